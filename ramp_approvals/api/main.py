from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from ..core.logging import setup_logging
from ..core.config import settings
from .routers import approvals, debug, health

logger = setup_logging()
app = FastAPI(title="Ramp Approvals Dashboard")


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    # Every route is read-only; any method other than GET/OPTIONS gets the same envelope
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        logger.warning(f"Rejected {request.method} {request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Method not allowed"},
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


# The dashboard may be served from anywhere; "*" (the default) allows all origins.
# Example: CORS_ORIGINS=http://localhost:3000,https://your-dashboard.com
allowed_origins = [origin.strip() for origin in settings.cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(health.router)
app.include_router(approvals.router)
app.include_router(debug.router)
