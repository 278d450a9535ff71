from fastapi import APIRouter

from ...core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "app": settings.app_name,
        "ramp_environment": settings.ramp_environment,
        "ramp_configured": bool(settings.ramp_client_id and settings.ramp_client_secret),
    }
