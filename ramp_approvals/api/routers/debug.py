import httpx
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from loguru import logger

from ..deps import get_ramp_context
from ...services.pipeline import fetch_debug_snapshot
from ...services.ramp_client import RampClient, RampContext

router = APIRouter(prefix="/api", tags=["debug"])


@router.get("/debug")
async def debug_dump(context: RampContext = Depends(get_ramp_context)):
    """
    Raw Ramp pages plus derived counts, for troubleshooting threshold filtering.

    Never exposes credential values, only whether they are set.
    """
    config = context.config
    if not config.is_configured:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Ramp API credentials not configured",
                "environment": {
                    "RAMP_ENVIRONMENT": config.environment,
                    "RAMP_CLIENT_ID": "set" if config.client_id else "not set",
                    "RAMP_CLIENT_SECRET": "set" if config.client_secret else "not set",
                },
            },
        )

    try:
        async with httpx.AsyncClient(timeout=config.timeout_seconds) as http:
            snapshot = await fetch_debug_snapshot(RampClient(context, http))
    except Exception as e:
        logger.exception(f"Ramp API debug error: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to fetch debug data",
                "message": str(e),
                "type": type(e).__name__,
            },
        )

    return {"success": True, **snapshot}


@router.options("/debug")
async def debug_preflight():
    return Response(status_code=200)
