import httpx
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from loguru import logger

from ..deps import get_approval_query, get_ramp_context
from ...models.approval import ApprovalsResponse
from ...services.approval_query import ApprovalQuery
from ...services.pipeline import fetch_approvals
from ...services.ramp_client import RampClient, RampContext

router = APIRouter(prefix="/api", tags=["approvals"])

@router.get("/approvals", response_model=ApprovalsResponse)
async def list_approvals(
    context: RampContext = Depends(get_ramp_context),
    query: ApprovalQuery = Depends(get_approval_query),
):
    """
    Pending approvals from Ramp, proxied so credentials stay server-side.

    Any failure answers 500 with ``useSampleData: true`` so the dashboard
    can fall back to its local sample list.

    Example response:
    {
        "success": true,
        "data": [{"id": "TXN-12345678", "amount": 12500, "priority": "low", ...}],
        "count": 1,
        "source": "ramp-api"
    }
    """
    if not context.config.is_configured:
        logger.warning("Ramp API credentials not configured - telling client to use sample data")
        return JSONResponse(
            status_code=500,
            content={"error": "Ramp API credentials not configured", "useSampleData": True},
        )

    try:
        async with httpx.AsyncClient(timeout=context.config.timeout_seconds) as http:
            approvals = await fetch_approvals(RampClient(context, http), query)
    except Exception as e:
        logger.exception(f"Ramp API error: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to fetch approvals data",
                "message": str(e),
                "useSampleData": True,
            },
        )

    return ApprovalsResponse(data=approvals, count=len(approvals))


@router.options("/approvals")
async def approvals_preflight():
    return Response(status_code=200)


@router.get("/connection")
async def check_connection(context: RampContext = Depends(get_ramp_context)):
    """Check that the configured credentials can obtain a Ramp token"""
    if not context.config.is_configured:
        return {"success": False, "error": "Ramp API credentials not configured on server"}

    try:
        async with httpx.AsyncClient(timeout=context.config.timeout_seconds) as http:
            await context.token_cache.get_token(http)
    except Exception as e:
        logger.warning(f"Ramp connection test failed: {e}")
        return {"success": False, "error": str(e)}

    return {"success": True, "message": "Successfully connected to Ramp API"}
