from fastapi import Request

from ..core.config import settings
from ..services.approval_query import ApprovalQuery, query_from_settings
from ..services.ramp_client import RampConfig, RampContext


def get_ramp_context(request: Request) -> RampContext:
    """
    Return the application's RampContext, rebuilding it when settings change.

    The context (and so the cached token) lives on app.state rather than in a
    module global, so each app instance and each test client is isolated.
    """
    config = RampConfig.from_settings(settings)
    context = getattr(request.app.state, "ramp_context", None)
    if context is None or context.config != config:
        context = RampContext(config=config)
        request.app.state.ramp_context = context
    return context


def get_approval_query() -> ApprovalQuery:
    return query_from_settings(settings)
