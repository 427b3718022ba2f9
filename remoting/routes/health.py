"""
Health check route for the remoting backend.

This endpoint is PUBLIC and provides a simple status check for load
balancers, monitoring, and deployment verification. It also reports how
many remote classes are exposed, which catches a startup that forgot to
register them.
"""

from fastapi import APIRouter, Request

from remoting.schemas.health import HealthResponse
from remoting.utils.logging import get_logger

logger = get_logger(__name__)

# Mounted at root level in main.py
router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint. Returns a simple status indicator "
        "and the number of exposed remote classes."
    ),
    status_code=200,
)
async def health_check(request: Request) -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "remoting-backend",
            "classes": 2
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok", classes=len(request.app.state.remotes.classes()))
