"""
Health check endpoints.
"""

from fastapi import APIRouter

from pkceflow import __version__
from pkceflow.api.v1.health.models import HealthResponse
from pkceflow.di import SettingsDep

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Service status, version and configured store backend
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        pending_store=settings.pending_store_provider,
    )
