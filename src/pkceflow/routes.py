"""
Routes registration for the FastAPI application.

Centralizes all router registrations for clean application setup.
"""

from fastapi import FastAPI

from pkceflow.api.v1.health.router import router as health_router
from pkceflow.api.v1.oauth.router import router as oauth_router


def register_routes(app: FastAPI) -> None:
    """
    Register all application routers.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, public)
    app.include_router(health_router)

    # OAuth endpoints (versioned API)
    app.include_router(oauth_router)
