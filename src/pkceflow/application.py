"""
FastAPI application factory.

Creates and configures the FastAPI application with routers, exception
handlers and the pending authorization repository.
"""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from pkceflow import __version__
from pkceflow.config import Settings, get_settings
from pkceflow.core.logging import logger
from pkceflow.di import build_provider_descriptors
from pkceflow.domain.errors import OAuthFlowError
from pkceflow.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    oauth_flow_exception_handler,
    validation_exception_handler,
)
from pkceflow.infrastructure import InfrastructureFactory
from pkceflow.infrastructure.repositories import PendingAuthorizationRepository
from pkceflow.lifespan import lifespan
from pkceflow.routes import register_routes


def create_app(
    settings: Settings | None = None,
    repository: PendingAuthorizationRepository | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the cached environment settings
        repository: Pending authorization repository to use instead of the
            one built from settings

    Returns:
        Configured FastAPI application instance

    Raises:
        ConfigurationError: If a configured provider is malformed
    """
    settings = settings or get_settings()
    provider_descriptors = build_provider_descriptors(settings)

    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None

    app = FastAPI(
        title=settings.project_name,
        description=settings.project_description,
        version=__version__,
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
    )

    app.state.settings = settings
    app.state.provider_descriptors = provider_descriptors
    app.dependency_overrides[get_settings] = lambda: settings

    if repository is None:
        repository = InfrastructureFactory.from_settings(
            settings
        ).get_pending_authorization_repository()
    app.state.pending_authorizations = repository
    app.state.http_client = None

    # Register exception handlers (RFC 7807 Problem Details)
    app.add_exception_handler(OAuthFlowError, oauth_flow_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    register_routes(app)

    logger.info(f"FastAPI application created (v{__version__})")
    logger.info(f"Pending authorization store: {type(repository).__name__}")
    logger.info(f"OAuth providers: {', '.join(provider_descriptors) or 'none'}")

    return app
