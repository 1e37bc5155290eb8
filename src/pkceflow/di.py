"""
Dependency injection container for the pkceflow HTTP layer.

This module provides centralized dependency injection using FastAPI's Depends
with typing.Annotated for clean type hints throughout the application.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from pkceflow.config import Settings, get_settings
from pkceflow.domain.errors import ConfigurationError
from pkceflow.domain.providers import ProviderDescriptor, ProviderKind
from pkceflow.infrastructure.repositories import PendingAuthorizationRepository
from pkceflow.services.oauth_client import OAuthClient
from pkceflow.services.token_exchange import TokenExchanger

# ============================================================================
# Settings Dependencies
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Injected Settings instance (cached via lru_cache)."""


# ============================================================================
# Infrastructure Dependencies
# ============================================================================


def get_pending_authorization_repository(
    request: Request,
) -> PendingAuthorizationRepository:
    """
    Get the application's pending authorization repository.

    The repository is created once per application in ``create_app`` and
    shared by every request, so "begin" and "callback" see the same entries.

    Args:
        request: Current request (injected)

    Returns:
        PendingAuthorizationRepository shared by the application
    """
    return request.app.state.pending_authorizations


PendingAuthorizationRepositoryDep = Annotated[
    PendingAuthorizationRepository, Depends(get_pending_authorization_repository)
]
"""Injected PendingAuthorizationRepository."""


def get_token_exchanger(request: Request) -> TokenExchanger:
    """
    Get a token exchanger bound to the shared HTTP client, if one is running.

    Args:
        request: Current request (injected)

    Returns:
        TokenExchanger
    """
    return TokenExchanger(getattr(request.app.state, "http_client", None))


TokenExchangerDep = Annotated[TokenExchanger, Depends(get_token_exchanger)]
"""Injected TokenExchanger."""


# ============================================================================
# OAuth Client Factory
# ============================================================================


def get_provider_descriptor(provider: str, settings: Settings) -> ProviderDescriptor:
    """
    Build the descriptor for a provider from settings.

    Args:
        provider: OAuth provider identifier (github, google, ...)
        settings: Application settings

    Returns:
        ProviderDescriptor for the provider

    Raises:
        ConfigurationError: If the provider is unknown or not configured
    """
    try:
        kind = ProviderKind(provider)
    except ValueError as e:
        raise ConfigurationError(f"Unsupported OAuth provider: {provider}") from e

    client_id, client_secret, redirect_uri = settings.get_provider_credentials(
        kind.value
    )
    if not client_id:
        raise ConfigurationError(f"{kind.value} OAuth credentials not configured")

    options: dict[str, object] = {}
    if kind is ProviderKind.MICROSOFT:
        options["tenant_id"] = settings.microsoft_tenant_id
    elif kind is ProviderKind.PAYPAL:
        options["sandbox"] = settings.paypal_sandbox
    elif kind is ProviderKind.CUSTOM:
        options["authorization_endpoint"] = settings.custom_authorization_endpoint
        options["token_endpoint"] = settings.custom_token_endpoint

    return ProviderDescriptor.named(
        kind, client_id, client_secret, redirect_uri, **options
    )


def build_provider_descriptors(settings: Settings) -> dict[str, ProviderDescriptor]:
    """
    Build descriptors for every provider with a client ID in settings.

    Called once by ``create_app`` so a malformed provider configuration
    fails at startup rather than on the first request.

    Raises:
        ConfigurationError: If a configured provider is malformed
    """
    return {
        kind.value: get_provider_descriptor(kind.value, settings)
        for kind in ProviderKind
        if settings.get_provider_credentials(kind.value)[0]
    }


def get_oauth_client(
    provider: str,
    request: Request,
    token_exchanger: TokenExchangerDep,
) -> OAuthClient:
    """
    Factory dependency returning the OAuth client for the path's provider.

    Example:
        ```python
        @router.get("/oauth/authorize/{provider}")
        async def authorize(client: OAuthClientDep):
            ...
        ```

    Args:
        provider: OAuth provider identifier from the URL path
        request: Current request (injected)
        token_exchanger: Token exchanger (injected)

    Returns:
        OAuthClient for the provider

    Raises:
        HTTPException: 404 if the provider name is unknown
        ConfigurationError: If the provider is known but not configured
    """
    if provider not in {kind.value for kind in ProviderKind}:
        raise HTTPException(
            status_code=404, detail=f"Unsupported OAuth provider: {provider}"
        )

    descriptor = request.app.state.provider_descriptors.get(provider)
    if descriptor is None:
        raise ConfigurationError(f"{provider} OAuth credentials not configured")
    return OAuthClient(descriptor, token_exchanger=token_exchanger)


OAuthClientDep = Annotated[OAuthClient, Depends(get_oauth_client)]
"""Injected OAuthClient for the requested provider."""
