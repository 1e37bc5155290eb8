"""
pkceflow: OAuth 2.0 Authorization Code flow with PKCE for multiple providers.

Typical use from a web backend:

    from pkceflow import OAuthClient, ProviderDescriptor, CallbackPayload
    from pkceflow.infrastructure.implementations.memory import (
        InMemoryPendingAuthorizationRepository,
    )

    repository = InMemoryPendingAuthorizationRepository()
    client = OAuthClient(
        ProviderDescriptor.github(client_id, client_secret, redirect_url)
    )

    # "begin" endpoint
    request = await client.begin_authorization_and_store(["read:user"], repository)
    redirect_to(request.authorization_url)

    # "callback" endpoint
    token = await client.complete_authorization_from_store(
        CallbackPayload(code=code, state=state), repository
    )
"""

from pkceflow.domain import (
    AuthorizationDeniedError,
    AuthorizationRequest,
    CallbackPayload,
    ClientAuthMethod,
    ConfigurationError,
    InvalidFlowStateError,
    NetworkError,
    OAuthFlowError,
    ProviderDescriptor,
    ProviderError,
    ProviderKind,
    ResponseFormatError,
    StoreError,
    StoreReadError,
    StoreWriteError,
    TokenExchangeError,
    TokenResult,
    UnknownStateError,
)
from pkceflow.infrastructure.repositories import PendingAuthorizationRepository
from pkceflow.services import (
    AuthorizationFlow,
    FlowStatus,
    OAuthClient,
    TokenExchanger,
    build_authorization_url,
)

__version__ = "1.0.0"

__all__ = [
    "AuthorizationDeniedError",
    "AuthorizationFlow",
    "AuthorizationRequest",
    "CallbackPayload",
    "ClientAuthMethod",
    "ConfigurationError",
    "FlowStatus",
    "InvalidFlowStateError",
    "NetworkError",
    "OAuthClient",
    "OAuthFlowError",
    "PendingAuthorizationRepository",
    "ProviderDescriptor",
    "ProviderError",
    "ProviderKind",
    "ResponseFormatError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "TokenExchangeError",
    "TokenExchanger",
    "TokenResult",
    "UnknownStateError",
    "__version__",
    "build_authorization_url",
]
