"""
Domain layer: provider descriptors, flow data model and error taxonomy.

This module contains pure values with no I/O.
"""

from pkceflow.domain.errors import (
    AuthorizationDeniedError,
    ConfigurationError,
    InvalidFlowStateError,
    NetworkError,
    OAuthFlowError,
    ProviderError,
    ResponseFormatError,
    StoreError,
    StoreReadError,
    StoreWriteError,
    TokenExchangeError,
    UnknownStateError,
)
from pkceflow.domain.models import AuthorizationRequest, CallbackPayload, TokenResult
from pkceflow.domain.providers import (
    ClientAuthMethod,
    ProviderDescriptor,
    ProviderKind,
)

__all__ = [
    "AuthorizationDeniedError",
    "AuthorizationRequest",
    "CallbackPayload",
    "ClientAuthMethod",
    "ConfigurationError",
    "InvalidFlowStateError",
    "NetworkError",
    "OAuthFlowError",
    "ProviderDescriptor",
    "ProviderError",
    "ProviderKind",
    "ResponseFormatError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "TokenExchangeError",
    "TokenResult",
    "UnknownStateError",
]
