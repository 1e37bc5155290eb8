"""
Flow services: URL building, token exchange and the client facade.
"""

from pkceflow.services.authorization_url import build_authorization_url
from pkceflow.services.oauth_client import AuthorizationFlow, FlowStatus, OAuthClient
from pkceflow.services.token_exchange import TokenExchanger

__all__ = [
    "AuthorizationFlow",
    "FlowStatus",
    "OAuthClient",
    "TokenExchanger",
    "build_authorization_url",
]

__all__ = [
    "AuthorizationFlow",
    "FlowStatus",
    "OAuthClient",
    "TokenExchanger",
    "build_authorization_url",
]
