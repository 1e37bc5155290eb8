"""
Error taxonomy for the authorization code + PKCE flow.

Every failure is raised to the immediate caller. Nothing here is retried,
and nothing is rendered: mapping errors to HTTP responses is done by
``pkceflow.exception_handlers``.
"""

import json


class OAuthFlowError(Exception):
    """Base class for all pkceflow errors."""


class ConfigurationError(OAuthFlowError, ValueError):
    """Malformed provider descriptor, detected at construction time."""


class UnknownStateError(OAuthFlowError):
    """
    Callback state not found in the pending authorization store.

    Expired, already consumed and forged states are indistinguishable.
    """

    def __init__(self, state: str):
        super().__init__("Unknown or expired authorization state")
        self.state = state


class AuthorizationDeniedError(OAuthFlowError):
    """Provider redirected back with an error instead of a code."""

    def __init__(self, error: str, error_description: str | None = None):
        message = f"Authorization denied: {error}"
        if error_description:
            message = f"{message} ({error_description})"
        super().__init__(message)
        self.error = error
        self.error_description = error_description


class InvalidFlowStateError(OAuthFlowError):
    """An authorization flow transition was requested from the wrong state."""


class StoreError(OAuthFlowError):
    """Backend failure in a pending authorization store."""


class StoreReadError(StoreError):
    """Reading a pending authorization failed (distinct from not found)."""


class StoreWriteError(StoreError):
    """Writing or deleting a pending authorization failed."""


class TokenExchangeError(OAuthFlowError):
    """Base class for failures at the token endpoint."""


class NetworkError(TokenExchangeError):
    """Transport-level failure reaching the token endpoint."""


class ProviderError(TokenExchangeError):
    """
    Token endpoint answered with a non-success status.

    Attributes:
        status: HTTP status code
        body: Raw response body, preserved for diagnostics
        error: RFC 6749 ``error`` code, when the body carries one
        error_description: RFC 6749 ``error_description``, when present
    """

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        self.error, self.error_description = _parse_oauth_error(body)
        detail = f": {self.error}" if self.error else ""
        super().__init__(f"Token endpoint returned HTTP {status}{detail}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProviderError):
            return NotImplemented
        return (self.status, self.body) == (other.status, other.body)

    def __hash__(self) -> int:
        return hash((self.status, self.body))


class ResponseFormatError(TokenExchangeError):
    """2xx response whose body is not a token payload."""


def _parse_oauth_error(body: str) -> tuple[str | None, str | None]:
    try:
        payload = json.loads(body)
    except ValueError:
        return None, None
    if not isinstance(payload, dict):
        return None, None
    error = payload.get("error")
    description = payload.get("error_description")
    return (
        error if isinstance(error, str) else None,
        description if isinstance(description, str) else None,
    )
