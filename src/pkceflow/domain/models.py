"""Flow data model: authorization request, callback payload and token result."""

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthorizationRequest(BaseModel):
    """
    Output of "begin authorization".

    ``state`` and ``verifier`` must be persisted by the caller (or by the
    store-bound helper) until the provider redirects back. ``challenge`` and
    ``authorization_url`` are derived from them.

    Attributes:
        provider: Provider kind name
        state: Random correlation token, key of the pending authorization
        verifier: PKCE code verifier, revealed only at token exchange
        challenge: BASE64URL(SHA256(verifier))
        authorization_url: URL the user is redirected to
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    state: str
    verifier: str = Field(repr=False)
    challenge: str
    authorization_url: str


class CallbackPayload(BaseModel):
    """
    Query parameters of the provider's redirect back to ``redirect_url``.

    Providers send either ``code`` + ``state`` or ``error`` (+ ``state``)
    when the user refuses consent.
    """

    model_config = ConfigDict(frozen=True)

    state: str
    code: str | None = Field(default=None, repr=False)
    error: str | None = None
    error_description: str | None = None

    def is_error(self) -> bool:
        """True if the provider redirected back with an error."""
        return self.error is not None


class TokenResult(BaseModel):
    """
    Successful token endpoint response (RFC 6749 section 5.1).

    Only ``access_token`` is required; the rest is optional because
    providers differ. ``raw`` keeps the full decoded payload so
    provider-specific fields (``id_token``, ``user_id``...) stay reachable.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1, repr=False)
    token_type: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = Field(default=None, repr=False)
    scope: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @field_validator("scope", mode="before")
    @classmethod
    def _join_scope_list(cls, value: Any) -> Any:
        # Some providers return granted scopes as a JSON array
        if isinstance(value, list):
            return " ".join(str(item) for item in value)
        return value

    def expires_at(self, now: datetime | None = None) -> datetime | None:
        """
        Absolute expiry time, if the provider sent ``expires_in``.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            datetime | None: When the access token expires
        """
        if self.expires_in is None:
            return None
        reference = now or datetime.now(timezone.utc)
        return reference + timedelta(seconds=self.expires_in)
