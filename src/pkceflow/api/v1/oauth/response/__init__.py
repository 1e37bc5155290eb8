"""OAuth Response Models."""

from pydantic import BaseModel, Field

from pkceflow.domain.models import TokenResult


class OAuthAuthorizeResponse(BaseModel):
    """Response with authorization URL."""

    provider: str = Field(..., description="OAuth provider")
    authorization_url: str = Field(..., description="OAuth authorization URL")
    state: str = Field(..., description="State the callback must carry back")


class OAuthTokenResponse(BaseModel):
    """Response with access tokens."""

    access_token: str = Field(..., description="Access token")
    token_type: str | None = Field(None, description="Token type")
    expires_in: int | None = Field(None, description="Expiration time in seconds")
    refresh_token: str | None = Field(None, description="Refresh token")
    scope: str | None = Field(None, description="Granted scopes")

    @classmethod
    def from_token_result(cls, token: TokenResult) -> "OAuthTokenResponse":
        """Build the response from a token exchange result."""
        return cls(
            access_token=token.access_token,
            token_type=token.token_type,
            expires_in=token.expires_in,
            refresh_token=token.refresh_token,
            scope=token.scope,
        )
