"""
Provider descriptors.

A descriptor is the immutable, validated configuration of one identity
provider: where to send the user, where to exchange the code, and the
client credentials registered with that provider.

Providers form a closed set (``ProviderKind``). Each known provider has a
constructor on ``ProviderDescriptor`` that fills in its fixed endpoints;
``ProviderDescriptor.custom`` takes both endpoints from the caller. Adding a
provider means adding a row to ``_ENDPOINTS`` and a constructor.
"""

import re
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from pkceflow.domain.errors import ConfigurationError

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


class ProviderKind(str, Enum):
    """Known identity providers."""

    GOOGLE = "google"
    GITHUB = "github"
    TWITTER = "twitter"
    DISCORD = "discord"
    FACEBOOK = "facebook"
    SPOTIFY = "spotify"
    MICROSOFT = "microsoft"
    PAYPAL = "paypal"
    CUSTOM = "custom"


class ClientAuthMethod(str, Enum):
    """How client credentials are presented to the token endpoint."""

    CLIENT_SECRET_POST = "client_secret_post"
    CLIENT_SECRET_BASIC = "client_secret_basic"


# (authorization endpoint, token endpoint)
_ENDPOINTS: dict[ProviderKind, tuple[str, str]] = {
    ProviderKind.GOOGLE: (
        "https://accounts.google.com/o/oauth2/v2/auth",
        "https://oauth2.googleapis.com/token",
    ),
    ProviderKind.GITHUB: (
        "https://github.com/login/oauth/authorize",
        "https://github.com/login/oauth/access_token",
    ),
    ProviderKind.TWITTER: (
        "https://twitter.com/i/oauth2/authorize",
        "https://api.twitter.com/2/oauth2/token",
    ),
    ProviderKind.DISCORD: (
        "https://discord.com/oauth2/authorize",
        "https://discord.com/api/oauth2/token",
    ),
    ProviderKind.FACEBOOK: (
        "https://www.facebook.com/v19.0/dialog/oauth",
        "https://graph.facebook.com/v19.0/oauth/access_token",
    ),
    ProviderKind.SPOTIFY: (
        "https://accounts.spotify.com/authorize",
        "https://accounts.spotify.com/api/token",
    ),
}

MICROSOFT_BASE_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0"

PAYPAL_ENDPOINTS = (
    "https://www.paypal.com/signin/authorize",
    "https://api-m.paypal.com/v1/oauth2/token",
)
PAYPAL_SANDBOX_ENDPOINTS = (
    "https://www.sandbox.paypal.com/signin/authorize",
    "https://api-m.sandbox.paypal.com/v1/oauth2/token",
)


def _is_absolute_url(value: str, http_only: bool) -> bool:
    if not value or any(char.isspace() for char in value):
        return False
    parts = urlsplit(value)
    if not parts.scheme or not _SCHEME.match(parts.scheme):
        return False
    if http_only or parts.scheme.lower() in ("http", "https"):
        return parts.scheme.lower() in ("http", "https") and bool(parts.hostname)
    return bool(parts.netloc or parts.path)


class ProviderDescriptor(BaseModel):
    """
    Immutable configuration of one OAuth 2.0 provider.

    Construction validates every URL eagerly; a malformed value raises
    ``ConfigurationError`` here rather than when the first request is made.

    Attributes:
        kind: Which provider this is
        authorization_endpoint: Where the user is sent to grant consent
        token_endpoint: Where the authorization code is exchanged
        client_id: Client ID registered with the provider
        client_secret: Client secret registered with the provider
        redirect_url: Callback URL registered with the provider (any scheme)
        scope_separator: Separator used to join scopes in the URL
        client_auth_method: How credentials reach the token endpoint
    """

    model_config = ConfigDict(frozen=True)

    kind: ProviderKind
    authorization_endpoint: str
    token_endpoint: str
    client_id: str
    client_secret: str = ""
    redirect_url: str
    scope_separator: str = " "
    client_auth_method: ClientAuthMethod = ClientAuthMethod.CLIENT_SECRET_POST

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationError(f"Invalid provider descriptor: {problems}") from e

    @field_validator("authorization_endpoint", "token_endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        if not _is_absolute_url(value, http_only=True):
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value

    @field_validator("redirect_url")
    @classmethod
    def _validate_redirect_url(cls, value: str) -> str:
        if not _is_absolute_url(value, http_only=False):
            raise ValueError(f"not an absolute URL: {value!r}")
        return value

    @field_validator("client_id")
    @classmethod
    def _validate_client_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("client_id must not be empty")
        return value

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def _fixed(
        cls,
        kind: ProviderKind,
        client_id: str,
        client_secret: str,
        redirect_url: str,
    ) -> "ProviderDescriptor":
        authorization_endpoint, token_endpoint = _ENDPOINTS[kind]
        return cls(
            kind=kind,
            authorization_endpoint=authorization_endpoint,
            token_endpoint=token_endpoint,
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
        )

    @classmethod
    def google(
        cls, client_id: str, client_secret: str, redirect_url: str
    ) -> "ProviderDescriptor":
        """Google (accounts.google.com)."""
        return cls._fixed(ProviderKind.GOOGLE, client_id, client_secret, redirect_url)

    @classmethod
    def github(
        cls, client_id: str, client_secret: str, redirect_url: str
    ) -> "ProviderDescriptor":
        """GitHub OAuth apps."""
        return cls._fixed(ProviderKind.GITHUB, client_id, client_secret, redirect_url)

    @classmethod
    def twitter(
        cls, client_id: str, client_secret: str, redirect_url: str
    ) -> "ProviderDescriptor":
        """Twitter / X OAuth 2.0."""
        return cls._fixed(
            ProviderKind.TWITTER, client_id, client_secret, redirect_url
        )

    @classmethod
    def discord(
        cls, client_id: str, client_secret: str, redirect_url: str
    ) -> "ProviderDescriptor":
        """Discord."""
        return cls._fixed(
            ProviderKind.DISCORD, client_id, client_secret, redirect_url
        )

    @classmethod
    def facebook(
        cls, client_id: str, client_secret: str, redirect_url: str
    ) -> "ProviderDescriptor":
        """Facebook login (Graph API v19.0)."""
        return cls._fixed(
            ProviderKind.FACEBOOK, client_id, client_secret, redirect_url
        )

    @classmethod
    def spotify(
        cls, client_id: str, client_secret: str, redirect_url: str
    ) -> "ProviderDescriptor":
        """Spotify accounts service."""
        return cls._fixed(
            ProviderKind.SPOTIFY, client_id, client_secret, redirect_url
        )

    @classmethod
    def microsoft(
        cls,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        tenant_id: str = "common",
    ) -> "ProviderDescriptor":
        """
        Microsoft identity platform (v2.0 endpoints).

        Args:
            client_id: Application (client) ID
            client_secret: Client secret
            redirect_url: Redirect URI registered for the app
            tenant_id: Tenant ID or one of common, organizations, consumers

        Returns:
            ProviderDescriptor for the given tenant
        """
        if not tenant_id or "/" in tenant_id or any(c.isspace() for c in tenant_id):
            raise ConfigurationError(f"Invalid Microsoft tenant id: {tenant_id!r}")
        base_url = MICROSOFT_BASE_URL.format(tenant_id=tenant_id)
        return cls(
            kind=ProviderKind.MICROSOFT,
            authorization_endpoint=f"{base_url}/authorize",
            token_endpoint=f"{base_url}/token",
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
        )

    @classmethod
    def paypal(
        cls,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        sandbox: bool = True,
    ) -> "ProviderDescriptor":
        """PayPal login, sandbox endpoints unless ``sandbox`` is False."""
        authorization_endpoint, token_endpoint = (
            PAYPAL_SANDBOX_ENDPOINTS if sandbox else PAYPAL_ENDPOINTS
        )
        return cls(
            kind=ProviderKind.PAYPAL,
            authorization_endpoint=authorization_endpoint,
            token_endpoint=token_endpoint,
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
        )

    @classmethod
    def custom(
        cls,
        authorization_endpoint: str,
        token_endpoint: str,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        scope_separator: str = " ",
        client_auth_method: ClientAuthMethod = ClientAuthMethod.CLIENT_SECRET_POST,
    ) -> "ProviderDescriptor":
        """Any RFC 6749 / RFC 7636 compliant server with explicit endpoints."""
        return cls(
            kind=ProviderKind.CUSTOM,
            authorization_endpoint=authorization_endpoint,
            token_endpoint=token_endpoint,
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
            scope_separator=scope_separator,
            client_auth_method=client_auth_method,
        )

    @classmethod
    def named(
        cls,
        kind: "ProviderKind | str",
        client_id: str,
        client_secret: str,
        redirect_url: str,
        **options: Any,
    ) -> "ProviderDescriptor":
        """
        Build a descriptor by provider name.

        Used when the provider is selected at runtime, e.g. from a URL path.

        Args:
            kind: Provider kind or its name (github, google, ...)
            client_id: Client ID
            client_secret: Client secret
            redirect_url: Redirect URL
            **options: Provider specific options (tenant_id, sandbox,
                authorization_endpoint and token_endpoint for custom)

        Returns:
            ProviderDescriptor for the provider

        Raises:
            ConfigurationError: If the provider is unknown or options are invalid
        """
        try:
            kind = ProviderKind(kind)
        except ValueError as e:
            raise ConfigurationError(f"Unsupported OAuth provider: {kind}") from e

        try:
            if kind is ProviderKind.CUSTOM:
                return cls.custom(
                    client_id=client_id,
                    client_secret=client_secret,
                    redirect_url=redirect_url,
                    **options,
                )
            if kind is ProviderKind.MICROSOFT:
                return cls.microsoft(client_id, client_secret, redirect_url, **options)
            if kind is ProviderKind.PAYPAL:
                return cls.paypal(client_id, client_secret, redirect_url, **options)
        except TypeError as e:
            raise ConfigurationError(f"Invalid options for {kind.value}: {e}") from e

        if options:
            raise ConfigurationError(
                f"Unexpected options for {kind.value}: {', '.join(sorted(options))}"
            )
        return cls._fixed(kind, client_id, client_secret, redirect_url)
