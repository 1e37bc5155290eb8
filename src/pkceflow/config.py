"""
Application configuration and environment variables.

This module unifies configuration using pydantic-settings.
Variables can come from:
1. .env file
2. System environment variables (have priority)
3. Default values

Naming convention:
- In Python code: snake_case (github_client_id)
- In .env or ENV vars: UPPER_CASE (GITHUB_CLIENT_ID)
- Pydantic automatically converts between both
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Unified application configuration.

    All variables can be defined in:
    - .env file: VARIABLE_NAME=value
    - Environment variables: export VARIABLE_NAME=value

    Example:
        # In .env or as environment variable:
        LOG_LEVEL=DEBUG
        PENDING_STORE_PROVIDER=sqlite
        GITHUB_CLIENT_ID=Iv1.0123456789
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allows using uppercase or lowercase
        extra="ignore",  # Ignores extra variables in .env
    )

    # ============================================================================
    # PROJECT SETTINGS
    # ============================================================================
    project_name: str = Field(default="pkceflow", description="Project name")
    project_description: str = Field(
        default="OAuth 2.0 Authorization Code + PKCE client for multiple providers",
        description="Project description",
    )
    project_version: str = Field(default="1.0.0", description="Project version")

    # ============================================================================
    # SERVER SETTINGS
    # ============================================================================
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    enable_docs: bool = Field(
        default=False, description="Enable API documentation (Swagger/ReDoc)"
    )

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",  # noqa: E501
        description="Log format",
    )
    logger_enqueue: bool = Field(
        default=False, description="Enqueue logs using multiprocessing"
    )

    # ============================================================================
    # PENDING AUTHORIZATION STORE SETTINGS
    # ============================================================================
    pending_store_provider: str = Field(
        default="memory",
        description="Backend for state -> verifier bindings (memory, sqlite, aws)",
    )
    pending_store_ttl_seconds: int = Field(
        default=900,
        description="Seconds a pending authorization stays valid",
    )
    pending_store_purge_interval_seconds: int = Field(
        default=60,
        description="Seconds between expired-entry sweeps while the app runs (0 disables)",
    )
    sqlite_path: str = Field(
        default="./.pkceflow/pending_authorizations.db",
        description="SQLite database file for the sqlite store",
    )
    aws_region: str = Field(default="eu-west-1", description="AWS region")
    aws_dynamodb_table: str = Field(
        default="pkceflow-pending-authorizations",
        description="DynamoDB table name for pending authorizations",
    )

    # ============================================================================
    # HTTP CLIENT SETTINGS
    # ============================================================================
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for the shared HTTP client used for token exchange",
    )

    # ============================================================================
    # OAUTH PROVIDERS SETTINGS
    # ============================================================================

    # Google
    google_client_id: str = Field(default="", description="Google OAuth Client ID")
    google_client_secret: str = Field(
        default="", description="Google OAuth Client Secret"
    )
    google_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/google",
        description="Google OAuth Redirect URI",
    )
    google_scopes: str = Field(
        default="openid,email", description="Default Google scopes (comma-separated)"
    )

    # GitHub
    github_client_id: str = Field(default="", description="GitHub OAuth Client ID")
    github_client_secret: str = Field(
        default="", description="GitHub OAuth Client Secret"
    )
    github_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/github",
        description="GitHub OAuth Redirect URI",
    )
    github_scopes: str = Field(
        default="read:user", description="Default GitHub scopes (comma-separated)"
    )

    # Twitter
    twitter_client_id: str = Field(default="", description="Twitter OAuth Client ID")
    twitter_client_secret: str = Field(
        default="", description="Twitter OAuth Client Secret"
    )
    twitter_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/twitter",
        description="Twitter OAuth Redirect URI",
    )
    twitter_scopes: str = Field(
        default="users.read,tweet.read",
        description="Default Twitter scopes (comma-separated)",
    )

    # Discord
    discord_client_id: str = Field(default="", description="Discord OAuth Client ID")
    discord_client_secret: str = Field(
        default="", description="Discord OAuth Client Secret"
    )
    discord_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/discord",
        description="Discord OAuth Redirect URI",
    )
    discord_scopes: str = Field(
        default="identify", description="Default Discord scopes (comma-separated)"
    )

    # Facebook
    facebook_client_id: str = Field(
        default="", description="Facebook OAuth Client ID"
    )
    facebook_client_secret: str = Field(
        default="", description="Facebook OAuth Client Secret"
    )
    facebook_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/facebook",
        description="Facebook OAuth Redirect URI",
    )
    facebook_scopes: str = Field(
        default="public_profile", description="Default Facebook scopes"
    )

    # Spotify
    spotify_client_id: str = Field(default="", description="Spotify OAuth Client ID")
    spotify_client_secret: str = Field(
        default="", description="Spotify OAuth Client Secret"
    )
    spotify_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/spotify",
        description="Spotify OAuth Redirect URI",
    )
    spotify_scopes: str = Field(
        default="user-read-email", description="Default Spotify scopes"
    )

    # Microsoft (Entra ID)
    microsoft_client_id: str = Field(
        default="", description="Microsoft OAuth Client ID"
    )
    microsoft_client_secret: str = Field(
        default="", description="Microsoft OAuth Client Secret"
    )
    microsoft_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/microsoft",
        description="Microsoft OAuth Redirect URI",
    )
    microsoft_scopes: str = Field(
        default="openid,User.Read", description="Default Microsoft scopes"
    )
    microsoft_tenant_id: str = Field(
        default="common", description="Microsoft tenant (common, organizations, id)"
    )

    # PayPal
    paypal_client_id: str = Field(default="", description="PayPal OAuth Client ID")
    paypal_client_secret: str = Field(
        default="", description="PayPal OAuth Client Secret"
    )
    paypal_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/paypal",
        description="PayPal OAuth Redirect URI",
    )
    paypal_scopes: str = Field(default="openid", description="Default PayPal scopes")
    paypal_sandbox: bool = Field(
        default=True, description="Use the PayPal sandbox endpoints"
    )

    # Custom provider (any RFC 6749 + RFC 7636 compliant server)
    custom_client_id: str = Field(default="", description="Custom OAuth Client ID")
    custom_client_secret: str = Field(
        default="", description="Custom OAuth Client Secret"
    )
    custom_redirect_uri: str = Field(
        default="http://localhost:8000/oauth/callback/custom",
        description="Custom OAuth Redirect URI",
    )
    custom_scopes: str = Field(default="", description="Default custom scopes")
    custom_authorization_endpoint: str = Field(
        default="", description="Custom provider authorization endpoint"
    )
    custom_token_endpoint: str = Field(
        default="", description="Custom provider token endpoint"
    )

    # ============================================================================
    # HELPER METHODS
    # ============================================================================

    def get_provider_credentials(self, provider: str) -> tuple[str, str, str]:
        """
        Get (client_id, client_secret, redirect_uri) for a provider.

        Args:
            provider: Provider name (github, google, ...)

        Returns:
            tuple[str, str, str]: Configured credentials, empty strings if unset.
        """
        return (
            getattr(self, f"{provider}_client_id", ""),
            getattr(self, f"{provider}_client_secret", ""),
            getattr(self, f"{provider}_redirect_uri", ""),
        )

    def get_provider_scopes(self, provider: str) -> list[str]:
        """
        Get the default scopes configured for a provider.

        Returns:
            list[str]: Scopes in configured order, without empty items.
        """
        raw = getattr(self, f"{provider}_scopes", "")
        return [scope.strip() for scope in raw.split(",") if scope.strip()]


# ============================================================================
# SINGLETON PATTERN - Global settings instance
# ============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings (LRU cached).

    This function is cached, so the .env file is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Application configuration instance.
    """
    return Settings()
