"""Global pytest configuration and fixtures for all tests."""

import os

import pytest

from pkceflow.config import get_settings
from pkceflow.domain.providers import ProviderDescriptor


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    This fixture runs automatically before any tests and provides
    dummy OAuth credentials so tests don't fail due to missing configuration.

    These are NOT real credentials - just placeholders for testing.
    """
    # Store original values to restore after tests
    original_env = {}

    test_env_vars = {
        # GitHub OAuth (dummy values for testing)
        "GITHUB_CLIENT_ID": "test-github-client-id",
        "GITHUB_CLIENT_SECRET": "test-github-client-secret",
        "GITHUB_REDIRECT_URI": "http://localhost:8000/oauth/callback/github",
        "GITHUB_SCOPES": "read:user,user:email",
        # Google OAuth (dummy values for testing)
        "GOOGLE_CLIENT_ID": "test-google-client-id.apps.googleusercontent.com",
        "GOOGLE_CLIENT_SECRET": "GOCSPX-test-secret-for-testing-only",
        "GOOGLE_REDIRECT_URI": "http://localhost:8000/oauth/callback/google",
        # Microsoft OAuth (dummy values for testing)
        "MICROSOFT_CLIENT_ID": "test-microsoft-client-id",
        "MICROSOFT_CLIENT_SECRET": "test-microsoft-client-secret",
        "MICROSOFT_TENANT_ID": "consumers",
        # Server configuration
        "ENABLE_DOCS": "false",  # Keep docs disabled in tests
        "DEBUG": "false",
        # Infrastructure (in-process store for tests)
        "PENDING_STORE_PROVIDER": "memory",
        "PENDING_STORE_PURGE_INTERVAL_SECONDS": "0",
    }

    # Set test environment variables
    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value
    get_settings.cache_clear()

    yield

    # Restore original environment after all tests
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value
    get_settings.cache_clear()


@pytest.fixture
def github_descriptor():
    """GitHub descriptor with dummy credentials."""
    return ProviderDescriptor.github(
        "test-github-client-id",
        "test-github-client-secret",
        "http://localhost:8000/oauth/callback/github",
    )


@pytest.fixture
def custom_descriptor():
    """Custom provider descriptor pointing at a fake authorization server."""
    return ProviderDescriptor.custom(
        authorization_endpoint="https://auth.example.com/authorize",
        token_endpoint="https://auth.example.com/token",
        client_id="example-client",
        client_secret="example-secret",
        redirect_url="http://localhost:8000/oauth/callback/custom",
    )
