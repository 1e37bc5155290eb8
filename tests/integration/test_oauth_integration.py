"""Integration tests for OAuth router endpoints.

The provider's token endpoint is mocked with respx; the FastAPI app runs
in-process through TestClient.
"""

from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from pkceflow.application import create_app
from pkceflow.config import Settings
from pkceflow.domain.errors import ConfigurationError
from pkceflow.infrastructure.implementations.memory import (
    InMemoryPendingAuthorizationRepository,
)
from pkceflow.utils.pkce import generate_code_challenge

GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"


@pytest.fixture
def repository():
    """Store shared by authorize and callback."""
    return InMemoryPendingAuthorizationRepository()


@pytest.fixture
def client(repository):
    """Create a test client."""
    app = create_app(repository=repository)
    return TestClient(app)


def _authorize(client, provider="github", **params):
    response = client.get(f"/oauth/authorize/{provider}", params=params)
    assert response.status_code == 200, response.text
    return response.json()


class TestOAuthAuthorize:
    """Tests for GET /oauth/authorize/{provider}"""

    def test_authorize_github(self, client, repository):
        """Authorization URL is returned and the verifier is stored."""
        data = _authorize(client)

        assert data["provider"] == "github"
        url = urlsplit(data["authorization_url"])
        assert url.netloc == "github.com"

        query = parse_qs(url.query)
        assert query["state"] == [data["state"]]
        assert query["code_challenge_method"] == ["S256"]
        assert query["client_id"] == ["test-github-client-id"]

        verifier = repository._entries[data["state"]].verifier
        assert query["code_challenge"] == [generate_code_challenge(verifier)]
        assert "code_verifier" not in data

    def test_authorize_uses_default_scopes(self, client):
        """Configured scopes apply when none are requested."""
        data = _authorize(client)

        query = parse_qs(urlsplit(data["authorization_url"]).query)
        assert query["scope"] == ["read:user user:email"]

    def test_authorize_with_requested_scopes(self, client):
        """Requested scopes override the defaults, keeping their order."""
        data = _authorize(client, scope=["repo", "gist"])

        query = parse_qs(urlsplit(data["authorization_url"]).query)
        assert query["scope"] == ["repo gist"]

    def test_authorize_google(self, client):
        """Another configured provider works the same way."""
        data = _authorize(client, provider="google")

        assert "accounts.google.com" in data["authorization_url"]

    def test_authorize_redirect(self, client):
        """redirect=true answers with a redirect to the provider."""
        response = client.get(
            "/oauth/authorize/github",
            params={"redirect": "true"},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers["location"].startswith(
            "https://github.com/login/oauth/authorize?"
        )

    def test_authorize_each_call_is_fresh(self, client, repository):
        """Every call creates its own pending authorization."""
        first = _authorize(client)
        second = _authorize(client)

        assert first["state"] != second["state"]
        assert len(repository) == 2

    def test_authorize_invalid_provider(self, client):
        """Unknown provider is a 404 problem response."""
        response = client.get("/oauth/authorize/myspace")

        assert response.status_code == 404
        assert response.headers["content-type"] == "application/problem+json"

    def test_authorize_unconfigured_provider(self, client):
        """Known provider without credentials is a 500 problem response."""
        response = client.get("/oauth/authorize/spotify")

        assert response.status_code == 500
        assert response.json()["title"] == "Provider misconfigured"


class TestOAuthCallback:
    """Tests for GET /oauth/callback/{provider}"""

    @respx.mock
    def test_full_flow(self, client, repository):
        """Authorize then callback exchanges the code with the stored verifier."""
        route = respx.post(GITHUB_TOKEN_URL).mock(
            return_value=httpx.Response(
                200,
                json={"access_token": "abc", "token_type": "bearer", "scope": "repo"},
            )
        )
        data = _authorize(client)
        verifier = repository._entries[data["state"]].verifier

        response = client.get(
            "/oauth/callback/github",
            params={"state": data["state"], "code": "code123"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "access_token": "abc",
            "token_type": "bearer",
            "expires_in": None,
            "refresh_token": None,
            "scope": "repo",
        }
        form = parse_qs(route.calls.last.request.content.decode())
        assert form["code_verifier"] == [verifier]
        assert form["code"] == ["code123"]
        assert len(repository) == 0

    @respx.mock
    def test_callback_replay_rejected(self, client):
        """The same state cannot be used twice."""
        respx.post(GITHUB_TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "abc"})
        )
        data = _authorize(client)
        params = {"state": data["state"], "code": "code123"}

        assert client.get("/oauth/callback/github", params=params).status_code == 200

        response = client.get("/oauth/callback/github", params=params)
        assert response.status_code == 400
        assert response.json()["title"] == "Unknown authorization state"

    def test_callback_unknown_state(self, client):
        """Forged state is rejected without a token request."""
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.post(GITHUB_TOKEN_URL)

            response = client.get(
                "/oauth/callback/github",
                params={"state": "forged", "code": "code123"},
            )

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/problem+json"
        assert not route.called

    def test_callback_access_denied(self, client):
        """User refusing consent is a 400 carrying the OAuth error."""
        data = _authorize(client)

        response = client.get(
            "/oauth/callback/github",
            params={
                "state": data["state"],
                "error": "access_denied",
                "error_description": "The user has denied your application access.",
            },
        )

        assert response.status_code == 400
        assert response.json()["oauth_error"] == "access_denied"

    @respx.mock
    def test_callback_provider_error(self, client):
        """Token endpoint rejection is a 502 with the provider's error code."""
        respx.post(GITHUB_TOKEN_URL).mock(
            return_value=httpx.Response(
                400, json={"error": "invalid_grant", "error_description": "Bad code"}
            )
        )
        data = _authorize(client)

        response = client.get(
            "/oauth/callback/github",
            params={"state": data["state"], "code": "bad"},
        )

        assert response.status_code == 502
        assert response.json()["oauth_error"] == "invalid_grant"

    @respx.mock
    def test_callback_network_error(self, client):
        """Unreachable token endpoint is a 504."""
        respx.post(GITHUB_TOKEN_URL).mock(side_effect=httpx.ConnectError("refused"))
        data = _authorize(client)

        response = client.get(
            "/oauth/callback/github",
            params={"state": data["state"], "code": "code123"},
        )

        assert response.status_code == 504

    def test_callback_missing_state(self, client):
        """state is a required query parameter."""
        response = client.get("/oauth/callback/github", params={"code": "code123"})

        assert response.status_code == 422
        assert response.json()["errors"][0]["loc"] == ["query", "state"]


class TestOAuthWithLifespan:
    """Flow through the running app, with shared HTTP client and SQLite store."""

    @respx.mock
    def test_full_flow_sqlite(self, tmp_path):
        """Pending authorizations survive in the SQLite file between requests."""
        settings = Settings(
            pending_store_provider="sqlite",
            sqlite_path=str(tmp_path / "pending.db"),
            pending_store_purge_interval_seconds=0,
        )
        respx.post(GITHUB_TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "abc"})
        )

        with TestClient(create_app(settings=settings)) as client:
            data = _authorize(client)
            response = client.get(
                "/oauth/callback/github",
                params={"state": data["state"], "code": "code123"},
            )

        assert response.status_code == 200
        assert response.json()["access_token"] == "abc"


class TestProviderConfiguration:
    """Provider descriptors are built once, when the app is created."""

    def test_malformed_provider_fails_at_startup(self):
        """A bad endpoint is reported by create_app, not by the first request."""
        settings = Settings(
            custom_client_id="client",
            custom_authorization_endpoint="https://auth.example.com/authorize",
            custom_token_endpoint="ftp://auth.example.com/token",
        )

        with pytest.raises(ConfigurationError):
            create_app(settings=settings)

    def test_descriptors_are_cached_on_app(self, repository):
        """Requests reuse the descriptors built at startup."""
        app = create_app(repository=repository)

        with patch(
            "pkceflow.di.get_provider_descriptor",
            side_effect=AssertionError("descriptor rebuilt per request"),
        ):
            response = TestClient(app).get("/oauth/authorize/github")

        assert response.status_code == 200
        assert "github" in app.state.provider_descriptors
