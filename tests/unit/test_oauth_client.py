"""
Unit tests for the OAuth client facade and the in-process authorization flow.
"""

from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
import respx

from pkceflow.domain.errors import (
    AuthorizationDeniedError,
    InvalidFlowStateError,
    ProviderError,
    StoreWriteError,
    UnknownStateError,
)
from pkceflow.domain.models import CallbackPayload, TokenResult
from pkceflow.infrastructure.implementations.memory import (
    InMemoryPendingAuthorizationRepository,
)
from pkceflow.services.oauth_client import AuthorizationFlow, FlowStatus, OAuthClient
from pkceflow.utils.pkce import generate_code_challenge, is_valid_code_verifier

GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"


@pytest.fixture
def client(github_descriptor):
    """OAuth client for GitHub."""
    return OAuthClient(github_descriptor)


@pytest.fixture
def repository():
    """Empty in-memory store."""
    return InMemoryPendingAuthorizationRepository()


# ===========================
# begin_authorization
# ===========================


def test_begin_authorization(client):
    """Request carries a valid verifier and its S256 challenge."""
    request = client.begin_authorization(["read:user"])

    assert request.provider == "github"
    assert is_valid_code_verifier(request.verifier)
    assert request.challenge == generate_code_challenge(request.verifier)
    assert request.state != request.verifier

    query = parse_qs(urlsplit(request.authorization_url).query)
    assert query["state"] == [request.state]
    assert query["code_challenge"] == [request.challenge]
    assert query["scope"] == ["read:user"]
    assert request.verifier not in request.authorization_url


def test_begin_authorization_is_fresh_each_time(client):
    """Two requests never share state or verifier."""
    first = client.begin_authorization(["repo"])
    second = client.begin_authorization(["repo"])

    assert first.state != second.state
    assert first.verifier != second.verifier


def test_begin_authorization_regenerates_colliding_state(client):
    """State equal to the verifier is replaced."""
    verifier = "v" * 128
    with (
        patch(
            "pkceflow.services.oauth_client.generate_code_verifier",
            return_value=verifier,
        ),
        patch(
            "pkceflow.services.oauth_client.generate_state",
            side_effect=[verifier, "distinct-state"],
        ),
    ):
        request = client.begin_authorization([])

    assert request.state == "distinct-state"


def test_authorization_request_repr_hides_verifier(client):
    """Verifier is not leaked through repr."""
    request = client.begin_authorization([])
    assert request.verifier not in repr(request)


# ===========================
# Store-backed flow
# ===========================


@pytest.mark.asyncio
async def test_begin_authorization_and_store(client, repository):
    """State and verifier are persisted."""
    request = await client.begin_authorization_and_store(["repo"], repository)

    assert await repository.get(request.state) == request.verifier


@pytest.mark.asyncio
async def test_begin_authorization_and_store_propagates_store_error(client):
    """Persistence failures reach the caller."""
    repository = AsyncMock()
    repository.put.side_effect = StoreWriteError("down")

    with pytest.raises(StoreWriteError):
        await client.begin_authorization_and_store(["repo"], repository)


@pytest.mark.asyncio
@respx.mock
async def test_complete_authorization_from_store(client, repository):
    """Callback code is exchanged with the stored verifier."""
    route = respx.post(GITHUB_TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "abc"})
    )
    request = await client.begin_authorization_and_store(["repo"], repository)

    token = await client.complete_authorization_from_store(
        CallbackPayload(state=request.state, code="code123"), repository
    )

    assert token.access_token == "abc"
    form = parse_qs(route.calls.last.request.content.decode())
    assert form["code_verifier"] == [request.verifier]
    assert form["code"] == ["code123"]


@pytest.mark.asyncio
@respx.mock
async def test_complete_authorization_is_single_use(client, repository):
    """A state cannot be redeemed twice."""
    respx.post(GITHUB_TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "abc"})
    )
    request = await client.begin_authorization_and_store(["repo"], repository)
    callback = CallbackPayload(state=request.state, code="code123")

    await client.complete_authorization_from_store(callback, repository)

    with pytest.raises(UnknownStateError):
        await client.complete_authorization_from_store(callback, repository)


@pytest.mark.asyncio
async def test_unknown_state_makes_no_network_call(client, repository):
    """Unknown state fails before contacting the token endpoint."""
    with respx.mock(assert_all_called=False) as respx_mock:
        route = respx_mock.post(GITHUB_TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "abc"})
        )

        with pytest.raises(UnknownStateError) as exc_info:
            await client.complete_authorization_from_store(
                CallbackPayload(state="forged", code="code123"), repository
            )

    assert exc_info.value.state == "forged"
    assert not route.called


@pytest.mark.asyncio
@respx.mock
async def test_failed_exchange_still_consumes_state(client, repository):
    """Entry is deleted before the exchange, whatever its outcome."""
    respx.post(GITHUB_TOKEN_URL).mock(
        return_value=httpx.Response(400, json={"error": "invalid_grant"})
    )
    request = await client.begin_authorization_and_store(["repo"], repository)

    with pytest.raises(ProviderError):
        await client.complete_authorization_from_store(
            CallbackPayload(state=request.state, code="bad"), repository
        )

    assert await repository.get(request.state) is None


@pytest.mark.asyncio
async def test_callback_error_is_authorization_denied(client, repository):
    """Provider error redirect raises AuthorizationDeniedError and consumes state."""
    request = await client.begin_authorization_and_store(["repo"], repository)

    with pytest.raises(AuthorizationDeniedError) as exc_info:
        await client.complete_authorization_from_store(
            CallbackPayload(
                state=request.state,
                error="access_denied",
                error_description="The user denied access",
            ),
            repository,
        )

    assert exc_info.value.error == "access_denied"
    assert exc_info.value.error_description == "The user denied access"
    assert await repository.get(request.state) is None


@pytest.mark.asyncio
async def test_callback_without_code_or_error(client, repository):
    """A callback carrying nothing is rejected."""
    request = await client.begin_authorization_and_store(["repo"], repository)

    with pytest.raises(AuthorizationDeniedError) as exc_info:
        await client.complete_authorization_from_store(
            CallbackPayload(state=request.state), repository
        )

    assert exc_info.value.error == "invalid_request"


@pytest.mark.asyncio
async def test_complete_authorization_delegates_to_exchanger(github_descriptor):
    """Direct completion hands code and verifier to the exchanger."""
    exchanger = AsyncMock()
    exchanger.exchange.return_value = TokenResult(access_token="abc")
    client = OAuthClient(github_descriptor, token_exchanger=exchanger)

    token = await client.complete_authorization("code", "verifier")

    assert token.access_token == "abc"
    exchanger.exchange.assert_awaited_once_with(github_descriptor, "code", "verifier")


# ===========================
# AuthorizationFlow
# ===========================


@pytest.fixture
def flow(github_descriptor):
    """Flow with a mocked token exchanger."""
    exchanger = AsyncMock()
    exchanger.exchange.return_value = TokenResult(access_token="abc")
    return AuthorizationFlow(OAuthClient(github_descriptor, token_exchanger=exchanger))


@pytest.mark.asyncio
async def test_flow_happy_path(flow):
    """Uninitialized -> UrlGenerated -> TokenExchanged."""
    assert flow.status is FlowStatus.UNINITIALIZED

    request = flow.begin(["repo"])
    assert flow.status is FlowStatus.URL_GENERATED

    token = await flow.complete(CallbackPayload(state=request.state, code="code"))

    assert token.access_token == "abc"
    assert flow.status is FlowStatus.TOKEN_EXCHANGED
    assert flow.token is token
    flow.client.token_exchanger.exchange.assert_awaited_once_with(
        flow.client.descriptor, "code", request.verifier
    )


@pytest.mark.asyncio
async def test_flow_complete_before_begin(flow):
    """Completing an unstarted flow is a state error."""
    with pytest.raises(InvalidFlowStateError):
        await flow.complete(CallbackPayload(state="s", code="code"))


def test_flow_begin_twice(flow):
    """A flow generates exactly one URL."""
    flow.begin([])

    with pytest.raises(InvalidFlowStateError):
        flow.begin([])


@pytest.mark.asyncio
async def test_flow_state_mismatch_fails(flow):
    """Callback for another state fails the flow."""
    flow.begin([])

    with pytest.raises(UnknownStateError):
        await flow.complete(CallbackPayload(state="other", code="code"))

    assert flow.status is FlowStatus.FAILED
    flow.client.token_exchanger.exchange.assert_not_awaited()


@pytest.mark.asyncio
async def test_flow_denied(flow):
    """Error callback fails the flow."""
    request = flow.begin([])

    with pytest.raises(AuthorizationDeniedError):
        await flow.complete(CallbackPayload(state=request.state, error="access_denied"))

    assert flow.status is FlowStatus.FAILED


@pytest.mark.asyncio
async def test_flow_exchange_failure_is_terminal(flow):
    """After a failed exchange the flow cannot be completed again."""
    flow.client.token_exchanger.exchange.side_effect = ProviderError(400, "{}")
    request = flow.begin([])
    callback = CallbackPayload(state=request.state, code="code")

    with pytest.raises(ProviderError):
        await flow.complete(callback)
    assert flow.status is FlowStatus.FAILED

    with pytest.raises(InvalidFlowStateError):
        await flow.complete(callback)


@pytest.mark.asyncio
async def test_flow_completed_is_terminal(flow):
    """A token is exchanged at most once per flow."""
    request = flow.begin([])
    callback = CallbackPayload(state=request.state, code="code")
    await flow.complete(callback)

    with pytest.raises(InvalidFlowStateError):
        await flow.complete(callback)


@pytest.mark.asyncio
async def test_flow_non_ascii_state_is_unknown(flow):
    """A forged state with non-ASCII characters is an unknown state."""
    flow.begin(["read:user"])

    with pytest.raises(UnknownStateError):
        await flow.complete(CallbackPayload(state="forgé", code="code"))

    assert flow.status is FlowStatus.FAILED
    flow.client.token_exchanger.exchange.assert_not_awaited()
