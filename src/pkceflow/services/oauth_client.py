"""
OAuth client facade.

Orchestrates the two steps of the authorization code + PKCE flow:

1. ``begin_authorization``: generate verifier, challenge and state, build
   the authorization URL. The caller persists ``(state, verifier)``.
2. ``complete_authorization``: exchange the callback's code together with
   the recovered verifier for a token.

The ``*_store`` variants do the persistence and lookup against an injected
``PendingAuthorizationRepository``.
"""

import hmac
from collections.abc import Sequence
from enum import Enum

from loguru import logger

from pkceflow.domain.errors import (
    AuthorizationDeniedError,
    InvalidFlowStateError,
    UnknownStateError,
)
from pkceflow.domain.models import AuthorizationRequest, CallbackPayload, TokenResult
from pkceflow.domain.providers import ProviderDescriptor
from pkceflow.infrastructure.repositories import PendingAuthorizationRepository
from pkceflow.services.authorization_url import build_authorization_url
from pkceflow.services.token_exchange import TokenExchanger
from pkceflow.utils.pkce import generate_code_challenge, generate_code_verifier
from pkceflow.utils.security import generate_state


class OAuthClient:
    """
    Stateless facade over one provider.

    Holds only the immutable descriptor and the token exchanger, so a single
    instance can serve any number of concurrent flows.
    """

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        token_exchanger: TokenExchanger | None = None,
    ) -> None:
        """
        Initialize OAuth client.

        Args:
            descriptor: Provider configuration
            token_exchanger: Exchanger to use (a default one if omitted)
        """
        self.descriptor = descriptor
        self.token_exchanger = token_exchanger or TokenExchanger()

    @property
    def provider_name(self) -> str:
        """Provider name (github, google, custom, ...)."""
        return self.descriptor.kind.value

    def begin_authorization(self, scopes: Sequence[str]) -> AuthorizationRequest:
        """
        Create a new authorization request.

        Args:
            scopes: Requested scopes, in order

        Returns:
            AuthorizationRequest with state, verifier, challenge and URL
        """
        code_verifier = generate_code_verifier()
        state = generate_state()
        while state == code_verifier:
            state = generate_state()
        code_challenge = generate_code_challenge(code_verifier)

        authorization_url = build_authorization_url(
            self.descriptor,
            scopes=scopes,
            state=state,
            code_challenge=code_challenge,
        )

        logger.debug(
            f"Authorization URL generated for {self.provider_name} "
            f"(state={state[:8]}..., scopes={list(scopes)})"
        )

        return AuthorizationRequest(
            provider=self.provider_name,
            state=state,
            verifier=code_verifier,
            challenge=code_challenge,
            authorization_url=authorization_url,
        )

    async def begin_authorization_and_store(
        self,
        scopes: Sequence[str],
        repository: PendingAuthorizationRepository,
    ) -> AuthorizationRequest:
        """
        Create an authorization request and persist its state and verifier.

        Args:
            scopes: Requested scopes, in order
            repository: Pending authorization storage

        Returns:
            AuthorizationRequest, already persisted

        Raises:
            StoreWriteError: If the binding could not be persisted
        """
        request = self.begin_authorization(scopes)
        await repository.put(request.state, request.verifier)
        return request

    async def complete_authorization(self, code: str, verifier: str) -> TokenResult:
        """
        Exchange an authorization code for a token.

        Args:
            code: Authorization code from the callback
            verifier: Verifier recovered for the callback's state

        Returns:
            TokenResult

        Raises:
            TokenExchangeError: NetworkError, ProviderError or ResponseFormatError
        """
        return await self.token_exchanger.exchange(self.descriptor, code, verifier)

    async def complete_authorization_from_store(
        self,
        callback: CallbackPayload,
        repository: PendingAuthorizationRepository,
    ) -> TokenResult:
        """
        Resolve the verifier for a callback and exchange its code.

        The pending authorization is deleted as soon as it has been read,
        before the exchange, so it is single use whatever the outcome.

        Args:
            callback: Provider redirect parameters
            repository: Pending authorization storage

        Returns:
            TokenResult

        Raises:
            UnknownStateError: State not found (expired, consumed or forged)
            AuthorizationDeniedError: Provider redirected back with an error
            StoreReadError / StoreWriteError: Storage backend failure
            TokenExchangeError: Token endpoint failure
        """
        verifier = await repository.get(callback.state)
        if verifier is None:
            raise UnknownStateError(callback.state)

        await repository.delete(callback.state)

        if callback.is_error():
            raise AuthorizationDeniedError(
                callback.error or "unknown_error", callback.error_description
            )
        if not callback.code:
            raise AuthorizationDeniedError(
                "invalid_request", "Callback carries neither code nor error"
            )

        return await self.complete_authorization(callback.code, verifier)


class FlowStatus(str, Enum):
    """Lifecycle of one authorization flow."""

    UNINITIALIZED = "uninitialized"
    URL_GENERATED = "url_generated"
    TOKEN_EXCHANGED = "token_exchanged"
    FAILED = "failed"


class AuthorizationFlow:
    """
    One authorization flow, for callers that keep the flow in process.

    Tracks ``Uninitialized -> UrlGenerated -> TokenExchanged``, with
    ``Failed`` reachable from either transition. Both terminal states are
    final: start a new flow to try again.
    """

    def __init__(self, client: OAuthClient) -> None:
        self.client = client
        self.status = FlowStatus.UNINITIALIZED
        self.request: AuthorizationRequest | None = None
        self.token: TokenResult | None = None

    def begin(self, scopes: Sequence[str]) -> AuthorizationRequest:
        """Generate the authorization request for this flow."""
        if self.status is not FlowStatus.UNINITIALIZED:
            raise InvalidFlowStateError(
                f"Cannot begin authorization from state {self.status.value}"
            )
        try:
            self.request = self.client.begin_authorization(scopes)
        except Exception:
            self.status = FlowStatus.FAILED
            raise
        self.status = FlowStatus.URL_GENERATED
        return self.request

    async def complete(self, callback: CallbackPayload) -> TokenResult:
        """
        Exchange the callback's code using this flow's verifier.

        Raises:
            InvalidFlowStateError: Flow not begun, or already finished
            UnknownStateError: Callback state does not belong to this flow
            AuthorizationDeniedError: Provider redirected back with an error
            TokenExchangeError: Token endpoint failure
        """
        if self.status is not FlowStatus.URL_GENERATED or self.request is None:
            raise InvalidFlowStateError(
                f"Cannot complete authorization from state {self.status.value}"
            )
        try:
            if not hmac.compare_digest(
                callback.state.encode("utf-8"), self.request.state.encode("utf-8")
            ):
                raise UnknownStateError(callback.state)
            if callback.is_error() or not callback.code:
                raise AuthorizationDeniedError(
                    callback.error or "invalid_request", callback.error_description
                )
            self.token = await self.client.complete_authorization(
                callback.code, self.request.verifier
            )
        except Exception:
            self.status = FlowStatus.FAILED
            raise
        self.status = FlowStatus.TOKEN_EXCHANGED
        return self.token
