"""
Token exchange against a provider's token endpoint.

Implements RFC 6749 section 4.1.3 (access token request) with the PKCE
``code_verifier`` from RFC 7636. This is the only network I/O in pkceflow.
"""

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from pkceflow.domain.errors import NetworkError, ProviderError, ResponseFormatError
from pkceflow.domain.models import TokenResult
from pkceflow.domain.providers import ClientAuthMethod, ProviderDescriptor


class TokenExchanger:
    """
    Exchanges authorization codes for tokens.

    Makes a single attempt per call. Retries, backoff and deadlines are left
    to the caller, since the right policy depends on the workload.

    An ``httpx.AsyncClient`` can be injected to share a connection pool
    between exchanges; the exchanger never closes an injected client.
    Without one, a short-lived client is opened per call.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None):
        """
        Initializes the token exchanger.

        Args:
            http_client: Optional shared HTTP client
        """
        self._http_client = http_client

    async def exchange(
        self,
        descriptor: ProviderDescriptor,
        code: str,
        code_verifier: str,
    ) -> TokenResult:
        """
        Exchanges authorization code for access token.

        Args:
            descriptor: Provider the code was issued by
            code: Authorization code from OAuth callback
            code_verifier: Original PKCE code verifier (not the challenge)

        Returns:
            TokenResult with access_token and whatever metadata the provider sent

        Raises:
            NetworkError: Request failed before a response was read
            ProviderError: Token endpoint answered with an error
            ResponseFormatError: 2xx response that is not a token payload
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": descriptor.redirect_url,
            "client_id": descriptor.client_id,
            "code_verifier": code_verifier,
        }
        auth: httpx.Auth | None = None
        if descriptor.client_auth_method is ClientAuthMethod.CLIENT_SECRET_BASIC:
            # RFC 6749 section 2.3.1: credentials are form-encoded first
            auth = httpx.BasicAuth(
                quote(descriptor.client_id, safe=""),
                quote(descriptor.client_secret, safe=""),
            )
        else:
            data["client_secret"] = descriptor.client_secret

        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        logger.debug(
            f"Exchanging authorization code at {descriptor.token_endpoint} "
            f"(provider={descriptor.kind.value}, client_id={descriptor.client_id})"
        )

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    descriptor.token_endpoint, data=data, headers=headers, auth=auth
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        descriptor.token_endpoint,
                        data=data,
                        headers=headers,
                        auth=auth,
                    )
        except httpx.RequestError as e:
            raise NetworkError(
                f"Could not reach token endpoint {descriptor.token_endpoint}: {e}"
            ) from e

        return self._parse_token_response(response)

    def _parse_token_response(self, response: httpx.Response) -> TokenResult:
        """
        Parse token endpoint response into TokenResult.

        Raises:
            ProviderError: Non-2xx status, or a 2xx carrying an OAuth error
            ResponseFormatError: Body is not a JSON object with an access_token
        """
        if not response.is_success:
            raise ProviderError(response.status_code, response.text)

        try:
            payload: Any = response.json()
        except ValueError as e:
            raise ResponseFormatError(
                f"Token response is not valid JSON (HTTP {response.status_code})"
            ) from e

        if not isinstance(payload, dict):
            raise ResponseFormatError("Token response is not a JSON object")

        # Some providers (GitHub) report errors with a 200 status
        if "access_token" not in payload and "error" in payload:
            raise ProviderError(response.status_code, response.text)

        try:
            result = TokenResult(
                access_token=payload.get("access_token"),
                token_type=payload.get("token_type"),
                expires_in=payload.get("expires_in"),
                refresh_token=payload.get("refresh_token"),
                scope=payload.get("scope"),
                raw=payload,
            )
        except ValidationError as e:
            raise ResponseFormatError(f"Malformed token response: {e}") from e

        logger.debug(
            f"Token exchange successful (token_type={result.token_type}, "
            f"expires_in={result.expires_in})"
        )
        return result
