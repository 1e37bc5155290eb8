"""
OAuth 2.0 endpoints for every configured provider.

Handles the two halves of the authorization code + PKCE flow:
- /authorize/{provider}: create state and verifier, persist them, return
  (or redirect to) the provider's authorization URL
- /callback/{provider}: resolve the verifier for the returned state and
  exchange the code for a token
"""

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse

from pkceflow.api.v1.oauth.response import OAuthAuthorizeResponse, OAuthTokenResponse
from pkceflow.core.logging import logger
from pkceflow.di import OAuthClientDep, PendingAuthorizationRepositoryDep, SettingsDep
from pkceflow.domain.models import CallbackPayload
from pkceflow.models import ProblemDetail

router = APIRouter()


@router.get(
    "/authorize/{provider}",
    response_model=OAuthAuthorizeResponse,
    responses={
        404: {"model": ProblemDetail},
        500: {"model": ProblemDetail},
        503: {"model": ProblemDetail},
    },
)
async def authorize(
    provider: str,
    client: OAuthClientDep,
    repository: PendingAuthorizationRepositoryDep,
    settings: SettingsDep,
    scope: list[str] | None = Query(
        None, description="Requested scopes (repeatable); provider defaults if omitted"
    ),
    redirect: bool = Query(
        False, description="Redirect to the provider instead of returning JSON"
    ),
) -> OAuthAuthorizeResponse | RedirectResponse:
    """
    Starts the OAuth authorization flow.

    Args:
        provider: OAuth provider (github, google, ...)
        client: OAuth client for the provider
        repository: Pending authorization storage
        settings: Application configuration
        scope: Requested scopes, in order
        redirect: Answer with a 307 redirect to the authorization URL

    Returns:
        Authorization URL and state, or a redirect to the URL
    """
    scopes = scope if scope is not None else settings.get_provider_scopes(provider)
    logger.info(f"Starting OAuth authorization flow for provider: {provider}")

    request = await client.begin_authorization_and_store(scopes, repository)

    if redirect:
        return RedirectResponse(url=request.authorization_url, status_code=307)

    return OAuthAuthorizeResponse(
        provider=request.provider,
        authorization_url=request.authorization_url,
        state=request.state,
    )


@router.get(
    "/callback/{provider}",
    response_model=OAuthTokenResponse,
    responses={
        400: {"model": ProblemDetail},
        404: {"model": ProblemDetail},
        502: {"model": ProblemDetail},
        503: {"model": ProblemDetail},
        504: {"model": ProblemDetail},
    },
)
async def oauth_callback(
    provider: str,
    client: OAuthClientDep,
    repository: PendingAuthorizationRepositoryDep,
    state: str = Query(..., description="State parameter"),
    code: str | None = Query(None, description="Authorization code"),
    error: str | None = Query(None, description="OAuth error code"),
    error_description: str | None = Query(None, description="OAuth error text"),
) -> OAuthTokenResponse:
    """
    OAuth callback called by the provider's redirect.

    Args:
        provider: OAuth provider
        client: OAuth client for the provider
        repository: Pending authorization storage
        state: State returned by the provider
        code: Authorization code
        error: Error code if the user refused consent
        error_description: Error description

    Returns:
        Access token and its metadata
    """
    logger.info(f"OAuth callback received for provider: {provider}")

    callback = CallbackPayload(
        state=state,
        code=code,
        error=error,
        error_description=error_description,
    )
    token = await client.complete_authorization_from_store(callback, repository)

    logger.info(f"Successfully exchanged code for token with {provider}")
    return OAuthTokenResponse.from_token_result(token)
