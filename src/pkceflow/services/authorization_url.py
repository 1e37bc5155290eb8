"""
Authorization URL builder.

Composes the provider's authorization endpoint with the PKCE parameters.
Pure: no I/O, no randomness.
"""

from collections.abc import Sequence
from urllib.parse import urlencode

from pkceflow.domain.providers import ProviderDescriptor
from pkceflow.utils.pkce import CODE_CHALLENGE_METHOD


def build_authorization_url(
    descriptor: ProviderDescriptor,
    scopes: Sequence[str],
    state: str,
    code_challenge: str,
) -> str:
    """
    Generates the authorization URL for the descriptor's provider.

    Parameter order is fixed: response_type, client_id, state,
    code_challenge, code_challenge_method, redirect_uri, scope. Scopes keep
    the caller's order and are joined with the provider's separator; an
    empty sequence yields an empty ``scope`` value.

    Args:
        descriptor: Validated provider descriptor
        scopes: Requested scopes, in order
        state: State parameter for CSRF protection and verifier lookup
        code_challenge: SHA256 hash of code_verifier (base64url)

    Returns:
        Complete authorization URL for user redirect
    """
    params = {
        "response_type": "code",
        "client_id": descriptor.client_id,
        "state": state,
        "code_challenge": code_challenge,
        "code_challenge_method": CODE_CHALLENGE_METHOD,
        "redirect_uri": descriptor.redirect_url,
        "scope": descriptor.scope_separator.join(scopes),
    }

    endpoint = descriptor.authorization_endpoint
    if "?" in endpoint:
        separator = "" if endpoint.endswith(("?", "&")) else "&"
    else:
        separator = "?"
    return f"{endpoint}{separator}{urlencode(params)}"
