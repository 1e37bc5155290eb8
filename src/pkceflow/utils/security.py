"""
Security utilities for OAuth state management.
"""

import secrets


def generate_state(nbytes: int = 32) -> str:
    """
    Generate a cryptographically secure random state for OAuth.

    The state is round-tripped through the provider and used as the key of
    the pending authorization, so it must be unguessable and URL-safe.

    Args:
        nbytes: Number of random bytes (32 gives 256 bits of entropy)

    Returns:
        str: URL-safe random string
    """
    return secrets.token_urlsafe(nbytes)
