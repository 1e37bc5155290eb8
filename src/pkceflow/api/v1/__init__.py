"""
API v1 endpoints.

Route prefix constants for consistent API versioning.
"""

API_V1_PREFIX: str = ""

OAUTH_PREFIX: str = f"{API_V1_PREFIX}/oauth"

__all__ = [
    "API_V1_PREFIX",
    "OAUTH_PREFIX",
]
