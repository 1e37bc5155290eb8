"""SQLite implementations for single-host deployments."""

from pkceflow.infrastructure.implementations.sqlite.pending_authorization_repository import (  # noqa: E501
    SQLitePendingAuthorizationRepository,
)

__all__ = ["SQLitePendingAuthorizationRepository"]
