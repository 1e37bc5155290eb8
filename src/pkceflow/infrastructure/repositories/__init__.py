"""
Repository interfaces for infrastructure abstraction.

Repositories define contracts for data persistence operations,
allowing different implementations (memory, SQLite, AWS).
"""

from pkceflow.infrastructure.repositories.pending_authorization_repository import (
    PendingAuthorizationRepository,
)

__all__ = ["PendingAuthorizationRepository"]
