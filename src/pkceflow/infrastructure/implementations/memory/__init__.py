"""In-process implementations for single-instance deployments and tests."""

from pkceflow.infrastructure.implementations.memory.pending_authorization_repository import (  # noqa: E501
    InMemoryPendingAuthorizationRepository,
)

__all__ = ["InMemoryPendingAuthorizationRepository"]
