"""AWS infrastructure implementations package (requires the ``aws`` extra)."""

from pkceflow.infrastructure.implementations.aws.pending_authorization_repository import (  # noqa: E501
    DynamoDBPendingAuthorizationRepository,
)

__all__ = ["DynamoDBPendingAuthorizationRepository"]
