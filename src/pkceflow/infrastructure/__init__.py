"""
Infrastructure layer for pkceflow.

This module provides abstractions for pending authorization storage
(the state -> verifier binding) with pluggable backends:
- memory: In-process storage
- sqlite: SQLite file storage
- aws: DynamoDB
"""

from pkceflow.infrastructure.factory import InfrastructureFactory
from pkceflow.infrastructure.repositories import PendingAuthorizationRepository

__all__ = [
    "InfrastructureFactory",
    "PendingAuthorizationRepository",
]
