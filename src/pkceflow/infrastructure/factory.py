"""
Infrastructure factory for pending authorization storage.

Selects the repository implementation based on configuration:
- memory: In-process dict, single instance deployments and tests
- sqlite: SQLite file, single host deployments
- aws: DynamoDB, multi-instance deployments

Usage:
    from pkceflow.infrastructure import InfrastructureFactory
    from pkceflow.config import get_settings

    # Option 1: From settings
    factory = InfrastructureFactory.from_settings(get_settings())

    # Option 2: Manual configuration
    factory = InfrastructureFactory(provider="sqlite", sqlite_path="/tmp/p.db")

    repository = factory.get_pending_authorization_repository()
"""

from typing import TYPE_CHECKING, Literal

from loguru import logger

from pkceflow.infrastructure.repositories import PendingAuthorizationRepository

if TYPE_CHECKING:
    from pkceflow.config import Settings

InfrastructureProvider = Literal["memory", "sqlite", "aws"]

SUPPORTED_PROVIDERS: tuple[str, ...] = ("memory", "sqlite", "aws")


class InfrastructureFactory:
    """
    Factory for creating pending authorization repository instances.

    Provides dependency injection for storage-agnostic operations.
    """

    def __init__(self, provider: InfrastructureProvider | None = None, **config):
        """
        Initialize infrastructure factory.

        Args:
            provider: Storage provider ("memory", "sqlite", "aws").
                     If None, uses "memory" as default.
            **config: Provider-specific configuration options
                     (ttl_seconds, sqlite_path, aws_region, dynamodb_table)

        Raises:
            ValueError: If provider is not supported
        """
        if provider is None:
            provider = "memory"

        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider}")

        self.provider = provider
        self.config = config

        logger.info(f"Initialized InfrastructureFactory with provider: {provider}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InfrastructureFactory":
        """
        Create factory from Settings object.

        Args:
            settings: Application settings from config.py

        Returns:
            InfrastructureFactory configured from settings
        """
        config = {
            "ttl_seconds": settings.pending_store_ttl_seconds,
            "sqlite_path": settings.sqlite_path,
            "aws_region": settings.aws_region,
            "dynamodb_table": settings.aws_dynamodb_table,
        }

        return cls(provider=settings.pending_store_provider, **config)

    def get_pending_authorization_repository(self) -> PendingAuthorizationRepository:
        """
        Get pending authorization repository for configured provider.

        Returns:
            PendingAuthorizationRepository implementation
        """
        ttl_seconds = self.config.get("ttl_seconds", 900)

        if self.provider == "memory":
            from pkceflow.infrastructure.implementations.memory import (
                InMemoryPendingAuthorizationRepository,
            )

            return InMemoryPendingAuthorizationRepository(ttl_seconds=ttl_seconds)

        elif self.provider == "sqlite":
            from pkceflow.infrastructure.implementations.sqlite import (
                SQLitePendingAuthorizationRepository,
            )

            db_path = self.config.get(
                "sqlite_path", "./.pkceflow/pending_authorizations.db"
            )
            return SQLitePendingAuthorizationRepository(
                db_path=db_path, ttl_seconds=ttl_seconds
            )

        else:
            from pkceflow.infrastructure.implementations.aws import (
                DynamoDBPendingAuthorizationRepository,
            )

            table_name = self.config.get(
                "dynamodb_table", "pkceflow-pending-authorizations"
            )
            region = self.config.get("aws_region", "eu-west-1")

            return DynamoDBPendingAuthorizationRepository(
                table_name=table_name,
                region_name=region,
                ttl_seconds=ttl_seconds,
            )
