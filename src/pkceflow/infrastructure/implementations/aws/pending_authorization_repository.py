"""
AWS DynamoDB implementation for pending authorization storage.

Table schema:
- Partition Key: state (string)
- Attributes: verifier (string), expires_at (number, unix seconds)

``expires_at`` should be configured as the table's TTL attribute so
DynamoDB removes stale items. TTL deletion is lazy, so reads also ignore
expired items.
"""

import time
from collections.abc import Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from pkceflow.core.logging import logger
from pkceflow.domain.errors import StoreReadError, StoreWriteError
from pkceflow.infrastructure.repositories.pending_authorization_repository import (
    PendingAuthorizationRepository,
)


class DynamoDBPendingAuthorizationRepository(PendingAuthorizationRepository):
    """AWS DynamoDB implementation of PendingAuthorizationRepository.

    Writes are conditional on the state not existing yet, so concurrent
    writers cannot overwrite each other's verifier.

    Environment Variables:
    - AWS_ACCESS_KEY_ID: AWS access key (optional if using IAM role)
    - AWS_SECRET_ACCESS_KEY: AWS secret key (optional if using IAM role)
    """

    def __init__(
        self,
        table_name: str = "pkceflow-pending-authorizations",
        region_name: str = "eu-west-1",
        ttl_seconds: int = 900,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize DynamoDB client.

        Args:
            table_name: DynamoDB table name (from settings.aws_dynamodb_table)
            region_name: AWS region (from settings.aws_region)
            ttl_seconds: Lifetime of a pending authorization
            clock: Wall-clock time source, injectable for tests
        """
        self.table_name = table_name
        self.region_name = region_name
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.client = boto3.client("dynamodb", region_name=region_name)

        logger.info(
            f"Initialized DynamoDBPendingAuthorizationRepository with "
            f"table={table_name}, region={region_name}"
        )

    async def put(self, state: str, verifier: str) -> None:
        """Store verifier unless a live item already exists for the state."""
        now = int(self._clock())
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item={
                    "state": {"S": state},
                    "verifier": {"S": verifier},
                    "expires_at": {"N": str(now + self.ttl_seconds)},
                },
                # Items past their TTL but not yet reaped may be overwritten
                ConditionExpression="attribute_not_exists(#s) OR expires_at <= :now",
                ExpressionAttributeNames={"#s": "state"},
                ExpressionAttributeValues={":now": {"N": str(now)}},
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise StoreWriteError(
                    "Pending authorization already exists for state"
                ) from e
            raise StoreWriteError(f"Failed to store pending authorization: {e}") from e
        except BotoCoreError as e:
            raise StoreWriteError(f"Failed to store pending authorization: {e}") from e

    async def get(self, state: str) -> str | None:
        """Retrieve verifier for a live item."""
        try:
            response = self.client.get_item(
                TableName=self.table_name,
                Key={"state": {"S": state}},
                ConsistentRead=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreReadError(f"Failed to read pending authorization: {e}") from e

        item = response.get("Item")
        if not item:
            return None
        if int(item["expires_at"]["N"]) <= int(self._clock()):
            return None
        return item["verifier"]["S"]

    async def delete(self, state: str) -> None:
        """Delete item; deleting an absent key succeeds in DynamoDB."""
        try:
            self.client.delete_item(
                TableName=self.table_name,
                Key={"state": {"S": state}},
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreWriteError(f"Failed to delete pending authorization: {e}") from e

    async def purge_expired(self) -> int:
        """
        No-op: expired items are removed by DynamoDB's TTL process.

        Returns:
            Always 0
        """
        return 0
