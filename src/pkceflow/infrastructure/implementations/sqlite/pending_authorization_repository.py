"""
SQLite pending authorization repository.

Stores one row per pending authorization:

    pending_authorizations(
        id TEXT PRIMARY KEY,        -- uuid4
        state TEXT NOT NULL UNIQUE, -- lookup key
        verifier TEXT NOT NULL,
        created_at REAL NOT NULL    -- unix time, used for expiry
    )

The UNIQUE constraint on ``state`` rejects duplicate inserts from
concurrent writers at the database level.
"""

import sqlite3
import time
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from loguru import logger

from pkceflow.domain.errors import StoreReadError, StoreWriteError
from pkceflow.infrastructure.repositories.pending_authorization_repository import (
    PendingAuthorizationRepository,
)


class SQLitePendingAuthorizationRepository(PendingAuthorizationRepository):
    """Relational pending authorization storage backed by a SQLite file."""

    def __init__(
        self,
        db_path: str = "./.pkceflow/pending_authorizations.db",
        ttl_seconds: float | None = 900,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize SQLite repository and create the table if needed.

        Args:
            db_path: Database file path (":memory:" is not supported, every
                operation opens its own connection)
            ttl_seconds: Lifetime of a pending authorization (None disables expiry)
            clock: Wall-clock time source, injectable for tests
        """
        self._db_path = Path(db_path)
        self.ttl_seconds = ttl_seconds
        self._clock = clock

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

        logger.info(f"Initialized SQLitePendingAuthorizationRepository at {self._db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        try:
            with self._transaction() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS pending_authorizations (
                        id TEXT NOT NULL PRIMARY KEY,
                        state TEXT NOT NULL UNIQUE,
                        verifier TEXT NOT NULL,
                        created_at REAL NOT NULL
                    )
                    """
                )
        except sqlite3.Error as e:
            raise StoreWriteError(f"Could not create pending authorization table: {e}") from e

    def _cutoff(self) -> float | None:
        if self.ttl_seconds is None:
            return None
        return self._clock() - self.ttl_seconds

    async def put(self, state: str, verifier: str) -> None:
        """Insert a row; a live row with the same state is an error."""
        cutoff = self._cutoff()
        try:
            with self._transaction() as conn:
                if cutoff is not None:
                    # An expired row must not block reuse of its state
                    conn.execute(
                        "DELETE FROM pending_authorizations "
                        "WHERE state = ? AND created_at <= ?",
                        (state, cutoff),
                    )
                conn.execute(
                    """
                    INSERT INTO pending_authorizations (id, state, verifier, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (str(uuid.uuid4()), state, verifier, self._clock()),
                )
        except sqlite3.IntegrityError as e:
            raise StoreWriteError("Pending authorization already exists for state") from e
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed to store pending authorization: {e}") from e

    async def get(self, state: str) -> str | None:
        """Retrieve verifier for a live row."""
        cutoff = self._cutoff()
        try:
            with self._transaction() as conn:
                row = conn.execute(
                    "SELECT verifier, created_at FROM pending_authorizations "
                    "WHERE state = ?",
                    (state,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to read pending authorization: {e}") from e

        if row is None:
            return None
        if cutoff is not None and row["created_at"] <= cutoff:
            return None
        return row["verifier"]

    async def delete(self, state: str) -> None:
        """Delete row if present."""
        try:
            with self._transaction() as conn:
                conn.execute(
                    "DELETE FROM pending_authorizations WHERE state = ?", (state,)
                )
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed to delete pending authorization: {e}") from e

    async def purge_expired(self) -> int:
        """Delete every row older than the TTL."""
        cutoff = self._cutoff()
        if cutoff is None:
            return 0
        try:
            with self._transaction() as conn:
                cursor = conn.execute(
                    "DELETE FROM pending_authorizations WHERE created_at <= ?",
                    (cutoff,),
                )
                removed = cursor.rowcount
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed to purge pending authorizations: {e}") from e

        if removed:
            logger.debug(f"Purged {removed} expired pending authorizations")
        return removed
