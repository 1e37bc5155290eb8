"""
In-memory pending authorization repository.

Suitable for a single process. Entries expire after ``ttl_seconds``;
expiry is applied lazily on read and eagerly by ``purge_expired``.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from pkceflow.domain.errors import StoreWriteError
from pkceflow.infrastructure.repositories.pending_authorization_repository import (
    PendingAuthorizationRepository,
)


@dataclass(frozen=True)
class _PendingEntry:
    verifier: str
    created_at: float


class InMemoryPendingAuthorizationRepository(PendingAuthorizationRepository):
    """
    Dict-backed repository guarded by a lock.

    The lock is held only for dict operations, so it is safe to use from
    both the event loop and worker threads.
    """

    def __init__(
        self,
        ttl_seconds: float | None = 900,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize in-memory repository.

        Args:
            ttl_seconds: Lifetime of a pending authorization (None disables expiry)
            clock: Monotonic time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _PendingEntry] = {}
        self._lock = threading.Lock()

        logger.info(
            f"Initialized InMemoryPendingAuthorizationRepository (ttl={ttl_seconds}s)"
        )

    def _is_expired(self, entry: _PendingEntry, now: float) -> bool:
        return self.ttl_seconds is not None and now - entry.created_at >= self.ttl_seconds

    async def put(self, state: str, verifier: str) -> None:
        """Store verifier; an existing live entry for the state is an error."""
        now = self._clock()
        with self._lock:
            existing = self._entries.get(state)
            if existing is not None and not self._is_expired(existing, now):
                raise StoreWriteError("Pending authorization already exists for state")
            self._entries[state] = _PendingEntry(verifier=verifier, created_at=now)

    async def get(self, state: str) -> str | None:
        """Retrieve verifier, dropping the entry if it has expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(state)
            if entry is None:
                return None
            if self._is_expired(entry, now):
                del self._entries[state]
                return None
            return entry.verifier

    async def delete(self, state: str) -> None:
        """Delete entry if present."""
        with self._lock:
            self._entries.pop(state, None)

    async def purge_expired(self) -> int:
        """Remove every expired entry."""
        now = self._clock()
        with self._lock:
            expired = [
                state
                for state, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for state in expired:
                del self._entries[state]

        if expired:
            logger.debug(f"Purged {len(expired)} expired pending authorizations")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
