"""
Abstract interface for pending authorization storage.

A pending authorization binds the ``state`` sent to the provider to the PKCE
``verifier`` kept by the client, across the redirect boundary.
"""

from abc import ABC, abstractmethod


class PendingAuthorizationRepository(ABC):
    """
    Abstract interface for state -> verifier storage.

    Implementations must:
    - Be safe under concurrent writers for distinct states
    - Report backend failures as StoreReadError / StoreWriteError,
      never as a missing entry
    - Treat deleting an absent state as a no-op
    """

    @abstractmethod
    async def put(self, state: str, verifier: str) -> None:
        """
        Store the verifier for a state.

        Args:
            state: Authorization state (lookup key)
            verifier: PKCE code verifier

        Raises:
            StoreWriteError: If the backend fails or the state already exists
        """
        pass

    @abstractmethod
    async def get(self, state: str) -> str | None:
        """
        Retrieve the verifier for a state.

        Args:
            state: Authorization state

        Returns:
            Verifier if found and not expired, None otherwise

        Raises:
            StoreReadError: If the backend fails
        """
        pass

    @abstractmethod
    async def delete(self, state: str) -> None:
        """
        Remove a pending authorization (single-use cleanup).

        Args:
            state: Authorization state

        Raises:
            StoreWriteError: If the backend fails
        """
        pass

    @abstractmethod
    async def purge_expired(self) -> int:
        """
        Remove pending authorizations older than the configured TTL.

        Returns:
            Number of entries removed
        """
        pass
