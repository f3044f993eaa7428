"""Storage interfaces for ledger persistence."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract key-value blob store.

    The ledger is persisted as one JSON document under a fixed key.
    Implementations may use a SQL table, in-memory storage, etc.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key is absent
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: The storage key
            value: The full document to store

        Raises:
            Any backend error; the ledger store translates it into
            PersistenceUnavailableException.
        """
        ...
