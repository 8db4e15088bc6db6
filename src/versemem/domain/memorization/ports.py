"""
Ports (interfaces) for memorization persistence.

These define the contract that infrastructure adapters must implement.
The scheduler depends on this abstraction, not on concrete storage.
"""

from abc import ABC, abstractmethod

from .models import MemorizationItem


class MemorizationStore(ABC):
    """
    Port for durably storing the whole memorization collection.

    Implementations:
        - InMemoryStore: Keeps the encoded collection in process memory.
        - JsonFileStore: One JSON document keyed by storage key.
        - SqliteStore: A key -> blob table in a SQLite database.
    """

    @abstractmethod
    async def load(self) -> list[MemorizationItem] | None:
        """
        Load the whole collection.

        Returns:
            Items in insertion order, or None if nothing was stored yet.

        Raises:
            PersistenceError: The backing storage could not be read or decoded.
        """
        pass

    @abstractmethod
    async def save(self, items: list[MemorizationItem]) -> None:
        """
        Replace the stored collection with `items`.

        Raises:
            PersistenceError: The backing storage could not be written.
        """
        pass
