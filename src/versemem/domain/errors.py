"""Error taxonomy for the memorization scheduler."""


class MemorizationError(Exception):
    """Base class for every error raised by versemem."""


class NotFoundError(MemorizationError, KeyError):
    """No item with the given id exists in the collection."""

    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Memorization item not found: {self.item_id}"


class InvalidArgumentError(MemorizationError, ValueError):
    """A caller passed a value outside the accepted contract."""


class PersistenceError(MemorizationError):
    """The store failed to load or save the collection."""


class SchedulerNotReadyError(MemorizationError):
    """An operation was attempted before the collection was loaded."""
