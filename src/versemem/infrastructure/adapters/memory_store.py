"""
In-Memory Store: keeps the encoded collection in process memory.

The collection still goes through the codec, so callers never share
item objects with the store.
"""

from versemem.domain.memorization.models import MemorizationItem
from versemem.domain.memorization.ports import MemorizationStore
from versemem.infrastructure.codec import decode_collection, encode_collection


class InMemoryStore(MemorizationStore):
    def __init__(self, payload: str | None = None):
        self.payload = payload
        self.save_count = 0

    async def load(self) -> list[MemorizationItem] | None:
        if self.payload is None:
            return None
        return decode_collection(self.payload)

    async def save(self, items: list[MemorizationItem]) -> None:
        self.payload = encode_collection(items)
        self.save_count += 1
