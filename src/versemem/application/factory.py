"""
Store Factory
Centralizes the logic for selecting the memorization storage adapter.
"""

from versemem.application.config import AppConfig
from versemem.application.memorization.scheduler import MemorizationScheduler
from versemem.domain.memorization.ports import MemorizationStore
from versemem.infrastructure.adapters.json_store import JsonFileStore
from versemem.infrastructure.adapters.memory_store import InMemoryStore
from versemem.infrastructure.adapters.sqlite_store import SqliteStore


def get_store(config: AppConfig) -> MemorizationStore:
    """
    Returns the MemorizationStore implementation selected by config.
    """
    if config.backend == "memory":
        return InMemoryStore()

    if config.backend == "sqlite":
        return SqliteStore(config.store_path, key=config.storage_key)

    return JsonFileStore(config.store_path, key=config.storage_key)


async def get_scheduler(config: AppConfig) -> MemorizationScheduler:
    """Build and initialize a scheduler over the configured store."""
    return await MemorizationScheduler.open(get_store(config))
