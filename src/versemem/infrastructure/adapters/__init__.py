# Infrastructure Storage Adapters Package
from .json_store import JsonFileStore
from .memory_store import InMemoryStore
from .sqlite_store import SqliteStore

__all__ = ["InMemoryStore", "JsonFileStore", "SqliteStore"]
