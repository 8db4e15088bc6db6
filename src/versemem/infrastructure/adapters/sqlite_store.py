"""
SQLite Store: Infrastructure adapter for a key -> blob table.

The whole collection is one row, so a save is a single upsert.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from versemem.domain.constants import DEFAULT_STORAGE_KEY
from versemem.domain.errors import PersistenceError
from versemem.domain.memorization.models import MemorizationItem
from versemem.domain.memorization.ports import MemorizationStore
from versemem.infrastructure.codec import decode_collection, encode_collection

logger = logging.getLogger(__name__)


class SqliteStore(MemorizationStore):
    def __init__(self, path: Path, key: str = DEFAULT_STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.path, timeout=10.0)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Could not open {self.path}: {e}") from e
        try:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"SQLite error on {self.path}: {e}") from e
        finally:
            conn.close()

    async def load(self) -> list[MemorizationItem] | None:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self.key,)).fetchone()
        if row is None:
            return None
        return decode_collection(row[0])

    async def save(self, items: list[MemorizationItem]) -> None:
        payload = encode_collection(items)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (self.key, payload),
            )
        logger.debug(f"Saved {len(items)} items to {self.path} under {self.key!r}")
