"""
JSON File Store: Infrastructure adapter for a single JSON document.

The document maps storage keys to collections, mirroring a key -> blob
store. Writes go to a temporary file that atomically replaces the
original, so a crash never leaves a half-written document.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from versemem.domain.constants import DEFAULT_STORAGE_KEY
from versemem.domain.errors import PersistenceError
from versemem.domain.memorization.models import MemorizationItem
from versemem.domain.memorization.ports import MemorizationStore
from versemem.infrastructure.codec import item_to_dict, items_from_list

logger = logging.getLogger(__name__)


class JsonFileStore(MemorizationStore):
    def __init__(self, path: Path, key: str = DEFAULT_STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict[str, Any] | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise PersistenceError(f"{self.path} must contain a JSON object")
        return document

    async def load(self) -> list[MemorizationItem] | None:
        document = self._read_document()
        if document is None or self.key not in document:
            logger.debug(f"No stored collection under {self.key!r} in {self.path}")
            return None

        return items_from_list(document[self.key])

    async def save(self, items: list[MemorizationItem]) -> None:
        # Other keys in the document belong to other collections
        document = self._read_document() or {}
        document[self.key] = [item_to_dict(item) for item in items]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e

        logger.debug(f"Saved {len(items)} items to {self.path}")
