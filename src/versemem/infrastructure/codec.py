"""
Codec between MemorizationItem and JSON-compatible payloads.

Timestamps are written as ISO-8601 strings with microsecond precision and
an explicit UTC offset, so due-date comparisons survive a round trip.
"""

import json
from dataclasses import asdict, fields
from datetime import datetime, timezone
from typing import Any

from versemem.domain.constants import INITIAL_INTERVAL, MIN_EASE_FACTOR
from versemem.domain.errors import PersistenceError
from versemem.domain.memorization.models import MemorizationItem

_TIMESTAMP_FIELDS = ("added_at", "last_reviewed", "next_review_date")
_REQUIRED_FIELDS = ("id", "reference", "text", *_TIMESTAMP_FIELDS)
_KNOWN_FIELDS = {f.name for f in fields(MemorizationItem)}
_DERIVED_FIELDS = ("level", "mastered")
_COUNT_FIELDS = (
    "interval",
    "review_count",
    "total_reviews",
    "successful_reviews",
    "perfect_reviews",
    "hints_used",
    "time_spent_ms",
)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    # Naive timestamps are taken to be UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_count(value: Any) -> int:
    # JSON integers only, no strings or floats
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {value!r}")
    return value


def _parse_ease(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)


def item_to_dict(item: MemorizationItem) -> dict[str, Any]:
    data = asdict(item)
    for name in _TIMESTAMP_FIELDS:
        data[name] = data[name].isoformat(timespec="microseconds")
    data["level"] = item.level.value
    return data


def item_from_dict(data: dict[str, Any]) -> MemorizationItem:
    """
    Rebuild an item from a stored payload.

    Stored `level` and `mastered` are ignored and recomputed from `interval`,
    which also fixes `next_review_date` to `last_reviewed + interval`.
    """
    missing = [name for name in _REQUIRED_FIELDS if name not in data]
    if missing:
        raise PersistenceError(f"Stored item is missing fields: {', '.join(missing)}")

    # Unknown keys from newer versions are ignored
    kwargs = {k: v for k, v in data.items() if k in _KNOWN_FIELDS and k not in _DERIVED_FIELDS}
    try:
        for name in _TIMESTAMP_FIELDS:
            kwargs[name] = _parse_timestamp(kwargs[name])
        for name in _COUNT_FIELDS:
            if name in kwargs:
                kwargs[name] = _parse_count(kwargs[name])
        if "ease_factor" in kwargs:
            kwargs["ease_factor"] = _parse_ease(kwargs["ease_factor"])
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Stored item {data.get('id')!r} is malformed: {e}") from e

    item = MemorizationItem(**kwargs)
    if item.interval < INITIAL_INTERVAL:
        raise PersistenceError(f"Stored item {item.id!r} has interval {item.interval} below 1")
    if not item.ease_factor >= MIN_EASE_FACTOR:
        raise PersistenceError(
            f"Stored item {item.id!r} has ease factor {item.ease_factor} below {MIN_EASE_FACTOR}"
        )
    negative = [name for name in _COUNT_FIELDS if getattr(item, name) < 0]
    if negative:
        raise PersistenceError(f"Stored item {item.id!r} has negative {', '.join(negative)}")

    item.refresh_schedule()
    return item


def encode_collection(items: list[MemorizationItem]) -> str:
    return json.dumps([item_to_dict(item) for item in items], ensure_ascii=False)


def decode_collection(payload: str) -> list[MemorizationItem]:
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Stored collection is not valid JSON: {e}") from e

    return items_from_list(raw)


def items_from_list(raw: Any) -> list[MemorizationItem]:
    if not isinstance(raw, list):
        raise PersistenceError("Stored collection must be a JSON array")

    items = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise PersistenceError("Stored collection entries must be JSON objects")
        items.append(item_from_dict(entry))
    return items
