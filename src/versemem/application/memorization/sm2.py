"""
SuperMemo SM-2 scheduling rules.

Pure functions over MemorizationItem with no I/O. The scheduler owns
locking and persistence; these only compute state transitions.
"""

import math
from datetime import datetime, timedelta

from versemem.application.id_service import generate_item_id
from versemem.domain.constants import (
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL,
    LAPSE_EASE_PENALTY,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    PERFECT_QUALITY,
    SECOND_INTERVAL,
)
from versemem.domain.errors import InvalidArgumentError
from versemem.domain.memorization.models import MemorizationItem
from versemem.domain.memorization.models import derive_level  # noqa: F401


def ease_adjustment(quality: int) -> float:
    """
    Canonical SM-2 ease delta for a successful recall.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    q=5 -> +0.10, q=4 -> 0.00, q=3 -> -0.14
    """
    miss = MAX_QUALITY - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


def validate_quality(quality: int) -> int:
    # bool is an int subclass; True/False are not recall scores
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidArgumentError(f"quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidArgumentError(
            f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )
    return quality


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _refresh_derived(item: MemorizationItem) -> None:
    # level and mastered always move together with interval
    item.refresh_schedule()


def new_item(
    reference: str, text: str, now: datetime, category: str | None = None
) -> MemorizationItem:
    """Build a freshly added item, first due one day after `now`."""
    return MemorizationItem(
        id=generate_item_id(),
        reference=reference,
        text=text,
        added_at=now,
        last_reviewed=now,
        next_review_date=now + timedelta(days=INITIAL_INTERVAL),
        category=category,
    )


def apply_review(item: MemorizationItem, quality: int, now: datetime) -> MemorizationItem:
    """
    Apply one SM-2 review to `item` in place and return it.

    A quality of 3 or more extends the streak; anything lower is a lapse
    that restarts the schedule at one day.
    """
    validate_quality(quality)

    item.last_reviewed = now
    item.review_count += 1
    item.total_reviews += 1

    if quality >= PASSING_QUALITY:
        item.successful_reviews += 1
        if quality == PERFECT_QUALITY:
            item.perfect_reviews += 1

        if item.review_count == 1:
            item.interval = INITIAL_INTERVAL
        elif item.review_count == 2:
            item.interval = SECOND_INTERVAL
        else:
            item.interval = max(
                INITIAL_INTERVAL, _round_half_up(item.interval * item.ease_factor)
            )

        item.ease_factor = item.ease_factor + ease_adjustment(quality)
    else:
        item.review_count = 0
        item.interval = INITIAL_INTERVAL
        item.ease_factor = max(MIN_EASE_FACTOR, item.ease_factor - LAPSE_EASE_PENALTY)

    item.ease_factor = max(MIN_EASE_FACTOR, item.ease_factor)
    _refresh_derived(item)
    return item


def apply_reset(item: MemorizationItem, now: datetime) -> MemorizationItem:
    """Return `item` to its just-added schedule, keeping id, text and added_at."""
    item.last_reviewed = now
    item.review_count = 0
    item.ease_factor = INITIAL_EASE_FACTOR
    item.interval = INITIAL_INTERVAL
    item.total_reviews = 0
    item.successful_reviews = 0
    item.perfect_reviews = 0
    item.hints_used = 0
    item.time_spent_ms = 0
    _refresh_derived(item)
    return item
