"""
Memorization Scheduler: Application layer orchestrator.

Owns the in-memory collection of memorization items, applies SM-2
transitions and mirrors the whole collection to a MemorizationStore
after every mutation.
"""

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from versemem.domain.constants import DEFAULT_BLANK_COUNT, DEFAULT_CHUNK_SIZE
from versemem.domain.errors import (
    InvalidArgumentError,
    NotFoundError,
    PersistenceError,
    SchedulerNotReadyError,
)
from versemem.domain.memorization.models import (
    Achievement,
    FillInBlank,
    FirstLetterExercise,
    Level,
    MemorizationItem,
    MemorizationStats,
    ProgressAnalytics,
    ProgressiveReveal,
    StreakInfo,
    TypingExercise,
    WordScramble,
)
from versemem.domain.memorization.ports import MemorizationStore

from . import exercises, sm2
from .analytics import ProgressCalculator, is_due

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemorizationScheduler:
    """
    Application service for scheduling verse reviews.

    Follows Dependency Inversion: depends on the MemorizationStore
    abstraction, not a concrete storage adapter.

    Every mutation runs under a single lock that covers both the
    in-memory change and the awaited save, so concurrent callers on the
    same event loop are serialized. If a save fails the in-memory change
    is kept and PersistenceError is raised; the next successful save
    writes the whole collection again.

    Items handed to callers are copies; the only way to change the
    collection is through the methods below.
    """

    def __init__(
        self,
        store: MemorizationStore,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
        calculator: ProgressCalculator | None = None,
    ):
        """
        Args:
            store: The repository (port) the collection is mirrored to.
            clock: Returns the current time; injectable for tests.
            rng: Randomness for exercises and random picks.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._store = store
        self._clock = clock
        self._rng = rng or random.Random()
        self._calc = calculator or ProgressCalculator()
        self._items: dict[str, MemorizationItem] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, store: MemorizationStore, **kwargs) -> "MemorizationScheduler":
        """Construct a scheduler and load its collection."""
        scheduler = cls(store, **kwargs)
        await scheduler.initialize()
        return scheduler

    async def initialize(self) -> None:
        """Load the collection from the store. Later calls are no-ops."""
        async with self._lock:
            if self._loaded:
                return
            items = await self._store.load()
            self._items = {item.id: item for item in items or []}
            self._loaded = True
        logger.info(f"Memorization scheduler initialized with {len(self._items)} items")

    @property
    def initialized(self) -> bool:
        return self._loaded

    # --- internals ---

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise SchedulerNotReadyError(
                "Scheduler is not initialized; await initialize() first"
            )

    def _get(self, item_id: str) -> MemorizationItem:
        self._require_loaded()
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError(item_id) from None

    async def _persist(self) -> None:
        try:
            await self._store.save(list(self._items.values()))
        except PersistenceError as e:
            logger.error(f"Failed to save memorization collection: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to save memorization collection: {e}", exc_info=True)
            raise PersistenceError(f"Store failed to save the collection: {e}") from e

    # --- mutations ---

    async def add_item(
        self, reference: str, text: str, category: str | None = None
    ) -> MemorizationItem:
        """Add a verse, first due one day from now."""
        if not reference or not reference.strip():
            raise InvalidArgumentError("reference must be a non-empty string")
        if not text or not text.strip():
            raise InvalidArgumentError("text must be a non-empty string")

        async with self._lock:
            self._require_loaded()
            item = sm2.new_item(reference, text, self._clock(), category=category or None)
            self._items[item.id] = item
            await self._persist()
            snapshot = replace(item)

        logger.info(f"Added verse to memorization: {reference} ({item.id})")
        return snapshot

    async def review(
        self,
        item_id: str,
        quality: int,
        hints_used: int = 0,
        time_spent_ms: int = 0,
    ) -> MemorizationItem:
        """
        Record a recall-quality score (0-5) and reschedule the item.

        Args:
            item_id: Item to review.
            quality: 0 = complete blackout, 5 = perfect recall. Below 3 is a lapse.
            hints_used: Hints the user needed during this review.
            time_spent_ms: Time the user spent on this review.

        Returns:
            The updated item.
        """
        sm2.validate_quality(quality)
        if hints_used < 0 or time_spent_ms < 0:
            raise InvalidArgumentError("hints_used and time_spent_ms must not be negative")

        async with self._lock:
            item = self._get(item_id)
            sm2.apply_review(item, quality, self._clock())
            item.hints_used += hints_used
            item.time_spent_ms += time_spent_ms
            await self._persist()
            snapshot = replace(item)

        logger.info(
            f"Reviewed {item.reference} with quality {quality}, "
            f"next review in {item.interval} days"
        )
        return snapshot

    async def reset_item(self, item_id: str) -> MemorizationItem:
        """Start memorization of an item over from scratch."""
        async with self._lock:
            item = self._get(item_id)
            sm2.apply_reset(item, self._clock())
            await self._persist()
            snapshot = replace(item)

        logger.info(f"Reset memorization schedule for {item.reference}")
        return snapshot

    async def remove_item(self, item_id: str) -> None:
        """Evict an item. Raises NotFoundError if it does not exist."""
        async with self._lock:
            item = self._get(item_id)
            del self._items[item_id]
            await self._persist()

        logger.info(f"Removed {item.reference} from memorization")

    async def set_category(self, item_id: str, category: str | None) -> MemorizationItem:
        """Assign a category; None or blank clears it."""
        async with self._lock:
            item = self._get(item_id)
            item.category = category.strip() if category and category.strip() else None
            await self._persist()
            return replace(item)

    # --- queries ---

    def _all(self) -> list[MemorizationItem]:
        self._require_loaded()
        return list(self._items.values())

    def get_item(self, item_id: str) -> MemorizationItem:
        return replace(self._get(item_id))

    def list_all(self) -> list[MemorizationItem]:
        """Every item, in insertion order."""
        return [replace(item) for item in self._all()]

    def list_due_for_review(self, as_of: datetime | None = None) -> list[MemorizationItem]:
        """Unmastered items whose next review date is at or before `as_of`."""
        if as_of is None:
            as_of = self._clock()
        elif as_of.tzinfo is None:
            raise InvalidArgumentError("as_of must be a timezone-aware datetime")
        return [replace(item) for item in self._all() if is_due(item, as_of)]

    def list_by_level(self, level: Level | str) -> list[MemorizationItem]:
        try:
            wanted = Level(level)
        except ValueError:
            raise InvalidArgumentError(f"Unknown level: {level!r}") from None
        return [replace(item) for item in self._all() if item.level == wanted]

    def list_categories(self) -> list[str]:
        return sorted({item.category for item in self._all() if item.category})

    def get_random_item(self) -> MemorizationItem | None:
        items = self._all()
        if not items:
            return None
        return replace(self._rng.choice(items))

    def get_statistics(self) -> MemorizationStats:
        return self._calc.statistics(self._all(), self._clock())

    def get_streak(self) -> StreakInfo:
        return self._calc.streak(self._all(), self._clock())

    def get_achievements(self) -> list[Achievement]:
        return self._calc.achievements(self._all(), self._clock())

    def get_progress_analytics(self) -> ProgressAnalytics:
        return self._calc.progress_analytics(self._all(), self._clock())

    # --- learning aids ---

    def fill_in_blank(self, item_id: str, blank_count: int = DEFAULT_BLANK_COUNT) -> FillInBlank:
        return exercises.generate_fill_in_blank(self._get(item_id), blank_count, rng=self._rng)

    def memorization_tips(self, item_id: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
        return exercises.generate_memorization_tips(self._get(item_id), chunk_size)

    def first_letter_exercise(self, item_id: str) -> FirstLetterExercise:
        return exercises.generate_first_letter_exercise(self._get(item_id))

    def word_scramble(self, item_id: str) -> WordScramble:
        return exercises.generate_word_scramble(self._get(item_id), rng=self._rng)

    def progressive_reveal(self, item_id: str) -> ProgressiveReveal:
        return exercises.generate_progressive_reveal(self._get(item_id))

    def typing_exercise(self, item_id: str) -> TypingExercise:
        return exercises.generate_typing_exercise(self._get(item_id))
