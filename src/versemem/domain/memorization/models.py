"""
Domain models for verse memorization.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from versemem.domain.constants import (
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL,
    MASTERED_INTERVAL,
    MATURE_INTERVAL,
    YOUNG_INTERVAL,
)


class Level(str, Enum):
    """Learning stage of an item, derived from its interval."""

    LEARNING = "Learning"
    YOUNG = "Young"
    MATURE = "Mature"
    MASTERED = "Mastered"


def derive_level(interval: int) -> Level:
    """Map an interval in days to its learning stage (first match wins)."""
    if interval >= MASTERED_INTERVAL:
        return Level.MASTERED
    if interval >= MATURE_INTERVAL:
        return Level.MATURE
    if interval >= YOUNG_INTERVAL:
        return Level.YOUNG
    return Level.LEARNING


@dataclass
class MemorizationItem:
    """
    One verse a user is memorizing.

    `interval` is the single source of truth for `level` and `mastered`;
    both are cached and recomputed together whenever `interval` changes.

    Attributes:
        id: Opaque unique identifier, immutable.
        reference: Human-readable citation, e.g. "John 3:16".
        text: Full verse text.
        added_at: Creation timestamp (UTC).
        last_reviewed: Most recent review (or reset/creation) timestamp.
        review_count: Consecutive successful reviews since the last lapse.
        ease_factor: SM-2 ease multiplier, never below 1.3.
        interval: Days until the next review, never below 1.
        next_review_date: last_reviewed + interval days.
        mastered: True iff interval >= 90.
        level: Derived learning stage.
    """

    id: str
    reference: str
    text: str
    added_at: datetime
    last_reviewed: datetime
    next_review_date: datetime
    review_count: int = 0
    ease_factor: float = INITIAL_EASE_FACTOR
    interval: int = INITIAL_INTERVAL
    mastered: bool = False
    level: Level = Level.LEARNING

    category: str | None = None

    # Lifetime counters (never reset by a lapse)
    total_reviews: int = 0
    successful_reviews: int = 0
    perfect_reviews: int = 0
    hints_used: int = 0
    time_spent_ms: int = 0

    def refresh_schedule(self) -> None:
        """Recompute next_review_date, level and mastered from interval."""
        self.next_review_date = self.last_reviewed + timedelta(days=self.interval)
        self.mastered = self.interval >= MASTERED_INTERVAL
        self.level = Level.MASTERED if self.mastered else derive_level(self.interval)

    @property
    def accuracy(self) -> int | None:
        """Percentage of lifetime reviews that were successful."""
        if self.total_reviews == 0:
            return None
        return round(self.successful_reviews / self.total_reviews * 100)


@dataclass(frozen=True)
class MemorizationStats:
    total: int
    learning: int
    young: int
    mature: int
    mastered: int
    due_today: int
    average_ease_factor: float


@dataclass(frozen=True)
class StreakInfo:
    current_streak: int
    longest_streak: int
    last_review_date: datetime | None


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    unlocked: bool
    progress: float  # 0.0-1.0
    icon: str


@dataclass(frozen=True)
class DailyReviewCount:
    date: date
    review_count: int


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int


@dataclass
class ProgressAnalytics:
    total_time_spent_minutes: int
    average_accuracy: int
    reviewed_today: int
    weekly_progress: list[DailyReviewCount] = field(default_factory=list)
    category_breakdown: list[CategoryCount] = field(default_factory=list)


# ---------- Exercises ----------


@dataclass(frozen=True)
class FillInBlank:
    text: str
    blanks: list[str]


@dataclass(frozen=True)
class FirstLetterExercise:
    text: str
    answer: str


@dataclass(frozen=True)
class WordScramble:
    scrambled_words: list[str]
    correct_order: list[str]


@dataclass(frozen=True)
class ProgressiveReveal:
    stages: list[str]


@dataclass(frozen=True)
class TypingExercise:
    prompt: str
    answer: str
