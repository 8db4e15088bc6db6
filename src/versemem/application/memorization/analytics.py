"""
Progress calculator for memorization statistics, streaks and achievements.

This is a pure computation module with no I/O.
"""

from collections import Counter
from datetime import date, datetime, timedelta, timezone

from versemem.domain.constants import (
    STREAK_LOOKBACK_DAYS,
    UNCATEGORIZED,
    WEEKLY_PROGRESS_DAYS,
)
from versemem.domain.errors import InvalidArgumentError
from versemem.domain.memorization.models import (
    Achievement,
    CategoryCount,
    DailyReviewCount,
    Level,
    MemorizationItem,
    MemorizationStats,
    ProgressAnalytics,
    StreakInfo,
)


def _day(moment: datetime) -> date:
    return moment.astimezone(timezone.utc).date()


def is_due(item: MemorizationItem, as_of: datetime) -> bool:
    """Mastered items are never due, whatever their date says."""
    if as_of.tzinfo is None:
        raise InvalidArgumentError("as_of must be a timezone-aware datetime")
    return not item.mastered and item.next_review_date <= as_of


class ProgressCalculator:
    """
    Computes aggregate metrics over a collection of items.

    Stateless and side-effect free; `now` is always passed in.
    """

    def statistics(self, items: list[MemorizationItem], now: datetime) -> MemorizationStats:
        levels = Counter(item.level for item in items)
        average = sum(item.ease_factor for item in items) / len(items) if items else 0.0

        return MemorizationStats(
            total=len(items),
            learning=levels[Level.LEARNING],
            young=levels[Level.YOUNG],
            mature=levels[Level.MATURE],
            mastered=levels[Level.MASTERED],
            due_today=sum(1 for item in items if is_due(item, now)),
            average_ease_factor=average,
        )

    def streak(self, items: list[MemorizationItem], now: datetime) -> StreakInfo:
        """
        Count consecutive review days within the last year.

        A day counts when at least one item was last reviewed on it. The
        current streak ends today and is 0 if nothing was reviewed today.
        """
        if not items:
            return StreakInfo(current_streak=0, longest_streak=0, last_review_date=None)

        review_days = {_day(item.last_reviewed) for item in items}
        today = _day(now)

        current = 0
        longest = 0
        run = 0
        still_current = True
        for offset in range(STREAK_LOOKBACK_DAYS):
            if today - timedelta(days=offset) in review_days:
                run += 1
                longest = max(longest, run)
                if still_current:
                    current = run
            else:
                run = 0
                still_current = False

        return StreakInfo(
            current_streak=current,
            longest_streak=longest,
            last_review_date=max(item.last_reviewed for item in items),
        )

    def achievements(self, items: list[MemorizationItem], now: datetime) -> list[Achievement]:
        stats = self.statistics(items, now)
        current_streak = self.streak(items, now).current_streak
        best_perfect = max((item.perfect_reviews for item in items), default=0)

        def milestone(
            id: str, title: str, description: str, value: int, goal: int, icon: str
        ) -> Achievement:
            return Achievement(
                id=id,
                title=title,
                description=description,
                unlocked=value >= goal,
                progress=min(value / goal, 1.0),
                icon=icon,
            )

        return [
            milestone("first_verse", "First Steps", "Memorize your first verse", stats.total, 1, "🌱"),
            milestone("five_verses", "Building Foundation", "Memorize 5 verses", stats.total, 5, "📚"),
            milestone("ten_verses", "Dedicated Scholar", "Memorize 10 verses", stats.total, 10, "⭐"),
            milestone(
                "first_mastered", "Master of Memory", "Master your first verse", stats.mastered, 1, "👑"
            ),
            milestone(
                "week_streak", "Weekly Warrior", "Maintain a 7-day streak", current_streak, 7, "🔥"
            ),
            milestone(
                "month_streak", "Monthly Master", "Maintain a 30-day streak", current_streak, 30, "💪"
            ),
            milestone(
                "perfect_week",
                "Perfection Seeker",
                "Get 7 perfect reviews in a row",
                best_perfect,
                7,
                "✨",
            ),
        ]

    def progress_analytics(
        self, items: list[MemorizationItem], now: datetime
    ) -> ProgressAnalytics:
        total_ms = sum(item.time_spent_ms for item in items)

        accuracies = [item.accuracy for item in items if item.accuracy]
        average_accuracy = round(sum(accuracies) / len(accuracies)) if accuracies else 0

        today = _day(now)
        per_day = Counter(_day(item.last_reviewed) for item in items)

        weekly = [
            DailyReviewCount(date=day, review_count=per_day[day])
            for day in (
                today - timedelta(days=offset)
                for offset in range(WEEKLY_PROGRESS_DAYS - 1, -1, -1)
            )
        ]

        # Counter keeps first-seen order
        categories = Counter(item.category or UNCATEGORIZED for item in items)

        return ProgressAnalytics(
            total_time_spent_minutes=round(total_ms / 60000),
            average_accuracy=average_accuracy,
            reviewed_today=per_day[today],
            weekly_progress=weekly,
            category_breakdown=[
                CategoryCount(category=name, count=count) for name, count in categories.items()
            ],
        )
