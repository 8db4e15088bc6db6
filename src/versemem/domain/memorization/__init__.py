# Domain Memorization Package
from .models import (
    Achievement,
    CategoryCount,
    DailyReviewCount,
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
from .ports import MemorizationStore

__all__ = [
    "Achievement",
    "CategoryCount",
    "DailyReviewCount",
    "FillInBlank",
    "FirstLetterExercise",
    "Level",
    "MemorizationItem",
    "MemorizationStats",
    "MemorizationStore",
    "ProgressAnalytics",
    "ProgressiveReveal",
    "StreakInfo",
    "TypingExercise",
    "WordScramble",
]
