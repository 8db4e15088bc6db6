"""Centralized constants for versemem.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
LAPSE_EASE_PENALTY = 0.2
INITIAL_INTERVAL = 1
SECOND_INTERVAL = 6
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
PERFECT_QUALITY = 5

# ---------- Levels (days) ----------
YOUNG_INTERVAL = 7
MATURE_INTERVAL = 21
MASTERED_INTERVAL = 90

# ---------- Exercises ----------
BLANK_PLACEHOLDER = "______"
HIDDEN_WORD_PLACEHOLDER = "___"
MIN_BLANK_WORD_LENGTH = 4
DEFAULT_BLANK_COUNT = 3
DEFAULT_CHUNK_SIZE = 5

# ---------- Analytics ----------
STREAK_LOOKBACK_DAYS = 365
WEEKLY_PROGRESS_DAYS = 7
UNCATEGORIZED = "Uncategorized"

# ---------- Storage ----------
DEFAULT_STORAGE_KEY = "memorized-verses"
ID_PREFIX = "memo_"
