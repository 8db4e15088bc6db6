"""
Learning aids generated from a verse's text.

Nothing here mutates the item. Functions that shuffle or sample take an
optional `random.Random` so callers can make them reproducible.
"""

import random
import re

from versemem.domain.constants import (
    BLANK_PLACEHOLDER,
    DEFAULT_BLANK_COUNT,
    DEFAULT_CHUNK_SIZE,
    HIDDEN_WORD_PLACEHOLDER,
    MIN_BLANK_WORD_LENGTH,
)
from versemem.domain.errors import InvalidArgumentError
from versemem.domain.memorization.models import (
    FillInBlank,
    FirstLetterExercise,
    MemorizationItem,
    ProgressiveReveal,
    TypingExercise,
    WordScramble,
)

_WHITESPACE_SPLIT = re.compile(r"(\s+)")
_FIRST_LETTER = re.compile(r"[A-Za-z]")

GENERIC_TIPS = [
    "Read it out loud 3 times",
    "Write it by hand on paper",
    "Create a melody or rhythm with the words",
    "Visualize the scene or meaning",
    "Practice right before bed and right after waking up",
    "Connect it to a personal experience",
    "Use the first letter of each word as an acronym",
]


def chunk_words(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split text into phrases of at most `chunk_size` words."""
    if chunk_size <= 0:
        raise InvalidArgumentError(f"chunk_size must be positive, got {chunk_size}")
    words = text.split()
    return [" ".join(words[i : i + chunk_size]) for i in range(0, len(words), chunk_size)]


def generate_fill_in_blank(
    item: MemorizationItem,
    blank_count: int = DEFAULT_BLANK_COUNT,
    rng: random.Random | None = None,
) -> FillInBlank:
    """
    Blank out up to `blank_count` distinct words longer than 3 characters.

    Candidates are collected once and sampled without replacement, so a
    verse with too few long words simply yields fewer blanks. `blanks`
    lists the hidden words in the order they were picked, not text order.
    """
    if blank_count <= 0:
        raise InvalidArgumentError(f"blank_count must be positive, got {blank_count}")
    rng = rng or random.Random()

    # Even positions are words, odd positions the whitespace between them
    tokens = _WHITESPACE_SPLIT.split(item.text)
    word_positions = [i for i, tok in enumerate(tokens) if tok and not tok.isspace()]
    candidates = [i for i in word_positions if len(tokens[i]) >= MIN_BLANK_WORD_LENGTH]

    chosen = rng.sample(candidates, min(blank_count, len(candidates)))
    blanks = [tokens[i] for i in chosen]
    for i in chosen:
        tokens[i] = BLANK_PLACEHOLDER

    return FillInBlank(text="".join(tokens), blanks=blanks)


def generate_memorization_tips(
    item: MemorizationItem, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> list[str]:
    phrases = " | ".join(chunk_words(item.text, chunk_size))
    return [f'Break it into phrases: "{phrases}"', *GENERIC_TIPS]


def generate_first_letter_exercise(item: MemorizationItem) -> FirstLetterExercise:
    """First letter of every word; words without any letter are dropped."""
    letters = []
    for word in item.text.split():
        match = _FIRST_LETTER.search(word)
        if match:
            letters.append(match.group(0))
    return FirstLetterExercise(text=" ".join(letters), answer=item.text)


def generate_word_scramble(
    item: MemorizationItem, rng: random.Random | None = None
) -> WordScramble:
    rng = rng or random.Random()
    words = item.text.split()
    scrambled = list(words)
    rng.shuffle(scrambled)
    return WordScramble(scrambled_words=scrambled, correct_order=words)


def generate_progressive_reveal(item: MemorizationItem) -> ProgressiveReveal:
    """
    One stage per word: stage i shows the first i words and a placeholder
    for each hidden one. The last stage is the whole verse.
    """
    words = item.text.split()
    stages = []
    for i in range(1, len(words) + 1):
        if i < len(words):
            hidden = " ".join(HIDDEN_WORD_PLACEHOLDER for _ in words[i:])
            stages.append(f"{' '.join(words[:i])} {hidden}")
        else:
            stages.append(" ".join(words))
    return ProgressiveReveal(stages=stages)


def generate_typing_exercise(item: MemorizationItem) -> TypingExercise:
    return TypingExercise(
        prompt=f"Type the full verse for {item.reference}:",
        answer=item.text,
    )
