"""Stable identifiers for memorization items."""

from ulid import ULID

from versemem.domain.constants import ID_PREFIX


def generate_item_id() -> str:
    """Generate a unique, creation-ordered item ID using ULID."""
    return f"{ID_PREFIX}{ULID()}"
