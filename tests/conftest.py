import random
from datetime import datetime, timedelta, timezone

import pytest

from versemem.application.memorization.scheduler import MemorizationScheduler
from versemem.infrastructure.adapters.memory_store import InMemoryStore

JOHN_3_16 = (
    "For God so loved the world, that he gave his only begotten Son, that whosoever "
    "believeth in him should not perish, but have everlasting life."
)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: float = 0, **kwargs) -> datetime:
        self.now += timedelta(days=days, **kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def scheduler(store, clock, rng):
    """An uninitialized scheduler; tests await initialize() themselves."""
    return MemorizationScheduler(store, clock=clock, rng=rng)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data
    monkeypatch.setenv("HOME", str(home))
    for var in ("VERSEMEM_BACKEND", "VERSEMEM_DATA_DIR", "VERSEMEM_STORAGE_KEY"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def verse_text():
    return JOHN_3_16
