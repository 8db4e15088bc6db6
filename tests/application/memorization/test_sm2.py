import random
from datetime import datetime, timedelta, timezone

import pytest

from versemem.application.memorization import sm2
from versemem.domain.errors import InvalidArgumentError
from versemem.domain.memorization.models import Level

NOW = datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def item():
    return sm2.new_item("John 3:16", "For God so loved the world", NOW)


@pytest.mark.parametrize(
    "interval,expected",
    [
        (1, Level.LEARNING),
        (6, Level.LEARNING),
        (7, Level.YOUNG),
        (20, Level.YOUNG),
        (21, Level.MATURE),
        (89, Level.MATURE),
        (90, Level.MASTERED),
        (400, Level.MASTERED),
    ],
)
def test_derive_level_thresholds(interval, expected):
    assert sm2.derive_level(interval) is expected


def test_new_item_initial_schedule(item):
    assert item.id.startswith("memo_")
    assert item.added_at == NOW
    assert item.last_reviewed == NOW
    assert item.next_review_date == NOW + timedelta(days=1)
    assert item.level is Level.LEARNING
    assert item.mastered is False


def test_new_items_get_distinct_ids():
    ids = {sm2.new_item("r", "t", NOW).id for _ in range(50)}
    assert len(ids) == 50


@pytest.mark.parametrize("quality,delta", [(5, 0.1), (4, 0.0), (3, -0.14)])
def test_ease_adjustment(quality, delta):
    assert sm2.ease_adjustment(quality) == pytest.approx(delta)


def test_three_perfect_reviews_follow_streak_progression(item):
    sm2.apply_review(item, 5, NOW)
    assert item.interval == 1
    assert item.ease_factor == pytest.approx(2.6)

    sm2.apply_review(item, 5, NOW)
    assert item.interval == 6

    sm2.apply_review(item, 5, NOW)
    assert item.interval == 16
    assert item.review_count == 3


def test_lapse_resets_streak(item):
    item.review_count = 3
    item.interval = 16
    item.ease_factor = 2.6

    sm2.apply_review(item, 1, NOW)

    assert item.review_count == 0
    assert item.interval == 1
    assert item.ease_factor == pytest.approx(2.4)
    assert item.mastered is False
    assert item.level is Level.LEARNING


def test_review_sets_next_date_from_review_time(item):
    later = NOW + timedelta(days=3, hours=2)
    sm2.apply_review(item, 4, later)
    sm2.apply_review(item, 4, later)
    assert item.last_reviewed == later
    assert item.next_review_date == later + timedelta(days=6)


def test_interval_uses_half_up_rounding(item):
    item.review_count = 2
    item.interval = 5
    item.ease_factor = 2.5
    sm2.apply_review(item, 4, NOW)
    # 5 * 2.5 = 12.5
    assert item.interval == 13


def test_reaching_ninety_days_masters_item(item):
    item.review_count = 5
    item.interval = 40
    item.ease_factor = 2.5

    sm2.apply_review(item, 5, NOW)

    assert item.interval == 100
    assert item.mastered is True
    assert item.level is Level.MASTERED


def test_success_keeps_mastery(item):
    item.review_count = 5
    item.interval = 100
    item.ease_factor = 1.3
    item.mastered = True
    item.level = Level.MASTERED

    sm2.apply_review(item, 3, NOW)

    assert item.interval == 130
    assert item.mastered is True
    assert item.level is Level.MASTERED


def test_lapse_clears_mastery(item):
    item.review_count = 5
    item.interval = 100
    item.mastered = True
    item.level = Level.MASTERED

    sm2.apply_review(item, 0, NOW)

    assert item.mastered is False
    assert item.level is Level.LEARNING
    assert item.interval == 1


def test_repeated_lapses_respect_floors(item):
    for _ in range(20):
        sm2.apply_review(item, 0, NOW)
        assert item.ease_factor >= 1.3
        assert item.interval >= 1
    assert item.ease_factor == pytest.approx(1.3)


def test_random_review_sequences_keep_invariants(item):
    rng = random.Random(7)
    moment = NOW
    for _ in range(100):
        moment += timedelta(days=rng.randint(0, 30))
        sm2.apply_review(item, rng.randint(0, 5), moment)

        assert item.ease_factor >= 1.3
        assert item.interval >= 1
        assert item.next_review_date == item.last_reviewed + timedelta(days=item.interval)
        assert item.mastered == (item.interval >= 90)
        assert item.level is sm2.derive_level(item.interval)


def test_total_reviews_survive_lapses(item):
    sm2.apply_review(item, 5, NOW)
    sm2.apply_review(item, 5, NOW)
    sm2.apply_review(item, 2, NOW)

    assert item.review_count == 0
    assert item.total_reviews == 3
    assert item.successful_reviews == 2
    assert item.perfect_reviews == 2
    assert item.accuracy == 67


@pytest.mark.parametrize("quality", [-1, 6, 2.5, "3", True, None])
def test_invalid_quality_rejected(item, quality):
    with pytest.raises(InvalidArgumentError):
        sm2.apply_review(item, quality, NOW)
    assert item.total_reviews == 0


def test_reset_restores_initial_schedule(item):
    for _ in range(6):
        sm2.apply_review(item, 5, NOW)
    later = NOW + timedelta(days=10)

    sm2.apply_reset(item, later)

    assert item.added_at == NOW
    assert item.last_reviewed == later
    assert item.review_count == 0
    assert item.ease_factor == 2.5
    assert item.interval == 1
    assert item.next_review_date == later + timedelta(days=1)
    assert item.mastered is False
    assert item.level is Level.LEARNING
    assert item.total_reviews == 0
