from datetime import datetime, timedelta, timezone

from versemem.domain.errors import InvalidArgumentError, NotFoundError
from versemem.domain.memorization.models import Level, MemorizationItem, derive_level


def _item(**overrides) -> MemorizationItem:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        id="memo_1",
        reference="Psalm 23:1",
        text="The Lord is my shepherd; I shall not want.",
        added_at=now,
        last_reviewed=now,
        next_review_date=now,
    )
    fields.update(overrides)
    return MemorizationItem(**fields)


def test_new_item_defaults():
    item = _item()
    assert item.review_count == 0
    assert item.ease_factor == 2.5
    assert item.interval == 1
    assert item.mastered is False
    assert item.level is Level.LEARNING
    assert item.category is None


def test_accuracy_is_none_without_reviews():
    assert _item().accuracy is None


def test_accuracy_rounds_percentage():
    item = _item(total_reviews=3, successful_reviews=2)
    assert item.accuracy == 67


def test_refresh_schedule_follows_interval():
    item = _item(interval=95, mastered=False, level=Level.LEARNING)

    item.refresh_schedule()

    assert item.mastered is True
    assert item.level is Level.MASTERED
    assert item.next_review_date == item.last_reviewed + timedelta(days=95)
    assert derive_level(21) is Level.MATURE


def test_level_compares_to_plain_strings():
    assert Level.MATURE == "Mature"
    assert Level("Young") is Level.YOUNG


def test_not_found_error_message_and_hierarchy():
    err = NotFoundError("memo_x")
    assert err.item_id == "memo_x"
    assert str(err) == "Memorization item not found: memo_x"
    assert isinstance(err, KeyError)


def test_invalid_argument_is_value_error():
    assert issubclass(InvalidArgumentError, ValueError)
