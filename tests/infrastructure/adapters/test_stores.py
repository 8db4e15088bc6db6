import json
from datetime import datetime, timezone

import pytest

from versemem.application.memorization import sm2
from versemem.application.memorization.scheduler import MemorizationScheduler
from versemem.domain.errors import PersistenceError
from versemem.infrastructure.adapters import InMemoryStore, JsonFileStore, SqliteStore

NOW = datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc)


def _items():
    first = sm2.new_item("John 3:16", "For God so loved the world", NOW, category="Gospels")
    sm2.apply_review(first, 5, NOW)
    sm2.apply_review(first, 1, NOW)
    second = sm2.new_item("Psalm 23:1", "The Lord is my shepherd; I shall not want.", NOW)
    return [first, second]


@pytest.fixture(params=["memory", "json", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryStore()
    if request.param == "json":
        return JsonFileStore(tmp_path / "nested" / "memorization.json")
    return SqliteStore(tmp_path / "nested" / "memorization.sqlite3")


@pytest.mark.asyncio
async def test_empty_store_loads_none(any_store):
    assert await any_store.load() is None


@pytest.mark.asyncio
async def test_round_trip(any_store):
    items = _items()
    await any_store.save(items)
    assert await any_store.load() == items


@pytest.mark.asyncio
async def test_save_replaces_collection(any_store):
    items = _items()
    await any_store.save(items)
    await any_store.save(items[1:])
    assert await any_store.load() == items[1:]

    await any_store.save([])
    assert await any_store.load() == []


@pytest.mark.asyncio
async def test_scheduler_round_trip_through_store(any_store):
    scheduler = await MemorizationScheduler.open(any_store)
    item = await scheduler.add_item("John 3:16", "For God so loved the world")
    await scheduler.review(item.id, 5)

    reloaded = await MemorizationScheduler.open(any_store)
    assert reloaded.list_all() == scheduler.list_all()


@pytest.mark.asyncio
async def test_json_store_keeps_other_keys(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"settings": {"theme": "dark"}}))

    store = JsonFileStore(path, key="verses")
    await store.save(_items())

    document = json.loads(path.read_text())
    assert document["settings"] == {"theme": "dark"}
    assert len(document["verses"]) == 2
    assert list(tmp_path.iterdir()) == [path]


@pytest.mark.asyncio
async def test_json_store_separates_keys(tmp_path):
    path = tmp_path / "store.json"
    await JsonFileStore(path, key="a").save(_items())
    assert await JsonFileStore(path, key="b").load() is None


@pytest.mark.asyncio
async def test_sqlite_store_separates_keys(tmp_path):
    path = tmp_path / "store.sqlite3"
    await SqliteStore(path, key="a").save(_items())
    assert await SqliteStore(path, key="b").load() is None
    assert len(await SqliteStore(path, key="a").load()) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["{broken", "[]", json.dumps({"memorized-verses": {}})])
async def test_json_store_rejects_corrupt_documents(tmp_path, content):
    path = tmp_path / "store.json"
    path.write_text(content)
    with pytest.raises(PersistenceError):
        await JsonFileStore(path).load()


@pytest.mark.asyncio
async def test_json_store_write_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    store = JsonFileStore(blocker / "store.json")
    with pytest.raises(PersistenceError):
        await store.save(_items())


@pytest.mark.asyncio
async def test_sqlite_store_unopenable_path_raises_persistence_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    with pytest.raises(PersistenceError):
        await SqliteStore(blocker / "store.sqlite3").load()
