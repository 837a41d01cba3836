from __future__ import annotations

import json

import pytest

from src.workforce_system.workforce_system.core.exceptions import ConcurrentUpdateError, StorageError
from src.workforce_system.workforce_system.storage.collections import JsonCollection
from src.workforce_system.workforce_system.storage.kv import InMemoryKeyValueStore


class BrokenStore(InMemoryKeyValueStore):
    def get(self, key):
        raise StorageError("disk unavailable")


def test_missing_key_loads_as_empty_list():
    coll = JsonCollection(InMemoryKeyValueStore(), "employees")
    assert coll.load() == []
    assert coll.exists() is False


def test_corrupt_collection_degrades_to_empty_unless_strict():
    store = InMemoryKeyValueStore({"employees": "{not json"})

    assert JsonCollection(store, "employees").load() == []
    with pytest.raises(StorageError):
        JsonCollection(store, "employees", strict_reads=True).load()


def test_non_array_collection_is_a_storage_error_when_strict():
    store = InMemoryKeyValueStore({"employees": json.dumps({"id": "1"})})

    assert JsonCollection(store, "employees").load() == []
    with pytest.raises(StorageError):
        JsonCollection(store, "employees").load(strict=True)


def test_backend_failure_degrades_to_empty():
    assert JsonCollection(BrokenStore(), "shifts").load() == []


def test_mutate_never_overwrites_an_unreadable_collection():
    store = InMemoryKeyValueStore({"shifts": "[{broken"})
    coll = JsonCollection(store, "shifts")

    with pytest.raises(StorageError):
        with coll.mutate() as records:
            records.append({"id": "1"})

    assert store.get("shifts") == "[{broken"


def test_mutate_writes_back_changes():
    store = InMemoryKeyValueStore()
    coll = JsonCollection(store, "shifts")

    with coll.mutate() as records:
        records.append({"id": "1"})

    assert json.loads(store.get("shifts")) == [{"id": "1"}]


def test_mutate_discards_changes_when_body_raises():
    store = InMemoryKeyValueStore({"shifts": json.dumps([{"id": "1"}])})
    coll = JsonCollection(store, "shifts")

    with pytest.raises(RuntimeError):
        with coll.mutate() as records:
            records.clear()
            raise RuntimeError("boom")

    assert json.loads(store.get("shifts")) == [{"id": "1"}]


def test_non_dict_entries_are_skipped():
    store = InMemoryKeyValueStore({"locations": json.dumps([{"id": "1"}, 5, None, "x"])})
    assert JsonCollection(store, "locations").load() == [{"id": "1"}]


def test_interleaved_writers_do_not_lose_updates():
    store = InMemoryKeyValueStore()
    a = JsonCollection(store, "checkIns")
    b = JsonCollection(store, "checkIns")

    with pytest.raises(ConcurrentUpdateError):
        with a.mutate() as records_a:
            with b.mutate() as records_b:
                records_b.append({"id": "b"})
            records_a.append({"id": "a"})

    assert [r["id"] for r in a.load()] == ["b"]

    with a.mutate() as records:
        records.append({"id": "a"})
    assert [r["id"] for r in b.load()] == ["b", "a"]


def test_save_then_mutate_sees_the_saved_version():
    store = InMemoryKeyValueStore()
    coll = JsonCollection(store, "shifts")
    coll.save([{"id": "1"}])

    with coll.mutate() as records:
        records.append({"id": "2"})

    assert store.keys() == ["shifts"]
    assert [r["id"] for r in coll.load()] == ["1", "2"]
