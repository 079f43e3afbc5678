"""Tests for the file-backed collections, identifier generator and session store."""

from __future__ import annotations

import json
import os

import pytest

from moodmate import storage
from moodmate.storage import (
    IdGenerator,
    PersistentCollection,
    RecordNotFoundError,
    SessionStore,
    StorageError,
    Stores,
)


def _read(path):
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def test_load_bootstraps_missing_files(data_dir):
    stores = Stores(data_dir).load()

    assert data_dir.is_dir()
    assert _read(data_dir / "users.json") == []
    assert _read(data_dir / "journals.json") == []
    assert len(stores.users) == 0
    assert stores.ids.next_ordinal == 1


def test_unparsable_file_is_fatal(data_dir):
    data_dir.mkdir(parents=True)
    (data_dir / "users.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        Stores(data_dir).load()


def test_non_array_file_is_fatal(data_dir):
    data_dir.mkdir(parents=True)
    (data_dir / "journals.json").write_text('{"id": "id_1_1"}', encoding="utf-8")

    collection = PersistentCollection(data_dir / "journals.json", "journals")
    with pytest.raises(StorageError):
        collection.load()


def test_id_generator_seeds_past_highest_ordinal():
    ids = IdGenerator()

    next_ordinal = ids.seed(["id_1700000000000_7", "id_1_3", "legacy-record"])

    assert next_ordinal == 8
    assert ids.next().endswith("_8")
    assert ids.next().endswith("_9")


def test_id_generator_ignores_malformed_identifiers():
    ids = IdGenerator()

    assert ids.seed(["user-42", "", "id_abc_5"]) == 1
    assert ids.next().startswith("id_")


def test_identifiers_stay_unique_across_restart(data_dir):
    first = Stores(data_dir).load()
    issued = []
    for index in range(5):
        user_id = first.ids.next()
        first.users.insert({"id": user_id, "email": f"u{index}@example.com"})
        entry_id = first.ids.next()
        first.journals.insert({"id": entry_id, "userId": user_id})
        issued.extend([user_id, entry_id])

    second = Stores(data_dir).load()
    assert second.ids.next_ordinal == 11
    for _ in range(10):
        issued.append(second.ids.next())

    assert len(issued) == len(set(issued)) == 20


def test_insert_persists_and_reload_preserves_order(data_dir, clock):
    collection = PersistentCollection(data_dir / "journals.json", "journals", clock)
    collection.load()
    for index in range(3):
        collection.insert({"id": f"id_1_{index + 1}", "catatan": f"note {index}"})

    reloaded = PersistentCollection(data_dir / "journals.json", "journals", clock)
    assert reloaded.load() == 3
    assert [record["id"] for record in reloaded.all()] == ["id_1_1", "id_1_2", "id_1_3"]


def test_update_replaces_patched_fields_only(data_dir, clock):
    collection = PersistentCollection(data_dir / "users.json", "users", clock)
    collection.load()
    collection.insert({"id": "id_1_1", "name": "Ana", "email": "ana@example.com"})

    updated = collection.update("id_1_1", {"name": "Ana Maria"})

    assert updated["name"] == "Ana Maria"
    assert updated["email"] == "ana@example.com"
    assert updated["updatedAt"].startswith("2024-01-01T")
    assert _read(data_dir / "users.json")[0]["name"] == "Ana Maria"


def test_unknown_identifier_raises_not_found(data_dir):
    collection = PersistentCollection(data_dir / "users.json", "users")
    collection.load()

    with pytest.raises(RecordNotFoundError):
        collection.update("id_1_99", {"name": "Nobody"})
    with pytest.raises(RecordNotFoundError):
        collection.remove("id_1_99")


def test_remove_returns_record(data_dir):
    collection = PersistentCollection(data_dir / "journals.json", "journals")
    collection.load()
    collection.insert({"id": "id_1_1", "mood": "calm"})

    removed = collection.remove("id_1_1")

    assert removed == {"id": "id_1_1", "mood": "calm"}
    assert collection.get("id_1_1") is None
    assert _read(data_dir / "journals.json") == []


def test_all_returns_copies(data_dir):
    collection = PersistentCollection(data_dir / "journals.json", "journals")
    collection.load()
    collection.insert({"id": "id_1_1", "aktivitas": ["run"]})

    snapshot = collection.all()
    snapshot[0]["aktivitas"].append("swim")

    assert collection.get("id_1_1")["aktivitas"] == ["run"]


def test_failed_write_keeps_memory_and_disk_in_step(data_dir, monkeypatch):
    collection = PersistentCollection(data_dir / "journals.json", "journals")
    collection.load()
    collection.insert({"id": "id_1_1"})

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", _fail)

    with pytest.raises(StorageError):
        collection.insert({"id": "id_1_2"})

    assert [record["id"] for record in collection.all()] == ["id_1_1"]
    assert _read(data_dir / "journals.json") == [{"id": "id_1_1"}]
    assert sorted(os.listdir(data_dir)) == ["journals.json"]


def test_clear_empties_collection(data_dir):
    collection = PersistentCollection(data_dir / "users.json", "users")
    collection.load()
    collection.insert({"id": "id_1_1"})
    collection.insert({"id": "id_1_2"})

    assert collection.clear() == 2
    assert len(collection) == 0
    assert _read(data_dir / "users.json") == []


def test_session_lifecycle(clock):
    sessions = SessionStore(clock)

    token = sessions.create("id_1_1", "ana@example.com")
    context = sessions.lookup(token)

    assert context["userId"] == "id_1_1"
    assert context["email"] == "ana@example.com"
    assert context["createdAt"].startswith("2024-01-01T")
    assert sessions.count() == 1

    assert sessions.destroy(token) is True
    assert sessions.destroy(token) is False
    assert sessions.lookup(token) is None


def test_session_tokens_are_distinct():
    sessions = SessionStore()
    tokens = {sessions.create("id_1_1", "ana@example.com") for _ in range(50)}

    assert len(tokens) == 50
    assert all(token.startswith("session_") for token in tokens)


@pytest.mark.parametrize("token", [None, "", "session_unknown"])
def test_session_lookup_miss(token):
    sessions = SessionStore()
    sessions.create("id_1_1", "ana@example.com")

    assert sessions.lookup(token) is None

