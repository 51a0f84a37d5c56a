import sqlite3

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.core.config import Settings
from app.db.repositories.notes import NoteRepository
from app.domain.addresses import NoteAddress
from app.domain.categories import Category
from app.domain.errors import (
    InvalidAddressError,
    InvalidArgumentError,
    InvalidCategoryError,
    InvalidFilterError,
    UnknownColumnError,
    WriteFailureError,
)
from app.features.notes.schemas import NoteValues
from app.features.notes.services import NoteStore


def fetch(store, note_id):
    return store.query(NoteAddress.item(note_id)).first()


# ---------- insert ----------

def test_insert_fills_defaults(store, clock):
    note_id = store.insert()
    note = fetch(store, note_id)
    assert note["title"] == "<Untitled>"
    assert note["body"] == ""
    assert note["category"] == Category.NONE
    assert note["created_at"] == note["modified_at"] == clock.now


def test_buy_milk_scenario(store):
    note_id = store.insert({"body": "buy milk"})
    assert note_id == 1
    note = fetch(store, 1)
    assert note["title"] == "<Untitled>"
    assert note["category"] == 0

    assert store.update(NoteAddress.item(1), {"category": 1}) == 1
    note = fetch(store, 1)
    assert note["category"] == Category.WORK
    assert note["body"] == "buy milk"


def test_insert_keeps_supplied_values(store):
    note_id = store.insert(
        NoteValues(title="t", body="b", created_at=10, modified_at=20, category=Category.STUDY)
    )
    note = fetch(store, note_id)
    assert (note["title"], note["body"], note["created_at"], note["modified_at"], note["category"]) == (
        "t", "b", 10, 20, 3,
    )


def test_insert_only_at_collection(store):
    with pytest.raises(InvalidAddressError):
        store.insert({"title": "x"}, address=NoteAddress.item(1))
    with pytest.raises(InvalidAddressError):
        store.insert({"title": "x"}, address=NoteAddress.live_folder())
    assert len(store.query(store.collection_address)) == 0


def test_insert_rejects_unknown_and_id_columns(store):
    with pytest.raises(UnknownColumnError):
        store.insert({"colour": "red"})
    with pytest.raises(InvalidArgumentError):
        store.insert({"id": 5, "title": "x"})


def test_insert_rejects_bad_types(store):
    with pytest.raises(InvalidArgumentError):
        store.insert({"title": 12})


def test_insert_rejects_modified_before_created(store):
    with pytest.raises(InvalidArgumentError):
        store.insert({"created_at": 100, "modified_at": 50})


@pytest.mark.parametrize("values", [{"modified_at": None}, {"created_at": None}])
def test_insert_rejects_null_timestamps(store, collection, values):
    with pytest.raises(InvalidArgumentError):
        store.insert(values)
    assert len(store.query(collection)) == 0


def test_strict_categories(store):
    with pytest.raises(InvalidCategoryError):
        store.insert({"category": 4})
    with pytest.raises(InvalidCategoryError):
        store.insert({"category": -1})


def test_permissive_categories(db, clock):
    lenient = NoteStore(db, settings=Settings(_env_file=None, STRICT_CATEGORIES=False), clock=clock)
    note_id = lenient.insert({"category": 9})
    assert fetch(lenient, note_id)["category"] == 9
    assert lenient.category_name(9) == "Unknown"


def test_insert_write_failure_leaves_nothing(store, db):
    with db.begin() as conn:
        conn.execute(text(
            "CREATE TRIGGER refuse_insert BEFORE INSERT ON notes "
            "BEGIN SELECT RAISE(ABORT, 'refused'); END"
        ))
    with pytest.raises(WriteFailureError):
        store.insert({"title": "x"})
    with db.begin() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM notes")).scalar() == 0


def test_ids_are_never_reused(store):
    first = store.insert()
    second = store.insert()
    assert store.delete(NoteAddress.item(second)) == 1
    third = store.insert()
    assert third > second > first


# ---------- update ----------

def test_update_bumps_modified_at(store):
    note_id = store.insert({"body": "a"})
    before = fetch(store, note_id)["modified_at"]
    store.update(NoteAddress.item(note_id), {"body": "b"})
    after = fetch(store, note_id)
    assert after["modified_at"] > before
    assert after["created_at"] == before


def test_update_keeps_explicit_modified_at(store):
    note_id = store.insert({"created_at": 1000, "modified_at": 1000})
    store.update(NoteAddress.item(note_id), {"modified_at": 5000})
    assert fetch(store, note_id)["modified_at"] == 5000


def test_update_never_moves_modified_before_created(store):
    note_id = store.insert({"created_at": 5000, "modified_at": 5000})
    store.update(NoteAddress.item(note_id), {"modified_at": 10})
    assert fetch(store, note_id)["modified_at"] == 5000


def test_partial_update_keeps_other_fields(store):
    note_id = store.insert({"title": "t", "body": "b", "category": 2})
    store.update(NoteAddress.item(note_id), {"title": "new"})
    note = fetch(store, note_id)
    assert (note["title"], note["body"], note["category"]) == ("new", "b", 2)


def test_update_collection_with_filter(store, collection):
    work = store.insert({"category": 1})
    other = store.insert({"category": 2})
    count = store.update(collection, {"title": "work"}, "category = ?", [1])
    assert count == 1
    assert fetch(store, work)["title"] == "work"
    assert fetch(store, other)["title"] == "<Untitled>"


def test_update_without_match_returns_zero(store):
    assert store.update(NoteAddress.item(404), {"title": "x"}) == 0


def test_update_rejects_immutable_columns(store):
    note_id = store.insert()
    with pytest.raises(InvalidArgumentError):
        store.update(NoteAddress.item(note_id), {"created_at": 1})
    with pytest.raises(InvalidArgumentError):
        store.update(NoteAddress.item(note_id), {"id": 2})


def test_update_rejects_null_modified_at(store):
    note_id = store.insert()
    before = fetch(store, note_id)["modified_at"]
    with pytest.raises(InvalidArgumentError):
        store.update(NoteAddress.item(note_id), {"modified_at": None})
    assert fetch(store, note_id)["modified_at"] == before


def test_update_rejects_live_folder(store):
    with pytest.raises(InvalidAddressError):
        store.update(NoteAddress.live_folder(), {"title": "x"})


def test_update_malformed_filter(store, collection):
    store.insert()
    with pytest.raises(InvalidFilterError):
        store.update(collection, {"title": "x"}, "title = = ?", ["a"])


# ---------- delete ----------

def test_delete_then_query_is_empty(store):
    note_id = store.insert({"body": "bye"})
    assert store.delete(NoteAddress.item(note_id)) == 1
    assert len(store.query(NoteAddress.item(note_id))) == 0


def test_delete_is_idempotent(store):
    note_id = store.insert()
    assert store.delete(NoteAddress.item(note_id)) == 1
    assert store.delete(NoteAddress.item(note_id)) == 0
    assert store.delete(NoteAddress.item(9999)) == 0


def test_delete_collection_with_filter(store, collection):
    store.insert({"category": 1})
    store.insert({"category": 1})
    keep = store.insert({"category": 3})
    assert store.delete(collection, "category = ?", [1]) == 2
    assert [row["id"] for row in store.query(collection)] == [keep]


def test_delete_item_and_filter(store):
    note_id = store.insert({"category": 1})
    assert store.delete(NoteAddress.item(note_id), "category = ?", [2]) == 0
    assert store.delete(NoteAddress.item(note_id), "category = ?", [1]) == 1


def test_delete_whole_collection(store, collection):
    store.insert()
    store.insert()
    assert store.delete(collection) == 2
    assert len(store.query(collection)) == 0


def test_storage_failure_with_filter_is_a_write_failure(store, collection, monkeypatch):
    store.insert({"category": 1})

    def locked(self, where, commit=True):
        raise OperationalError("DELETE", {}, sqlite3.OperationalError("database is locked"))

    monkeypatch.setattr(NoteRepository, "delete_where", locked)
    with pytest.raises(WriteFailureError):
        store.delete(collection, "category = ?", [1])
