import pytest

from app.domain.addresses import CONTENT_ITEM_TYPE, CONTENT_TYPE, NoteAddress
from app.domain.errors import InvalidAddressError, InvalidFilterError, UnknownColumnError


@pytest.fixture
def notes(store):
    return {
        "cat": store.insert({"title": "my cat", "body": "feed it", "category": 2}),
        "concat": store.insert({"title": "strings", "body": "concatenate them", "category": 3}),
        "dog": store.insert({"title": "dog", "body": "walk", "category": 1}),
    }


def ids(cursor):
    return [row["id"] for row in cursor]


def test_default_sort_is_id_descending(store, collection, notes):
    cursor = store.query(collection)
    assert ids(cursor) == sorted(notes.values(), reverse=True)
    assert cursor.columns == ["id", "title", "body", "created_at", "modified_at", "category"]


def test_explicit_sort_order(store, collection, notes):
    cursor = store.query(collection, ["id", "title"], sort_order="title ASC")
    assert [row["title"] for row in cursor] == ["dog", "my cat", "strings"]


def test_item_address_scopes_to_one_note(store, notes):
    cursor = store.query(NoteAddress.item(notes["dog"]))
    assert len(cursor) == 1
    assert cursor.first()["body"] == "walk"


def test_item_address_is_anded_with_filter(store, notes):
    address = NoteAddress.item(notes["dog"])
    assert len(store.query(address, selection="category = ?", selection_args=[1])) == 1
    assert len(store.query(address, selection="category = ?", selection_args=[2])) == 0


def test_predicate_filter_with_args(store, collection, notes):
    cursor = store.query(collection, ["id"], "category >= ?", [2])
    assert sorted(ids(cursor)) == sorted([notes["cat"], notes["concat"]])


def test_predicate_filter_with_empty_args(store, collection, notes):
    cursor = store.query(collection, ["id"], "category = 1", [])
    assert ids(cursor) == [notes["dog"]]


def test_filter_cannot_widen_item_scope(store, notes):
    cursor = store.query(NoteAddress.item(notes["dog"]), ["id"], "1 = 1 OR 1 = 1", [])
    assert ids(cursor) == [notes["dog"]]


def test_keyword_overload_matches_substring_in_title_or_body(store, collection, notes):
    cursor = store.query(collection, selection="cat", selection_args=None)
    assert sorted(ids(cursor)) == sorted([notes["cat"], notes["concat"]])


def test_search_is_the_same_as_the_overload(store, notes):
    assert sorted(ids(store.search("cat"))) == sorted([notes["cat"], notes["concat"]])
    assert ids(store.search("walk")) == [notes["dog"]]
    assert ids(store.search("nothing like this")) == []


def test_search_scoped_to_item(store, notes):
    assert ids(store.search("cat", address=NoteAddress.item(notes["dog"]))) == []


def test_meeting_scenario_ignores_requested_sort(store, collection):
    first = store.insert({"body": "team meeting at 10"})
    second = store.insert({"body": "meeting notes"})
    store.insert({"body": "groceries"})
    for sort_order in ("id ASC", "id DESC", "body ASC", "modified_at DESC"):
        cursor = store.query(collection, ["id"], "meeting", None, sort_order)
        assert sorted(ids(cursor)) == sorted([first, second])


def test_live_folder_projection(store, notes):
    cursor = store.query(NoteAddress.live_folder(), ["_id", "name", "icon_package"], sort_order="_id ASC")
    assert cursor.columns == ["_id", "name", "icon_package"]
    assert cursor.first() == {"_id": notes["cat"], "name": "my cat", "icon_package": 2}


def test_unknown_projection_column_is_rejected(store, collection, notes):
    with pytest.raises(UnknownColumnError):
        store.query(collection, ["id", "password"])


def test_filter_argument_mismatch(store, collection, notes):
    with pytest.raises(InvalidFilterError):
        store.query(collection, selection="category = ? AND id = ?", selection_args=[1])


def test_malformed_filter(store, collection, notes):
    with pytest.raises(InvalidFilterError):
        store.query(collection, selection="category ==== ?", selection_args=[1])


@pytest.mark.parametrize(
    "selection, args",
    [("category = ?1", [1]), ("category = @c", []), ("category = :c", []), ("category = $c", [])],
)
def test_other_parameter_styles_are_rejected(store, collection, notes, selection, args):
    with pytest.raises(InvalidFilterError):
        store.query(collection, ["id"], selection, args)


def test_args_without_filter(store, collection):
    with pytest.raises(InvalidFilterError):
        store.query(collection, selection=None, selection_args=["1"])


def test_unknown_address(store):
    with pytest.raises(InvalidAddressError):
        store.query("content://com.google.provider.NotePad/folders")


def test_get_type(store):
    assert store.get_type("content://com.google.provider.NotePad/notes") == CONTENT_TYPE
    assert store.get_type("content://com.google.provider.NotePad/live_folders/notes") == CONTENT_TYPE
    assert store.get_type("content://com.google.provider.NotePad/notes/3") == CONTENT_ITEM_TYPE
    with pytest.raises(InvalidAddressError):
        store.get_type("content://com.google.provider.NotePad/nope")


def test_stream_types(store, collection):
    item = NoteAddress.item(1)
    assert store.get_stream_types(item, "text/*") == ["text/plain"]
    assert store.get_stream_types(item, "*/*") == ["text/plain"]
    assert store.get_stream_types(item, "image/*") == []
    assert store.get_stream_types(collection, "text/*") == []


def test_export_text(store):
    note_id = store.insert({"title": "Groceries", "body": "milk\neggs"})
    assert store.export_text(NoteAddress.item(note_id)) == "Groceries\n\nmilk\neggs"
    with pytest.raises(LookupError):
        store.export_text(NoteAddress.item(note_id + 100))


def test_get_note(store, collection):
    note_id = store.insert({"title": "t", "body": "b", "category": 3})
    note = store.get_note(store.item_address(note_id))
    assert (note.id, note.title, note.body, note.category) == (note_id, "t", "b", 3)
    assert store.get_note(store.item_address(note_id + 1)) is None
    with pytest.raises(InvalidAddressError):
        store.get_note(collection)


def test_category_name(store):
    assert store.category_name(0) == "None"
    assert store.category_name(1) == "Work"
    assert store.category_name(3) == "Study"
    assert store.category_name(9) == "Unknown"
    assert store.category_name(None) == "Unknown"
