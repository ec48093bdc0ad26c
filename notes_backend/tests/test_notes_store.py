"""Tests for the owner-scoped note lifecycle store."""
from datetime import datetime, timedelta, timezone

import pytest

from scribz_api import notes as store
from scribz_api.errors import NoteNotFound, ValidationFailure
from scribz_api.models import Note, DEFAULT_NOTE_COLOR, DEFAULT_NOTE_TITLE
from scribz_api.schemas import NoteFilter


@pytest.fixture
def owner(alice):
    return alice[1].id


@pytest.fixture
def intruder(bob):
    return bob[1].id


def _ids(notes):
    return {n.id for n in notes}


# =============================================================================
# Create
# =============================================================================


def test_create_with_values(db, owner):
    note = store.create_note(db, owner, title="Groceries", content="<p>milk, eggs</p>", color="#0f3460")
    assert note.title == "Groceries"
    assert note.content == "<p>milk, eggs</p>"
    assert note.color == "#0f3460"
    assert note.is_favorite is False
    assert note.is_trashed is False
    assert note.user_id == owner
    assert note.created_at is not None
    assert note.updated_at is not None


@pytest.mark.parametrize("title", [None, "", "   "])
def test_create_applies_defaults(db, owner, title):
    note = store.create_note(db, owner, title=title)
    assert note.title == DEFAULT_NOTE_TITLE
    assert note.content == ""
    assert note.color == DEFAULT_NOTE_COLOR


def test_create_trims_title(db, owner):
    assert store.create_note(db, owner, title="  Plans  ").title == "Plans"


# =============================================================================
# Filters and search
# =============================================================================


@pytest.fixture
def mixed(db, owner):
    active = store.create_note(db, owner, title="Active")
    favorite = store.create_note(db, owner, title="Favorite")
    store.toggle_favorite(db, owner, favorite.id)
    trashed = store.create_note(db, owner, title="Trashed")
    store.toggle_trash(db, owner, trashed.id)
    trashed_favorite = store.create_note(db, owner, title="Trashed favorite")
    store.toggle_favorite(db, owner, trashed_favorite.id)
    store.toggle_trash(db, owner, trashed_favorite.id)
    return {
        "active": active.id,
        "favorite": favorite.id,
        "trashed": trashed.id,
        "trashed_favorite": trashed_favorite.id,
    }


def test_filter_all_excludes_trashed(db, owner, mixed):
    notes = store.list_notes(db, owner, NoteFilter.all)
    assert _ids(notes) == {mixed["active"], mixed["favorite"]}
    assert not any(n.is_trashed for n in notes)


def test_filter_favorites_excludes_trashed_favorites(db, owner, mixed):
    notes = store.list_notes(db, owner, NoteFilter.favorites)
    assert _ids(notes) == {mixed["favorite"]}


def test_filter_trash_ignores_favorite_status(db, owner, mixed):
    notes = store.list_notes(db, owner, NoteFilter.trash)
    assert _ids(notes) == {mixed["trashed"], mixed["trashed_favorite"]}
    assert all(n.is_trashed for n in notes)


def test_filter_accepts_plain_strings(db, owner, mixed):
    assert _ids(store.list_notes(db, owner, "trash")) == _ids(store.list_notes(db, owner, NoteFilter.trash))


def test_list_is_scoped_to_owner(db, owner, intruder, mixed):
    store.create_note(db, intruder, title="Bob's note")
    assert "Bob's note" not in {n.title for n in store.list_notes(db, owner)}
    assert [n.title for n in store.list_notes(db, intruder)] == ["Bob's note"]


def test_search_matches_title_case_insensitively(db, owner):
    groceries = store.create_note(db, owner, title="Groceries")
    store.create_note(db, owner, title="Workout", content="groceries after gym")
    notes = store.list_notes(db, owner, search="GROC")
    assert _ids(notes) == {groceries.id}


def test_search_treats_wildcards_literally(db, owner):
    literal = store.create_note(db, owner, title="100% done")
    store.create_note(db, owner, title="1000 things")
    assert _ids(store.list_notes(db, owner, search="100%")) == {literal.id}
    assert store.list_notes(db, owner, search="_") == []


@pytest.mark.parametrize("search", ["été", "ÉTÉ", "Été"])
def test_search_folds_case_beyond_ascii(db, owner, search):
    summer = store.create_note(db, owner, title="Été plans")
    store.create_note(db, owner, title="Winter plans")
    assert _ids(store.list_notes(db, owner, search=search)) == {summer.id}


def test_search_keeps_surrounding_spaces(db, owner):
    shopping = store.create_note(db, owner, title="Buy milk today")
    store.create_note(db, owner, title="milkshake")
    assert _ids(store.list_notes(db, owner, search="milk ")) == {shopping.id}
    assert _ids(store.list_notes(db, owner, search=" milk")) == {shopping.id}


def test_unknown_filter_is_a_validation_failure(db, owner):
    with pytest.raises(ValidationFailure):
        store.list_notes(db, owner, "archived")


def test_timestamps_are_utc_aware(db, owner):
    note = store.create_note(db, owner)
    db.expire_all()
    reloaded = store.get_note(db, owner, note.id)
    assert reloaded.created_at.utcoffset() == timedelta(0)
    assert reloaded.updated_at.utcoffset() == timedelta(0)


def test_blank_search_returns_everything_in_view(db, owner, mixed):
    assert len(store.list_notes(db, owner, search="   ")) == 2


def test_search_combines_with_filter(db, owner, mixed):
    assert _ids(store.list_notes(db, owner, NoteFilter.trash, search="favorite")) == {mixed["trashed_favorite"]}


def test_list_orders_by_most_recently_updated(db, owner):
    older = store.create_note(db, owner, title="Older")
    newer = store.create_note(db, owner, title="Newer")
    now = datetime.now(timezone.utc)
    db.query(Note).filter(Note.id == older.id).update({Note.updated_at: now + timedelta(minutes=5)})
    db.query(Note).filter(Note.id == newer.id).update({Note.updated_at: now})
    db.commit()
    assert [n.id for n in store.list_notes(db, owner)] == [older.id, newer.id]


# =============================================================================
# Update and toggles
# =============================================================================


def test_update_changes_only_supplied_fields(db, owner):
    note = store.create_note(db, owner, title="Draft", content="body", color="#1a1a1a")
    updated = store.update_note(db, owner, note.id, {"content": "new body", "title": None})
    assert updated.title == "Draft"
    assert updated.content == "new body"
    assert updated.color == "#1a1a1a"


def test_update_can_set_favorite(db, owner):
    note = store.create_note(db, owner)
    assert store.update_note(db, owner, note.id, {"is_favorite": True}).is_favorite is True


def test_update_cannot_trash(db, owner):
    note = store.create_note(db, owner)
    updated = store.update_note(db, owner, note.id, {"is_trashed": True, "user_id": "someone"})
    assert updated.is_trashed is False
    assert updated.user_id == owner


def test_update_blank_title_falls_back_to_default(db, owner):
    note = store.create_note(db, owner, title="Named")
    assert store.update_note(db, owner, note.id, {"title": "  "}).title == DEFAULT_NOTE_TITLE


def test_toggle_favorite_is_self_inverse(db, owner):
    note = store.create_note(db, owner)
    assert store.toggle_favorite(db, owner, note.id).is_favorite is True
    again = store.toggle_favorite(db, owner, note.id)
    assert again.is_favorite is False
    assert again.is_trashed is False


def test_toggle_trash_is_self_inverse(db, owner):
    note = store.create_note(db, owner)
    store.toggle_favorite(db, owner, note.id)
    trashed = store.toggle_trash(db, owner, note.id)
    assert trashed.is_trashed is True
    assert trashed.is_favorite is True
    assert store.toggle_trash(db, owner, note.id).is_trashed is False


def test_delete_from_active_state(db, owner):
    note = store.create_note(db, owner)
    store.delete_note(db, owner, note.id)
    with pytest.raises(NoteNotFound):
        store.get_note(db, owner, note.id)


def test_delete_from_trash(db, owner):
    note = store.create_note(db, owner)
    store.toggle_trash(db, owner, note.id)
    store.delete_note(db, owner, note.id)
    assert store.list_notes(db, owner, NoteFilter.trash) == []


# =============================================================================
# Ownership
# =============================================================================


@pytest.mark.parametrize(
    "operation",
    [
        lambda db, who, nid: store.get_note(db, who, nid),
        lambda db, who, nid: store.update_note(db, who, nid, {"title": "hijacked"}),
        lambda db, who, nid: store.toggle_favorite(db, who, nid),
        lambda db, who, nid: store.toggle_trash(db, who, nid),
        lambda db, who, nid: store.delete_note(db, who, nid),
    ],
    ids=["get", "update", "favorite", "trash", "delete"],
)
def test_foreign_note_behaves_as_missing(db, owner, intruder, operation):
    note = store.create_note(db, owner, title="Private")
    with pytest.raises(NoteNotFound):
        operation(db, intruder, note.id)
    with pytest.raises(NoteNotFound):
        operation(db, intruder, "does-not-exist")

    untouched = store.get_note(db, owner, note.id)
    assert untouched.title == "Private"
    assert untouched.is_favorite is False
    assert untouched.is_trashed is False
