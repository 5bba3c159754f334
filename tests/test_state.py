"""Tests for the keyed note store."""
import pytest
from PySide6.QtCore import QPointF

from board.models import NoteData
from board.state import NoteStore


def note(note_id, x=0.0, y=0.0):
    return NoteData(id=note_id, content="hi", position=QPointF(x, y))


class TestNoteStore:

    def test_add_and_get(self):
        store = NoteStore()
        store.add(note("a", 1, 2))
        assert "a" in store
        assert len(store) == 1
        assert store.get("a").position == QPointF(1, 2)
        assert store.get("b") is None

    def test_duplicate_id_rejected(self):
        store = NoteStore()
        store.add(note("a"))
        with pytest.raises(KeyError):
            store.add(note("a"))

    def test_insertion_order(self):
        store = NoteStore()
        for i in "cab":
            store.add(note(i))
        assert store.ids() == ["c", "a", "b"]
        assert [n.id for n in store] == ["c", "a", "b"]

    def test_update_touches_one_key(self):
        store = NoteStore()
        store.add(note("a"))
        store.add(note("b", 5, 5))
        store.update_position("a", QPointF(9, 9))
        assert store.get("a").position == QPointF(9, 9)
        assert store.get("b").position == QPointF(5, 5)
        assert store.get("a").content == "hi"

    def test_update_replaces_record(self):
        store = NoteStore()
        original = note("a")
        store.add(original)
        store.update_content("a", "new")
        assert store.get("a").content == "new"
        assert original.content == "hi"

    def test_unknown_ids(self):
        store = NoteStore()
        assert store.update_position("x", QPointF(1, 1)) is None
        assert store.update_content("x", "y") is None
        assert store.remove("x") is None
        assert len(store) == 0

    def test_iterating_while_removing(self):
        store = NoteStore()
        store.add(note("a"))
        store.add(note("b"))
        for n in store:
            store.remove(n.id)
        assert len(store) == 0

    def test_clear(self):
        store = NoteStore()
        store.add(note("a"))
        store.clear()
        assert len(store) == 0
