"""
Unit Tests for LocalStore.

Runs against the in-memory backend from the root conftest.
"""

import json
from datetime import datetime, timezone

from studynotes.repositories.backends import MemoryBackend
from studynotes.repositories.store import LocalStore
from studynotes.schemas.flashcard import Flashcard
from studynotes.schemas.note import Note


def _note(title: str = "Heaps", content: str = "# Heaps") -> Note:
    return Note(title=title, content=content)


class TestNotes:
    """Tests for note persistence."""

    def test_empty_store_has_no_notes(self, store):
        assert store.list_notes() == []
        assert store.get_note("missing") is None

    def test_put_then_get_returns_equal_note(self, store):
        note = _note()
        store.put_note(note)

        stored = store.get_note(note.id)
        assert stored == note
        assert stored is not note

    def test_timestamps_survive_with_full_precision(self, store):
        moment = datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
        note = Note(title="t", created_at=moment, updated_at=moment)
        store.put_note(note)

        assert store.get_note(note.id).updated_at == moment

    def test_put_replaces_in_place(self, store):
        first, second = _note("First"), _note("Second")
        store.put_note(first)
        store.put_note(second)

        first.title = "First, renamed"
        store.put_note(first)

        assert [n.title for n in store.list_notes()] == ["First, renamed", "Second"]

    def test_mutating_a_returned_note_does_not_change_store(self, store):
        note = _note()
        store.put_note(note)

        store.get_note(note.id).title = "Changed"

        assert store.get_note(note.id).title == "Heaps"

    def test_delete_note(self, store):
        note = _note()
        store.put_note(note)

        assert store.delete_note(note.id) is True
        assert store.delete_note(note.id) is False
        assert store.list_notes() == []

    def test_current_note_id(self, store):
        assert store.get_current_note_id() is None
        store.set_current_note_id("abc")
        assert store.get_current_note_id() == "abc"


class TestDecks:
    """Tests for flashcard deck persistence."""

    def test_missing_deck_is_empty(self, store):
        assert store.get_deck("note-1") == []

    def test_put_and_get_deck(self, store):
        cards = [Flashcard(question="Q1", answer="A1", note_id="note-1")]
        store.put_deck("note-1", cards)

        assert store.get_deck("note-1") == cards

    def test_decks_are_isolated_per_note(self, store):
        store.put_deck("a", [Flashcard(question="Qa", answer="Aa", note_id="a")])
        store.put_deck("b", [Flashcard(question="Qb", answer="Ab", note_id="b")])

        assert [c.question for c in store.get_deck("a")] == ["Qa"]
        assert [c.question for c in store.get_deck("b")] == ["Qb"]

    def test_append_to_deck_keeps_existing_cards_first(self, store):
        store.put_deck("n", [Flashcard(question="old", answer="1", note_id="n")])

        merged = store.append_to_deck("n", [Flashcard(question="new", answer="2", note_id="n")])

        assert [c.question for c in merged] == ["old", "new"]
        assert store.get_deck("n") == merged

    def test_deleting_note_leaves_deck(self, store):
        note = _note()
        store.put_note(note)
        store.put_deck(note.id, [Flashcard(question="Q", answer="A", note_id=note.id)])

        store.delete_note(note.id)

        assert len(store.get_deck(note.id)) == 1


class TestKeyLayout:
    """Tests for the persisted key layout and formats."""

    def test_keys_and_camel_case_fields(self, backend, store):
        note = _note()
        store.put_note(note)
        store.set_current_note_id(note.id)
        store.put_deck(note.id, [Flashcard(question="Q", answer="A", note_id=note.id)])

        assert sorted(backend.keys()) == sorted(
            ["notes-list", "current-note-id", f"flashcards-{note.id}"]
        )
        stored_note = json.loads(backend.get_item("notes-list"))[0]
        assert set(stored_note) == {"id", "title", "content", "createdAt", "updatedAt"}
        assert stored_note["updatedAt"].endswith("Z")
        stored_card = json.loads(backend.get_item(f"flashcards-{note.id}"))[0]
        assert stored_card["noteId"] == note.id
        assert backend.get_item("current-note-id") == note.id

    def test_reads_camel_case_records(self):
        backend = MemoryBackend({
            "notes-list": json.dumps([{
                "id": "n1",
                "title": "Graphs",
                "content": "BFS",
                "createdAt": "2024-01-01T00:00:00.000Z",
                "updatedAt": "2024-01-02T00:00:00.000Z",
            }]),
        })

        note = LocalStore(backend).get_note("n1")

        assert note.title == "Graphs"
        assert note.updated_at == datetime(2024, 1, 2, tzinfo=timezone.utc)


class TestCorruption:
    """Unparseable slots read as empty instead of failing."""

    def test_invalid_json_notes_slot(self):
        store = LocalStore(MemoryBackend({"notes-list": "{broken"}))
        assert store.list_notes() == []

    def test_wrong_shape_deck_slot(self):
        store = LocalStore(MemoryBackend({"flashcards-n": json.dumps({"not": "a list"})}))
        assert store.get_deck("n") == []

    def test_corrupted_slot_is_overwritten_by_next_put(self):
        backend = MemoryBackend({"notes-list": "{broken"})
        store = LocalStore(backend)

        note = _note()
        store.put_note(note)

        assert store.list_notes() == [note]
