"""
Local Store.

Data access layer for notes and flashcard decks on top of a string
key-value backend. The key layout is private to this module:

    notes-list           JSON array of every note
    current-note-id      id of the active note (raw string)
    flashcards-<noteId>  JSON array of that note's flashcards

Reads never fail: a missing slot reads as empty and an unparseable slot is
logged and treated as empty.
"""

import json

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from studynotes.core.logging import get_logger, log_with_source
from studynotes.repositories.backends import StorageBackend
from studynotes.schemas.flashcard import Flashcard
from studynotes.schemas.note import Note

logger = get_logger(__name__)

_NOTES_KEY = "notes-list"
_CURRENT_NOTE_ID_KEY = "current-note-id"
_DECK_KEY_PREFIX = "flashcards-"

_notes_adapter = TypeAdapter(list[Note])
_deck_adapter = TypeAdapter(list[Flashcard])


def _deck_key(note_id: str) -> str:
    return f"{_DECK_KEY_PREFIX}{note_id}"


class LocalStore:
    """
    Repository for notes and flashcard decks.

    All operations are synchronous and work on fresh copies: mutating a
    returned model does not change what is stored until it is put back.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend

    def _read_list(self, key: str, adapter: TypeAdapter) -> list:
        raw = self.backend.get_item(key)
        if raw is None:
            return []
        try:
            return adapter.validate_json(raw)
        except PydanticValidationError as e:
            log_with_source(
                logger, "storage", "warning",
                "Corrupted slot, treating as empty",
                key=key, error_count=e.error_count(),
            )
            return []

    def _write_notes(self, notes: list[Note]) -> None:
        payload = json.dumps([note.to_storage() for note in notes], ensure_ascii=False)
        self.backend.set_item(_NOTES_KEY, payload)

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    def list_notes(self) -> list[Note]:
        """All stored notes, in insertion order."""
        return self._read_list(_NOTES_KEY, _notes_adapter)

    def get_note(self, note_id: str) -> Note | None:
        """Get a note by id, or None if it is not stored."""
        for note in self.list_notes():
            if note.id == note_id:
                return note
        return None

    def put_note(self, note: Note) -> None:
        """Insert or replace a note by id. Existing notes keep their position."""
        notes = self.list_notes()
        for index, existing in enumerate(notes):
            if existing.id == note.id:
                notes[index] = note.model_copy()
                break
        else:
            notes.append(note.model_copy())
        self._write_notes(notes)
        logger.debug("Note stored", note_id=note.id)

    def delete_note(self, note_id: str) -> bool:
        """
        Delete a note by id. The note's flashcard deck is left in place.

        Returns:
            True if a note was removed
        """
        notes = self.list_notes()
        remaining = [note for note in notes if note.id != note_id]
        if len(remaining) == len(notes):
            return False
        self._write_notes(remaining)
        logger.debug("Note removed", note_id=note_id)
        return True

    def get_current_note_id(self) -> str | None:
        """The id recorded as active, if any."""
        return self.backend.get_item(_CURRENT_NOTE_ID_KEY) or None

    def set_current_note_id(self, note_id: str) -> None:
        """Record the active note id."""
        self.backend.set_item(_CURRENT_NOTE_ID_KEY, note_id)

    # -------------------------------------------------------------------------
    # Flashcard decks
    # -------------------------------------------------------------------------

    def get_deck(self, note_id: str) -> list[Flashcard]:
        """The flashcards stored for a note; empty if none."""
        return self._read_list(_deck_key(note_id), _deck_adapter)

    def put_deck(self, note_id: str, cards: list[Flashcard]) -> None:
        """Replace a note's deck wholesale."""
        payload = json.dumps([card.to_storage() for card in cards], ensure_ascii=False)
        self.backend.set_item(_deck_key(note_id), payload)
        logger.debug("Deck stored", note_id=note_id, count=len(cards))

    def append_to_deck(self, note_id: str, cards: list[Flashcard]) -> list[Flashcard]:
        """
        Append cards to a note's existing deck.

        Returns:
            The merged deck as stored
        """
        merged = self.get_deck(note_id) + list(cards)
        self.put_deck(note_id, merged)
        return merged
