"""
Note Session.

Holds the active note's working copy plus the index of every note, and
writes the working copy through to the local store after a quiet period.

Edits (update_content/update_title) only touch memory and restart the
autosave timer; the timer firing calls save(). A user who never pauses
never triggers an autosave: there is no maximum wait.
"""

from collections.abc import Callable
from datetime import datetime

from studynotes.core.debounce import Debouncer
from studynotes.core.exceptions import NotFoundError, StorageError
from studynotes.core.utils import utc_now
from studynotes.repositories.store import LocalStore
from studynotes.schemas.note import Note
from studynotes.services.base import BaseService

ActivateListener = Callable[[Note], None]


def _most_recent(notes: list[Note]) -> Note | None:
    if not notes:
        return None
    return max(notes, key=lambda note: note.updated_at)


class NoteSession(BaseService):
    """
    Service owning the active note.

    After load() the session always has exactly one active note: deleting
    the active note activates another one, creating a blank note when none
    remain.
    """

    def __init__(self, store: LocalStore, autosave_delay: float | None = None) -> None:
        super().__init__(store)
        if autosave_delay is None:
            from studynotes.core.config import get_app_config
            autosave_delay = get_app_config().application.autosave.delay_seconds
        self._debouncer = Debouncer(autosave_delay, self._autosave)
        self._note: Note | None = None
        self._notes: list[Note] = []
        self._dirty = False
        self._saved_at: datetime | None = None
        self._listeners: list[ActivateListener] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def note(self) -> Note:
        """The working copy of the active note."""
        if self._note is None:
            raise RuntimeError("Note session not loaded; call load() first")
        return self._note

    @property
    def notes(self) -> list[Note]:
        """Every note, with the active one shown as its working copy."""
        active_id = self._note.id if self._note is not None else None
        return [
            self._note if note.id == active_id else note
            for note in self._notes
        ]

    @property
    def is_dirty(self) -> bool:
        """Whether the working copy has changes not yet saved."""
        return self._dirty

    @property
    def saved_at(self) -> datetime | None:
        """When the working copy was last saved in this session."""
        return self._saved_at

    @property
    def autosave_pending(self) -> bool:
        """Whether the autosave timer is running."""
        return self._debouncer.pending

    def on_activate(self, listener: ActivateListener) -> None:
        """Register a callable invoked with the note each time one becomes active."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def load(self) -> Note:
        """
        Load the note index and activate the previously active note.

        Falls back to the most recently updated note when the recorded id is
        missing or dangling, and to a new blank note when there are none.

        Returns:
            The active note
        """
        self._notes = self.store.list_notes()
        current_id = self.store.get_current_note_id()

        note = next((n for n in self._notes if n.id == current_id), None)
        if note is None:
            note = _most_recent(self._notes)
        if note is None:
            self._log_debug("No notes stored, creating one")
            return self.create()

        self._activate(note)
        self._log_operation("Note session loaded", note_id=note.id, note_count=len(self._notes))
        return self.note

    def close(self) -> None:
        """Save pending changes and stop the autosave timer."""
        self.flush()
        self._debouncer.cancel()

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def update_content(self, content: str) -> None:
        """Replace the working copy's content. Saved after the autosave delay."""
        note = self.note
        note.content = content
        self._mark_changed(note)

    def update_title(self, title: str) -> None:
        """Replace the working copy's title. Saved after the autosave delay."""
        note = self.note
        note.title = title
        self._mark_changed(note)

    def save(self) -> Note:
        """
        Persist the working copy.

        Safe to call with nothing pending; the note is simply written again.

        Returns:
            The saved note

        Raises:
            StorageError: If the store cannot be written
        """
        note = self.note
        self._debouncer.cancel()
        self.store.put_note(note)
        self._remember(note)
        self._dirty = False
        self._saved_at = utc_now()
        self._log_debug("Note saved", note_id=note.id)
        return note

    def flush(self) -> bool:
        """
        Save only if there are pending changes.

        Returns:
            True if a save happened
        """
        if self._note is None or not self._dirty:
            return False
        self.save()
        return True

    # -------------------------------------------------------------------------
    # Switching, creating, deleting
    # -------------------------------------------------------------------------

    def switch_to(self, note_id: str) -> Note:
        """
        Make another stored note active.

        Pending changes to the current note are NOT saved; call save() or
        flush() first to keep them.

        Raises:
            NotFoundError: If no note with that id is stored
        """
        if self._note is not None and self._note.id == note_id:
            return self._note

        note = self.store.get_note(note_id)
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")

        self._notes = self.store.list_notes()
        self._activate(note)
        self._log_operation("Switched note", note_id=note_id)
        return self.note

    def create(self) -> Note:
        """Create a blank note, persist it, and make it active."""
        note = Note.blank()
        self.store.put_note(note)
        self._notes = self.store.list_notes()
        self._activate(note)
        self._log_operation("Created note", note_id=note.id)
        return self.note

    def adopt(self, note: Note) -> Note:
        """Persist an externally built note (e.g. an import) and make it active."""
        self.store.put_note(note)
        self._notes = self.store.list_notes()
        self._activate(note)
        self._log_operation("Adopted note", note_id=note.id, title=note.title)
        return self.note

    def delete(self, note_id: str) -> Note:
        """
        Delete a note. Its flashcard deck is left in the store.

        If the deleted note was active, the most recently updated remaining
        note becomes active, or a new blank note is created.

        Returns:
            The active note after deletion

        Raises:
            NotFoundError: If no note with that id is stored
        """
        if not self.store.delete_note(note_id):
            raise NotFoundError(f"Note {note_id} not found")

        self._log_operation("Deleted note", note_id=note_id)
        self._notes = self.store.list_notes()

        if self._note is not None and self._note.id != note_id:
            return self._note

        self._debouncer.cancel()
        self._dirty = False
        self._note = None
        replacement = _most_recent(self._notes)
        if replacement is None:
            return self.create()
        self._activate(replacement)
        return self.note

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _activate(self, note: Note) -> None:
        self._debouncer.cancel()
        if self._dirty and self._note is not None and self._note.id != note.id:
            self._logger.warning(
                "Discarding unsaved changes",
                source="session",
                note_id=self._note.id,
            )
        self._note = note.model_copy()
        self._dirty = False
        self.store.set_current_note_id(note.id)
        for listener in self._listeners:
            listener(self._note)

    def _mark_changed(self, note: Note) -> None:
        note.touch()
        self._dirty = True
        self._debouncer.trigger()

    def _remember(self, note: Note) -> None:
        stored = note.model_copy()
        for index, existing in enumerate(self._notes):
            if existing.id == note.id:
                self._notes[index] = stored
                return
        self._notes.append(stored)

    def _autosave(self) -> None:
        try:
            self.save()
        except StorageError as e:
            self._logger.error(
                "Autosave failed",
                source="session",
                note_id=self.note.id,
                error=e.message,
            )
