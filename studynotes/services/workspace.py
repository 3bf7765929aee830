"""
Workspace.

The single owner of the note session, the flashcard session and the AI
gateway. Front ends call the workspace; nothing else mutates notes or
decks, so there is exactly one working copy of each.

The flashcard session follows the note session: whenever a note becomes
active its deck is loaded.

AI results are kept in one slot per operation. Each request takes a
monotonically increasing id when it is sent; a reply only fills the slot
if no newer request has completed, so a slow early reply never overwrites
a later one and a failed request never discards an earlier success.
"""

import itertools
from dataclasses import dataclass
from pathlib import Path

from studynotes.core.exceptions import ValidationError
from studynotes.core.logging import get_logger, log_with_source
from studynotes.repositories.store import LocalStore
from studynotes.schemas.flashcard import Flashcard
from studynotes.schemas.note import Note
from studynotes.services import transfer
from studynotes.services.ai import AIGateway, AIOperation
from studynotes.services.flashcard import FlashcardSession
from studynotes.services.note import NoteSession

logger = get_logger(__name__)

_FLASHCARD_SLOT = "flashcards"


@dataclass(frozen=True)
class AIResult:
    """A completed AI operation on a piece of text."""

    operation: AIOperation
    source_text: str
    text: str


@dataclass(frozen=True)
class FlashcardImport:
    """Where an imported flashcard file ended up."""

    note_id: str
    note_title: str
    count: int
    matched_title: bool


class Workspace:
    """
    Facade over the sessions for one local store.

    Usage:
        workspace = Workspace(LocalStore(JsonFileBackend(get_storage_path())))
        workspace.open()
        workspace.notes.update_content("# Heaps ...")
        cards = await workspace.generate_flashcards()
        await workspace.close()
    """

    def __init__(
        self,
        store: LocalStore,
        gateway: AIGateway | None = None,
        autosave_delay: float | None = None,
        export_directory: str | Path | None = None,
    ) -> None:
        self.store = store
        self.notes = NoteSession(store, autosave_delay=autosave_delay)
        self.flashcards = FlashcardSession(store)
        self.notes.on_activate(lambda note: self.flashcards.bind(note.id))
        self._gateway = gateway
        self._export_directory = Path(export_directory) if export_directory else None
        self._request_ids = itertools.count(1)
        self._completed_request: dict[str, int] = {}
        self._results: dict[AIOperation, AIResult] = {}

    @property
    def gateway(self) -> AIGateway:
        """The AI gateway, created from configuration on first use."""
        if self._gateway is None:
            self._gateway = AIGateway()
        return self._gateway

    @property
    def export_directory(self) -> Path:
        """Directory exports are written into."""
        if self._export_directory is None:
            from studynotes.core.config import get_export_directory
            self._export_directory = get_export_directory()
        return self._export_directory

    def open(self) -> Note:
        """Load the notes and the active note's deck."""
        return self.notes.load()

    async def close(self) -> None:
        """Save pending edits and release the HTTP client."""
        self.notes.close()
        if self._gateway is not None:
            await self._gateway.close()

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    def switch_note(self, note_id: str) -> Note:
        """Save pending edits, then activate another note."""
        self.notes.flush()
        return self.notes.switch_to(note_id)

    def create_note(self) -> Note:
        """Save pending edits, then create and activate a blank note."""
        self.notes.flush()
        return self.notes.create()

    def delete_note(self, note_id: str) -> Note:
        """Delete a note; returns the note active afterwards."""
        if self.notes.note.id != note_id:
            self.notes.flush()
        return self.notes.delete(note_id)

    def find_note_by_title(self, title: str) -> Note | None:
        """First note whose title matches, ignoring case."""
        wanted = title.casefold()
        return next(
            (note for note in self.notes.notes if note.title.casefold() == wanted),
            None,
        )

    # -------------------------------------------------------------------------
    # AI
    # -------------------------------------------------------------------------

    def _claim(self, slot: str, request_id: int) -> bool:
        """Record a completed request; False if a newer one already completed."""
        if request_id < self._completed_request.get(slot, 0):
            return False
        self._completed_request[slot] = request_id
        return True

    async def run_ai(self, operation: AIOperation | str, text: str) -> str:
        """
        Run explain/expand/summarize and keep the result in its slot.

        The reply is returned to the caller either way; the slot is only
        filled if no newer request for the same operation has already
        completed. Failed requests never touch the slot.
        """
        try:
            op = AIOperation(operation)
        except ValueError as e:
            raise ValidationError(f"Unknown AI operation: {operation}") from e
        request_id = next(self._request_ids)

        reply = await self.gateway.execute(op, text)

        if self._claim(op.value, request_id):
            self._results[op] = AIResult(operation=op, source_text=text, text=reply)
        else:
            log_with_source(
                logger, "ai", "info", "Discarding stale AI result",
                operation=op.value, request_id=request_id,
            )
        return reply

    def ai_result(self, operation: AIOperation | str) -> AIResult | None:
        """The latest completed result for an operation."""
        return self._results.get(AIOperation(operation))

    def clear_ai_results(self) -> None:
        """Forget every stored AI result."""
        self._results.clear()

    async def generate_flashcards(self) -> list[Flashcard]:
        """
        Generate a deck from the active note's content and replace its deck.

        The deck is left untouched when generation fails. If a newer
        generation for the same note completed while this one was in
        flight, that deck is kept and returned instead.

        Returns:
            The note's deck after the call
        """
        note = self.notes.note
        slot = f"{_FLASHCARD_SLOT}-{note.id}"
        request_id = next(self._request_ids)

        drafts = await self.gateway.generate_flashcards(note.content)

        if not self._claim(slot, request_id):
            log_with_source(
                logger, "ai", "info", "Discarding stale flashcard generation",
                note_id=note.id, request_id=request_id,
            )
            if self.flashcards.note_id == note.id:
                return self.flashcards.cards
            return self.store.get_deck(note.id)

        if self.flashcards.note_id == note.id:
            return self.flashcards.replace(drafts)

        cards = [draft.to_flashcard(note.id) for draft in drafts]
        self.store.put_deck(note.id, cards)
        return cards

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def export_note(self, fmt: str = "md", directory: str | Path | None = None) -> Path:
        """Export the active note's working copy as 'txt' or 'md'."""
        target = Path(directory) if directory else self.export_directory
        if fmt == "txt":
            return transfer.export_note_as_text(self.notes.note, target)
        if fmt == "md":
            return transfer.export_note_as_markdown(self.notes.note, target)
        raise ValidationError(f"Unsupported export format: {fmt}", details={"format": fmt})

    def export_flashcards(self, directory: str | Path | None = None) -> Path:
        """Export the active note's deck as JSON."""
        target = Path(directory) if directory else self.export_directory
        return transfer.export_flashcards_as_json(
            self.flashcards.cards, self.notes.note.title, target,
        )

    def import_note(self, path: str | Path) -> Note:
        """Import a .txt/.md file as a new note and make it active."""
        note = transfer.import_note(path)
        self.notes.flush()
        return self.notes.adopt(note)

    def import_flashcards(self, path: str | Path, into_active: bool = False) -> FlashcardImport:
        """
        Import a flashcard file.

        Cards go to the note whose title matches the file's recorded note
        title, or to the active note when there is no match or into_active
        is set.
        """
        collection = transfer.import_flashcard_collection(path)
        active = self.notes.note
        match = None if into_active else self.find_note_by_title(collection.note_title)
        target = match or active

        if target.id == self.flashcards.note_id:
            self.flashcards.merge(collection.flashcards)
        else:
            stamped = [
                card.model_copy(update={"note_id": target.id})
                for card in collection.flashcards
            ]
            self.store.append_to_deck(target.id, stamped)

        return FlashcardImport(
            note_id=target.id,
            note_title=target.title,
            count=len(collection.flashcards),
            matched_title=match is not None,
        )
