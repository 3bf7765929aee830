"""
Flashcard Session.

The deck of the note the session is bound to. Every mutation updates the
in-memory deck and writes it straight through to the local store; there is
no batching.
"""

from studynotes.repositories.store import LocalStore
from studynotes.schemas.flashcard import Flashcard, FlashcardDraft
from studynotes.services.base import BaseService


class FlashcardSession(BaseService):
    """
    Service for one note's flashcard deck.

    Rebind with bind() whenever the active note changes. Cards handed to
    replace() or merge() are stamped with the bound note id; drafts are
    given fresh ids.
    """

    def __init__(self, store: LocalStore, note_id: str | None = None) -> None:
        super().__init__(store)
        self._note_id: str | None = None
        self._cards: list[Flashcard] = []
        if note_id is not None:
            self.bind(note_id)

    @property
    def note_id(self) -> str:
        """The note this deck belongs to."""
        if self._note_id is None:
            raise RuntimeError("Flashcard session is not bound to a note")
        return self._note_id

    @property
    def cards(self) -> list[Flashcard]:
        """The current deck."""
        return list(self._cards)

    def bind(self, note_id: str) -> list[Flashcard]:
        """Bind to a note and load its deck."""
        self._note_id = note_id
        return self.load()

    def load(self) -> list[Flashcard]:
        """Re-read the bound note's deck from the store."""
        self._cards = self.store.get_deck(self.note_id)
        self._log_debug("Deck loaded", note_id=self.note_id, count=len(self._cards))
        return self.cards

    def replace(self, cards: list[Flashcard | FlashcardDraft]) -> list[Flashcard]:
        """Overwrite the deck with cards, all stamped with the bound note id."""
        self._commit([self._stamp(card) for card in cards])
        self._log_operation("Deck replaced", note_id=self.note_id, count=len(self._cards))
        return self.cards

    def merge(self, cards: list[Flashcard | FlashcardDraft]) -> list[Flashcard]:
        """Append stamped cards to the existing deck."""
        added = [self._stamp(card) for card in cards]
        self._commit(self._cards + added)
        self._log_operation("Deck merged", note_id=self.note_id, added=len(added))
        return self.cards

    def update(self, card_id: str, question: str, answer: str) -> Flashcard | None:
        """
        Replace one card's question and answer.

        Returns:
            The updated card, or None if no card has that id
        """
        for index, card in enumerate(self._cards):
            if card.id == card_id:
                updated = card.model_copy(update={"question": question, "answer": answer})
                cards = list(self._cards)
                cards[index] = updated
                self._commit(cards)
                return updated
        return None

    def remove(self, card_id: str) -> bool:
        """
        Delete one card.

        Returns:
            True if a card was removed
        """
        remaining = [card for card in self._cards if card.id != card_id]
        if len(remaining) == len(self._cards):
            return False
        self._commit(remaining)
        return True

    def clear(self) -> None:
        """Empty the deck."""
        self._commit([])
        self._log_operation("Deck cleared", note_id=self.note_id)

    def _stamp(self, card: Flashcard | FlashcardDraft) -> Flashcard:
        if isinstance(card, FlashcardDraft):
            return card.to_flashcard(self.note_id)
        return card.model_copy(update={"note_id": self.note_id})

    def _commit(self, cards: list[Flashcard]) -> None:
        self.store.put_deck(self.note_id, cards)
        self._cards = cards
