"""Pydantic models for notes and flashcards."""

from studynotes.schemas.flashcard import Flashcard, FlashcardCollection, FlashcardDraft
from studynotes.schemas.note import Note

__all__ = [
    "Flashcard",
    "FlashcardCollection",
    "FlashcardDraft",
    "Note",
]
