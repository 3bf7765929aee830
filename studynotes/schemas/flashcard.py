"""
Flashcard Schemas.

A deck is the list of flashcards sharing a note id. Drafts are bare
question/answer pairs produced by the AI gateway or read from an import
file, before an id is minted and a note id stamped.
"""

from pydantic import BaseModel, ConfigDict, Field

from studynotes.core.utils import new_id


class FlashcardDraft(BaseModel):
    """A question/answer pair without identity."""

    question: str
    answer: str

    def to_flashcard(self, note_id: str | None = None) -> "Flashcard":
        """Mint a flashcard with a fresh id."""
        return Flashcard(question=self.question, answer=self.answer, note_id=note_id)


class Flashcard(BaseModel):
    """A question/answer pair belonging to at most one note."""

    id: str = Field(default_factory=new_id, min_length=1)
    question: str
    answer: str
    note_id: str | None = Field(default=None, alias="noteId")

    model_config = ConfigDict(populate_by_name=True)

    def to_storage(self) -> dict:
        """Serialize with the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FlashcardCollection(BaseModel):
    """Result of reading a flashcard export file."""

    note_title: str
    flashcards: list[Flashcard]
