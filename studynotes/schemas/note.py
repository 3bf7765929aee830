"""
Note Schemas.

Pydantic model for a note as held in memory and persisted in the local store.
Persisted field names are camelCase; Python attributes are snake_case.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from studynotes.core.utils import isoformat_utc, new_id, utc_now

DEFAULT_NOTE_TITLE = "Untitled Note"


class Note(BaseModel):
    """A titled block of markdown text."""

    id: str = Field(default_factory=new_id, min_length=1, description="Note unique identifier")
    title: str = Field(default=DEFAULT_NOTE_TITLE, description="Note title")
    content: str = Field(default="", description="Markdown content")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)

    @classmethod
    def blank(cls) -> "Note":
        """A new empty note with matching creation and update timestamps."""
        now = utc_now()
        return cls(created_at=now, updated_at=now)

    def touch(self) -> None:
        """Refresh the update timestamp."""
        self.updated_at = utc_now()

    def to_storage(self) -> dict:
        """Serialize with the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)
