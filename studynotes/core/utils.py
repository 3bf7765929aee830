"""
Core Utilities.

Shared utility functions used across the package.
All modules should import utilities from this module.
"""

from datetime import datetime, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """
    Return current UTC time as a timezone-aware datetime.

    Persisted timestamps are ISO-8601 strings in UTC, so every datetime in
    the application carries tzinfo=UTC.

    Returns:
        Current UTC time
    """
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime, timespec: str = "auto") -> str:
    """Format a datetime as ISO-8601 in UTC with a Z suffix. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec=timespec).replace("+00:00", "Z")


def new_id() -> str:
    """Mint a globally unique identifier for notes and flashcards."""
    return str(uuid4())
