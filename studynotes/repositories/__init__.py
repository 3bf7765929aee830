"""Local persistence: key-value backends and the note/flashcard store."""

from studynotes.repositories.backends import JsonFileBackend, MemoryBackend, StorageBackend
from studynotes.repositories.store import LocalStore

__all__ = [
    "JsonFileBackend",
    "LocalStore",
    "MemoryBackend",
    "StorageBackend",
]
