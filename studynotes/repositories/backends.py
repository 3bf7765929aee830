"""
Storage Backends.

String key-value stores underneath LocalStore. Values are opaque strings
(LocalStore puts JSON in them), mirroring a browser's localStorage.

Backends never fail a read: a missing or unreadable store reads as empty.
Writes that cannot reach the disk raise StorageError.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from studynotes.core.exceptions import StorageError
from studynotes.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class StorageBackend(ABC):
    """
    Base class for string key-value backends.

    Subclasses implement the four primitives; LocalStore owns the key space.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently stored."""


class MemoryBackend(StorageBackend):
    """In-process backend. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileBackend(StorageBackend):
    """
    Backend persisting every key in a single JSON object file.

    The file is re-read on every access so that edits made by another
    process are picked up (last writer wins). Writes go to a temporary file
    in the same directory and are moved into place atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            log_with_source(
                logger, "storage", "warning",
                "Store unreadable, treating as empty",
                path=str(self.path), error=str(e),
            )
            return {}

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            log_with_source(
                logger, "storage", "warning",
                "Store corrupted, treating as empty",
                path=str(self.path), error=str(e),
            )
            return {}

        if not isinstance(data, dict):
            log_with_source(
                logger, "storage", "warning",
                "Store is not a JSON object, treating as empty",
                path=str(self.path),
            )
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            log_with_source(
                logger, "storage", "error",
                "Failed to write store",
                path=str(self.path), error=str(e),
            )
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def keys(self) -> list[str]:
        return list(self._read())
