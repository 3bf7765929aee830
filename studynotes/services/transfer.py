"""
Import and Export.

One-shot encoders and decoders for moving notes and flashcards in and out
of the application.

Export formats:
    .txt   title, a line of '=' as long as the title, blank line, content
    .md    '# title', blank line, content
    .json  {"note": title, "exportedAt": ISO-8601, "flashcards": [{question, answer}]}

Import rules:
    Notes (.txt/.md): a first line '# Title' is the title; otherwise a second
    line made only of '=' marks the first line as the title; otherwise the
    file name without extension is the title and the whole text the content.

    Flashcards (.json): an object with a 'flashcards' array. Every card gets
    a fresh id; ids in the file are ignored, as are unknown fields.
"""

import json
import re
from pathlib import Path
from typing import Any

from studynotes.core.exceptions import StorageError, ValidationError
from studynotes.core.logging import get_logger, log_with_source
from studynotes.core.utils import isoformat_utc, utc_now
from studynotes.schemas.flashcard import Flashcard, FlashcardCollection
from studynotes.schemas.note import Note

logger = get_logger(__name__)

NOTE_EXTENSIONS = (".txt", ".md")
IMPORTED_NOTE_TITLE = "Imported Note"
UNKNOWN_NOTE_TITLE = "Unknown"

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+", re.IGNORECASE)
_UNDERLINE = re.compile(r"^=+$")


def sanitize_filename(title: str) -> str:
    """
    Turn a title into a safe file stem.

    Every run of non-alphanumeric characters becomes one underscore, edge
    underscores are trimmed and the result is lowercased.

    Example:
        sanitize_filename("CS 101!!") == "cs_101"
    """
    stem = _NON_ALNUM_RUN.sub("_", title).strip("_").lower()
    return stem or "untitled"


# =============================================================================
# Rendering
# =============================================================================


def render_note_text(note: Note) -> str:
    """Plain-text rendering with an '=' underlined title."""
    return f"{note.title}\n{'=' * len(note.title)}\n\n{note.content}"


def render_note_markdown(note: Note) -> str:
    """Markdown rendering with the title as a level-one heading."""
    return f"# {note.title}\n\n{note.content}"


def render_flashcards_json(cards: list[Flashcard], note_title: str) -> str:
    """JSON document for a deck, without ids or note ids."""
    data = {
        "note": note_title,
        "exportedAt": isoformat_utc(utc_now(), timespec="milliseconds"),
        "flashcards": [
            {"question": card.question, "answer": card.answer}
            for card in cards
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


# =============================================================================
# Export
# =============================================================================


def _write_export(directory: str | Path, filename: str, text: str) -> Path:
    target_dir = Path(directory)
    path = target_dir / filename
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e
    log_with_source(logger, "transfer", "info", "Exported file", path=str(path))
    return path


def export_note_as_text(note: Note, directory: str | Path) -> Path:
    """Write note as <sanitized-title>.txt into directory."""
    return _write_export(directory, f"{sanitize_filename(note.title)}.txt", render_note_text(note))


def export_note_as_markdown(note: Note, directory: str | Path) -> Path:
    """Write note as <sanitized-title>.md into directory."""
    return _write_export(directory, f"{sanitize_filename(note.title)}.md", render_note_markdown(note))


def export_flashcards_as_json(
    cards: list[Flashcard],
    note_title: str,
    directory: str | Path,
) -> Path:
    """Write a deck as <sanitized-title>-flashcards.json into directory."""
    return _write_export(
        directory,
        f"{sanitize_filename(note_title)}-flashcards.json",
        render_flashcards_json(cards, note_title),
    )


# =============================================================================
# Import
# =============================================================================


def _split_title(text: str) -> tuple[str, str] | None:
    """Split off a heading; the body loses only the blank line that follows it."""
    lines = text.split("\n")
    first = lines[0].rstrip("\r")
    if first.startswith("# "):
        title, body = first[2:], lines[1:]
    elif len(lines) >= 2 and _UNDERLINE.match(lines[1].strip()):
        title, body = first, lines[2:]
    else:
        return None
    if body and not body[0].strip():
        body = body[1:]
    return title.strip(), "\n".join(body)


def parse_note(filename: str, text: str) -> Note:
    """
    Build a new note from the text of a .txt or .md file.

    Raises:
        ValidationError: If the file type is not supported
    """
    path = Path(filename)
    if path.suffix.lower() not in NOTE_EXTENSIONS:
        raise ValidationError(
            "Unsupported note file type. Use a .txt or .md file.",
            details={"filename": filename},
        )

    split = _split_title(text)
    if split is None:
        title, content = path.stem, text
    else:
        title, content = split

    note = Note.blank()
    note.title = title.strip() or IMPORTED_NOTE_TITLE
    note.content = content
    return note


def parse_flashcard_collection(text: str) -> FlashcardCollection:
    """
    Read a flashcard export document.

    Raises:
        ValidationError: If the text is not JSON or has no 'flashcards' array
    """
    error = "Failed to parse flashcard file. Make sure it's a valid JSON file."
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(error, details={"reason": str(e)}) from e

    if not isinstance(data, dict) or not isinstance(data.get("flashcards"), list):
        raise ValidationError(error, details={"reason": "Missing 'flashcards' array"})

    cards = []
    for index, item in enumerate(data["flashcards"]):
        if not isinstance(item, dict):
            raise ValidationError(error, details={"reason": f"Flashcard {index} is not an object"})
        cards.append(Flashcard(
            question=str(item.get("question") or ""),
            answer=str(item.get("answer") or ""),
        ))

    note_title = data.get("note")
    if not isinstance(note_title, str) or not note_title:
        note_title = UNKNOWN_NOTE_TITLE

    return FlashcardCollection(note_title=note_title, flashcards=cards)


def _read_text(path: Path, kind: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError(f"Failed to parse {kind} file", details={"path": str(path)}) from e
    except OSError as e:
        raise ValidationError(f"Failed to read file: {e}", details={"path": str(path)}) from e


def import_note(path: str | Path) -> Note:
    """Read a .txt/.md file into a new, unsaved note."""
    path = Path(path)
    note = parse_note(path.name, _read_text(path, "note"))
    log_with_source(logger, "transfer", "info", "Imported note", path=str(path), title=note.title)
    return note


def import_flashcard_collection(path: str | Path) -> FlashcardCollection:
    """Read a flashcard .json file."""
    path = Path(path)
    collection = parse_flashcard_collection(_read_text(path, "flashcard"))
    log_with_source(
        logger, "transfer", "info", "Imported flashcards",
        path=str(path), note_title=collection.note_title, count=len(collection.flashcards),
    )
    return collection
