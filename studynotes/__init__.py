"""
AI Study Notes.

- core/: Configuration, logging, exceptions, timers
- schemas/: Pydantic models for notes and flashcards
- repositories/: Local key-value persistence
- services/: Note and flashcard sessions, AI gateway, import/export
- cli/: Command-line client (Typer + Rich)
"""

__version__ = "0.1.0"
