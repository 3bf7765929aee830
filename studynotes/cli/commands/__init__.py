"""
CLI Commands.

Organized by domain/feature area.
"""

from studynotes.cli.commands.ai import app as ai_app
from studynotes.cli.commands.cards import app as cards_app
from studynotes.cli.commands.notes import app as notes_app
from studynotes.cli.commands.system import app as system_app
from studynotes.cli.commands.transfer import app as transfer_app

__all__ = [
    "ai_app",
    "cards_app",
    "notes_app",
    "system_app",
    "transfer_app",
]
