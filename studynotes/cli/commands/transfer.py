"""
Import/Export Commands.

Commands for moving notes and flashcards in and out as files.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from studynotes.cli.context import console, fail, workspace_session
from studynotes.core.exceptions import ApplicationError

app = typer.Typer(help="Import and export commands")


class NoteFormat(str, Enum):
    txt = "txt"
    md = "md"


_DIR_HELP = "Directory to write into (defaults to exports.directory in application.yaml)"


@app.command("export-note")
def export_note(
    fmt: NoteFormat = typer.Option(NoteFormat.md, "--format", "-f", help="File format"),
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", file_okay=False, help=_DIR_HELP),
) -> None:
    """
    Export the active note as a .txt or .md file.
    """
    try:
        with workspace_session() as workspace:
            path = workspace.export_note(fmt.value, directory)
    except ApplicationError as e:
        fail(e)
    console.print(f"[green]Exported[/green] {path}")


@app.command("export-cards")
def export_cards(
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", file_okay=False, help=_DIR_HELP),
) -> None:
    """
    Export the active note's flashcards as JSON.
    """
    try:
        with workspace_session() as workspace:
            path = workspace.export_flashcards(directory)
    except ApplicationError as e:
        fail(e)
    console.print(f"[green]Exported[/green] {path}")


@app.command("import-note")
def import_note(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help=".txt or .md file"),
) -> None:
    """
    Import a .txt or .md file as a new note and make it active.
    """
    try:
        with workspace_session() as workspace:
            note = workspace.import_note(path)
    except ApplicationError as e:
        fail(e)
    console.print(f'[green]Note "{note.title}" imported successfully![/green]')


@app.command("import-cards")
def import_cards(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Flashcard .json file"),
    into_active: bool = typer.Option(
        False, "--into-active", help="Add to the active note even if another note's title matches",
    ),
) -> None:
    """
    Import flashcards from a JSON export.

    Cards are added to the note whose title matches the file, or to the active note.
    """
    try:
        with workspace_session() as workspace:
            result = workspace.import_flashcards(path, into_active=into_active)
    except ApplicationError as e:
        fail(e)
    console.print(
        f'[green]{result.count} flashcards imported to "{result.note_title}"![/green]'
    )
