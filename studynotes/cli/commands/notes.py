"""
Note Commands.

Commands for listing, viewing, creating, editing and deleting notes.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from studynotes.cli.context import console, fail, workspace_session
from studynotes.core.exceptions import ApplicationError

app = typer.Typer(help="Note commands")


@app.command("list")
def list_notes() -> None:
    """
    List all notes.

    The active note is marked with an asterisk.
    """
    try:
        with workspace_session() as workspace:
            active_id = workspace.notes.note.id
            notes = workspace.notes.notes
    except ApplicationError as e:
        fail(e)

    table = Table(title="Notes", show_header=True)
    table.add_column("", width=1)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Updated")

    for note in notes:
        table.add_row(
            "*" if note.id == active_id else "",
            note.id,
            note.title,
            note.updated_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def show(
    raw: bool = typer.Option(False, "--raw", help="Print markdown source instead of rendering it"),
) -> None:
    """
    Show the active note.
    """
    try:
        with workspace_session() as workspace:
            note = workspace.notes.note
    except ApplicationError as e:
        fail(e)
    if raw:
        console.print(note.content, markup=False, highlight=False)
        return
    console.print(Panel(Markdown(note.content or "_(empty)_"), title=note.title))


@app.command()
def new() -> None:
    """
    Create a blank note and make it active.
    """
    try:
        with workspace_session() as workspace:
            note = workspace.create_note()
    except ApplicationError as e:
        fail(e)
    console.print(f"[green]Created note[/green] {note.id}")


@app.command()
def switch(
    note_id: str = typer.Argument(..., help="ID of the note to activate"),
) -> None:
    """
    Make another note active.
    """
    try:
        with workspace_session() as workspace:
            note = workspace.switch_note(note_id)
    except ApplicationError as e:
        fail(e)
    console.print(f"Active note: [cyan]{note.title}[/cyan]")


@app.command()
def edit(
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New content"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read new content from a file",
    ),
    append: bool = typer.Option(False, "--append", "-a", help="Append to the content instead of replacing it"),
) -> None:
    """
    Edit the active note's title or content.

    Examples:
        studynotes notes edit --title "Graphs"
        studynotes notes edit --file lecture.md
        studynotes notes edit --append --content "- Dijkstra"
    """
    if content is not None and file is not None:
        console.print("[red]Use either --content or --file, not both[/red]")
        raise typer.Exit(1)
    if file is not None:
        content = file.read_text(encoding="utf-8")
    if title is None and content is None:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    try:
        with workspace_session() as workspace:
            if title is not None:
                workspace.notes.update_title(title)
            if content is not None:
                if append and workspace.notes.note.content:
                    content = f"{workspace.notes.note.content}\n{content}"
                workspace.notes.update_content(content)
    except ApplicationError as e:
        fail(e)
    console.print("[green]Note saved[/green]")


@app.command()
def delete(
    note_id: str = typer.Argument(..., help="ID of the note to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """
    Delete a note.

    Its flashcards stay in the store.
    """
    if not yes:
        typer.confirm(f"Delete note {note_id}?", abort=True)

    try:
        with workspace_session() as workspace:
            active = workspace.delete_note(note_id)
    except ApplicationError as e:
        fail(e)
    console.print(f"[green]Deleted[/green] {note_id}. Active note: [cyan]{active.title}[/cyan]")
