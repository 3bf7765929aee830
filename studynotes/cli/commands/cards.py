"""
Flashcard Commands.

Commands for the active note's flashcard deck.
"""

import asyncio
from typing import Optional

import typer
from rich.table import Table

from studynotes.cli.context import console, fail, get_workspace, workspace_session
from studynotes.core.exceptions import ApplicationError

app = typer.Typer(help="Flashcard commands")


@app.command("list")
def list_cards() -> None:
    """
    List the active note's flashcards.
    """
    try:
        with workspace_session() as workspace:
            cards = workspace.flashcards.cards
            title = workspace.notes.note.title
    except ApplicationError as e:
        fail(e)
    if not cards:
        console.print("[dim]No flashcards for this note[/dim]")
        return

    table = Table(title=f"Flashcards: {title}", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Answer")
    for card in cards:
        table.add_row(card.id, card.question, card.answer)
    console.print(table)


@app.command()
def generate() -> None:
    """
    Generate flashcards from the active note with AI.

    Replaces the note's existing deck. The deck is unchanged if generation fails.
    """
    asyncio.run(_generate())


async def _generate() -> None:
    """Async implementation of generate command."""
    try:
        workspace = get_workspace()
    except ApplicationError as e:
        fail(e)
    try:
        with console.status("Generating flashcards..."):
            cards = await workspace.generate_flashcards()
    except ApplicationError as e:
        fail(e)
    finally:
        await workspace.close()
    console.print(f"[green]Generated {len(cards)} flashcards![/green]")


@app.command()
def edit(
    card_id: str = typer.Argument(..., help="ID of the flashcard"),
    question: Optional[str] = typer.Option(None, "--question", "-q", help="New question"),
    answer: Optional[str] = typer.Option(None, "--answer", "-a", help="New answer"),
) -> None:
    """
    Change a flashcard's question or answer.
    """
    try:
        with workspace_session() as workspace:
            current = next((c for c in workspace.flashcards.cards if c.id == card_id), None)
            if current is None:
                console.print(f"[yellow]No flashcard {card_id}[/yellow]")
                raise typer.Exit(1)
            workspace.flashcards.update(
                card_id,
                question if question is not None else current.question,
                answer if answer is not None else current.answer,
            )
    except ApplicationError as e:
        fail(e)
    console.print("[green]Flashcard updated[/green]")


@app.command()
def remove(
    card_id: str = typer.Argument(..., help="ID of the flashcard"),
) -> None:
    """
    Delete one flashcard.
    """
    try:
        with workspace_session() as workspace:
            removed = workspace.flashcards.remove(card_id)
    except ApplicationError as e:
        fail(e)
    if not removed:
        console.print(f"[yellow]No flashcard {card_id}[/yellow]")
        raise typer.Exit(1)
    console.print("[green]Flashcard removed[/green]")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """
    Delete every flashcard of the active note.
    """
    if not yes:
        typer.confirm("Delete all flashcards for this note?", abort=True)
    try:
        with workspace_session() as workspace:
            workspace.flashcards.clear()
    except ApplicationError as e:
        fail(e)
    console.print("[green]Flashcards cleared[/green]")
