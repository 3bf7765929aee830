"""
CLI Application.

Command-line client for the note workspace.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    studynotes --help                          # Show help

    # Notes
    studynotes notes list                      # List notes, active one starred
    studynotes notes show                      # Render the active note
    studynotes notes new                       # Create and activate a blank note
    studynotes notes edit --file lecture.md    # Replace the active note's content
    studynotes notes delete <id>               # Delete a note

    # Flashcards
    studynotes cards generate                  # Generate a deck with AI
    studynotes cards list                      # Show the active note's deck

    # AI
    studynotes ai explain "binary heap"        # Explain a selection
    studynotes ai summarize                    # Summarize the active note

    # Import / export
    studynotes transfer export-note -f txt     # Write <title>.txt
    studynotes transfer import-cards deck.json # Merge a flashcard export

    # System
    studynotes system info                     # Show app info
    studynotes system config ai                # Show a configuration section

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import typer
from rich.console import Console

from studynotes.cli.commands import ai_app, cards_app, notes_app, system_app, transfer_app
from studynotes.core.config import find_project_root

app = typer.Typer(
    name="studynotes",
    help="AI Study Notes CLI - Markdown notes, flashcards and AI text tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(notes_app, name="notes")
app.add_typer(cards_app, name="cards")
app.add_typer(ai_app, name="ai")
app.add_typer(transfer_app, name="transfer")
app.add_typer(system_app, name="system")


def _validate_project_root() -> None:
    """Validate that we're running inside the project."""
    try:
        find_project_root()
    except RuntimeError:
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    AI Study Notes CLI.

    Markdown notes with autosave, AI explanations, and flashcards.
    """
    _validate_project_root()

    from studynotes.core.logging import setup_logging

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging()


if __name__ == "__main__":
    app()
