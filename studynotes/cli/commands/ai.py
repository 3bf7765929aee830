"""
AI Commands.

Explain, expand or summarize a piece of text. Results are displayed, never
saved into the note.
"""

import asyncio
from typing import Optional

import typer
from rich.markdown import Markdown
from rich.panel import Panel

from studynotes.cli.context import console, fail, get_workspace
from studynotes.core.exceptions import ApplicationError
from studynotes.services.ai import AIOperation

app = typer.Typer(help="AI text commands")

_TEXT_HELP = "Text to process (defaults to the active note's content)"

_TITLES = {
    AIOperation.EXPLAIN: "Explanation",
    AIOperation.EXPAND: "Expansion",
    AIOperation.SUMMARIZE: "Summary",
}


async def _run(operation: AIOperation, text: str | None) -> None:
    try:
        workspace = get_workspace()
    except ApplicationError as e:
        fail(e)
    source = text if text is not None else workspace.notes.note.content
    try:
        with console.status(f"Running {operation.value}..."):
            reply = await workspace.run_ai(operation, source)
    except ApplicationError as e:
        fail(e)
    finally:
        await workspace.close()
    console.print(Panel(Markdown(reply), title=_TITLES[operation]))


@app.command()
def explain(
    text: Optional[str] = typer.Argument(None, help=_TEXT_HELP),
) -> None:
    """
    Explain text in simpler terms.
    """
    asyncio.run(_run(AIOperation.EXPLAIN, text))


@app.command()
def expand(
    text: Optional[str] = typer.Argument(None, help=_TEXT_HELP),
) -> None:
    """
    Expand text with more detail.
    """
    asyncio.run(_run(AIOperation.EXPAND, text))


@app.command()
def summarize(
    text: Optional[str] = typer.Argument(None, help=_TEXT_HELP),
) -> None:
    """
    Summarize text.
    """
    asyncio.run(_run(AIOperation.SUMMARIZE, text))
