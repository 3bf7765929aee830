"""
CLI Workspace Access.

Provides the workspace shared by all commands of one CLI invocation and the
common error reporting used at the command boundary.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console

from studynotes.core.exceptions import ApplicationError
from studynotes.core.logging import get_logger, log_with_source
from studynotes.repositories.backends import JsonFileBackend
from studynotes.repositories.store import LocalStore
from studynotes.services.workspace import Workspace

logger = get_logger(__name__)

console = Console()
error_console = Console(stderr=True)

# Module-level workspace instance
_workspace: Workspace | None = None


def get_workspace() -> Workspace:
    """Get or create the workspace singleton, opened on the configured store."""
    global _workspace
    if _workspace is None:
        from studynotes.core.config import get_storage_path

        store = LocalStore(JsonFileBackend(get_storage_path()))
        _workspace = Workspace(store)
        _workspace.open()
    return _workspace


def set_workspace(workspace: Workspace | None) -> None:
    """Replace the workspace singleton (None resets it)."""
    global _workspace
    _workspace = workspace


@contextmanager
def workspace_session() -> Iterator[Workspace]:
    """Yield the workspace and save pending edits when the command ends."""
    workspace = get_workspace()
    try:
        yield workspace
    finally:
        workspace.notes.flush()


def fail(error: ApplicationError) -> None:
    """Report an application error and exit with status 1."""
    log_with_source(logger, "cli", "debug", "Command failed", code=error.code, error=error.message)
    error_console.print(f"[red]Error: {error.message}[/red]")
    raise typer.Exit(1)
