"""
System Commands.

Commands for application information and configuration.
"""

from typing import Any, Optional

import typer
from pydantic import BaseModel
from rich.panel import Panel
from rich.tree import Tree

from studynotes.cli.context import console

app = typer.Typer(help="System information commands")


@app.command()
def info() -> None:
    """
    Display application information.

    Shows app name, version, store location and whether AI is configured.
    """
    try:
        from studynotes.core.config import get_app_config, get_settings, get_storage_path

        app_config = get_app_config()
        application = app_config.application
        api_key = get_settings().openai_api_key
        ai_ready = bool(api_key) and api_key != app_config.ai.placeholder_api_key

        console.print(Panel(
            f"[bold]{application.name}[/bold]\n"
            f"Version: {application.version}\n"
            f"Description: {application.description}\n"
            f"Store: {get_storage_path()}\n"
            f"AI: {'[green]configured[/green]' if ai_ready else '[yellow]no API key[/yellow]'}",
            title="Application Info",
        ))

    except (OSError, RuntimeError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    section: Optional[str] = typer.Argument(None, help="Config section to show (application, ai, logging)"),
) -> None:
    """
    Display configuration settings.

    Shows all configuration or a specific section. Secrets are never shown.
    """
    try:
        from studynotes.core.config import get_app_config

        app_config = get_app_config()
    except (OSError, RuntimeError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    sections = {
        "application": app_config.application,
        "ai": app_config.ai,
        "logging": app_config.logging,
    }

    if section:
        if section not in sections:
            console.print(f"[red]Unknown section: {section}[/red]")
            console.print(f"Available sections: {', '.join(sections.keys())}")
            raise typer.Exit(1)
        _display_config_section(section, sections[section])
    else:
        for name, data in sections.items():
            _display_config_section(name, data)
            console.print()


def _display_config_section(name: str, data: BaseModel) -> None:
    """Display a configuration section as a tree."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")
    _add_to_tree(tree, data.model_dump())
    console.print(tree)


def _add_to_tree(tree: Tree, data: dict[str, Any]) -> None:
    """Recursively add dictionary items to tree."""
    for key, value in data.items():
        if isinstance(value, dict):
            branch = tree.add(f"[yellow]{key}[/yellow]")
            _add_to_tree(branch, value)
        else:
            tree.add(f"[yellow]{key}[/yellow]: {value}")
