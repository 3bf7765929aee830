"""Command-line client built with Typer and Rich."""
