"""Command registration utilities for the vidhost CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from vidhost.cli.commands import videos
from vidhost.cli.context import ServiceFactory


def register_commands(app: typer.Typer, console: Console, services: ServiceFactory) -> None:
    """Attach command groups to the provided Typer application."""

    videos.register(app, console, services)

    @app.callback(invoke_without_command=True)
    def main_callback(ctx: typer.Context) -> None:
        """Manage hosted videos and the published listing."""

        if ctx.invoked_subcommand is None:
            console.print("[bold green]vidhost CLI ready for commands.[/bold green]")


__all__ = ["register_commands"]
