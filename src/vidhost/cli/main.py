"""Typer application for operating a vidhost deployment."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from vidhost.cli.context import ServiceFactory
from vidhost.cli.commands import register_commands

HELP = "Manage stored videos and the published listing."


class CLIApplication:
    """Builds the `vidhost` command set around one console and one service factory.

    Tests pass a factory bound to an in-memory database; the installed script
    builds one from the environment settings.
    """

    def __init__(self, console: Optional[Console] = None, services: Optional[ServiceFactory] = None) -> None:
        self.console = console or Console()
        self.services = services or ServiceFactory.from_settings()
        self._app = typer.Typer(help=HELP, add_completion=False, rich_markup_mode="rich")
        register_commands(self._app, self.console, self.services)

    @property
    def app(self) -> typer.Typer:
        return self._app

    def run(self, *, args: Optional[list[str]] = None) -> None:
        """Parse ``args`` (default: ``sys.argv``) and dispatch the video command."""

        self._app(prog_name="vidhost", args=args)


def create_app(console: Optional[Console] = None, services: Optional[ServiceFactory] = None) -> typer.Typer:
    """Return the video command set, e.g. for ``typer.testing.CliRunner``."""

    return CLIApplication(console=console, services=services).app


def main() -> None:
    """Run the `vidhost` script."""

    CLIApplication().run()


__all__ = ["CLIApplication", "create_app", "main"]
