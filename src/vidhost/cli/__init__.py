"""Command-line interface package for vidhost."""

from vidhost.cli.main import CLIApplication, create_app, main

__all__ = ["CLIApplication", "create_app", "main"]
