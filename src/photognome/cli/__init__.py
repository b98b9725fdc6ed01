"""Command-line interface for photognome.

- app: The Typer application object (``photognome`` console script).
- main: Entry point that runs the app.
"""

from photognome.cli.commands import app, main

__all__ = ["app", "main"]
