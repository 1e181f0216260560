# shapeforge/cli/commands/version.py
"""Version command."""

from __future__ import annotations

import typer


def command() -> None:
    from shapeforge import __version__

    typer.echo(f"shapeforge {__version__}")
