# shapeforge/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from shapeforge.cli.ui import ui, console

    ui.header("Generate")
    ui.success("Done!")

Messages and table cells are escaped, so diagnostic text such as
``[error] naming-collision: ...`` is printed verbatim instead of being read
as rich markup.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()


class UI:
    """Consistent styling for command output."""

    def __init__(self, out: Console):
        self.console = out

    def header(self, title: str, subtitle: str = "") -> None:
        body = f"[bold]{escape(title)}[/bold]"
        if subtitle:
            body += f"\n[dim]{escape(subtitle)}[/dim]"
        self.console.print(Panel(body, expand=False))

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]i[/cyan] {escape(message)}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        table = Table(title=escape(title))
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self.console.print(table)


ui = UI(console)


__all__ = ["ui", "console", "UI"]
