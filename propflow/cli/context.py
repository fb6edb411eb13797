"""
CLI Context for PropFlow.

Provides centralized file loading and output handling for all CLI commands.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from propflow.common.exceptions import PropFlowError
from propflow.diagnostics import PropertyWarning
from propflow.config import PropertiesConfig
from propflow.loader import Declarations, load_declarations, load_events, load_settings


@dataclass
class CLIContext:
    """
    Context object for CLI commands.

    Created once by the app callback and reached by commands through
    ``ctx.obj``.

    Attributes:
        console: Rich console for output
        verbose: Enable verbose output (ignored when json_mode is True)
        json_mode: When True, suppress all non-JSON output (set by commands)
    """

    console: Console
    verbose: bool = False
    json_mode: bool = False

    def print_verbose(self, message: str, **kwargs) -> None:
        if self.verbose and not self.json_mode:
            self.console.print(message, **kwargs)

    def fail(self, message: str) -> None:
        """Report an error and exit with code 1."""
        if self.json_mode:
            self.console.print_json(data={"error": message})
        else:
            self.console.print(f"[red]❌ {escape(message)}[/red]")
        raise typer.Exit(code=1)

    def load_declarations(self, source: Path) -> Declarations:
        self.print_verbose(f"🔄 Loading declarations from {source}")
        try:
            return load_declarations(source)
        except PropFlowError as e:
            self.fail(str(e))

    def load_events(self, source: Path) -> list[dict[str, Any]]:
        self.print_verbose(f"🔄 Loading events from {source}")
        try:
            return load_events(source)
        except PropFlowError as e:
            self.fail(str(e))

    def load_settings(self, source: Path) -> PropertiesConfig:
        self.print_verbose(f"🔄 Loading settings from {source}")
        try:
            return load_settings(source)
        except PropFlowError as e:
            self.fail(str(e))

    def print_properties(self, rows: list[dict[str, Any]], title: str) -> None:
        table = Table(title=title)
        for column in rows[0] if rows else ("name",):
            table.add_column(column.title())
        for row in rows:
            table.add_row(*(_cell(value) for value in row.values()))
        self.console.print(table)

    def print_warnings(self, warnings: tuple[PropertyWarning, ...]) -> None:
        if not warnings:
            self.print_verbose("[green]✅ No warnings[/green]")
            return
        self.console.print(f"[yellow]⚠️  {len(warnings)} warning(s):[/yellow]")
        for warning in warnings:
            self.console.print(f"  • {escape(f'[{warning.kind.value}] {warning.message}')}")


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    return escape(value if isinstance(value, str) else repr(value))
