"""Rich-based terminal output and logging setup for BaselineGate."""

from __future__ import annotations

import logging
from typing import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

__all__ = [
    "console",
    "err_console",
    "configure_logging",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "severity_style",
    "create_table",
    "create_panel",
]

_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "info": "bold cyan",
        "muted": "dim",
        "accent": "bold magenta",
        "sev.high": "bold red",
        "sev.medium": "yellow",
        "sev.low": "cyan",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging to stderr; ``verbose`` shows debug detail."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def print_success(message: str) -> None:
    """Print a success message with a checkmark."""
    console.print(f"[success]✔[/success] {message}")


def print_warning(message: str) -> None:
    """Print a warning to stderr so ``--format json`` output stays parseable."""
    err_console.print(f"[warning]⚠[/warning] {message}")


def print_error(message: str) -> None:
    """Print an error to stderr with a cross."""
    err_console.print(f"[error]✖[/error] {message}")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[info]ℹ[/info] {message}")


def severity_style(severity: str) -> str:
    return f"sev.{severity}" if severity in ("high", "medium", "low") else "white"


def create_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: Iterable[Iterable[object]],
) -> Table:
    """Rich table; cells may be any value and keep their rich markup."""
    table = Table(title=title, show_lines=False, expand=True, header_style="accent")
    for header, style in columns:
        table.add_column(header, style=style or None)
    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    return table


def create_panel(content: str, title: str, style: str = "cyan") -> Panel:
    """Panel whose body is rendered from rich markup."""
    return Panel(Text.from_markup(content), title=title, border_style=style, expand=True, padding=(0, 2))
