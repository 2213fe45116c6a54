import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

_console = Console()


def print_step(title: str) -> None:
    """Print a step header."""
    _console.rule(f"[bold blue]{title}[/]")


def print_success(message: str) -> None:
    _console.print(f"[bold green]SUCCESS:[/] {message}")


def print_warning(message: str) -> None:
    _console.print(f"[bold yellow]WARNING:[/] {message}")


def print_error(message: str, exit_code: Optional[int] = None) -> None:
    """Print an error message and optionally exit."""
    _console.print(f"[bold red]ERROR:[/] {message}")

    if exit_code is not None:
        sys.exit(exit_code)


def print_table(
    title: str,
    columns: List[str],
    rows: List[List[str]],
    numeric_columns: Optional[List[int]] = None,
    dim_rows: Optional[List[int]] = None,
) -> None:
    """Print a table; numeric columns are right-aligned, dim rows are greyed out."""
    numeric = set(numeric_columns or [])
    dimmed = set(dim_rows or [])

    table = Table(title=title)
    for index, col in enumerate(columns):
        table.add_column(col, justify="right" if index in numeric else "left")
    if not rows:
        _console.print(table)
        _console.print("(No data)")
        return
    for index, row in enumerate(rows):
        table.add_row(*row, style="dim" if index in dimmed else None)
    _console.print(table)


def print_line(message: str = "") -> None:
    _console.print(message, highlight=False)
