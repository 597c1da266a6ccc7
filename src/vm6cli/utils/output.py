"""Output formatting utilities using Rich."""

import json
from typing import Any

import yaml
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_error(msg: str) -> None:
    """Print an error message to stderr.

    Args:
        msg: The error message to display.
    """
    err_console.print(f"[bold red]Error:[/bold red] {msg}")


def print_success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green] {msg}")


def print_warning(msg: str) -> None:
    err_console.print(f"[bold yellow]Warning:[/bold yellow] {msg}")


def print_info(msg: str) -> None:
    console.print(f"[cyan]{msg}[/cyan]")


def print_cancelled(msg: str = "Cancelled") -> None:
    console.print(f"[yellow]{msg}[/yellow]")


def print_data(data: Any, fmt: str = "json") -> None:
    """Print structured data as JSON or YAML.

    Args:
        data: JSON-serialisable data.
        fmt: 'json' or 'yaml'.
    """
    if fmt == "yaml":
        console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    else:
        console.print_json(json.dumps(data))


def create_table(
    title: str | None = None,
    columns: list[tuple[str, str]] | None = None,
    rows: list[list[str]] | None = None,
    show_header: bool = True,
) -> Table:
    """Create a Rich table.

    Args:
        title: Optional table title.
        columns: List of (column_name, column_style) tuples.
        rows: List of row data.
        show_header: Whether to show the header row.

    Returns:
        A configured Rich Table instance.
    """
    table = Table(title=title, show_header=show_header, header_style="bold cyan")

    for col_name, col_style in columns or []:
        table.add_column(col_name, style=col_style)

    for row in rows or []:
        table.add_row(*row)

    return table


def confirm(message: str, default: bool = False) -> bool:
    return Confirm.ask(message, default=default)


def prompt(message: str, default: str | None = None, password: bool = False) -> str:
    """Prompt user for text input.

    Args:
        message: The prompt message to display.
        default: Default value if user just presses enter.
        password: Hide the typed input.

    Returns:
        The user's input string.
    """
    if default is None:
        return Prompt.ask(message, password=password)
    return Prompt.ask(message, default=default, password=password)


def format_mib(mib: int | None) -> str:
    """Format a size in MiB (e.g. 2048 -> '2.0 GiB')."""
    if mib is None:
        return "-"
    value = float(mib)
    for unit in ["MiB", "GiB", "TiB"]:
        if value < 1024.0:
            return f"{value:.1f} {unit}"
        value /= 1024.0
    return f"{value:.1f} PiB"


def get_state_color(state: str | None) -> str:
    """Get the Rich color name for a VM or node state.

    Args:
        state: The state string (e.g., 'active', 'stopped').

    Returns:
        Rich color name ('green', 'red', 'yellow', or 'white').
    """
    state_lower = (state or "").lower()
    if state_lower in ["active", "running", "online"]:
        return "green"
    elif state_lower in ["stopped", "offline", "deleted", "failed"]:
        return "red"
    elif state_lower in ["creating", "starting", "stopping", "reinstalling", "updating"]:
        return "yellow"
    else:
        return "white"
