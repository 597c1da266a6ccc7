"""Helper utilities."""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from rich.progress import Progress, SpinnerColumn, TextColumn
from typer.core import TyperGroup

from .output import console

T = TypeVar("T")


def async_to_sync(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to run async functions synchronously."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def ordered_group(order: list[str]) -> type[TyperGroup]:
    """Create a TyperGroup subclass that orders commands."""

    class _OrderedGroup(TyperGroup):
        def list_commands(self, ctx: Any) -> list[str]:
            commands = super().list_commands(ctx)
            rank = {n: i for i, n in enumerate(order)}
            return sorted(commands, key=lambda n: rank.get(n, 99))

    return _OrderedGroup


async def run_with_spinner(message: str, operation: Awaitable[T]) -> T:
    """Await an operation while showing a transient spinner.

    Args:
        message: Text next to the spinner
        operation: Coroutine to await

    Returns:
        The operation's result
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(message, total=None)
        return await operation
