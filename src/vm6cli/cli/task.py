"""Task commands."""

import typer

from ..api.exceptions import VM6CliError
from ..utils import console, print_error, print_success, run_with_spinner
from ..utils.helpers import async_to_sync
from ._shared import PROFILE_OPTION, load_profile, open_client

app = typer.Typer(help="Inspect server-side tasks", no_args_is_help=True)


@app.command("status")
@async_to_sync
async def task_status(
    task_id: int = typer.Argument(..., help="Task ID"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Print the current status of a task."""
    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            status = await client.get_task_status(task_id)
        console.print(status.label or "not found")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("wait")
@async_to_sync
async def wait_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    timeout: int = typer.Option(None, "--timeout", "-t", min=0, help="Seconds to wait (profile default if omitted)"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Wait until a task completes."""
    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(
                f"Waiting for task {task_id}...",
                client.wait_for_task(task_id, timeout),
            )
        print_success(f"Task {task_id} complete")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)
