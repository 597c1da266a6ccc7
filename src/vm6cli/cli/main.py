"""Main CLI application."""

import typer

from .. import __version__
from ..utils import console, setup_logging
from . import config, node, task, vm

app = typer.Typer(
    name="vm6cli",
    help="Command line client for the VMmanager 6 API",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(config.app, name="config")
app.add_typer(node.app, name="node")
app.add_typer(vm.app, name="vm")
app.add_typer(task.app, name="task")


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: Whether version flag was set
    """
    if value:
        console.print(f"vm6cli version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    debug: bool = typer.Option(False, "--debug", help="Log HTTP calls, retries and task polls"),
) -> None:
    """vm6cli - manage VMmanager 6 virtual machines from the command line.

    Get started:
        vm6cli config add     # Set up your first profile
        vm6cli vm list        # List virtual machines
        vm6cli --help         # Show all available commands
    """
    setup_logging(debug)


if __name__ == "__main__":
    app()
