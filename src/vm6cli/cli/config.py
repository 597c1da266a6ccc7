"""Configuration management commands for vm6cli."""

import typer
from pydantic import ValidationError

from ..api.exceptions import VM6CliError
from ..config import AuthConfig, ConfigManager, ProfileConfig
from ..utils import console, create_table, print_error, print_info, print_success, print_warning, prompt

app = typer.Typer(help="Manage vm6cli configuration", no_args_is_help=True)


def _collect_auth(user: str | None, password: str | None, token: str | None) -> AuthConfig:
    """Build auth settings, prompting for what's missing."""
    if token:
        return AuthConfig(type="token", user=user, token=token)

    if user is None:
        while not (user := prompt("Account email")):
            print_error("Email is required")
    if password is None:
        while not (password := prompt("Password", password=True)):
            print_error("Password is required")
    return AuthConfig(type="password", user=user, password=password)


@app.command("add")
def add_profile(
    name: str = typer.Argument(..., help="Profile name"),
    api_url: str = typer.Option(None, "--url", help="API root, e.g. https://vm.example.com/vm/v3"),
    user: str = typer.Option(None, "--user", "-u", help="Account email"),
    password: str = typer.Option(None, "--password", help="Account password"),
    token: str = typer.Option(None, "--token", help="API token (instead of a password)"),
    task_timeout: int = typer.Option(300, "--task-timeout", min=0, help="Seconds to wait for tasks"),
    no_verify_ssl: bool = typer.Option(False, "--no-verify-ssl", help="Skip TLS certificate checks"),
) -> None:
    """Add or replace a profile."""
    config_manager = ConfigManager()

    if api_url is None:
        while not (api_url := prompt("API URL")):
            print_error("API URL is required")

    try:
        profile = ProfileConfig(
            api_url=api_url,
            verify_ssl=not no_verify_ssl,
            task_timeout=task_timeout,
            auth=_collect_auth(user, password, token),
        )
        config_manager.add_profile(name, profile)
    except ValidationError as e:
        print_error(f"Invalid profile: {e}")
        raise typer.Exit(1)
    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Profile '{name}' saved to {config_manager.config_file}")
    if no_verify_ssl:
        print_warning("TLS certificate checks are disabled for this profile")


@app.command("list")
def list_profiles() -> None:
    """List configured profiles."""
    config_manager = ConfigManager()

    if not config_manager.config_file.exists():
        print_info("No configuration found. Run 'vm6cli config add' first.")
        return

    try:
        config = config_manager.get()
    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)

    table = create_table(
        title="Profiles",
        columns=[("Name", "cyan"), ("API URL", ""), ("Auth", ""), ("Task timeout", ""), ("Default", "")],
    )
    for name, profile in sorted(config.profiles.items()):
        table.add_row(
            name,
            profile.api_url,
            profile.auth.type,
            f"{profile.task_timeout}s",
            "✓" if name == config.default_profile else "",
        )
    console.print(table)


@app.command("use")
def use_profile(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Set the default profile."""
    try:
        ConfigManager().set_default_profile(name)
    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Default profile set to '{name}'")


@app.command("remove")
def remove_profile(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Remove a profile."""
    try:
        ConfigManager().remove_profile(name)
    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Profile '{name}' removed")
