"""Helpers shared by the command modules."""

import typer

from ..api.client import VMManagerClient
from ..config import ConfigManager
from ..models.config import ProfileConfig
from ..models.vm import VmRef
from ..utils import confirm, print_cancelled

PROFILE_OPTION = typer.Option(None, "--profile", "-p", help="Profile to use")
OUTPUT_OPTION = typer.Option(None, "--output", "-o", help="Output format: table, json or yaml")


def load_profile(name: str | None) -> tuple[ProfileConfig, str]:
    """Resolve a profile and the preferred output format."""
    config_manager = ConfigManager()
    profile = config_manager.get_profile(name)
    return profile, config_manager.get().output.format


def open_client(profile: ProfileConfig) -> VMManagerClient:
    return VMManagerClient(profile)


def resolve_output(requested: str | None, default: str) -> str:
    fmt = requested or default
    if fmt not in ("table", "json", "yaml"):
        raise typer.BadParameter(f"Unknown output format '{fmt}'", param_hint="--output")
    return fmt


def confirm_action(action: str, vmr: VmRef, yes: bool) -> bool:
    """Ask before a destructive action unless --yes was given."""
    if yes:
        return True
    if confirm(f"{action} VM {vmr.vm_id}?", default=False):
        return True
    print_cancelled()
    return False
