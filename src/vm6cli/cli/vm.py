"""VM management commands."""

import typer

from ..api.exceptions import VM6CliError
from ..models.vm import (
    DiskResize,
    ReinstallParams,
    VMConfigUpdate,
    VMCreateParams,
    VmRef,
    VMResources,
)
from ..utils import (
    console,
    create_table,
    format_mib,
    get_state_color,
    print_data,
    print_error,
    print_info,
    print_success,
    prompt,
    run_with_spinner,
)
from ..utils.helpers import async_to_sync, ordered_group
from ._shared import OUTPUT_OPTION, PROFILE_OPTION, confirm_action, load_profile, open_client, resolve_output

app = typer.Typer(
    help="Manage virtual machines",
    no_args_is_help=True,
    cls=ordered_group([
        "list", "show", "state", "create", "remove", "resources",
        "resize-disk", "rename", "reinstall", "password", "owner",
    ]),
)


@app.command("list")
@async_to_sync
async def list_vms(
    profile: str = PROFILE_OPTION,
    output: str = OUTPUT_OPTION,
) -> None:
    """List all VMs."""
    try:
        profile_config, default_format = load_profile(profile)
        fmt = resolve_output(output, default_format)

        async with open_client(profile_config) as client:
            vms = await client.list_vms()

        if fmt != "table":
            print_data([vm.model_dump(exclude_none=True) for vm in vms], fmt)
            return

        if not vms:
            print_info("No VMs found")
            return

        table = create_table(
            title="Virtual Machines",
            columns=[("ID", "cyan"), ("Name", ""), ("State", ""), ("Node", ""),
                     ("CPU", ""), ("RAM", ""), ("Disk", ""), ("IPv4", "")],
        )
        for vm in sorted(vms, key=lambda v: v.id):
            color = get_state_color(vm.state)
            table.add_row(
                str(vm.id),
                vm.name or "-",
                f"[{color}]{vm.state or 'unknown'}[/{color}]",
                vm.node_name or "-",
                str(vm.cpu_number or "-"),
                format_mib(vm.ram_mib),
                format_mib(vm.disk_mib),
                ", ".join(vm.addresses) or "-",
            )
        console.print(table)

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("show")
@async_to_sync
async def show_vm(
    vmid: int = typer.Argument(..., help="VM ID"),
    profile: str = PROFILE_OPTION,
    output: str = OUTPUT_OPTION,
) -> None:
    """Show the full record of a VM."""
    try:
        profile_config, default_format = load_profile(profile)
        fmt = resolve_output(output, default_format)

        async with open_client(profile_config) as client:
            vm = await client.get_vm_info(VmRef.of(vmid))

        data = vm.model_dump(exclude_none=True)
        if fmt != "table":
            print_data(data, fmt)
            return

        table = create_table(title=f"VM {vm.id}", columns=[("Field", "bold"), ("Value", "")])
        for key, value in data.items():
            table.add_row(key, str(value))
        console.print(table)

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("state")
@async_to_sync
async def vm_state(
    vmid: int = typer.Argument(..., help="VM ID"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Print the state of a VM."""
    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            state = await client.get_vm_state(VmRef.of(vmid))
        console.print(state)

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("create")
@async_to_sync
async def create_vm(
    name: str = typer.Option(..., "--name", "-n", help="VM name"),
    cluster: int = typer.Option(..., "--cluster", help="Cluster ID"),
    account: int = typer.Option(..., "--account", help="Owner account ID"),
    os: int = typer.Option(None, "--os", help="OS template ID"),
    preset: int = typer.Option(None, "--preset", help="Resource preset ID"),
    cpu: int = typer.Option(None, "--cpu", min=1, help="Number of vCPUs"),
    ram: int = typer.Option(None, "--ram", min=1, help="RAM in MiB"),
    disk: int = typer.Option(None, "--disk", min=1, help="Disk size in MiB"),
    ipv4: int = typer.Option(None, "--ipv4", min=0, help="Number of IPv4 addresses"),
    password: str = typer.Option(None, "--password", help="Root password"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Create a VM and wait until it is provisioned."""
    try:
        params = VMCreateParams(
            name=name, cluster=cluster, account=account, os=os, preset=preset,
            cpu_number=cpu, ram_mib=ram, hdd_mib=disk, ipv4_number=ipv4, password=password,
        )
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            vm_id = await run_with_spinner(f"Creating VM {name}...", client.create_vm(params))
        print_success(f"VM {name} created with ID {vm_id}")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("remove")
@async_to_sync
async def delete_vm(
    vmid: int = typer.Argument(..., help="VM ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Delete a VM."""
    vmr = VmRef.of(vmid)
    if not confirm_action("Delete", vmr, yes):
        return

    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(f"Deleting VM {vmid}...", client.delete_vm(vmr))
        print_success(f"VM {vmid} deleted")

    except VM6CliError as e:
        print_error(f"Failed to delete VM {vmid}: {e}")
        raise typer.Exit(1)


@app.command("resources")
@async_to_sync
async def update_resources(
    vmid: int = typer.Argument(..., help="VM ID"),
    cpu: int = typer.Option(None, "--cpu", min=1, help="Number of vCPUs"),
    ram: int = typer.Option(None, "--ram", min=1, help="RAM in MiB"),
    bandwidth: int = typer.Option(None, "--bandwidth", min=0, help="Network bandwidth in Mbit/s"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Change CPU, RAM or bandwidth of a VM."""
    resources = VMResources(cpu_number=cpu, ram_mib=ram, net_bandwidth_mbitps=bandwidth)
    if not resources.to_body():
        print_error("Nothing to change. Pass --cpu, --ram or --bandwidth.")
        raise typer.Exit(1)

    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(
                f"Updating VM {vmid} resources...",
                client.update_resources(VmRef.of(vmid), resources),
            )
        print_success(f"VM {vmid} resources updated")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("resize-disk")
@async_to_sync
async def resize_disk(
    disk_id: int = typer.Argument(..., help="Disk ID"),
    size: int = typer.Argument(..., min=1, help="New size in MiB"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Resize a VM disk."""
    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(
                f"Resizing disk {disk_id}...",
                client.resize_disk(DiskResize(id=disk_id, size_mib=size)),
            )
        print_success(f"Disk {disk_id} resized to {size} MiB")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("rename")
@async_to_sync
async def update_config(
    vmid: int = typer.Argument(..., help="VM ID"),
    name: str = typer.Option(None, "--name", "-n", help="New VM name"),
    comment: str = typer.Option(None, "--comment", help="VM comment"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Change the name or comment of a VM."""
    update = VMConfigUpdate(name=name, comment=comment)
    if not update.to_body():
        print_error("Nothing to change. Pass --name or --comment.")
        raise typer.Exit(1)

    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await client.update_config(VmRef.of(vmid), update)
        print_success(f"VM {vmid} updated")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("reinstall")
@async_to_sync
async def reinstall_vm(
    vmid: int = typer.Argument(..., help="VM ID"),
    os: int = typer.Option(..., "--os", help="OS template ID"),
    password: str = typer.Option(None, "--password", help="New root password"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Reinstall the operating system of a VM. All data on it is lost."""
    vmr = VmRef.of(vmid)
    if not confirm_action("Reinstall", vmr, yes):
        return

    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(
                f"Reinstalling VM {vmid}...",
                client.reinstall(vmr, ReinstallParams(os=os, password=password)),
            )
        print_success(f"VM {vmid} reinstalled")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("password")
@async_to_sync
async def change_password(
    vmid: int = typer.Argument(..., help="VM ID"),
    password: str = typer.Option(None, "--password", help="New root password (prompted if omitted)"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Change the root password of a VM."""
    if password is None:
        while not (password := prompt("New password", password=True)):
            print_error("Password is required")

    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(
                f"Changing VM {vmid} password...",
                client.change_password(VmRef.of(vmid), password),
            )
        print_success(f"VM {vmid} password changed")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("owner")
@async_to_sync
async def change_owner(
    vmid: int = typer.Argument(..., help="VM ID"),
    account: int = typer.Argument(..., help="New owner account ID"),
    profile: str = PROFILE_OPTION,
) -> None:
    """Move a VM to another account."""
    try:
        profile_config, _ = load_profile(profile)
        async with open_client(profile_config) as client:
            await run_with_spinner(
                f"Changing VM {vmid} owner...",
                client.change_owner(VmRef.of(vmid), account),
            )
        print_success(f"VM {vmid} now belongs to account {account}")

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)
