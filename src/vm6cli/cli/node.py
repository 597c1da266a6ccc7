"""Node management commands."""

import typer

from ..api.exceptions import VM6CliError
from ..utils import console, create_table, get_state_color, print_data, print_error, print_info
from ..utils.helpers import async_to_sync
from ._shared import OUTPUT_OPTION, PROFILE_OPTION, load_profile, open_client, resolve_output

app = typer.Typer(help="Manage cluster nodes", no_args_is_help=True)


@app.command("list")
@async_to_sync
async def list_nodes(
    profile: str = PROFILE_OPTION,
    output: str = OUTPUT_OPTION,
) -> None:
    """List all cluster nodes."""
    try:
        profile_config, default_format = load_profile(profile)
        fmt = resolve_output(output, default_format)

        async with open_client(profile_config) as client:
            nodes = await client.list_nodes()

        if fmt != "table":
            print_data([n.model_dump(exclude_none=True) for n in nodes], fmt)
            return

        if not nodes:
            print_info("No nodes found")
            return

        table = create_table(
            title="Cluster Nodes",
            columns=[("ID", "cyan"), ("Name", ""), ("State", ""), ("Address", ""), ("VMs", "")],
        )
        for node in sorted(nodes, key=lambda n: n.id):
            color = get_state_color(node.state)
            table.add_row(
                str(node.id),
                node.name or "-",
                f"[{color}]{node.state or 'unknown'}[/{color}]",
                node.ip_addr or "-",
                str(node.host_count) if node.host_count is not None else "-",
            )
        console.print(table)

    except VM6CliError as e:
        print_error(str(e))
        raise typer.Exit(1)
