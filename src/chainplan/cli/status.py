"""Read-only commands: registry status, node accounts, configured networks."""

from __future__ import annotations

from pathlib import Path

from chainplan.cli.context import build_context
from chainplan.cli.ux import console, error, info, print_table
from chainplan.config.loader import get_network, load_networks
from chainplan.config.settings import get_settings
from chainplan.core.errors import ChainPlanError, format_error_message, main_with_error_handling
from chainplan.registry.store import JsonFileRegistry


@main_with_error_handling()
def status_command(
    network: str,
    *,
    config_path: str | None = None,
    deployments_dir: str | None = None,
) -> int:
    """List registry entries for ``network`` without touching the network."""
    settings = get_settings()
    try:
        net = get_network(network, config_path or settings.networks_file)
    except ChainPlanError as e:
        error(format_error_message(e))
        raise

    registry = JsonFileRegistry(Path(deployments_dir or settings.deployments_dir))
    entries = registry.list(net.name)
    if not entries:
        info(f"Nothing deployed on {net.name} yet")
        return 0

    rows = [
        [e.logical_name, e.address, e.template_hash[:10], e.deployed_at or "-"] for e in entries
    ]
    print_table(f"Deployments on {net.name}", ["Resource", "Address", "Template", "Deployed"], rows)
    return 0


@main_with_error_handling()
def accounts_command(
    network: str,
    *,
    config_path: str | None = None,
    rpc_url: str | None = None,
) -> int:
    """Print the accounts the node exposes."""
    try:
        ctx = build_context(network, config_path=config_path, rpc_url=rpc_url)
        accounts = ctx.client.accounts()
    except ChainPlanError as e:
        error(format_error_message(e))
        raise

    for account in accounts:
        console.print(account)
    return 0


@main_with_error_handling()
def networks_command(*, config_path: str | None = None) -> int:
    settings = get_settings()
    networks = load_networks(config_path or settings.networks_file)
    rows = [
        [
            name,
            str(net.chain_id),
            net.rpc_url,
            "yes" if net.prize_pool else "no",
        ]
        for name, net in sorted(networks.items())
    ]
    print_table("Networks", ["Name", "Chain id", "RPC", "Prize pool"], rows)
    return 0
