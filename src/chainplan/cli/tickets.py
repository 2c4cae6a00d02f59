"""
Standalone ticket linkage command.

Points the deployed prize pool at a yes/no ticket pair without running the
full plan. Addresses default to the registry entries for the network.
"""

from __future__ import annotations

from chainplan.cli.context import build_context, use_deployer_account
from chainplan.cli.ux import error, info, success
from chainplan.core.errors import (
    ChainPlanError,
    ConfigurationError,
    format_error_message,
    main_with_error_handling,
)
from chainplan.deployment.reconciler import Reconciler
from chainplan.plans.prize_pool import NO_TICKET, PRIZE_POOL, TICKET_LINKAGE, YES_TICKET
from chainplan.registry.store import RegistryStore


def _registered_address(registry: RegistryStore, network: str, logical_name: str) -> str:
    entry = registry.get(network, logical_name)
    if entry is None:
        raise ConfigurationError(
            f"{logical_name} is not deployed on {network}",
            details={"hint": "run `chainplan deploy` first or pass the address explicitly"},
        )
    return entry.address


@main_with_error_handling()
def set_tickets_command(
    network: str,
    *,
    yes_address: str | None = None,
    no_address: str | None = None,
    pool_address: str | None = None,
    config_path: str | None = None,
    deployments_dir: str | None = None,
    artifacts_dir: str | None = None,
    rpc_url: str | None = None,
) -> int:
    try:
        ctx = build_context(
            network,
            config_path=config_path,
            deployments_dir=deployments_dir,
            artifacts_dir=artifacts_dir,
            rpc_url=rpc_url,
        )
        use_deployer_account(ctx)
        name = ctx.network.name
        pool = pool_address or _registered_address(ctx.registry, name, PRIZE_POOL)
        yes = yes_address or _registered_address(ctx.registry, name, YES_TICKET)
        no = no_address or _registered_address(ctx.registry, name, NO_TICKET)

        reconciler = Reconciler(ctx.client, TICKET_LINKAGE, confirmations=ctx.settings.confirmations)
        result = reconciler.reconcile(pool, [yes, no])
    except ChainPlanError as e:
        error(format_error_message(e))
        raise

    if result.changed:
        success(f"Set tickets on prize pool {pool}")
    else:
        info(f"Prize pool {pool} already references {yes} / {no}")
    return 0
