"""
Deploy command.

Runs the prize pool plan against a network: deploys or reuses each
contract in order, then points the prize pool at both tickets.
"""

from __future__ import annotations

from chainplan.cli.context import build_context, use_deployer_account
from chainplan.cli.ux import console, error, header, info, print_table, success, warning
from chainplan.core.errors import ChainPlanError, format_error_message, main_with_error_handling
from chainplan.deployment.deployer import Deployer
from chainplan.deployment.models import DeployedResource, ReconcileResult, RunResult
from chainplan.deployment.runner import PlanRunner
from chainplan.network.base import resolve_account
from chainplan.plans.prize_pool import build_prize_pool_plan


def _print_step(resource: DeployedResource) -> None:
    if resource.replaced_address:
        warning(
            f"{resource.logical_name} at {resource.replaced_address} was built from an older template"
        )
    if resource.newly_deployed:
        console.print(
            f"  [green]✓ {resource.logical_name:<12}[/green] deployed at [cyan]{resource.address}[/cyan]"
        )
    else:
        console.print(
            f"  [muted]• {resource.logical_name:<12}[/muted] reusing [cyan]{resource.address}[/cyan]"
        )


def _print_reconcile(result: ReconcileResult) -> None:
    if result.changed:
        success(f"Set tickets on prize pool (tx {result.tx_hash})")
    else:
        info("Prize pool already references both tickets")


def print_run_summary(result: RunResult) -> None:
    rows = [
        [name, res.address, "deployed" if res.newly_deployed else "reused"]
        for name, res in result.deployments.items()
    ]
    console.print()
    print_table(f"{result.plan_name} on {result.network}", ["Resource", "Address", "Action"], rows)
    console.print(
        f"[bold green]{len(result.created)} deployed, {len(result.reused)} reused "
        f"in {result.duration_seconds:.1f}s[/bold green]"
    )


@main_with_error_handling()
def deploy_command(
    network: str,
    *,
    config_path: str | None = None,
    deployments_dir: str | None = None,
    artifacts_dir: str | None = None,
    rpc_url: str | None = None,
) -> int:
    """Deploy the prize pool plan to ``network``. Returns an exit code."""
    try:
        ctx = build_context(
            network,
            config_path=config_path,
            deployments_dir=deployments_dir,
            artifacts_dir=artifacts_dir,
            rpc_url=rpc_url,
        )
        deployer_address = use_deployer_account(ctx)
        relayer = resolve_account(ctx.client, ctx.network.accounts.defender_relayer)

        header(f"Deploying on {ctx.network.name}")
        console.print(f"[cyan]Chain id:[/cyan] {ctx.network.chain_id}")
        console.print(f"[cyan]Deployer:[/cyan] {deployer_address}")
        console.print(f"[cyan]Relayer:[/cyan]  {relayer}")
        console.print()

        plan = build_prize_pool_plan(ctx.network, relayer)
        runner = PlanRunner(
            Deployer(ctx.client, ctx.registry, ctx.network.name, confirmations=ctx.settings.confirmations),
            ctx.client,
            confirmations=ctx.settings.confirmations,
            on_step=_print_step,
            on_reconcile=_print_reconcile,
        )
        result = runner.run(plan)
    except ChainPlanError as e:
        error(format_error_message(e))
        raise

    print_run_summary(result)
    return 0
