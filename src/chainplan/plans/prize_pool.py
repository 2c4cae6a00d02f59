"""
Prize pool environment plan.

Deploys ``PrizePool``, then the ``YesTicket`` and ``NoTicket`` instances of
the ``Ticket`` template pointing at the pool, and finally makes sure the pool
references both tickets (``getTicket(true)``/``getTicket(false)`` read,
``setTicket(yes, no)`` write).
"""

from __future__ import annotations

from chainplan.config.networks import NetworkConfig, PrizePoolParams
from chainplan.core.errors import ConfigurationError
from chainplan.deployment.models import ResourceSpec
from chainplan.deployment.plan import EnvironmentPlan, LinkageGoal, PlanOutputs, PlanStep
from chainplan.deployment.reconciler import LinkageAccessor

PRIZE_POOL = "PrizePool"
YES_TICKET = "YesTicket"
NO_TICKET = "NoTicket"
TICKET_TEMPLATE = "Ticket"

TICKET_LINKAGE = LinkageAccessor(
    template=PRIZE_POOL,
    getter="getTicket",
    getter_args=((True,), (False,)),
    setter="setTicket",
)


def build_prize_pool_plan(network: NetworkConfig, defender_relayer: str) -> EnvironmentPlan:
    """Build the plan for ``network``; ``defender_relayer`` must already be resolved."""
    params = network.prize_pool
    if params is None:
        raise ConfigurationError(
            f"Network '{network.name}' has no prize_pool settings",
            details={"network": network.name},
        )

    def prize_pool(_: PlanOutputs) -> ResourceSpec:
        return ResourceSpec(
            logical_name=PRIZE_POOL,
            template_name=PRIZE_POOL,
            constructor_args=(
                defender_relayer,
                params.draw_id,
                params.chain_label,
                params.draw_start_timestamp,
                params.beacon_period_seconds,
            ),
            skip_if_already_deployed=True,
        )

    def yes_ticket(outputs: PlanOutputs) -> ResourceSpec:
        return _ticket_spec(YES_TICKET, params, outputs, yes=True)

    def no_ticket(outputs: PlanOutputs) -> ResourceSpec:
        return _ticket_spec(NO_TICKET, params, outputs, yes=False)

    return EnvironmentPlan(
        name="prize-pool",
        network=network.name,
        steps=(
            PlanStep(PRIZE_POOL, PRIZE_POOL, prize_pool),
            PlanStep(YES_TICKET, TICKET_TEMPLATE, yes_ticket, depends_on=(PRIZE_POOL,)),
            PlanStep(NO_TICKET, TICKET_TEMPLATE, no_ticket, depends_on=(PRIZE_POOL,)),
        ),
        linkage=LinkageGoal(
            controller=PRIZE_POOL,
            references=(YES_TICKET, NO_TICKET),
            accessor=TICKET_LINKAGE,
        ),
    )


def _ticket_spec(
    logical_name: str, params: PrizePoolParams, outputs: PlanOutputs, *, yes: bool
) -> ResourceSpec:
    ticket = params.yes_ticket if yes else params.no_ticket
    return ResourceSpec(
        logical_name=logical_name,
        template_name=TICKET_TEMPLATE,
        constructor_args=(
            ticket.name,
            ticket.symbol,
            params.token_decimals,
            outputs.address(PRIZE_POOL),
        ),
        skip_if_already_deployed=yes or params.reuse_no_ticket,
    )
