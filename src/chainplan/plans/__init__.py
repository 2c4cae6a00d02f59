"""Built-in environment plans."""

from chainplan.plans.prize_pool import (
    NO_TICKET,
    PRIZE_POOL,
    TICKET_LINKAGE,
    TICKET_TEMPLATE,
    YES_TICKET,
    build_prize_pool_plan,
)

__all__ = [
    "NO_TICKET",
    "PRIZE_POOL",
    "TICKET_LINKAGE",
    "TICKET_TEMPLATE",
    "YES_TICKET",
    "build_prize_pool_plan",
]
