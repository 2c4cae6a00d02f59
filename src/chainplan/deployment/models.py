"""Value types shared by the deployer, reconciler and plan runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class ResourceSpec:
    """What to deploy for one logical resource in one run."""

    logical_name: str
    template_name: str
    constructor_args: Tuple[Any, ...] = ()
    skip_if_already_deployed: bool = True


@dataclass(frozen=True)
class DeployedResource:
    """Outcome of deploying (or reusing) one logical resource."""

    logical_name: str
    address: str
    newly_deployed: bool
    template_name: str | None = None
    tx_hash: str | None = None
    # Address of a registry entry that was redeployed because its template changed
    replaced_address: str | None = None


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a linkage reconciliation."""

    controller_address: str
    changed: bool
    previous: Tuple[Any, ...] = ()
    desired: Tuple[Any, ...] = ()
    tx_hash: str | None = None


@dataclass
class RunResult:
    """Result of running an environment plan."""

    plan_name: str
    network: str
    deployments: Dict[str, DeployedResource] = field(default_factory=dict)
    reconcile: ReconcileResult | None = None
    duration_seconds: float = 0.0

    @property
    def created(self) -> List[str]:
        """Logical names that were deployed fresh in this run."""
        return [name for name, res in self.deployments.items() if res.newly_deployed]

    @property
    def reused(self) -> List[str]:
        return [name for name, res in self.deployments.items() if not res.newly_deployed]

    @property
    def linkage_changed(self) -> bool:
        return self.reconcile is not None and self.reconcile.changed
