"""Deployment engine — deploy-or-reuse, sequential plans, linkage reconciliation."""

from chainplan.deployment.deployer import Deployer
from chainplan.deployment.models import (
    DeployedResource,
    ReconcileResult,
    ResourceSpec,
    RunResult,
)
from chainplan.deployment.plan import EnvironmentPlan, LinkageGoal, PlanOutputs, PlanStep
from chainplan.deployment.reconciler import LinkageAccessor, Reconciler, linkage_matches
from chainplan.deployment.runner import PlanRunner

__all__ = [
    "DeployedResource",
    "Deployer",
    "EnvironmentPlan",
    "LinkageAccessor",
    "LinkageGoal",
    "PlanOutputs",
    "PlanRunner",
    "PlanStep",
    "ReconcileResult",
    "Reconciler",
    "ResourceSpec",
    "RunResult",
    "linkage_matches",
]
