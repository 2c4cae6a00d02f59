"""Sequential execution of an environment plan."""

from __future__ import annotations

import time
from typing import Callable, Dict

from chainplan.core.errors import InvalidPlan
from chainplan.deployment.deployer import Deployer
from chainplan.deployment.models import DeployedResource, ReconcileResult, RunResult
from chainplan.deployment.plan import EnvironmentPlan, PlanOutputs
from chainplan.deployment.reconciler import Reconciler
from chainplan.logging import bind_context
from chainplan.network.base import NetworkClient

StepCallback = Callable[[DeployedResource], None]
ReconcileCallback = Callable[[ReconcileResult], None]


class PlanRunner:
    """
    Runs plan steps one at a time through the deployer, then reconciles.

    Each step's spec is rebuilt from the outputs accumulated in this run,
    so a redeployed dependency is always picked up by later steps. A failure
    stops the run; registry entries already written stay in place and the
    next run resumes by reusing them.
    """

    def __init__(
        self,
        deployer: Deployer,
        client: NetworkClient,
        *,
        confirmations: int = 1,
        on_step: StepCallback | None = None,
        on_reconcile: ReconcileCallback | None = None,
    ) -> None:
        self._deployer = deployer
        self._client = client
        self._confirmations = confirmations
        self._on_step = on_step
        self._on_reconcile = on_reconcile

    def run(self, plan: EnvironmentPlan) -> RunResult:
        if plan.network != self._deployer.network:
            raise InvalidPlan(
                f"Plan {plan.name} targets {plan.network}, deployer targets {self._deployer.network}",
                details={"plan": plan.name},
            )
        plan.validate()

        log = bind_context(plan=plan.name, network=plan.network)
        started = time.monotonic()
        results: Dict[str, DeployedResource] = {}
        outputs = PlanOutputs(results)
        total = len(plan.steps)

        for index, step in enumerate(plan.steps, 1):
            spec = step.build(outputs)
            plan.check_spec(step, spec)
            log.debug("step_started", step=index, total=total, logical_name=step.logical_name)
            deployed = self._deployer.deploy(spec)
            results[step.logical_name] = deployed
            log.info(
                "step_completed",
                logical_name=deployed.logical_name,
                address=deployed.address,
                newly_deployed=deployed.newly_deployed,
            )
            if self._on_step:
                self._on_step(deployed)

        result = RunResult(plan_name=plan.name, network=plan.network, deployments=dict(results))

        if plan.linkage is not None:
            goal = plan.linkage
            reconciler = Reconciler(self._client, goal.accessor, confirmations=self._confirmations)
            desired = [outputs.address(name) for name in goal.references]
            result.reconcile = reconciler.reconcile(outputs.address(goal.controller), desired)
            log.info("linkage_checked", changed=result.reconcile.changed)
            if self._on_reconcile:
                self._on_reconcile(result.reconcile)

        result.duration_seconds = time.monotonic() - started
        return result
