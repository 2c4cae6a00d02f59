"""Environment plans: ordered deploy steps plus one linkage goal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Tuple

from chainplan.core.errors import InvalidPlan
from chainplan.deployment.models import DeployedResource, ResourceSpec
from chainplan.deployment.reconciler import LinkageAccessor


class PlanOutputs(Mapping[str, DeployedResource]):
    """Read-only view of the resources produced so far in a run."""

    def __init__(self, results: Dict[str, DeployedResource]) -> None:
        self._results = results

    def __getitem__(self, logical_name: str) -> DeployedResource:
        try:
            return self._results[logical_name]
        except KeyError:
            raise InvalidPlan(
                f"{logical_name} has not been deployed yet",
                details={"logical_name": logical_name, "available": ", ".join(self._results)},
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def address(self, logical_name: str) -> str:
        return self[logical_name].address


PLACEHOLDER_ADDRESS = "0x" + "00" * 20

SpecBuilder = Callable[[PlanOutputs], ResourceSpec]


@dataclass(frozen=True)
class PlanStep:
    logical_name: str
    template_name: str
    build: SpecBuilder
    depends_on: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LinkageGoal:
    controller: str
    references: Tuple[str, ...]
    accessor: LinkageAccessor


@dataclass(frozen=True)
class EnvironmentPlan:
    name: str
    network: str
    steps: Tuple[PlanStep, ...]
    linkage: LinkageGoal | None = None

    def validate(self) -> None:
        """
        Reject plans whose steps depend on anything but strictly earlier steps.

        Runs before any network call, since the step order is fixed. Builders
        are also called once against placeholder outputs of the earlier steps,
        so a read of a later or unknown output is caught here too.
        """
        seen: List[str] = []
        for step in self.steps:
            if step.logical_name in seen:
                raise InvalidPlan(
                    f"Duplicate step {step.logical_name} in plan {self.name}",
                    details={"plan": self.name},
                )
            for dep in step.depends_on:
                if dep not in seen:
                    raise InvalidPlan(
                        f"{step.logical_name} depends on {dep}, which is not deployed before it",
                        details={"plan": self.name, "step": step.logical_name, "dependency": dep},
                    )
            seen.append(step.logical_name)

        if self.linkage is not None:
            for name in (self.linkage.controller, *self.linkage.references):
                if name not in seen:
                    raise InvalidPlan(
                        f"Linkage refers to {name}, which the plan never deploys",
                        details={"plan": self.name},
                    )

        self._dry_build()

    def _dry_build(self) -> None:
        """Build every step against placeholders for the steps before it."""
        placeholders: Dict[str, DeployedResource] = {}
        for step in self.steps:
            self.check_spec(step, step.build(PlanOutputs(dict(placeholders))))
            placeholders[step.logical_name] = DeployedResource(
                logical_name=step.logical_name,
                address=PLACEHOLDER_ADDRESS,
                newly_deployed=False,
                template_name=step.template_name,
            )

    def check_spec(self, step: PlanStep, spec: ResourceSpec) -> None:
        if spec.logical_name != step.logical_name or spec.template_name != step.template_name:
            raise InvalidPlan(
                f"Step {step.logical_name} built a spec for {spec.logical_name} ({spec.template_name})",
                details={"plan": self.name, "step": step.logical_name},
            )
