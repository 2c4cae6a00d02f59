"""Tests for deployment/runner.py and deployment/plan.py."""

from dataclasses import replace

import pytest
from chainplan.core.errors import DeploymentFailed, InvalidPlan
from chainplan.deployment.deployer import Deployer
from chainplan.deployment.models import ResourceSpec
from chainplan.deployment.plan import EnvironmentPlan, LinkageGoal, PlanStep
from chainplan.deployment.runner import PlanRunner
from chainplan.plans.prize_pool import TICKET_LINKAGE, build_prize_pool_plan
from chainplan.registry.store import RegistryEntry

RELAYER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def _runner(fake_network, registry, network="local", **kwargs):
    return PlanRunner(Deployer(fake_network, registry, network), fake_network, **kwargs)


def _chain_plan(network="local", b_skip=False):
    """A -> B(args reference A) -> C, no linkage."""
    return EnvironmentPlan(
        name="chain",
        network=network,
        steps=(
            PlanStep("A", "Base", lambda out: ResourceSpec("A", "Base", (1,))),
            PlanStep(
                "B",
                "Child",
                lambda out: ResourceSpec("B", "Child", (out.address("A"),), b_skip),
                depends_on=("A",),
            ),
            PlanStep("C", "Base", lambda out: ResourceSpec("C", "Base", (2,))),
        ),
    )


class TestPrizePoolScenario:
    def test_first_run_deploys_everything_and_links(self, fake_network, registry, local_network):
        plan = build_prize_pool_plan(local_network, RELAYER)

        result = _runner(fake_network, registry).run(plan)

        assert list(result.deployments) == ["PrizePool", "YesTicket", "NoTicket"]
        assert result.created == ["PrizePool", "YesTicket", "NoTicket"]
        for name in ("PrizePool", "YesTicket", "NoTicket"):
            assert registry.get("local", name).address == result.deployments[name].address

        pool = result.deployments["PrizePool"].address
        yes = result.deployments["YesTicket"].address
        no = result.deployments["NoTicket"].address
        assert result.linkage_changed is True
        assert fake_network.updates == [("call", pool, "setTicket", (yes, no))]

    def test_constructor_arguments(self, fake_network, registry, local_network):
        plan = build_prize_pool_plan(local_network, RELAYER)

        result = _runner(fake_network, registry).run(plan)

        pool = result.deployments["PrizePool"].address
        creations = fake_network.creations
        assert creations[0] == (
            "create",
            "PrizePool",
            (RELAYER, 1, "fantom", 1654905600, 86400 * 13),
        )
        assert creations[1] == ("create", "Ticket", ("yesUnitV1", "yUNIT", 18, pool))
        assert creations[2] == ("create", "Ticket", ("noUnitV1", "nUNIT", 18, pool))

    def test_second_run_redeploys_only_no_ticket(self, fake_network, registry, local_network):
        plan = build_prize_pool_plan(local_network, RELAYER)
        runner = _runner(fake_network, registry)

        first = runner.run(plan)
        second = runner.run(build_prize_pool_plan(local_network, RELAYER))

        assert second.reused == ["PrizePool", "YesTicket"]
        assert second.created == ["NoTicket"]
        assert second.deployments["PrizePool"].address == first.deployments["PrizePool"].address
        assert second.deployments["YesTicket"].address == first.deployments["YesTicket"].address
        assert second.deployments["NoTicket"].address != first.deployments["NoTicket"].address
        assert registry.get("local", "NoTicket").address == second.deployments["NoTicket"].address
        # New no ticket means the pool has drifted and is updated again
        assert second.linkage_changed is True
        assert len(fake_network.updates) == 2

    def test_fully_idempotent_when_no_ticket_is_reused(self, fake_network, registry, local_network):
        network = replace(
            local_network, prize_pool=replace(local_network.prize_pool, reuse_no_ticket=True)
        )
        runner = _runner(fake_network, registry)

        first = runner.run(build_prize_pool_plan(network, RELAYER))
        mutations_after_first = fake_network.mutating_calls
        second = runner.run(build_prize_pool_plan(network, RELAYER))

        assert all(not r.newly_deployed for r in second.deployments.values())
        assert {n: r.address for n, r in first.deployments.items()} == {
            n: r.address for n, r in second.deployments.items()
        }
        assert second.linkage_changed is False
        assert fake_network.mutating_calls == mutations_after_first

    def test_callbacks_receive_events(self, fake_network, registry, local_network):
        steps, reconciles = [], []
        runner = _runner(
            fake_network, registry, on_step=steps.append, on_reconcile=reconciles.append
        )

        runner.run(build_prize_pool_plan(local_network, RELAYER))

        assert [s.logical_name for s in steps] == ["PrizePool", "YesTicket", "NoTicket"]
        assert len(reconciles) == 1 and reconciles[0].changed is True


class TestOrdering:
    def test_redeployed_dependency_flows_into_later_args(self, fake_network, registry):
        runner = _runner(fake_network, registry)
        runner.run(_chain_plan())

        moved = "0x00000000000000000000000000000000000000dd"
        registry.put(RegistryEntry("A", "local", moved, "0xhash-base"))
        result = runner.run(_chain_plan())

        assert result.deployments["A"].address == moved
        last_child = [c for c in fake_network.creations if c[1] == "Child"][-1]
        assert last_child[2] == (moved,)

    def test_steps_run_in_declared_order(self, fake_network, registry):
        result = _runner(fake_network, registry).run(_chain_plan())

        assert [c[2] for c in fake_network.creations] == [
            (1,),
            (result.deployments["A"].address,),
            (2,),
        ]


class TestInvalidPlans:
    def test_forward_dependency_rejected_before_network_calls(self, fake_network, registry):
        plan = EnvironmentPlan(
            name="bad",
            network="local",
            steps=(
                PlanStep(
                    "B",
                    "Child",
                    lambda out: ResourceSpec("B", "Child", (out.address("A"),)),
                    depends_on=("A",),
                ),
                PlanStep("A", "Base", lambda out: ResourceSpec("A", "Base")),
            ),
        )

        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry).run(plan)
        assert fake_network.calls == []

    def test_duplicate_step_rejected(self, fake_network, registry):
        step = PlanStep("A", "Base", lambda out: ResourceSpec("A", "Base"))
        plan = EnvironmentPlan(name="dup", network="local", steps=(step, step))

        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry).run(plan)

    def test_linkage_to_unknown_step_rejected(self, fake_network, registry):
        plan = EnvironmentPlan(
            name="bad-link",
            network="local",
            steps=(PlanStep("A", "Base", lambda out: ResourceSpec("A", "Base")),),
            linkage=LinkageGoal("A", ("Missing",), TICKET_LINKAGE),
        )

        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry).run(plan)
        assert fake_network.calls == []

    def test_undeclared_read_of_missing_output_rejected(self, fake_network, registry):
        plan = EnvironmentPlan(
            name="sneaky",
            network="local",
            steps=(PlanStep("B", "Child", lambda out: ResourceSpec("B", "Child", (out.address("A"),))),),
        )

        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry).run(plan)
        assert fake_network.mutating_calls == 0

    def test_undeclared_read_of_later_output_rejected_before_any_deploy(self, fake_network, registry):
        plan = EnvironmentPlan(
            name="sneaky-later",
            network="local",
            steps=(
                PlanStep("A", "Base", lambda out: ResourceSpec("A", "Base", (1,))),
                PlanStep("B", "Child", lambda out: ResourceSpec("B", "Child", (out.address("C"),))),
                PlanStep("C", "Base", lambda out: ResourceSpec("C", "Base", (2,))),
            ),
        )

        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry).run(plan)
        assert fake_network.calls == []
        assert registry.get("local", "A") is None

    def test_validate_builds_against_earlier_steps_only(self):
        seen = []

        def record(out):
            seen.append(sorted(out))
            return ResourceSpec("C", "Base")

        plan = EnvironmentPlan(
            name="peek",
            network="local",
            steps=(
                PlanStep("A", "Base", lambda out: ResourceSpec("A", "Base")),
                PlanStep("B", "Base", lambda out: ResourceSpec("B", "Base")),
                PlanStep("C", "Base", record),
            ),
        )

        plan.validate()

        assert seen == [["A", "B"]]

    def test_builder_must_return_its_own_step(self, fake_network, registry):
        plan = EnvironmentPlan(
            name="mismatch",
            network="local",
            steps=(PlanStep("A", "Base", lambda out: ResourceSpec("Other", "Base")),),
        )

        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry).run(plan)

    def test_network_mismatch_rejected(self, fake_network, registry):
        with pytest.raises(InvalidPlan):
            _runner(fake_network, registry, network="fuji").run(_chain_plan(network="local"))


class TestFailures:
    def test_failure_aborts_and_keeps_partial_progress(self, fake_network, registry, local_network):
        fake_network.fail_creation_of.add("Ticket")
        runner = _runner(fake_network, registry)

        with pytest.raises(DeploymentFailed) as exc_info:
            runner.run(build_prize_pool_plan(local_network, RELAYER))

        assert exc_info.value.logical_name == "YesTicket"
        assert registry.get("local", "PrizePool") is not None
        assert registry.get("local", "YesTicket") is None
        assert fake_network.updates == []

    def test_rerun_after_failure_resumes(self, fake_network, registry, local_network):
        fake_network.fail_creation_of.add("Ticket")
        runner = _runner(fake_network, registry)
        with pytest.raises(DeploymentFailed):
            runner.run(build_prize_pool_plan(local_network, RELAYER))
        pool = registry.get("local", "PrizePool").address

        fake_network.fail_creation_of.clear()
        result = runner.run(build_prize_pool_plan(local_network, RELAYER))

        assert result.deployments["PrizePool"].newly_deployed is False
        assert result.deployments["PrizePool"].address == pool
        assert result.created == ["YesTicket", "NoTicket"]
