"""
Tests for the DayStepper engine.
"""

from __future__ import annotations

import pytest

from fmsim.catalog import Catalog
from fmsim.engine import DayStepper, EngineState
from fmsim.entity import MachineRef, MachineStatus, TimelineEvent
from fmsim.random import FailureClock


class ScriptedClock(FailureClock):
    """Failure clock returning a fixed series of intervals (the last one repeats)."""

    def __init__(self, *days: int) -> None:
        super().__init__(0)
        self._days = list(days)
        self.calls: list[int] = []

    def draw(self, mean_days: int) -> int:
        self.calls.append(mean_days)
        if len(self._days) > 1:
            return self._days.pop(0)
        return self._days[0]


def _press_catalog() -> Catalog:
    catalog = Catalog()
    catalog.add_machine_type("Press", 1000, 5, 1)
    catalog.add_adjuster_group("A", 1, ["Press"])
    return catalog


class TestLifecycle:
    def test_states(self, single_machine_catalog: Catalog, clock: FailureClock) -> None:
        stepper = DayStepper(
            single_machine_catalog.machine_types, single_machine_catalog.adjuster_groups, clock
        )
        assert stepper.state is EngineState.NOT_INITIALIZED

        stepper.initialize()
        assert stepper.state is EngineState.INITIALIZED

        seen = []
        stepper.run(3, on_day_end=lambda day, s: seen.append(s.state))
        assert seen == [EngineState.RUNNING] * 3
        assert stepper.state is EngineState.COMPLETED
        assert stepper.stats is not None

    def test_initialize_builds_fresh_population(self, mixed_catalog: Catalog, make_stepper) -> None:
        stepper = make_stepper(mixed_catalog)
        stepper.initialize()

        assert [len(m) for m in stepper.machines] == [6, 4, 5]
        assert [len(a) for a in stepper.adjusters] == [2, 1, 1]
        for index, instances in enumerate(stepper.machines):
            for ordinal, machine in enumerate(instances):
                assert machine.ref == MachineRef(index, ordinal)
                assert machine.working
                assert machine.running_days == 0
                assert machine.next_failure_day >= 1
        for members in stepper.adjusters:
            for adjuster in members:
                assert not adjuster.busy
                assert adjuster.machine is None
                assert adjuster.total_busy_days == 0
        assert stepper.queue.empty()
        assert stepper.timeline == []
        assert stepper.max_queue_depth == 0

    def test_initialize_draws_once_per_machine(self, mixed_catalog: Catalog) -> None:
        clock = ScriptedClock(4)
        stepper = DayStepper(mixed_catalog.machine_types, mixed_catalog.adjuster_groups, clock)
        stepper.initialize()
        assert clock.calls == [20] * 6 + [15] * 4 + [10] * 5

    def test_rejects_empty_horizon(self, single_machine_catalog: Catalog, make_stepper) -> None:
        stepper = make_stepper(single_machine_catalog)
        with pytest.raises(ValueError):
            stepper.run(0)
        assert stepper.state is EngineState.NOT_INITIALIZED

    def test_rerun_starts_fresh(self, contention_catalog: Catalog, make_stepper) -> None:
        stepper = make_stepper(contention_catalog)
        stepper.run(200)
        stepper.run(50)
        assert stepper.horizon_days == 50
        assert stepper.day == 50
        snapshots = [e for e in stepper.timeline if e.description.startswith("Queue length")]
        assert len(snapshots) == 50


class TestDailyPhases:
    """Exact walk through one failure and repair with a scripted clock."""

    def setup_method(self) -> None:
        catalog = _press_catalog()
        self.clock = ScriptedClock(3)
        self.stepper = DayStepper(catalog.machine_types, catalog.adjuster_groups, self.clock)

    def test_timeline(self) -> None:
        self.stepper.run(10)
        assert self.stepper.timeline == [
            TimelineEvent(1, "Queue length: 0"),
            TimelineEvent(2, "Queue length: 0"),
            TimelineEvent(3, "Machine Press #1 failed"),
            TimelineEvent(3, "Queue length: 1"),
            TimelineEvent(0, "Assign adjuster 1 of group A to repair machine Press #1"),
            TimelineEvent(4, "Queue length: 0"),
            TimelineEvent(5, "Queue length: 0"),
            TimelineEvent(6, "Queue length: 0"),
            TimelineEvent(7, "Queue length: 0"),
            TimelineEvent(8, "Adjuster 1 of group A finished repair on machine Press #1"),
            TimelineEvent(8, "Queue length: 0"),
            TimelineEvent(9, "Queue length: 0"),
            TimelineEvent(10, "Queue length: 0"),
        ]

    def test_state_by_day(self) -> None:
        states = {}

        def observe(day: int, stepper: DayStepper) -> None:
            machine = stepper.machines[0][0]
            adjuster = stepper.adjusters[0][0]
            states[day] = (
                stepper.machine_status(machine.ref),
                machine.running_days,
                machine.repair_days,
                adjuster.days_worked,
                adjuster.total_busy_days,
            )

        self.stepper.run(10, on_day_end=observe)
        assert states[2] == (MachineStatus.WORKING, 2, 0, 0, 0)
        assert states[3] == (MachineStatus.QUEUED, 0, 0, 0, 0)
        # Assigned and worked one day: first day is credited twice
        assert states[4] == (MachineStatus.REPAIRING, 0, 1, 1, 2)
        assert states[7] == (MachineStatus.REPAIRING, 0, 1, 4, 5)
        assert states[8] == (MachineStatus.WORKING, 0, 0, 0, 6)
        assert states[10] == (MachineStatus.WORKING, 2, 0, 0, 6)

    def test_failure_redraws_threshold(self) -> None:
        self.stepper.run(10)
        # one draw at initialize, one at the failure on day 3
        assert self.clock.calls == [1000, 1000]

    def test_statistics(self) -> None:
        stats = self.stepper.run(10)
        press = stats.machine_types[0]
        assert press.working_days == 2
        assert press.uptime_pct == pytest.approx(20.0)
        assert press.failures == 1
        assert press.repairs_completed == 1
        group = stats.adjuster_groups[0]
        assert group.busy_days == 6
        assert group.utilization_pct == pytest.approx(60.0)
        assert group.repairs_completed == 1
        assert stats.machine_utilization_pct == pytest.approx(20.0)
        assert stats.adjuster_utilization_pct == pytest.approx(60.0)
        assert stats.max_queue_depth == 1
        assert stats.mean_queue_depth == pytest.approx(0.1)
        assert stats.horizon_days == 10

    def test_uptime_only_counts_current_cycle(self) -> None:
        """A machine that ends the run in the queue contributes no uptime."""
        stats = self.stepper.run(3)
        assert stats.machine_types[0].uptime_pct == 0.0


class TestInvariants:
    def test_daily_invariants(self, mixed_catalog: Catalog, make_stepper, check_invariants) -> None:
        stepper = make_stepper(mixed_catalog)
        stepper.run(730, on_day_end=lambda day, s: check_invariants(s))

    def test_one_snapshot_per_day(self, mixed_catalog: Catalog, make_stepper) -> None:
        stepper = make_stepper(mixed_catalog)
        depths: list[int] = []
        stepper.run(365, on_day_end=lambda day, s: depths.append(len(s.queue)))

        snapshots = [e for e in stepper.timeline if e.description.startswith("Queue length: ")]
        assert [e.day for e in snapshots] == list(range(1, 366))
        assert [int(e.description.split(": ")[1]) for e in snapshots] == depths
        assert stepper.max_queue_depth == max(depths)
        assert stepper.stats.max_queue_depth == max(depths)

    def test_observer_sees_consecutive_days(self, mixed_catalog: Catalog, make_stepper) -> None:
        days: list[int] = []
        make_stepper(mixed_catalog).run(40, on_day_end=lambda day, s: days.append(day))
        assert days == list(range(1, 41))

    def test_assignments_respect_capabilities(self, mixed_catalog: Catalog, make_stepper) -> None:
        stepper = make_stepper(mixed_catalog)

        def observe(day: int, s: DayStepper) -> None:
            for group, members in zip(s.adjuster_groups, s.adjusters):
                for adjuster in members:
                    if adjuster.busy:
                        name = s.machine_types[adjuster.machine.type_index].name
                        assert group.can_service(name)

        stepper.run(365, on_day_end=observe)

    def test_seeded_runs_reproducible(self, mixed_catalog: Catalog) -> None:
        def run() -> list[TimelineEvent]:
            stepper = DayStepper(
                mixed_catalog.machine_types, mixed_catalog.adjuster_groups, FailureClock(77)
            )
            stepper.run(365)
            return list(stepper.timeline)

        assert run() == run()
