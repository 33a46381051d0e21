"""
Pytest configuration and fixtures for fmsim.
"""

from __future__ import annotations

import logging
from typing import Callable

import pytest

from fmsim.catalog import Catalog
from fmsim.engine import DayStepper
from fmsim.entity import MachineRef
from fmsim.random import FailureClock

SEED = 20240611


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers a test (or the CLI) attached to the fmsim logger."""
    yield
    logger = logging.getLogger("fmsim")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> FailureClock:
    """Failure clock with a fixed seed."""
    return FailureClock(SEED)


@pytest.fixture
def single_machine_catalog() -> Catalog:
    """One long-lived machine and one adjuster."""
    catalog = Catalog()
    catalog.add_machine_type("Press", 1000, 5, 1)
    catalog.add_adjuster_group("A", 1, ["Press"])
    return catalog


@pytest.fixture
def contention_catalog() -> Catalog:
    """Ten machines sharing one adjuster."""
    catalog = Catalog()
    catalog.add_machine_type("Loom", 30, 10, 10)
    catalog.add_adjuster_group("Solo", 1, ["Loom"])
    return catalog


@pytest.fixture
def mixed_catalog() -> Catalog:
    """Three machine types and overlapping adjuster skills."""
    catalog = Catalog()
    catalog.add_machine_type("Lathe", 20, 3, 6)
    catalog.add_machine_type("Mill", 15, 4, 4)
    catalog.add_machine_type("Drill", 10, 2, 5)
    catalog.add_adjuster_group("Turners", 2, ["Lathe"])
    catalog.add_adjuster_group("Generalists", 1, ["Mill", "Lathe", "Drill"])
    catalog.add_adjuster_group("DrillTeam", 1, ["Drill"])
    return catalog


@pytest.fixture
def make_stepper(clock: FailureClock) -> Callable[[Catalog], DayStepper]:
    def _make(catalog: Catalog) -> DayStepper:
        return DayStepper(catalog.machine_types, catalog.adjuster_groups, clock)

    return _make


def assert_consistent(stepper: DayStepper) -> None:
    """
    Check the population invariants of a stepper between days.

    Every machine is exactly one of working, queued or bound to a busy
    adjuster, and an adjuster is busy iff it holds a machine.
    """
    bound: list[MachineRef] = []
    for members in stepper.adjusters:
        for adjuster in members:
            assert adjuster.busy == (adjuster.machine is not None)
            if adjuster.busy:
                bound.append(adjuster.machine)

    queued = list(stepper.queue)
    assert len(set(queued)) == len(queued)
    assert len(set(bound)) == len(bound)
    assert not set(queued) & set(bound)

    working = set()
    for instances in stepper.machines:
        for machine in instances:
            if machine.working:
                working.add(machine.ref)
                assert machine.running_days < machine.next_failure_day

    assert not working & set(queued)
    assert not working & set(bound)
    everything = {m.ref for instances in stepper.machines for m in instances}
    assert working | set(queued) | set(bound) == everything


@pytest.fixture
def check_invariants() -> Callable[[DayStepper], None]:
    return assert_consistent
