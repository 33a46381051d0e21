"""
FactorySimulator - setup catalog, failure clock and runs in one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fmsim.catalog import Catalog
from fmsim.config import SimulationConfig
from fmsim.engine import DayObserver, DayStepper
from fmsim.entity import TimelineEvent
from fmsim.errors import SimulationNotReadyError
from fmsim.random import FailureClock
from fmsim.stats import SimulationStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Statistics and full event log of one run."""

    years: int
    stats: SimulationStats
    timeline: tuple[TimelineEvent, ...]

    def recent_events(self, n: int) -> tuple[TimelineEvent, ...]:
        """Last ``n`` events of the run."""
        if n <= 0:
            return ()
        return self.timeline[-n:]


@dataclass(frozen=True)
class MachineTypeDetails:
    name: str
    mttf_days: int
    repair_days: int
    quantity: int
    # None until a run has included this machine type
    working: int | None = None
    broken: int | None = None


@dataclass(frozen=True)
class AdjusterGroupDetails:
    id: str
    count: int
    machine_types: tuple[str, ...]
    busy: int | None = None
    idle: int | None = None


class FactorySimulator:
    """
    Entry point for setting up and running simulations.

    The failure clock is created once, here, and keeps advancing across
    runs; each run gets a fresh engine.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        config: SimulationConfig | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else Catalog()
        self.config = config if config is not None else SimulationConfig()
        self.clock = FailureClock(self.config.seed)
        self._stepper: DayStepper | None = None
        self._result: SimulationResult | None = None

    @property
    def result(self) -> SimulationResult | None:
        """Result of the last run."""
        return self._result

    @property
    def stepper(self) -> DayStepper | None:
        """Engine of the last run."""
        return self._stepper

    def check_ready(self) -> None:
        if not self.catalog.machine_types:
            raise SimulationNotReadyError("Add at least one machine type before simulation")
        if not self.catalog.adjuster_groups:
            raise SimulationNotReadyError("Add at least one adjuster group before simulation")

    def run(
        self,
        years: int | None = None,
        on_day_end: DayObserver | None = None,
    ) -> SimulationResult:
        """
        Simulate ``years`` years (default from the config).

        Raises SimulationNotReadyError, leaving the previous result in
        place, if the catalog lacks machine types or adjuster groups.
        """
        self.check_ready()
        config = self.config.with_overrides(years=years)

        stepper = DayStepper(self.catalog.machine_types, self.catalog.adjuster_groups, self.clock)
        logger.info("Running %d year(s) (%d days)", config.years, config.horizon_days)
        stats = stepper.run(config.horizon_days, on_day_end=on_day_end)

        self._stepper = stepper
        self._result = SimulationResult(config.years, stats, tuple(stepper.timeline))
        return self._result

    def machine_details(self, name: str) -> MachineTypeDetails:
        """Configuration of a machine type plus its state at the end of the last run."""
        machine_type = self.catalog.machine_type(name)
        details = MachineTypeDetails(
            machine_type.name,
            machine_type.mttf_days,
            machine_type.repair_days,
            machine_type.quantity,
        )
        if self._stepper is None:
            return details
        for mt, instances in zip(self._stepper.machine_types, self._stepper.machines):
            if mt.name == name:
                working = sum(1 for m in instances if m.working)
                return MachineTypeDetails(
                    details.name,
                    details.mttf_days,
                    details.repair_days,
                    details.quantity,
                    working=working,
                    broken=len(instances) - working,
                )
        return details

    def adjuster_details(self, group_id: str) -> AdjusterGroupDetails:
        """Configuration of an adjuster group plus its state at the end of the last run."""
        group = self.catalog.adjuster_group(group_id)
        if self._stepper is not None:
            for g, members in zip(self._stepper.adjuster_groups, self._stepper.adjusters):
                if g.id == group_id:
                    busy = sum(1 for a in members if a.busy)
                    return AdjusterGroupDetails(
                        group.id, group.count, group.machine_types, busy, len(members) - busy
                    )
        return AdjusterGroupDetails(group.id, group.count, group.machine_types)
