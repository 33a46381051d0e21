"""
Utilization statistics for a finished run.

Machine uptime only counts the running days of the current, unfinished run
cycle of each machine that is working when the run ends. It is an estimate,
not the cumulative uptime over the horizon.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from fmsim.catalog import AdjusterGroup, MachineType
from fmsim.entity import AdjusterInstance, MachineInstance
from fmsim.stats.mean import Mean


def _percent(part: int, whole: int) -> float:
    return 100.0 * part / whole if whole > 0 else 0.0


@dataclass(frozen=True)
class MachineTypeStats:
    name: str
    quantity: int
    working_days: int
    uptime_pct: float
    failures: int
    repairs_completed: int


@dataclass(frozen=True)
class AdjusterGroupStats:
    id: str
    count: int
    busy_days: int
    utilization_pct: float
    repairs_completed: int


@dataclass(frozen=True)
class SimulationStats:
    """Aggregate results of one run."""

    horizon_days: int
    machine_types: tuple[MachineTypeStats, ...]
    adjuster_groups: tuple[AdjusterGroupStats, ...]
    machine_utilization_pct: float
    adjuster_utilization_pct: float
    max_queue_depth: int
    mean_queue_depth: float


class StatisticsAccumulator:
    """
    Collects per-day tallies during a run and summarizes them at the end.

    Per-type failure and repair counts and the daily queue depth are
    accumulated as the run proceeds; everything else is read from the
    instance counters when ``summarize`` is called.
    """

    def __init__(self, machine_type_count: int = 0) -> None:
        self.queue_depth = Mean()
        self.reset(machine_type_count)

    def reset(self, machine_type_count: int) -> None:
        self.queue_depth.reset()
        self._failures = [0] * machine_type_count
        self._repairs = [0] * machine_type_count

    def record_failure(self, type_index: int) -> None:
        self._failures[type_index] += 1

    def record_repair(self, type_index: int) -> None:
        self._repairs[type_index] += 1

    def sample_queue(self, depth: int) -> None:
        self.queue_depth.set_value(depth)

    @property
    def max_queue_depth(self) -> int:
        """Largest daily queue sample so far."""
        return int(self.queue_depth.max)

    def summarize(
        self,
        machine_types: Sequence[MachineType],
        adjuster_groups: Sequence[AdjusterGroup],
        machines: Sequence[Sequence[MachineInstance]],
        adjusters: Sequence[Sequence[AdjusterInstance]],
        horizon_days: int,
    ) -> SimulationStats:
        machine_stats = []
        total_machine_days = 0
        total_working_days = 0
        for index, (machine_type, instances) in enumerate(zip(machine_types, machines)):
            available = machine_type.quantity * horizon_days
            working_days = sum(m.running_days for m in instances if m.working)
            total_machine_days += available
            total_working_days += working_days
            machine_stats.append(
                MachineTypeStats(
                    name=machine_type.name,
                    quantity=machine_type.quantity,
                    working_days=working_days,
                    uptime_pct=_percent(working_days, available),
                    failures=self._failures[index],
                    repairs_completed=self._repairs[index],
                )
            )

        group_stats = []
        total_adjuster_days = 0
        total_busy_days = 0
        for group, members in zip(adjuster_groups, adjusters):
            available = group.count * horizon_days
            busy_days = sum(a.total_busy_days for a in members)
            total_adjuster_days += available
            total_busy_days += busy_days
            group_stats.append(
                AdjusterGroupStats(
                    id=group.id,
                    count=group.count,
                    busy_days=busy_days,
                    utilization_pct=_percent(busy_days, available),
                    repairs_completed=sum(a.repairs_completed for a in members),
                )
            )

        return SimulationStats(
            horizon_days=horizon_days,
            machine_types=tuple(machine_stats),
            adjuster_groups=tuple(group_stats),
            machine_utilization_pct=_percent(total_working_days, total_machine_days),
            adjuster_utilization_pct=_percent(total_busy_days, total_adjuster_days),
            max_queue_depth=self.max_queue_depth,
            mean_queue_depth=self.queue_depth.mean,
        )
