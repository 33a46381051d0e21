"""
Runtime entities: machine and adjuster instances, timeline events.

Instances refer to each other through ``MachineRef`` handles that the engine
resolves, never through direct object references.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple


class MachineRef(NamedTuple):
    """Stable handle to a machine instance: machine type index and ordinal."""

    type_index: int
    ordinal: int


class MachineStatus(Enum):
    WORKING = auto()
    QUEUED = auto()
    REPAIRING = auto()


@dataclass
class MachineInstance:
    """
    One physical machine.

    ``running_days`` counts days operated in the current run cycle and
    ``next_failure_day`` is the threshold on it that triggers a failure.
    ``repair_days`` is set to 1 when a repair starts and is never advanced.
    """

    type_index: int
    ordinal: int
    next_failure_day: int
    working: bool = True
    running_days: int = 0
    repair_days: int = 0

    @property
    def ref(self) -> MachineRef:
        return MachineRef(self.type_index, self.ordinal)

    def advance(self) -> bool:
        """
        Age a working machine by one day.

        Returns True if the machine failed today.
        """
        if not self.working:
            return False
        self.running_days += 1
        return self.running_days >= self.next_failure_day

    def fail(self, next_failure_day: int) -> None:
        """Take the machine down and arm the threshold for its next run cycle."""
        self.working = False
        self.running_days = 0
        self.repair_days = 0
        self.next_failure_day = next_failure_day

    def start_repair(self) -> None:
        self.working = False
        self.repair_days = 1

    def restore(self) -> None:
        """Back in service after repair."""
        self.working = True
        self.running_days = 0
        self.repair_days = 0


@dataclass
class AdjusterInstance:
    """
    One technician.

    ``total_busy_days`` is credited once when a job is assigned and once per
    day of work, so the first day of every job counts twice.
    """

    group_index: int
    ordinal: int
    busy: bool = False
    days_worked: int = 0
    required_days: int = 0
    machine: MachineRef | None = None
    total_busy_days: int = 0
    repairs_completed: int = 0

    def assign(self, machine: MachineRef, required_days: int) -> None:
        self.busy = True
        self.days_worked = 0
        self.required_days = required_days
        self.machine = machine
        self.total_busy_days += 1

    def advance(self) -> bool:
        """
        Work one day on the current job.

        Returns True if the job is finished today.
        """
        if not self.busy:
            return False
        self.days_worked += 1
        self.total_busy_days += 1
        return self.days_worked >= self.required_days

    def release(self) -> MachineRef:
        """Go idle and hand back the machine that was being repaired."""
        machine = self.machine
        if machine is None:
            raise RuntimeError(f"Adjuster {self.ordinal + 1} has no machine to release")
        self.busy = False
        self.days_worked = 0
        self.required_days = 0
        self.machine = None
        self.repairs_completed += 1
        return machine


@dataclass(frozen=True)
class TimelineEvent:
    """Entry in the run's event log."""

    day: int
    description: str

    def __str__(self) -> str:
        return f"Day {self.day}: {self.description}"
