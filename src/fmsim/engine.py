"""
DayStepper - the day-stepped simulation engine.

Simulation time advances in whole days. A single SimPy process ticks the
clock one day at a time and runs the daily phases in fixed order:

1. assignment of queued machines to idle, qualified adjusters
2. machine advance (aging and failures)
3. adjuster advance (repair progress and completions)
4. queue-depth sampling and the daily ``Queue length`` event

The engine owns every mutable piece of a run: instance populations, the
repair queue, the timeline and the statistics. The failure clock is handed
in by the caller and shared across runs.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Generator, Sequence

import simpy

from fmsim.catalog import AdjusterGroup, MachineType
from fmsim.entity import (
    AdjusterInstance,
    MachineInstance,
    MachineRef,
    MachineStatus,
    TimelineEvent,
)
from fmsim.matching import AssignmentMatcher
from fmsim.random import FailureClock
from fmsim.repair_queue import RepairQueue
from fmsim.stats import SimulationStats, StatisticsAccumulator

logger = logging.getLogger(__name__)

DayObserver = Callable[[int, "DayStepper"], None]


class EngineState(Enum):
    NOT_INITIALIZED = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    COMPLETED = auto()


class DayStepper:
    """
    Runs one simulation over a fixed horizon of days.

    Usage::

        stepper = DayStepper(catalog.machine_types, catalog.adjuster_groups, FailureClock())
        stats = stepper.run(365)
    """

    def __init__(
        self,
        machine_types: Sequence[MachineType],
        adjuster_groups: Sequence[AdjusterGroup],
        clock: FailureClock,
    ) -> None:
        self._machine_types = tuple(machine_types)
        self._adjuster_groups = tuple(adjuster_groups)
        self._clock = clock
        self._matcher = AssignmentMatcher(self._machine_types, self._adjuster_groups)
        self._accumulator = StatisticsAccumulator(len(self._machine_types))

        self._machines: list[list[MachineInstance]] = []
        self._adjusters: list[list[AdjusterInstance]] = []
        self._queue = RepairQueue()
        self._timeline: list[TimelineEvent] = []
        self._state = EngineState.NOT_INITIALIZED
        self._day = 0
        self._horizon_days = 0
        self._stats: SimulationStats | None = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def day(self) -> int:
        """Last completed day (0 before the first step)."""
        return self._day

    @property
    def horizon_days(self) -> int:
        return self._horizon_days

    @property
    def machine_types(self) -> tuple[MachineType, ...]:
        return self._machine_types

    @property
    def adjuster_groups(self) -> tuple[AdjusterGroup, ...]:
        return self._adjuster_groups

    @property
    def machines(self) -> Sequence[Sequence[MachineInstance]]:
        """Machine instances, one list per machine type in catalog order."""
        return self._machines

    @property
    def adjusters(self) -> Sequence[Sequence[AdjusterInstance]]:
        """Adjuster instances, one list per adjuster group in catalog order."""
        return self._adjusters

    @property
    def queue(self) -> RepairQueue:
        return self._queue

    @property
    def timeline(self) -> Sequence[TimelineEvent]:
        return self._timeline

    @property
    def max_queue_depth(self) -> int:
        return self._accumulator.max_queue_depth

    @property
    def stats(self) -> SimulationStats | None:
        """Results of the last completed run."""
        return self._stats

    def machine(self, ref: MachineRef) -> MachineInstance:
        """Resolve a machine handle."""
        return self._machines[ref.type_index][ref.ordinal]

    def machine_status(self, ref: MachineRef) -> MachineStatus:
        if self.machine(ref).working:
            return MachineStatus.WORKING
        if ref in self._queue:
            return MachineStatus.QUEUED
        return MachineStatus.REPAIRING

    def initialize(self) -> None:
        """Build fresh instance populations and clear all run state."""
        self._machines = [
            [
                MachineInstance(index, ordinal, self._clock.draw(machine_type.mttf_days))
                for ordinal in range(machine_type.quantity)
            ]
            for index, machine_type in enumerate(self._machine_types)
        ]
        self._adjusters = [
            [AdjusterInstance(index, ordinal) for ordinal in range(group.count)]
            for index, group in enumerate(self._adjuster_groups)
        ]
        self._queue.clear()
        self._timeline.clear()
        self._accumulator.reset(len(self._machine_types))
        self._day = 0
        self._horizon_days = 0
        self._stats = None
        self._state = EngineState.INITIALIZED
        logger.info(
            "Simulation initialized: %d machine type(s), %d adjuster group(s)",
            len(self._machine_types),
            len(self._adjuster_groups),
        )

    def run(self, days: int, on_day_end: DayObserver | None = None) -> SimulationStats:
        """
        Simulate ``days`` consecutive days and return the statistics.

        The engine is re-initialized unless ``initialize()`` was called and
        nothing has run since. ``on_day_end`` is called after the last phase
        of every day and must not modify the engine.
        """
        if days < 1:
            raise ValueError(f"days must be >= 1 (got {days})")
        if self._state is not EngineState.INITIALIZED:
            self.initialize()

        self._horizon_days = days
        self._state = EngineState.RUNNING
        logger.info("Starting simulation for %d day(s)", days)

        env = simpy.Environment()
        env.process(self._days(env, days, on_day_end))
        env.run()

        self._state = EngineState.COMPLETED
        self._stats = self._accumulator.summarize(
            self._machine_types,
            self._adjuster_groups,
            self._machines,
            self._adjusters,
            days,
        )
        logger.info(
            "Simulation finished after %d day(s); max repair queue length %d",
            self._day,
            self._stats.max_queue_depth,
        )
        return self._stats

    def _days(
        self,
        env: simpy.Environment,
        days: int,
        on_day_end: DayObserver | None,
    ) -> Generator[simpy.Event, None, None]:
        for _ in range(days):
            yield env.timeout(1)
            self._step(int(env.now))
            if on_day_end is not None:
                on_day_end(self._day, self)

    def _step(self, day: int) -> None:
        self._day = day
        self._matcher.assign(self._queue, self._machines, self._adjusters, self._timeline)
        self._advance_machines(day)
        self._advance_adjusters(day)

        depth = len(self._queue)
        self._accumulator.sample_queue(depth)
        self._timeline.append(TimelineEvent(day, f"Queue length: {depth}"))

    def _advance_machines(self, day: int) -> None:
        for machine_type, instances in zip(self._machine_types, self._machines):
            for machine in instances:
                if not machine.advance():
                    continue
                # Threshold for the cycle that starts once the repair is done
                machine.fail(self._clock.draw(machine_type.mttf_days))
                self._log(day, f"Machine {machine_type.name} #{machine.ordinal + 1} failed")
                self._accumulator.record_failure(machine.type_index)
                self._queue.insert(machine.ref)

    def _advance_adjusters(self, day: int) -> None:
        for group, members in zip(self._adjuster_groups, self._adjusters):
            for adjuster in members:
                if not adjuster.advance():
                    continue
                ref = adjuster.release()
                self._log(
                    day,
                    f"Adjuster {adjuster.ordinal + 1} of group {group.id} finished repair "
                    f"on machine {self._machine_types[ref.type_index].name} #{ref.ordinal + 1}",
                )
                self.machine(ref).restore()
                self._accumulator.record_repair(ref.type_index)

    def _log(self, day: int, description: str) -> None:
        self._timeline.append(TimelineEvent(day, description))
        logger.debug("Day %d: %s", day, description)
