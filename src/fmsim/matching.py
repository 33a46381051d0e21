"""
Daily assignment of queued machines to qualified idle adjusters.
"""

from __future__ import annotations

import logging
from typing import Sequence

from fmsim.catalog import AdjusterGroup, MachineType
from fmsim.entity import AdjusterInstance, MachineInstance, MachineRef, TimelineEvent
from fmsim.repair_queue import RepairQueue

logger = logging.getLogger(__name__)

# Assignment events are logged without a day number.
ASSIGNMENT_DAY = 0


class AssignmentMatcher:
    """
    Pairs waiting machines with idle adjusters.

    Groups are searched in catalog order and adjusters within a group in
    instantiation order; the first idle adjuster of the first eligible group
    wins. Machines left unmatched go back to the tail of the queue and are
    retried the next day.
    """

    def __init__(
        self,
        machine_types: Sequence[MachineType],
        adjuster_groups: Sequence[AdjusterGroup],
    ) -> None:
        self._machine_types = machine_types
        self._adjuster_groups = adjuster_groups

    def find_adjuster(
        self,
        machine: MachineRef,
        adjusters: Sequence[Sequence[AdjusterInstance]],
    ) -> AdjusterInstance | None:
        """First idle adjuster qualified for ``machine``, or None."""
        type_name = self._machine_types[machine.type_index].name
        for group, members in zip(self._adjuster_groups, adjusters):
            if not group.can_service(type_name):
                continue
            for adjuster in members:
                if not adjuster.busy:
                    return adjuster
        return None

    def assign(
        self,
        queue: RepairQueue,
        machines: Sequence[Sequence[MachineInstance]],
        adjusters: Sequence[Sequence[AdjusterInstance]],
        timeline: list[TimelineEvent],
    ) -> int:
        """
        Run one assignment phase.

        Only the machines queued when the phase starts are examined, so a
        machine pushed back during the phase is not seen twice in one day.
        Returns the number of assignments made.
        """
        assigned = 0
        for _ in range(len(queue)):
            ref = queue.remove()
            if ref is None:
                break

            adjuster = self.find_adjuster(ref, adjusters)
            if adjuster is None:
                queue.insert(ref)
                continue

            machine_type = self._machine_types[ref.type_index]
            adjuster.assign(ref, machine_type.repair_days)
            machines[ref.type_index][ref.ordinal].start_repair()

            description = (
                f"Assign adjuster {adjuster.ordinal + 1} of group "
                f"{self._adjuster_groups[adjuster.group_index].id} to repair machine "
                f"{machine_type.name} #{ref.ordinal + 1}"
            )
            timeline.append(TimelineEvent(ASSIGNMENT_DAY, description))
            logger.debug(description)
            assigned += 1
        return assigned
