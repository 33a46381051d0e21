"""
Repair queue - FIFO of machines awaiting an adjuster.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator

from fmsim.entity import MachineRef


class RepairQueue:
    """
    Queue of failed machines waiting for assignment.

    A machine can be queued at most once; inserting a machine that is
    already waiting raises ValueError.
    """

    def __init__(self) -> None:
        self._queue: deque[MachineRef] = deque()
        self._members: set[MachineRef] = set()

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[MachineRef]:
        return iter(self._queue)

    def __contains__(self, machine: object) -> bool:
        return machine in self._members

    def empty(self) -> bool:
        """Check if queue is empty."""
        return len(self._queue) == 0

    def insert(self, machine: MachineRef) -> None:
        """Add machine to the tail of the queue."""
        if machine in self._members:
            raise ValueError(f"Machine {machine} is already queued")
        self._queue.append(machine)
        self._members.add(machine)

    def remove(self) -> MachineRef | None:
        """Remove and return the first machine, or None if empty."""
        if not self._queue:
            return None
        machine = self._queue.popleft()
        self._members.discard(machine)
        return machine

    def clear(self) -> None:
        self._queue.clear()
        self._members.clear()
