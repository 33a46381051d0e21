"""
Setup catalog: machine types and adjuster groups.

Both records are immutable once registered. The catalog enforces unique
keys and only accepts adjuster groups whose capabilities name machine types
it already holds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from fmsim.errors import (
    ConfigurationError,
    DuplicateAdjusterGroupError,
    DuplicateMachineTypeError,
    InvalidSelectionError,
    UnknownMachineTypeError,
)

logger = logging.getLogger(__name__)

MAX_DAYS = 10000
MAX_QUANTITY = 1000
MAX_ADJUSTERS = 1000


def _check_range(label: str, value: int, lo: int, hi: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{label} must be an integer (got {value!r})")
    if value < lo or value > hi:
        raise ConfigurationError(f"{label} must be between {lo} and {hi} (got {value})")


def _check_name(label: str, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{label} cannot be empty")


@dataclass(frozen=True)
class MachineType:
    """A kind of machine and how many of them the factory runs."""

    name: str
    mttf_days: int
    repair_days: int
    quantity: int

    def __post_init__(self) -> None:
        _check_name("Machine type name", self.name)
        _check_range("MTTF (days)", self.mttf_days, 1, MAX_DAYS)
        _check_range("Repair time (days)", self.repair_days, 1, MAX_DAYS)
        _check_range("Quantity", self.quantity, 1, MAX_QUANTITY)


@dataclass(frozen=True)
class AdjusterGroup:
    """A team of identically skilled adjusters."""

    id: str
    count: int
    machine_types: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_name("Adjuster group id", self.id)
        _check_range("Number of adjusters", self.count, 1, MAX_ADJUSTERS)
        if not self.machine_types:
            raise InvalidSelectionError("Adjuster group must service at least one machine type")

    def can_service(self, machine_type: str) -> bool:
        """True if this group is qualified for ``machine_type``."""
        return machine_type in self.machine_types


def _unique(names: Iterable[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return tuple(seen)


class Catalog:
    """
    Ordered registry of machine types and adjuster groups.

    Registration order matters: the matcher scans adjuster groups in the
    order they were added.
    """

    def __init__(self) -> None:
        self._machine_types: list[MachineType] = []
        self._adjuster_groups: list[AdjusterGroup] = []

    @property
    def machine_types(self) -> Sequence[MachineType]:
        return tuple(self._machine_types)

    @property
    def adjuster_groups(self) -> Sequence[AdjusterGroup]:
        return tuple(self._adjuster_groups)

    def machine_type(self, name: str) -> MachineType:
        """Look up a machine type by name. Raises KeyError if absent."""
        for mt in self._machine_types:
            if mt.name == name:
                return mt
        raise KeyError(name)

    def adjuster_group(self, group_id: str) -> AdjusterGroup:
        """Look up an adjuster group by id. Raises KeyError if absent."""
        for group in self._adjuster_groups:
            if group.id == group_id:
                return group
        raise KeyError(group_id)

    def has_machine_type(self, name: str) -> bool:
        return any(mt.name == name for mt in self._machine_types)

    def has_adjuster_group(self, group_id: str) -> bool:
        return any(group.id == group_id for group in self._adjuster_groups)

    def add_machine_type(
        self,
        name: str,
        mttf_days: int,
        repair_days: int,
        quantity: int,
    ) -> MachineType:
        """Register a machine type. Names must be unique."""
        if self.has_machine_type(name):
            raise DuplicateMachineTypeError(name)
        machine_type = MachineType(name, mttf_days, repair_days, quantity)
        self._machine_types.append(machine_type)
        logger.info("Machine type %r added", name)
        return machine_type

    def add_adjuster_group(
        self,
        group_id: str,
        count: int,
        machine_types: Iterable[str],
    ) -> AdjusterGroup:
        """
        Register an adjuster group.

        Every name in ``machine_types`` must already be registered;
        repeated names collapse to their first occurrence.
        """
        if not self._machine_types:
            raise ConfigurationError("Add at least one machine type before adding adjusters")
        if self.has_adjuster_group(group_id):
            raise DuplicateAdjusterGroupError(group_id)
        if isinstance(machine_types, str):
            raise InvalidSelectionError("machine_types must be a collection of names, not a string")
        names = _unique(machine_types)
        for name in names:
            if not self.has_machine_type(name):
                raise UnknownMachineTypeError(name)
        group = AdjusterGroup(group_id, count, names)
        self._adjuster_groups.append(group)
        logger.info("Adjuster group %r added (services %s)", group_id, ", ".join(names))
        return group

    def select_machine_types(self, selection: str | Iterable[int]) -> tuple[str, ...]:
        """
        Resolve 1-based machine type numbers into names.

        ``selection`` is either a whitespace separated string such as
        ``"1 3"`` or an iterable of integers.
        """
        if isinstance(selection, str):
            tokens = selection.split()
            try:
                numbers = [int(token) for token in tokens]
            except ValueError:
                raise InvalidSelectionError(f"Invalid selection {selection!r}") from None
        else:
            numbers = list(selection)

        names = []
        for number in numbers:
            if number < 1 or number > len(self._machine_types):
                raise InvalidSelectionError(f"Invalid machine type number {number}")
            names.append(self._machine_types[number - 1].name)
        if not names:
            raise InvalidSelectionError("Empty selection")
        return _unique(names)
