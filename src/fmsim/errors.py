"""
Exception hierarchy for fmsim.

Configuration errors are raised at registration time and leave the catalog
unchanged. ``SimulationNotReadyError`` is raised before a run touches any
state.
"""

from __future__ import annotations


class FactorySimError(Exception):
    """Base class for all fmsim errors."""


class ConfigurationError(FactorySimError, ValueError):
    """A machine type, adjuster group or scenario was rejected."""


class DuplicateMachineTypeError(ConfigurationError):
    """Machine type name already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Machine type with name {name!r} already exists")
        self.name = name


class DuplicateAdjusterGroupError(ConfigurationError):
    """Adjuster group id already registered."""

    def __init__(self, group_id: str) -> None:
        super().__init__(f"Adjuster group with id {group_id!r} already exists")
        self.group_id = group_id


class InvalidSelectionError(ConfigurationError):
    """Machine type selection is empty, non-numeric or out of range."""


class UnknownMachineTypeError(ConfigurationError):
    """Adjuster group references a machine type that is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown machine type {name!r}")
        self.name = name


class SimulationNotReadyError(FactorySimError):
    """Run requested without at least one machine type and one adjuster group."""
