"""
fmsim - day-stepped factory maintenance simulator.

Machines of several types fail at random (exponential MTTF) and queue for
repair; adjuster groups with different skills pick them up in FIFO order.
"""

__version__ = "0.1.0"

from fmsim.catalog import AdjusterGroup, Catalog, MachineType
from fmsim.config import SimulationConfig, load_scenario
from fmsim.engine import DayStepper, EngineState
from fmsim.entity import (
    AdjusterInstance,
    MachineInstance,
    MachineRef,
    MachineStatus,
    TimelineEvent,
)
from fmsim.errors import (
    ConfigurationError,
    DuplicateAdjusterGroupError,
    DuplicateMachineTypeError,
    FactorySimError,
    InvalidSelectionError,
    SimulationNotReadyError,
    UnknownMachineTypeError,
)
from fmsim.matching import AssignmentMatcher
from fmsim.random import FailureClock
from fmsim.repair_queue import RepairQueue
from fmsim.simulator import (
    AdjusterGroupDetails,
    FactorySimulator,
    MachineTypeDetails,
    SimulationResult,
)
from fmsim.stats import Mean, SimulationStats, StatisticsAccumulator

__all__ = [
    # Setup
    "Catalog",
    "MachineType",
    "AdjusterGroup",
    "SimulationConfig",
    "load_scenario",
    # Engine
    "FactorySimulator",
    "SimulationResult",
    "MachineTypeDetails",
    "AdjusterGroupDetails",
    "DayStepper",
    "EngineState",
    "AssignmentMatcher",
    "RepairQueue",
    "FailureClock",
    # Entities
    "MachineInstance",
    "AdjusterInstance",
    "MachineRef",
    "MachineStatus",
    "TimelineEvent",
    # Statistics
    "Mean",
    "SimulationStats",
    "StatisticsAccumulator",
    # Errors
    "FactorySimError",
    "ConfigurationError",
    "DuplicateMachineTypeError",
    "DuplicateAdjusterGroupError",
    "InvalidSelectionError",
    "UnknownMachineTypeError",
    "SimulationNotReadyError",
]
