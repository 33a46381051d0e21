"""Statistics collection classes."""

from fmsim.stats.mean import Mean
from fmsim.stats.utilization import (
    AdjusterGroupStats,
    MachineTypeStats,
    SimulationStats,
    StatisticsAccumulator,
)

__all__ = [
    "Mean",
    "AdjusterGroupStats",
    "MachineTypeStats",
    "SimulationStats",
    "StatisticsAccumulator",
]
