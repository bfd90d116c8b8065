"""firegrid - fire propagation on a square grid of walls and burnable cells."""

from firegrid.fire_simulator.fire import FireSim
from firegrid.base_classes.grid_manager import GridManager
from firegrid.base_classes.scheduler import ManualScheduler, ThreadedScheduler
from firegrid.utilities.fire_util import CellStates, SimStates
from firegrid.utilities.data_classes import SimParams
from firegrid.exceptions import (
    FireGridError,
    ConfigurationError,
    SimulationError,
    ValidationError,
    GridError,
)

__version__ = "0.1.0"

__all__ = [
    "FireSim",
    "GridManager",
    "ManualScheduler",
    "ThreadedScheduler",
    "CellStates",
    "SimStates",
    "SimParams",
    "FireGridError",
    "ConfigurationError",
    "SimulationError",
    "ValidationError",
    "GridError",
]
