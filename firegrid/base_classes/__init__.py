"""Building blocks for the firegrid simulation.

Classes:
    - GridManager: Owns the square cell grid and the propagation rule.
    - Scheduler: Interface for the timers that drive simulation ticks.
    - ManualScheduler: Virtual clock scheduler for tests and headless runs.
    - ThreadedScheduler: Wall-clock scheduler backed by ``threading.Timer``.

.. autoclass:: firegrid.base_classes.grid_manager.GridManager
    :members:

.. autoclass:: firegrid.base_classes.scheduler.ManualScheduler
    :members:

.. autoclass:: firegrid.base_classes.scheduler.ThreadedScheduler
    :members:
"""

from firegrid.base_classes.grid_manager import GridManager
from firegrid.base_classes.scheduler import Scheduler, ManualScheduler, ThreadedScheduler

__all__ = [
    "GridManager",
    "Scheduler",
    "ManualScheduler",
    "ThreadedScheduler",
]
