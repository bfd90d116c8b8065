"""
Fire propagation simulation controller.

This module defines the `FireSim` class, which owns a
:class:`~firegrid.base_classes.grid_manager.GridManager` and runs the
**idle / running / paused** state machine that drives it: ticks are armed on a
:class:`~firegrid.base_classes.scheduler.Scheduler`, each tick computes one
full generation and the run stops by itself once the fire has nowhere left
to spread.

Every entry point, user edits and scheduled ticks alike, takes the same
re-entrant lock, so a tick never interleaves with a wall toggle or a reset.
Each armed tick carries a token; pausing, resetting or rescheduling bumps the
token before returning, which turns any callback that was already on its way
into a no-op.

Classes:
    - FireSim: The fire propagation simulation controller.

.. autoclass:: FireSim
    :members:
"""

import threading
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from firegrid.base_classes.grid_manager import GridManager, next_generation
from firegrid.base_classes.scheduler import Scheduler, ThreadedScheduler, TimerHandle
from firegrid.exceptions import SimulationError
from firegrid.utilities.data_classes import SimParams
from firegrid.utilities.fire_util import CellStates, SimStates, UtilFuncs
from firegrid.utilities.logger_schemas import ActionEntry, CellLogEntry


class FireSim:
    """Square grid fire propagation simulation.

    Attributes:
        logger (Optional[Logger]): Run logger, cell changes and user actions
            are cached to it when set.
        on_update (Optional[Callable]): Called with ``(sim, updates)`` after
            every change to the grid, ``updates`` being a list of
            ``(row, col, state)``.
        on_finished (Optional[Callable]): Called with ``sim`` when a run stops
            because the fire is saturated.
        progress_bar (Optional[tqdm]): Progress bar used by
            :meth:`run_to_completion`.
    """
    def __init__(self, sim_params: Optional[SimParams] = None,
                 scheduler: Optional[Scheduler] = None,
                 rng: Optional[np.random.Generator] = None):
        """Build the simulation with a fresh all-safe grid.

        Args:
            sim_params (SimParams, optional): Grid size, interval, wall density
                and seed. Defaults to ``SimParams()``.
            scheduler (Scheduler, optional): Scheduler used to arm ticks.
                Defaults to a :class:`ThreadedScheduler`.
            rng (np.random.Generator, optional): Random generator for random
                ignitions and walls. Defaults to one seeded from
                ``sim_params.seed``.
        """
        self._params = sim_params or SimParams()

        self._grid_manager = GridManager(self._params.grid_size)
        self._scheduler = scheduler or ThreadedScheduler()
        self._rng = rng if rng is not None else np.random.default_rng(self._params.seed)

        self._interval_ms = self._params.interval_ms
        self._wall_density = self._params.wall_density

        self._state = SimStates.IDLE
        self._lock = threading.RLock()
        self._pending: Optional[TimerHandle] = None
        self._token = 0

        # Ticks since the last start
        self._iters = 0
        self._finished = False

        self.logger = None
        self.on_update: Optional[Callable[['FireSim', List[Tuple[int, int, int]]], None]] = None
        self.on_finished: Optional[Callable[['FireSim'], None]] = None
        self.progress_bar = None

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start the simulation from idle.

        If no cell is burning yet a uniformly random cell is ignited first.

        Returns:
            bool: False if the simulation was not idle.
        """
        with self._lock:
            if self._state != SimStates.IDLE:
                return False

            if self._grid_manager.count(CellStates.FIRE) == 0:
                row, col = self._grid_manager.ignite_random(self._rng)
                self._log_action('random_ignite', row, col)

            self._begin_running()
            return True

    def ignite(self, row: int, col: int) -> bool:
        """Set the cell at [row, col] on fire and start the simulation.

        Ignition overrides walls. Only honoured while idle; a running or
        paused simulation ignores it, though the coordinates are still
        checked.

        Returns:
            bool: True if the simulation was started.

        Raises:
            TypeError: If row or col is not an integer.
            GridError: If row or col is out of bounds.
        """
        with self._lock:
            self._grid_manager.check_indices(row, col, "ignite")
            if self._state != SimStates.IDLE:
                return False

            self._grid_manager.ignite(row, col)
            self._log_action('ignite', row, col)
            self._begin_running()
            return True

    def pause(self) -> bool:
        """Suspend ticking. The grid is left as is.

        Returns:
            bool: False if the simulation was not running.
        """
        with self._lock:
            if self._state != SimStates.RUNNING:
                return False

            self._cancel_pending()
            self._state = SimStates.PAUSED
            self._log_action('pause')
            return True

    def resume(self) -> bool:
        """Resume ticking at the current interval.

        Returns:
            bool: False if the simulation was not paused.
        """
        with self._lock:
            if self._state != SimStates.PAUSED:
                return False

            self._state = SimStates.RUNNING
            self._log_action('resume')
            self._arm()
            return True

    def toggle_pause(self) -> bool:
        """Pause a running simulation or resume a paused one.

        Returns:
            bool: False if the simulation was idle.
        """
        with self._lock:
            if self._state == SimStates.RUNNING:
                return self.pause()
            return self.resume()

    def reset_fire(self) -> int:
        """Stop the simulation and return every burning cell to safe.

        Allowed in any state. Any pending tick is cancelled before the
        state changes.

        Returns:
            int: Number of cells that were burning.
        """
        with self._lock:
            self._cancel_pending()
            self._state = SimStates.IDLE
            self._finished = False

            cleared = self._grid_manager.clear_fire()
            self._log_action('reset_fire', value=cleared)
            self._record_updates()
            return cleared

    def set_speed(self, interval_ms: int) -> None:
        """Change the tick interval.

        While running, the pending tick is cancelled and re-armed with the
        new interval so exactly one tick stays pending.

        Args:
            interval_ms: New interval in milliseconds, 0..1000.

        Raises:
            ValidationError: If interval_ms is out of range.
        """
        UtilFuncs.validate_interval(interval_ms)

        with self._lock:
            self._interval_ms = interval_ms
            self._log_action('set_speed', value=interval_ms)

            if self._state == SimStates.RUNNING:
                self._cancel_pending()
                self._arm()

    def iterate(self) -> bool:
        """Compute one tick immediately instead of waiting for the timer.

        Returns:
            bool: True if any cell changed. When nothing changed the
            simulation has become idle.

        Raises:
            SimulationError: If the simulation is not running.
        """
        with self._lock:
            if self._state != SimStates.RUNNING:
                msg = f"Cannot iterate a simulation that is {self._state.value}"
                if self.logger:
                    self.logger.log_message(f"Following error occurred in 'FireSim.iterate()': {msg}")
                raise SimulationError(msg, tick=self._iters)

            self._cancel_pending()
            return self._tick()

    def run_to_completion(self, max_ticks: Optional[int] = None) -> int:
        """Run ticks back to back until the fire saturates.

        Starts the simulation first if it is idle, and resumes it if it is
        paused. The scheduler is not used.

        Args:
            max_ticks (int, optional): Stop (and pause) after this many ticks.
                Defaults to ``sim_params.max_ticks``.

        Returns:
            int: Number of ticks run by this call.
        """
        if max_ticks is None:
            max_ticks = self._params.max_ticks

        with self._lock:
            if self._state == SimStates.IDLE:
                self.start()
            elif self._state == SimStates.PAUSED:
                self.resume()

            # Every tick that changes something ignites at least one cell
            total = self._grid_manager.count(CellStates.SAFE) + 1
            if max_ticks is not None:
                total = min(total, max_ticks)

            self.progress_bar = tqdm(total=total, desc='Current sim ', position=0, leave=False)

            self._cancel_pending()

            ticks = 0
            try:
                while self._state == SimStates.RUNNING:
                    if max_ticks is not None and ticks >= max_ticks:
                        self.pause()
                        break

                    self._tick(rearm=False)
                    ticks += 1
                    self.progress_bar.update(1)
            finally:
                self.progress_bar.close()
                self.progress_bar = None

            return ticks

    # ------------------------------------------------------------------
    # Grid edits (idle only)
    # ------------------------------------------------------------------

    def toggle_wall(self, row: int, col: int) -> bool:
        """Flip the cell at [row, col] between safe and wall.

        Ignored unless the simulation is idle, and for burning cells. The
        coordinates are checked in every state.

        Returns:
            bool: True if the cell changed.

        Raises:
            TypeError: If row or col is not an integer.
            GridError: If row or col is out of bounds.
        """
        with self._lock:
            self._grid_manager.check_indices(row, col, "toggle_wall")
            if not self._grid_manager.can_edit(self._state):
                return False

            changed = self._grid_manager.toggle_wall(row, col)
            if changed:
                self._log_action('toggle_wall', row, col)
                self._record_updates()
            return changed

    def clear_walls(self) -> int:
        """Return every wall to safe. Ignored unless idle.

        Returns:
            int: Number of walls removed.
        """
        with self._lock:
            if not self._grid_manager.can_edit(self._state):
                return 0

            removed = self._grid_manager.clear_walls()
            self._log_action('clear_walls', value=removed)
            self._record_updates()
            return removed

    def randomize_walls(self, density: Optional[float] = None) -> int:
        """Replace the walls with a random layout. Ignored unless idle.

        Args:
            density (float, optional): Probability of each cell becoming a
                wall. Defaults to the configured wall density.

        Returns:
            int: Number of walls placed.

        Raises:
            ValidationError: If density is outside [0, 1].
        """
        if density is None:
            density = self._wall_density

        with self._lock:
            if not self._grid_manager.can_edit(self._state):
                return 0

            placed = self._grid_manager.randomize_walls(density, self._rng)
            self._log_action('randomize_walls', value=density)
            self._record_updates()
            return placed

    def resize(self, size: int) -> None:
        """Replace the grid with a new ``size x size`` all-safe grid.

        Raises:
            ValidationError: If size is not a positive integer.
            SimulationError: If the simulation is not idle.
        """
        with self._lock:
            if not self._grid_manager.can_edit(self._state):
                msg = f"Cannot resize the grid while the simulation is {self._state.value}"
                if self.logger:
                    self.logger.log_message(f"Following error occurred in 'FireSim.resize()': {msg}")
                raise SimulationError(msg, tick=self._iters)

            grid_manager = GridManager(size)
            grid_manager.logger = self.logger
            self._grid_manager = grid_manager
            self._finished = False

            self._log_action('resize', value=size)
            if self.logger:
                self.logger.log_message(f"Grid resized to {size}x{size}.")
            if self.on_update is not None:
                self.on_update(self, [])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_state(self, row: int, col: int) -> CellStates:
        """Return the state of the cell at [row, col]."""
        return self._grid_manager.get_state(row, col)

    def stats(self) -> Dict[str, object]:
        """Return counts describing the current grid.

        Returns:
            dict: ``ticks``, ``burning``, ``walls``, ``safe`` and
            ``saturated`` (True when cells are burning and none can catch
            fire any more).
        """
        with self._lock:
            burning = self._grid_manager.count(CellStates.FIRE)
            _, can_spread, _ = next_generation(self._grid_manager.grid)

            return {
                "ticks": self._iters,
                "burning": burning,
                "walls": self._grid_manager.count(CellStates.WALL),
                "safe": self._grid_manager.count(CellStates.SAFE),
                "saturated": burning > 0 and not can_spread,
            }

    def set_logger(self, logger) -> None:
        """Attach a run logger to the simulation and its grid."""
        self.logger = logger
        self._grid_manager.logger = logger

    @property
    def state(self) -> SimStates:
        """Current controller state."""
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SimStates.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state == SimStates.PAUSED

    @property
    def is_idle(self) -> bool:
        return self._state == SimStates.IDLE

    @property
    def finished(self) -> bool:
        """True if the last run stopped because the fire saturated."""
        return self._finished

    @property
    def iters(self) -> int:
        """Number of ticks since the simulation was last started."""
        return self._iters

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def wall_density(self) -> float:
        return self._wall_density

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the current generation."""
        return self._grid_manager.grid

    @property
    def grid_manager(self) -> GridManager:
        return self._grid_manager

    @property
    def shape(self) -> Tuple[int, int]:
        return self._grid_manager.shape

    @property
    def size(self) -> int:
        return self._grid_manager.size

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_running(self) -> None:
        self._state = SimStates.RUNNING
        self._iters = 0
        self._finished = False
        self._record_updates()
        if self.logger:
            self.logger.log_message("Simulation started.")
        self._arm()

    def _arm(self) -> None:
        self._token += 1
        token = self._token
        delay_s = UtilFuncs.ms_to_s(self._interval_ms)
        self._pending = self._scheduler.call_later(delay_s, lambda: self._on_timer(token))

    def _cancel_pending(self) -> None:
        self._token += 1
        self._scheduler.cancel(self._pending)
        self._pending = None

    def _on_timer(self, token: int) -> None:
        with self._lock:
            if token != self._token or self._state != SimStates.RUNNING:
                return

            self._pending = None
            self._tick()

    def _tick(self, rearm: bool = True) -> bool:
        _, changed = self._grid_manager.step()
        self._iters += 1
        self._record_updates()

        if not changed:
            self._state = SimStates.IDLE
            self._finished = True
            if self.logger:
                self.logger.log_message(f"Fire saturated after {self._iters} ticks.")
            if self.on_finished is not None:
                self.on_finished(self)
        elif rearm:
            self._arm()

        return changed

    def _record_updates(self) -> None:
        updates = self._grid_manager.pop_updates()
        if not updates:
            return

        if self.logger:
            self.logger.cache_cell_updates(
                [CellLogEntry(tick=self._iters, row=r, col=c, state=s) for r, c, s in updates]
            )
        if self.on_update is not None:
            self.on_update(self, updates)

    def _log_action(self, action_type: str, row: int = -1, col: int = -1, value: float = 0.0) -> None:
        if self.logger:
            self.logger.cache_action_updates(
                [ActionEntry(tick=self._iters, action_type=action_type,
                             row=row, col=col, value=float(value))]
            )
