"""Grid management for square-grid fire propagation.

This module provides the GridManager class which owns the 2D array of cell
states and every operation that mutates it: wall edits, ignitions, clears,
randomized walls and the propagation step itself.

The propagation rule lives in :func:`next_generation`, a pure function that
reads only the previous generation, so a cell ignited during a tick can never
spread fire further within that same tick.

Classes:
    - GridManager: Manages the square cell grid for fire propagation.

Functions:
    - next_generation: Compute the next generation from an immutable snapshot.
"""

from typing import List, Tuple

import numpy as np

from firegrid.exceptions import GridError
from firegrid.utilities.fire_util import CellStates, GridMath, SimStates, UtilFuncs


def next_generation(grid: np.ndarray) -> Tuple[np.ndarray, bool, List[Tuple[int, int]]]:
    """Compute the next generation of a grid.

    For every cell on fire in ``grid`` each orthogonal neighbour catches fire
    if it is inside the grid, was not a wall and was not already burning in
    ``grid``. Only ``grid`` is read; the result is written to a fresh array,
    so the outcome does not depend on scan order.

    Args:
        grid: 2D array of :class:`CellStates` values. Not modified.

    Returns:
        Tuple of (new_grid, changed, new_ignitions) where ``changed`` is False
        iff no cell changed state and ``new_ignitions`` lists the ``(row, col)``
        of every cell that caught fire this tick in row-major order.
    """
    burning = grid == CellStates.FIRE
    spread = np.zeros_like(burning)

    for d_row, d_col in GridMath.orthogonal_neighborhood:
        # Shift the burning mask one cell towards the neighbour, no wraparound
        src_rows = slice(max(0, -d_row), grid.shape[0] - max(0, d_row))
        src_cols = slice(max(0, -d_col), grid.shape[1] - max(0, d_col))
        dst_rows = slice(max(0, d_row), grid.shape[0] - max(0, -d_row))
        dst_cols = slice(max(0, d_col), grid.shape[1] - max(0, -d_col))
        spread[dst_rows, dst_cols] |= burning[src_rows, src_cols]

    ignites = spread & (grid == CellStates.SAFE)

    new_grid = grid.copy()
    new_grid[ignites] = CellStates.FIRE

    new_ignitions = [(int(r), int(c)) for r, c in np.argwhere(ignites)]
    return new_grid, bool(new_ignitions), new_ignitions


class GridManager:
    """Manages the square cell grid for fire propagation.

    Holds a ``size x size`` ``int8`` array of :class:`CellStates`. Every row
    is its own storage; a resize builds a brand new grid with every cell
    safe rather than migrating the previous layout.

    Changes made by any operation are recorded and can be drained with
    :meth:`pop_updates`, which the simulation uses for logging and redraws.

    Attributes:
        grid (np.ndarray): Read-only view of the current generation.
        shape (Tuple[int, int]): Grid dimensions (size, size).
        size (int): Number of rows (and columns).
    """

    def __init__(self, size: int):
        """Create a grid of ``size x size`` safe cells.

        Args:
            size: Number of rows and columns. Must be a positive integer.

        Raises:
            ValidationError: If size is not a positive integer.
        """
        self._size = UtilFuncs.validate_size(size)
        self._shape = (self._size, self._size)
        self._grid = self.create(self._size)

        self._updates: List[Tuple[int, int, int]] = []

        # Reference to logger for error messages (set by parent)
        self.logger = None

    @staticmethod
    def create(size: int) -> np.ndarray:
        """Return a new ``size x size`` grid with every cell safe.

        Raises:
            ValidationError: If size is not a positive integer.
        """
        size = UtilFuncs.validate_size(size)
        return np.full((size, size), CellStates.SAFE, dtype=np.int8)

    @staticmethod
    def can_edit(sim_state: SimStates) -> bool:
        """Return True if walls may be edited (and the grid resized) in sim_state."""
        return sim_state == SimStates.IDLE

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the current generation."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    @property
    def shape(self) -> Tuple[int, int]:
        """Grid dimensions (size, size)."""
        return self._shape

    @property
    def size(self) -> int:
        """Number of rows (and columns) in the grid."""
        return self._size

    def snapshot(self) -> np.ndarray:
        """Return an independent copy of the current generation."""
        return self._grid.copy()

    def get_state(self, row: int, col: int) -> CellStates:
        """Return the state of the cell at [row, col].

        Raises:
            TypeError: If row or col is not an integer.
            GridError: If row or col is out of bounds.
        """
        self._check_indices(row, col, "get_state")
        return CellStates(int(self._grid[row, col]))

    def count(self, state: CellStates) -> int:
        """Return the number of cells currently in ``state``."""
        return int(np.count_nonzero(self._grid == state))

    def burning_cells(self) -> List[Tuple[int, int]]:
        """Return the ``(row, col)`` of every burning cell in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self._grid == CellStates.FIRE)]

    def toggle_wall(self, row: int, col: int) -> bool:
        """Flip a cell between safe and wall.

        Burning cells are left untouched. Callers are responsible for checking
        :meth:`can_edit` against the simulation state first.

        Returns:
            bool: True if the cell changed, False for a burning cell.
        """
        self._check_indices(row, col, "toggle_wall")

        state = self._grid[row, col]
        if state == CellStates.FIRE:
            return False

        new_state = CellStates.SAFE if state == CellStates.WALL else CellStates.WALL
        self._set(row, col, new_state)
        return True

    def ignite(self, row: int, col: int) -> bool:
        """Set a cell on fire whatever its current state, walls included.

        Returns:
            bool: True if the cell changed, False if it was already burning.
        """
        self._check_indices(row, col, "ignite")

        if self._grid[row, col] == CellStates.FIRE:
            return False

        self._set(row, col, CellStates.FIRE)
        return True

    def ignite_random(self, rng: np.random.Generator) -> Tuple[int, int]:
        """Set a uniformly random cell on fire.

        Args:
            rng: Random generator used to pick the cell.

        Returns:
            Tuple[int, int]: The (row, col) that was ignited.
        """
        row, col = (int(i) for i in rng.integers(0, self._size, size=2))
        self.ignite(row, col)
        return row, col

    def step(self) -> Tuple[np.ndarray, bool]:
        """Advance the grid by one generation and commit it.

        Returns:
            Tuple of (new_grid, changed). ``changed`` is False once no cell
            can catch fire any more.
        """
        new_grid, changed, new_ignitions = next_generation(self._grid)

        self._grid = new_grid
        self._updates.extend((r, c, int(CellStates.FIRE)) for r, c in new_ignitions)

        return self.grid, changed

    def clear_fire(self) -> int:
        """Return every burning cell to safe. Walls are untouched.

        Returns:
            int: Number of cells cleared.
        """
        return self._replace(CellStates.FIRE, CellStates.SAFE)

    def clear_walls(self) -> int:
        """Return every wall to safe. Burning cells are untouched.

        Returns:
            int: Number of walls removed.
        """
        return self._replace(CellStates.WALL, CellStates.SAFE)

    def randomize_walls(self, density: float, rng: np.random.Generator) -> int:
        """Replace the current walls with a random layout.

        Existing walls are cleared, then every cell independently becomes a
        wall with probability ``density``. Burning cells are never turned
        into walls.

        Args:
            density: Probability in [0, 1] of a cell becoming a wall.
            rng: Random generator used to draw the layout.

        Returns:
            int: Number of walls placed.

        Raises:
            ValidationError: If density is outside [0, 1].
        """
        density = UtilFuncs.validate_density(density)

        self.clear_walls()

        walls = (rng.random(self._shape) < density) & (self._grid != CellStates.FIRE)
        self._grid[walls] = CellStates.WALL
        self._updates.extend((int(r), int(c), int(CellStates.WALL)) for r, c in np.argwhere(walls))

        return int(np.count_nonzero(walls))

    def pop_updates(self) -> List[Tuple[int, int, int]]:
        """Return and clear the ``(row, col, state)`` changes recorded so far."""
        updates = self._updates
        self._updates = []
        return updates

    def _set(self, row: int, col: int, state: CellStates) -> None:
        self._grid[row, col] = state
        self._updates.append((row, col, int(state)))

    def _replace(self, old: CellStates, new: CellStates) -> int:
        mask = self._grid == old
        self._grid[mask] = new
        self._updates.extend((int(r), int(c), int(new)) for r, c in np.argwhere(mask))
        return int(np.count_nonzero(mask))

    def check_indices(self, row: int, col: int, caller: str = "check_indices") -> None:
        """Raise unless [row, col] addresses a cell of this grid.

        Raises:
            TypeError: If row or col is not an integer.
            GridError: If row or col is out of bounds.
        """
        self._check_indices(row, col, caller)

    def _check_indices(self, row: int, col: int, caller: str) -> None:
        if not isinstance(row, (int, np.integer)) or not isinstance(col, (int, np.integer)) \
                or isinstance(row, bool) or isinstance(col, bool):
            msg = (f"Row and column must be integer index values. "
                   f"Input was {type(row)}, {type(col)}")

            if self.logger:
                self.logger.log_message(f"Following error occurred in 'GridManager.{caller}()': {msg}")
            raise TypeError(msg)

        if not UtilFuncs.in_bounds(row, col, self._shape):
            msg = (f"Out of bounds error. Indices are out of bounds for grid of size "
                   f"{self._shape[0]}, {self._shape[1]}")

            if self.logger:
                self.logger.log_message(f"Following error occurred in 'GridManager.{caller}()': {msg}")
            raise GridError(msg, row=row, col=col)
