"""Various sets of constants and helper functions useful throughout the codebase

.. autoclass:: CellStates
    :members:

.. autoclass:: SimStates
    :members:

.. autoclass:: GridMath
    :members:

.. autoclass:: UtilFuncs
    :members:

"""

from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from firegrid.exceptions import ValidationError


class CellStates(IntEnum):
    """Enumeration of the possible cell states.

    Values are stored directly in the grid's ``int8`` array.

    Attributes:
        - **SAFE** (int): Represents a cell that can catch fire.
        - **WALL** (int): Represents an impermeable cell fire never spreads into.
        - **FIRE** (int): Represents a cell that is currently on fire.
    """
    SAFE = 0
    WALL = 1
    FIRE = 2


class SimStates(Enum):
    """Enumeration of the simulation controller states.

    Attributes:
        - **IDLE**: No tick is scheduled; the grid may be edited.
        - **RUNNING**: A tick is scheduled at the configured interval.
        - **PAUSED**: Ticking is suspended with the fire frozen; resumable.
    """
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class GridMath:
    """Neighbourhood offsets for the square simulation grid.

    Fire only spreads orthogonally, so only the von Neumann neighbourhood
    is used by the propagation rule. Offsets are ``(d_row, d_col)``.
    """

    # Up, down, left, right
    orthogonal_neighborhood = [(-1, 0), (1, 0), (0, -1), (0, 1)]


class UtilFuncs:
    """Validation helpers shared by the grid and the controller.

    Each validator raises :class:`ValidationError` with the offending field
    and value; nothing is ever clamped.
    """

    MIN_INTERVAL_MS = 0
    MAX_INTERVAL_MS = 1000

    @staticmethod
    def validate_size(size: int, field: str = "size") -> int:
        """Check that a grid size is a positive integer.

        Args:
            size: Proposed number of rows (and columns) of the grid.
            field: Field name reported in the error.

        Returns:
            int: The validated size.

        Raises:
            ValidationError: If size is not an integer or is <= 0.
        """
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
            raise ValidationError("Grid size must be an integer", field=field, value=size)
        if size <= 0:
            raise ValidationError("Grid size must be positive", field=field, value=size)
        return int(size)

    @staticmethod
    def validate_interval(interval_ms: int, field: str = "interval_ms") -> int:
        """Check that a tick interval lies within 0..1000 milliseconds.

        Raises:
            ValidationError: If interval_ms is not an integer or is out of range.
        """
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int):
            raise ValidationError("Interval must be an integer number of milliseconds",
                                  field=field, value=interval_ms)
        if not UtilFuncs.MIN_INTERVAL_MS <= interval_ms <= UtilFuncs.MAX_INTERVAL_MS:
            raise ValidationError(f"Interval must be between {UtilFuncs.MIN_INTERVAL_MS} and "
                                  f"{UtilFuncs.MAX_INTERVAL_MS} ms", field=field, value=interval_ms)
        return interval_ms

    @staticmethod
    def validate_density(density: float, field: str = "wall_density") -> float:
        """Check that a wall density is a fraction in [0, 1].

        Raises:
            ValidationError: If density is not a number or is outside [0, 1].
        """
        if isinstance(density, bool) or not isinstance(density, (int, float)):
            raise ValidationError("Wall density must be a number", field=field, value=density)
        if not 0.0 <= density <= 1.0:
            raise ValidationError("Wall density must be between 0 and 1", field=field, value=density)
        return float(density)

    @staticmethod
    def in_bounds(row: int, col: int, shape: Tuple[int, int]) -> bool:
        """Return True if (row, col) lies inside a grid of the given shape."""
        return 0 <= row < shape[0] and 0 <= col < shape[1]

    @staticmethod
    def ms_to_s(interval_ms: Optional[int]) -> float:
        """Convert a millisecond interval to seconds."""
        return (interval_ms or 0) / 1000.0
