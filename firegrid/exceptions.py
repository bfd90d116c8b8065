"""Custom exceptions for the firegrid simulation package.

This module defines a hierarchy of exceptions used throughout firegrid
so callers can tell precondition violations apart from configuration
problems and catch all package errors with a single except clause.

Exception Hierarchy:
    FireGridError (base)
    ├── ConfigurationError - Invalid configuration files or parameters
    ├── SimulationError - Illegal simulation state transitions
    ├── ValidationError - Input validation failures
    └── GridError - Grid operations failures

Example:
    >>> from firegrid.exceptions import GridError
    >>> raise GridError("Cell coordinates outside grid bounds", row=25, col=3)
"""

from typing import Optional


class FireGridError(Exception):
    """Base exception for all firegrid errors.

    Example:
        >>> try:
        ...     sim.resize(30)
        ... except FireGridError as e:
        ...     print(f"firegrid error occurred: {e}")
    """

    pass


class ConfigurationError(FireGridError):
    """Raised when a configuration file or parameter is invalid.

    Attributes:
        message (str): Explanation of the configuration error.
        config_path (str): Path to the configuration file, if applicable.
        parameter (str): Name of the problematic parameter, if applicable.

    Example:
        >>> raise ConfigurationError(
        ...     "Interval must be between 0 and 1000 ms",
        ...     config_path="/path/to/sim.cfg",
        ...     parameter="interval_ms"
        ... )
    """

    def __init__(self, message: str, config_path: Optional[str] = None, parameter: Optional[str] = None):
        self.config_path = config_path
        self.parameter = parameter

        parts = []
        if config_path:
            parts.append(f"in {config_path}")
        if parameter:
            parts.append(f"parameter '{parameter}'")

        if parts:
            full_message = f"{message} ({', '.join(parts)})"
        else:
            full_message = message

        super().__init__(full_message)


class SimulationError(FireGridError):
    """Raised when an operation is not legal in the current simulation state.

    This exception is raised when:
    - The grid is resized while a simulation is running or paused
    - A tick is requested on a simulation that is not running

    Attributes:
        message (str): Explanation of the simulation error.
        tick (int): Tick count when the error occurred, if available.
    """

    def __init__(self, message: str, tick: Optional[int] = None):
        self.tick = tick

        if tick is not None:
            full_message = f"{message} (at tick {tick})"
        else:
            full_message = message

        super().__init__(full_message)


class ValidationError(FireGridError):
    """Raised when input validation fails.

    This exception is raised when:
    - The grid size is not a positive integer
    - The tick interval is outside 0..1000 ms
    - The wall density is outside [0, 1]

    Attributes:
        message (str): Explanation of the validation failure.
        field (str): Name of the field that failed validation, if applicable.
        value: The invalid value, if applicable.
    """

    def __init__(self, message: str, field: Optional[str] = None, value=None):
        self.field = field
        self.value = value

        parts = []
        if field:
            parts.append(f"field '{field}'")
        if value is not None:
            parts.append(f"value={value!r}")

        if parts:
            full_message = f"{message} ({', '.join(parts)})"
        else:
            full_message = message

        super().__init__(full_message)


class GridError(FireGridError):
    """Raised when grid operations fail.

    Attributes:
        message (str): Explanation of the grid error.
        row (int): Row index involved, if applicable.
        col (int): Column index involved, if applicable.

    Example:
        >>> raise GridError(
        ...     "Cell coordinates outside grid bounds",
        ...     row=150,
        ...     col=200
        ... )
    """

    def __init__(self, message: str, row: Optional[int] = None, col: Optional[int] = None):
        self.row = row
        self.col = col

        parts = []
        if row is not None:
            parts.append(f"row={row}")
        if col is not None:
            parts.append(f"col={col}")

        if parts:
            full_message = f"{message} ({', '.join(parts)})"
        else:
            full_message = message

        super().__init__(full_message)
