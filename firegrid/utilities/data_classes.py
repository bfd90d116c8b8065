import configparser
import os
from dataclasses import dataclass
from typing import Optional

from firegrid.exceptions import ConfigurationError, ValidationError
from firegrid.utilities.fire_util import UtilFuncs

DEFAULT_GRID_SIZE = 20
DEFAULT_INTERVAL_MS = 500
DEFAULT_WALL_DENSITY = 0.1


@dataclass
class SimParams:
    """Inputs needed to build a :class:`~firegrid.fire_simulator.fire.FireSim`.

    Attributes:
        grid_size (int): Number of rows and columns of the square grid.
        interval_ms (int): Time between ticks in milliseconds (0..1000).
        wall_density (float): Probability of a cell becoming a wall when walls
            are randomized.
        seed (Optional[int]): Seed for the simulation's random generator.
        max_ticks (Optional[int]): Cap on ticks for headless runs.
        log_folder (Optional[str]): Folder run logs are written to.
        write_logs (bool): Whether to create a logger for the run.
    """
    grid_size: int = DEFAULT_GRID_SIZE
    interval_ms: int = DEFAULT_INTERVAL_MS
    wall_density: float = DEFAULT_WALL_DENSITY
    seed: Optional[int] = None
    max_ticks: Optional[int] = None
    log_folder: Optional[str] = None
    write_logs: bool = False

    def __post_init__(self):
        try:
            UtilFuncs.validate_size(self.grid_size, field="grid_size")
            UtilFuncs.validate_interval(self.interval_ms)
            self.wall_density = UtilFuncs.validate_density(self.wall_density)
        except ValidationError as e:
            raise ConfigurationError(str(e), parameter=e.field) from e

        if self.max_ticks is not None and self.max_ticks <= 0:
            raise ConfigurationError("max_ticks must be positive", parameter="max_ticks")

        if self.write_logs and not self.log_folder:
            raise ConfigurationError("A log folder is required when write_logs is set",
                                     parameter="log_folder")


def load_sim_params(cfg_path: str) -> SimParams:
    """Read simulation parameters from an INI style config file.

    Recognised sections and keys (all optional)::

        [Grid]
        size = 20
        wall_density = 0.1

        [Simulation]
        interval_ms = 500
        seed = 42
        max_ticks = 200

        [Logging]
        folder = logs
        write_logs = true

    Args:
        cfg_path: Path to the ``.cfg`` file.

    Returns:
        SimParams: Validated parameters.

    Raises:
        ConfigurationError: If the file is missing, a value can't be parsed
            or a value is out of range.
    """
    if not os.path.exists(cfg_path):
        raise ConfigurationError("Config file not found", config_path=cfg_path)

    config = configparser.ConfigParser()
    config.read(cfg_path)

    grid = config["Grid"] if "Grid" in config else {}
    sim = config["Simulation"] if "Simulation" in config else {}
    logging_cfg = config["Logging"] if "Logging" in config else {}

    try:
        grid_size = _get_int(grid, "size", DEFAULT_GRID_SIZE)
        wall_density = _get_float(grid, "wall_density", DEFAULT_WALL_DENSITY)
        interval_ms = _get_int(sim, "interval_ms", DEFAULT_INTERVAL_MS)
        seed = _get_int(sim, "seed", None)
        max_ticks = _get_int(sim, "max_ticks", None)
        write_logs = _get_bool(logging_cfg, "write_logs", False)
    except ValueError as e:
        raise ConfigurationError(f"Could not parse value: {e}", config_path=cfg_path) from e

    log_folder = logging_cfg.get("folder", None) or None

    try:
        return SimParams(
            grid_size=grid_size,
            interval_ms=interval_ms,
            wall_density=wall_density,
            seed=seed,
            max_ticks=max_ticks,
            log_folder=log_folder,
            write_logs=write_logs,
        )
    except ConfigurationError as e:
        raise ConfigurationError(str(e), config_path=cfg_path) from e


def _get_int(section, key: str, default: Optional[int]) -> Optional[int]:
    value = section.get(key, None)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _get_float(section, key: str, default: float) -> float:
    value = section.get(key, None)
    if value is None or value.strip() == "":
        return default
    return float(value)


def _get_bool(section, key: str, default: bool) -> bool:
    value = section.get(key, None)
    if value is None or value.strip() == "":
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "yes", "true", "on"):
        return True
    if lowered in ("0", "no", "false", "off"):
        return False
    raise ValueError(f"'{value}' is not a boolean")
