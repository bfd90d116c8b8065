"""Shared pytest fixtures for the firegrid test suite.

This module provides reusable fixtures for building grids and simulations
driven by a deterministic scheduler.
"""

import pytest
import numpy as np

from firegrid.base_classes.grid_manager import GridManager
from firegrid.base_classes.scheduler import ManualScheduler
from firegrid.fire_simulator.fire import FireSim
from firegrid.utilities.data_classes import SimParams
from firegrid.utilities.fire_util import CellStates


# ============================================================================
# Random Number Generator Fixtures
# ============================================================================

@pytest.fixture
def seeded_rng():
    """Provide seeded random number generator for reproducible tests.

    Returns:
        np.random.Generator: Seeded RNG with seed 42.
    """
    return np.random.default_rng(42)


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def grid_3x3():
    """Provide an all-safe 3x3 grid."""
    return GridManager(3)


@pytest.fixture
def walled_center_grid():
    """Provide a 3x3 grid whose centre is boxed in by four walls."""
    grid = GridManager(3)
    for row, col in [(0, 1), (1, 0), (1, 2), (2, 1)]:
        grid.toggle_wall(row, col)
    grid.pop_updates()
    return grid


@pytest.fixture
def make_grid():
    """Provide a factory building a GridManager from rows of characters.

    ``.`` is safe, ``#`` is a wall and ``F`` is fire.
    """
    symbols = {'.': CellStates.SAFE, '#': CellStates.WALL, 'F': CellStates.FIRE}

    def _make(*rows):
        grid = GridManager(len(rows))
        for r, line in enumerate(rows):
            for c, ch in enumerate(line):
                if symbols[ch] == CellStates.WALL:
                    grid.toggle_wall(r, c)
                elif symbols[ch] == CellStates.FIRE:
                    grid.ignite(r, c)
        grid.pop_updates()
        return grid

    return _make


# ============================================================================
# Simulation Fixtures
# ============================================================================

@pytest.fixture
def scheduler():
    """Provide a virtual clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def make_sim(scheduler):
    """Provide a factory for FireSim instances on the shared virtual clock."""
    def _make(grid_size=3, interval_ms=500, wall_density=0.1, seed=42):
        params = SimParams(grid_size=grid_size, interval_ms=interval_ms,
                           wall_density=wall_density, seed=seed)
        return FireSim(params, scheduler=scheduler)
    return _make
