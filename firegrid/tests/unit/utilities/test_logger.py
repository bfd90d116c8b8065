"""Tests for the run Logger."""

import json
import os

import pandas as pd
import pytest

from firegrid.base_classes.scheduler import ManualScheduler
from firegrid.fire_simulator.fire import FireSim
from firegrid.utilities.data_classes import SimParams
from firegrid.utilities.logger import Logger


@pytest.fixture
def logged_sim(tmp_path):
    params = SimParams(grid_size=3, interval_ms=500, seed=0,
                       log_folder=str(tmp_path), write_logs=True)
    sim = FireSim(params, scheduler=ManualScheduler())
    logger = Logger(params.log_folder)
    logger.start_new_run()
    sim.set_logger(logger)
    return params, sim, logger


class TestLogger:
    """Tests for status logs and parquet output."""

    def test_session_and_run_folders(self, logged_sim):
        _, _, logger = logged_sim

        assert os.path.isdir(logger.session_folder)
        assert logger.run_folder == os.path.join(logger.session_folder, "run_0")

        logger.start_new_run()
        assert logger.run_folder.endswith("run_1")

    def test_messages_before_first_run_are_kept(self, tmp_path):
        logger = Logger(str(tmp_path))
        logger.log_message("Loaded configuration.")

        logger.start_new_run()
        assert any("Loaded configuration." in m for m in logger.messages)

        logger.start_new_run()
        assert logger.messages == []

    def test_finish_writes_merged_logs(self, logged_sim):
        _, sim, logger = logged_sim
        sim.toggle_wall(0, 0)
        sim.ignite(1, 1)
        sim.run_to_completion()

        logger.finish(sim)

        cells = pd.read_parquet(os.path.join(logger.run_folder, "cell_logs.parquet"))
        assert len(cells) == 9
        assert set(cells.columns) == {"tick", "row", "col", "state"}
        assert sorted(cells["tick"].unique().tolist()) == [0, 1, 2]

        actions = pd.read_parquet(os.path.join(logger.run_folder, "action_logs.parquet"))
        assert actions["action_type"].tolist() == ["toggle_wall", "ignite"]

        assert not os.path.exists(os.path.join(logger.session_folder, "cell_logs"))

    def test_status_log_results(self, logged_sim):
        _, sim, logger = logged_sim
        sim.ignite(1, 1)
        sim.run_to_completion()

        logger.finish(sim)

        with open(os.path.join(logger.run_folder, "status_log.json")) as f:
            status = json.load(f)

        assert status["results"] == {
            "user interrupted": False,
            "ticks": 3,
            "cells burning": 9,
            "walls": 0,
            "cells safe": 0,
            "saturated": True,
        }
        assert any("Fire saturated after 3 ticks." in m for m in status["messages"])

    def test_finish_without_entries(self, logged_sim):
        _, sim, logger = logged_sim

        logger.finish(sim)

        assert not os.path.exists(os.path.join(logger.run_folder, "cell_logs.parquet"))
        assert any("No parquet files found" in m for m in logger.messages)

    def test_log_metadata(self, logged_sim):
        params, sim, logger = logged_sim

        logger.log_metadata(params, sim)

        with open(os.path.join(logger.session_folder, "metadata.json")) as f:
            metadata = json.load(f)

        assert metadata["inputs"]["grid size"] == 3
        assert metadata["sim size"]["total cells"] == 9
