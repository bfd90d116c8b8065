"""Run logging for fire propagation simulations.

A :class:`Logger` owns a timestamped session folder. Each run inside the
session gets its own ``run_N`` folder holding:

- ``status_log.json``: timestamped messages and the final results.
- ``cell_logs.parquet``: every cell state change, one row per change.
- ``action_logs.parquet``: user actions (ignitions, wall edits, pauses...).

Cell and action entries are cached in memory, written to parquet part files
on :meth:`Logger.flush` and merged into a single file on :meth:`Logger.finish`.
"""

import datetime
import glob
import json
import os
import shutil
from typing import List, Optional, TYPE_CHECKING

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from firegrid.utilities.data_classes import SimParams
from firegrid.utilities.logger_schemas import ActionEntry, CellLogEntry
from firegrid.utilities.parquet_writer import ParquetWriter

if TYPE_CHECKING:
    from firegrid.fire_simulator.fire import FireSim


class Logger:
    def __init__(self, log_folder: str):

        self.log_ctr = 0

        self.log_folder = log_folder
        os.makedirs(self.log_folder, exist_ok=True)

        self._session_folder = self.generate_session_folder()
        self._run_folder = None

        self.cell_writer = ParquetWriter(os.path.join(self._session_folder, "cell_logs"))
        self.action_writer = ParquetWriter(os.path.join(self._session_folder, "action_logs"))

        self._cell_cache: List[CellLogEntry] = []
        self._action_cache: List[ActionEntry] = []

        self._status_log = self._new_status_log()

    @property
    def session_folder(self) -> str:
        return self._session_folder

    @property
    def run_folder(self) -> Optional[str]:
        return self._run_folder

    @property
    def messages(self) -> List[str]:
        return list(self._status_log["messages"])

    def cache_cell_updates(self, entries: List[CellLogEntry]):
        self._cell_cache.extend(entries)

    def cache_action_updates(self, entries: List[ActionEntry]):
        self._action_cache.extend(entries)

    def log_message(self, message: str):
        timestamp = datetime.datetime.now().isoformat()
        entry = f"[{timestamp}]: {message}"
        self._status_log["messages"].append(entry)

    def flush(self):
        if self._run_folder is None:
            self.start_new_run()

        self.cell_writer.write_batch(self._cell_cache)
        self._cell_cache.clear()

        self.action_writer.write_batch(self._action_cache)
        self._action_cache.clear()

        self._status_log["latest_flush"] = datetime.datetime.now().isoformat()
        self._write_status_log()

    def write_results(self, sim: 'FireSim', on_interrupt: bool = False):
        if sim is None:
            return

        stats = sim.stats()
        self._status_log["results"] = {
            "user interrupted": on_interrupt,
            "ticks": stats["ticks"],
            "cells burning": stats["burning"],
            "walls": stats["walls"],
            "cells safe": stats["safe"],
            "saturated": stats["saturated"],
        }

    def finish(self, sim: 'FireSim', on_interrupt: bool = False):
        """Write results, flush caches and merge part files into the run folder."""
        self.write_results(sim, on_interrupt=on_interrupt)
        self.flush()

        cell_log_path = os.path.join(self._session_folder, "cell_logs")
        action_log_path = os.path.join(self._session_folder, "action_logs")

        self._merge_parquet_files(
            cell_log_path,
            os.path.join(self._run_folder, "cell_logs.parquet")
        )

        self._merge_parquet_files(
            action_log_path,
            os.path.join(self._run_folder, "action_logs.parquet")
        )

        # Part files are only needed until they have been merged
        if os.path.exists(cell_log_path):
            shutil.rmtree(cell_log_path)

        if os.path.exists(action_log_path):
            shutil.rmtree(action_log_path)

        self._write_status_log()

    def _merge_parquet_files(self, folder_path: str, output_file: str):

        parquet_files = sorted(glob.glob(os.path.join(folder_path, "part-*.parquet")))

        if not parquet_files:
            self.log_message(f"No parquet files found in {folder_path}")
            return

        dfs = [pd.read_parquet(f) for f in parquet_files]
        combined_df = pd.concat(dfs, ignore_index=True)

        table = pa.Table.from_pandas(combined_df, preserve_index=False)
        pq.write_table(table, output_file, compression='snappy')

    def generate_session_folder(self) -> str:
        """Generates the path for the current session's log files based on current datetime

        :return: Session folder path string
        :rtype: str
        """
        date_time_str = datetime.datetime.now().strftime('%d-%b-%Y-%H-%M-%S-%f')
        return os.path.join(self.log_folder, f"log_{date_time_str}")

    def start_new_run(self):
        # Messages logged before the first run belong to it
        pending = self._status_log["messages"] if self._run_folder is None else []

        self._run_folder = os.path.join(self._session_folder, f"run_{self.log_ctr}")
        os.makedirs(self._run_folder, exist_ok=True)

        self.log_ctr += 1
        self._status_log = self._new_status_log()
        self._status_log["messages"].extend(pending)

    def log_metadata(self, sim_params: SimParams, sim: 'FireSim'):
        rows, cols = sim.shape

        metadata = {
            "inputs": {
                "grid size": sim_params.grid_size,
                "interval (ms)": sim_params.interval_ms,
                "wall density": sim_params.wall_density,
                "seed": sim_params.seed,
                "max ticks": sim_params.max_ticks,
            },

            "sim size": {
                "rows": rows,
                "cols": cols,
                "total cells": rows * cols,
            },
        }

        os.makedirs(self._session_folder, exist_ok=True)
        metadata_path = os.path.join(self._session_folder, "metadata.json")
        with open(metadata_path, 'w') as f:
            json.dump(metadata, f, indent=2)

    def _new_status_log(self) -> dict:
        return {
            "sim_start": datetime.datetime.now().isoformat(),
            "messages": [],
            "latest_flush": None,
            "results": None
        }

    def _write_status_log(self):
        status_path = os.path.join(self._run_folder, "status_log.json")
        with open(status_path, 'w') as f:
            json.dump(self._status_log, f, indent=2)
