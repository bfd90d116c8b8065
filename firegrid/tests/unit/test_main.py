"""Tests for the headless runner."""

import os

from firegrid.main import main


class TestMain:

    def test_default_run(self, capsys):
        assert main(["--ignite", "0", "0"]) == 0

        out = capsys.readouterr().out
        assert "Run 0: 39 ticks, 400 cells burning, 0 walls, 0 cells safe" in out

    def test_bad_config(self, tmp_path, capsys):
        cfg = tmp_path / "sim.cfg"
        cfg.write_text("[Grid]\nsize = 0\n")

        assert main(["--config", str(cfg)]) == 1
        assert "Invalid configuration" in capsys.readouterr().out

    def test_runs_with_logs(self, tmp_path):
        cfg = tmp_path / "sim.cfg"
        cfg.write_text(
            "[Grid]\nsize = 6\nwall_density = 0.2\n"
            "[Simulation]\nseed = 3\n"
            f"[Logging]\nfolder = {tmp_path / 'logs'}\nwrite_logs = true\n"
        )

        assert main(["--config", str(cfg), "--walls", "--runs", "2"]) == 0

        sessions = os.listdir(tmp_path / "logs")
        assert len(sessions) == 1
        session = tmp_path / "logs" / sessions[0]
        assert (session / "metadata.json").exists()
        assert (session / "run_0" / "status_log.json").exists()
        assert (session / "run_1" / "cell_logs.parquet").exists()
