"""Tests for SimParams and the .cfg reader."""

import pytest

from firegrid.exceptions import ConfigurationError
from firegrid.utilities.data_classes import SimParams, load_sim_params


class TestSimParams:
    """Tests for SimParams validation."""

    def test_defaults(self):
        params = SimParams()

        assert params.grid_size == 20
        assert params.interval_ms == 500
        assert params.wall_density == pytest.approx(0.1)
        assert params.seed is None
        assert params.write_logs is False

    @pytest.mark.parametrize("kwargs, parameter", [
        ({"grid_size": 0}, "grid_size"),
        ({"grid_size": -3}, "grid_size"),
        ({"interval_ms": -1}, "interval_ms"),
        ({"interval_ms": 1001}, "interval_ms"),
        ({"wall_density": 1.2}, "wall_density"),
        ({"max_ticks": 0}, "max_ticks"),
        ({"write_logs": True}, "log_folder"),
    ])
    def test_invalid_values_rejected(self, kwargs, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            SimParams(**kwargs)

        assert exc_info.value.parameter == parameter

    def test_integer_density_normalised(self):
        assert SimParams(wall_density=1).wall_density == 1.0


class TestLoadSimParams:
    """Tests for load_sim_params."""

    def test_full_config(self, tmp_path):
        cfg = tmp_path / "sim.cfg"
        cfg.write_text(
            "[Grid]\n"
            "size = 12\n"
            "wall_density = 0.25\n"
            "\n"
            "[Simulation]\n"
            "interval_ms = 200\n"
            "seed = 7\n"
            "max_ticks = 50\n"
            "\n"
            "[Logging]\n"
            f"folder = {tmp_path / 'logs'}\n"
            "write_logs = yes\n"
        )

        params = load_sim_params(str(cfg))

        assert params.grid_size == 12
        assert params.wall_density == pytest.approx(0.25)
        assert params.interval_ms == 200
        assert params.seed == 7
        assert params.max_ticks == 50
        assert params.log_folder == str(tmp_path / "logs")
        assert params.write_logs is True

    def test_missing_sections_use_defaults(self, tmp_path):
        cfg = tmp_path / "sim.cfg"
        cfg.write_text("[Grid]\nsize = 5\n")

        params = load_sim_params(str(cfg))

        assert params.grid_size == 5
        assert params.interval_ms == 500
        assert params.seed is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_sim_params(str(tmp_path / "nope.cfg"))

    def test_unparseable_value(self, tmp_path):
        cfg = tmp_path / "sim.cfg"
        cfg.write_text("[Simulation]\ninterval_ms = fast\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_sim_params(str(cfg))

        assert exc_info.value.config_path == str(cfg)

    def test_out_of_range_value_reports_path(self, tmp_path):
        cfg = tmp_path / "sim.cfg"
        cfg.write_text("[Simulation]\ninterval_ms = 5000\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_sim_params(str(cfg))

        assert str(cfg) in str(exc_info.value)
