"""Tests for settings and logging configuration."""

import logging
import logging.handlers

from retiresim.analysis.sim_models import SimulationParameters
from retiresim.config import Settings
from retiresim.logging_config import setup_logging


class TestSettings:
    def test_defaults_match_builder_state(self):
        params = Settings(_env_file=None).default_parameters()
        assert params == SimulationParameters(
            initial_equity=100000.0,
            annual_withdrawal=4000.0,
            inflation_rate=0.025,
            time_horizon=30,
            iterations=10000,
        )

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RS_SIMULATION_ITERATIONS", "500")
        monkeypatch.setenv("RS_SIMULATION_ENABLE_FAT_TAILS", "true")
        monkeypatch.setenv("RS_SIMULATION_SEED", "42")
        settings = Settings(_env_file=None)
        params = settings.default_parameters()
        assert params.iterations == 500
        assert params.enable_fat_tails
        assert settings.simulation_seed == 42


class TestLogging:
    def test_setup_creates_rotating_file_handler(self, tmp_path):
        log_dir = tmp_path / "logs"
        root = logging.getLogger()
        saved = (root.handlers[:], root.level)
        try:
            setup_logging(str(log_dir))
            assert log_dir.is_dir()
            file_handlers = [
                h for h in root.handlers
                if isinstance(h, logging.handlers.RotatingFileHandler)
            ]
            assert len(file_handlers) == 1
            logging.getLogger("retiresim.test").info("hello")
            file_handlers[0].flush()
            assert "hello" in (log_dir / "retiresim.log").read_text()
        finally:
            for h in root.handlers:
                h.close()
            root.handlers = saved[0]
            root.setLevel(saved[1])
