"""Tests for configuration loading and logging setup."""

import json
import logging
from pathlib import Path

import pytest

from simulation import Simulation
from utils import load_config, setup_logging

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.json"


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.json"))

    def test_bad_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{ not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_config(str(path))

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_section_must_be_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"run_control": 5}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_missing_sections_default_to_empty(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}", encoding="utf-8")
        config = load_config(str(path))
        assert config["simulation_parameters"] == {}
        assert config["logging"] == {}

    def test_repository_config_builds_a_simulation(self):
        config = load_config(str(REPO_CONFIG))
        simulation = Simulation(config["simulation_parameters"])
        assert simulation.particles.particle_count == 1000
        assert simulation.spawn_timer.period_ms == 200


class TestSetupLogging:
    def test_creates_log_file_and_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "circuit.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
            assert log_file.parent.is_dir()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
