"""Tests for loading settings from CLI arguments and settings files."""

import json
from argparse import Namespace
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from traitscore.config.loader import ConfigurationLoader, configure_from_cli
from traitscore.config.settings import LogLevel
from traitscore.domain.exceptions import ConfigurationError


class TestConfigurationLoader:
    """Test configuration loading from various sources."""

    def test_load_defaults(self):
        settings = ConfigurationLoader().load_defaults()
        assert settings.aggregation.w_max == 1.0
        assert settings.aggregation.c == 2.0
        assert settings.aggregation.tau == 0.75
        assert settings.aggregation.initial_score == 0.5
        assert settings.aggregation.min_samples == 1
        assert settings.logging.level == LogLevel.INFO
        assert settings.debug_mode is False

    def test_mock_args_fall_back_to_defaults(self):
        """Attributes that are not real values are ignored."""
        args = MagicMock()
        settings = ConfigurationLoader().load_from_cli_args(args)
        assert settings.aggregation.tau == 0.75
        assert settings.processing.chunk_size == 500
        assert settings.debug_mode is False
        assert settings.dry_run is False

    def test_cli_args_override_defaults(self, tmp_path):
        args = Namespace(
            config=None,
            w_max=0.5,
            c=3.0,
            tau=0.9,
            initial_score=0.4,
            min_samples=2,
            chunk_size=50,
            max_workers=2,
            log_file=str(tmp_path / "run.log"),
            debug=True,
            dry_run=True,
        )
        settings = ConfigurationLoader().load_from_cli_args(args)

        assert settings.aggregation.w_max == 0.5
        assert settings.aggregation.c == 3.0
        assert settings.aggregation.tau == 0.9
        assert settings.aggregation.initial_score == 0.4
        assert settings.aggregation.min_samples == 2
        assert settings.processing.chunk_size == 50
        assert settings.processing.max_workers == 2
        assert settings.logging.file_path == Path(tmp_path / "run.log")
        assert settings.logging.level == LogLevel.DEBUG
        assert settings.debug_mode is True
        assert settings.dry_run is True

    def test_settings_file_overlay(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "aggregation": {"tau": 0.6, "min_samples": 3},
            "processing": {"chunk_size": 10},
            "logging": {"level": "warning"},
        }))
        settings = ConfigurationLoader().load_from_file(path)

        assert settings.aggregation.tau == 0.6
        assert settings.aggregation.min_samples == 3
        assert settings.aggregation.c == 2.0
        assert settings.processing.chunk_size == 10
        assert settings.logging.level == LogLevel.WARNING

    def test_cli_args_win_over_settings_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"aggregation": {"tau": 0.6, "c": 1.0}}))
        args = Namespace(config=str(path), tau=0.8)
        settings = ConfigurationLoader().load_from_cli_args(args)
        assert settings.aggregation.tau == 0.8
        assert settings.aggregation.c == 1.0

    def test_unknown_settings_key(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"aggregation": {"gamma": 1}}))
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationLoader().load_from_file(path)
        assert exc_info.value.config_field == "aggregation"
        assert any("Valid keys" in s for s in exc_info.value.suggestions)

    def test_missing_settings_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Settings file not found"):
            ConfigurationLoader().load_from_file(tmp_path / "absent.json")

    def test_invalid_json_settings_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            ConfigurationLoader().load_from_file(path)

    def test_settings_file_must_be_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            ConfigurationLoader().load_from_file(path)


def test_configure_from_cli_validates():
    args = Namespace(tau=1.5)
    with pytest.raises(ConfigurationError) as exc_info:
        configure_from_cli(args)
    assert exc_info.value.config_field == "aggregation.tau"
