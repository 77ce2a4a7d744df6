"""Tests for configuration loading and validation."""

import pytest

from studiobook.config import (
    AppConfig,
    ModelConfig,
    StorageConfig,
    StudioConfig,
    _safe_float,
    _safe_int,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_invalid_temperature_too_high(self):
        config = AppConfig(model=ModelConfig(llm_temperature=3.0))
        with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
            _validate_config(config)

    def test_invalid_temperature_negative(self):
        config = AppConfig(model=ModelConfig(llm_temperature=-0.5))
        with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
            _validate_config(config)

    def test_negative_rate(self):
        config = AppConfig(studio=StudioConfig(default_rate_per_hour=-1))
        with pytest.raises(ValueError, match="DEFAULT_RATE_PER_HOUR"):
            _validate_config(config)

    def test_zero_duration(self):
        config = AppConfig(studio=StudioConfig(default_duration_hours=0))
        with pytest.raises(ValueError, match="DEFAULT_DURATION_HOURS"):
            _validate_config(config)

    def test_upcoming_limit_below_one(self):
        config = AppConfig(studio=StudioConfig(upcoming_limit=0))
        with pytest.raises(ValueError, match="UPCOMING_LIMIT"):
            _validate_config(config)

    def test_malformed_start_time(self):
        config = AppConfig(studio=StudioConfig(default_start_time="10am"))
        with pytest.raises(ValueError, match="DEFAULT_START_TIME"):
            _validate_config(config)

    def test_empty_storage_key(self):
        config = AppConfig(storage=StorageConfig(storage_key="  "))
        with pytest.raises(ValueError, match="STORAGE_KEY"):
            _validate_config(config)

    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_float_parsing(self):
        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("STUDIOBOOK_TEST_INT", "five")
        with pytest.raises(ValueError, match="STUDIOBOOK_TEST_INT"):
            _safe_int("STUDIOBOOK_TEST_INT", "5")


class TestDefaults:
    def test_studio_defaults(self):
        studio = StudioConfig()
        assert studio.default_session_type
        assert studio.default_duration_hours > 0
        assert studio.upcoming_limit >= 1

    def test_config_is_frozen(self):
        config = AppConfig()
        with pytest.raises(Exception):
            config.log_level = "DEBUG"  # type: ignore[misc]
