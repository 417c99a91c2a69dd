"""
Unit tests for configuration loading.

Tests defaults, environment overrides and validation of Settings.
"""

import logging

import pytest
from loguru import logger
from pydantic import ValidationError

from json_recovery.config import Settings, get_settings
from json_recovery.logging_config import configure_logging
from json_recovery.repair import RepairEngine


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        """Test an empty environment yields the standard configuration."""
        settings = Settings()

        assert settings.repair_max_attempts == 5
        assert settings.repair_backscan_window == 50
        assert settings.repair_excerpt_radius == 40
        assert settings.log_level == "WARNING"

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values are read from environment variables."""
        monkeypatch.setenv("REPAIR_MAX_ATTEMPTS", "8")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = get_settings()

        assert settings.repair_max_attempts == 8
        assert settings.log_level == "DEBUG"

    def test_get_settings_is_cached(self) -> None:
        """Test the same instance is returned until the cache is cleared."""
        assert get_settings() is get_settings()

    def test_max_attempts_lower_bound(self) -> None:
        """Test a zero attempt ceiling is rejected."""
        with pytest.raises(ValidationError):
            Settings(repair_max_attempts=0)

    def test_unknown_log_level(self) -> None:
        """Test an unknown log level is rejected."""
        with pytest.raises(ValidationError, match="log_level"):
            Settings(log_level="LOUD")

    def test_engine_uses_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test RepairEngine.from_settings falls back to the global settings."""
        monkeypatch.setenv("REPAIR_MAX_ATTEMPTS", "2")

        assert RepairEngine.from_settings().max_attempts == 2


class TestLoggingConfig:
    """Tests for configure_logging."""

    def test_stdlib_records_reach_loguru(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test stdlib logging is forwarded to the Loguru stderr sink."""
        configure_logging("INFO")
        try:
            logging.getLogger("grader").warning("evaluation payload unreadable")
            logging.getLogger("grader").debug("below threshold")

            err = capsys.readouterr().err
            assert "evaluation payload unreadable" in err
            assert "below threshold" not in err
        finally:
            logger.remove()
            logging.basicConfig(handlers=[logging.NullHandler()], force=True)
