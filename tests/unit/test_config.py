"""
Unit tests for event_calendar/config.py

Tests Settings defaults, environment variable loading, production
validation and settings caching.
"""

import logging
from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from event_calendar.config import (
    DEFAULT_RECURRENCE_HORIZON,
    Settings,
    configure_logging,
    get_settings,
)

ENV_VARS = (
    "PYTHON_ENV",
    "LOG_LEVEL",
    "STORAGE_BACKEND",
    "DATABASE_URL",
    "RECURRENCE_HORIZON",
    "API_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettingsDefaults:
    """Test Settings initialization with default values."""

    def test_settings_defaults(self):
        """Settings should initialize with correct default values."""
        settings = Settings(_env_file=None)

        assert settings.python_env == "development"
        assert settings.log_level == "INFO"
        assert settings.storage_backend == "memory"
        assert settings.database_url == "sqlite:///:memory:"
        assert settings.recurrence_horizon == date(2025, 12, 31)
        assert settings.recurrence_horizon == DEFAULT_RECURRENCE_HORIZON
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 8000
        assert settings.api_reload is True

    def test_properties(self):
        settings = Settings(_env_file=None)

        assert settings.is_development is True
        assert settings.is_production is False
        assert settings.uses_database is False
        assert settings.uses_sqlite is True


class TestSettingsEnvironmentVariables:
    """Test Settings loading from environment variables."""

    def test_settings_from_env_vars(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("STORAGE_BACKEND", "database")
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/events")
        monkeypatch.setenv("RECURRENCE_HORIZON", "2026-06-30")
        monkeypatch.setenv("API_PORT", "9000")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.uses_database is True
        assert settings.uses_sqlite is False
        assert settings.recurrence_horizon == date(2026, 6, 30)
        assert settings.api_port == 9000

    def test_invalid_horizon(self, monkeypatch):
        monkeypatch.setenv("RECURRENCE_HORIZON", "not-a-date")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_storage_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "redis")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestProductionValidation:
    """Test validate_production_config."""

    def test_development_skips_validation(self):
        Settings(_env_file=None).validate_production_config()

    def test_production_requires_database_backend(self):
        settings = Settings(_env_file=None, python_env="production")

        with pytest.raises(ValueError, match="STORAGE_BACKEND=database"):
            settings.validate_production_config()

    def test_production_rejects_in_memory_database(self):
        settings = Settings(
            _env_file=None, python_env="production", storage_backend="database"
        )

        with pytest.raises(ValueError, match="persistent database"):
            settings.validate_production_config()

    def test_production_with_file_database(self):
        settings = Settings(
            _env_file=None,
            python_env="production",
            storage_backend="database",
            database_url="sqlite:///./data/events.db",
        )

        settings.validate_production_config()


class TestGetSettings:
    """Test settings caching."""

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestConfigureLogging:
    """Test configure_logging."""

    def test_uses_configured_level(self):
        settings = Settings(_env_file=None, log_level="WARNING")

        with patch("event_calendar.config.logging.basicConfig") as basic_config:
            configure_logging(settings)

        assert basic_config.call_args.kwargs["level"] == "WARNING"
