"""
Configuration management for Event Calendar.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

import logging
from datetime import date
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Global ceiling for recurring-event generation
DEFAULT_RECURRENCE_HORIZON = date(2025, 12, 31)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Python & Application
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Storage
    storage_backend: Literal["memory", "database"] = Field(
        default="memory",
        description="Event storage backend (in-memory collection or SQL database)"
    )
    database_url: str = Field(
        default="sqlite:///:memory:",
        description="Database connection URL (used when storage_backend=database)"
    )

    # Recurrence
    recurrence_horizon: date = Field(
        default=DEFAULT_RECURRENCE_HORIZON,
        description="Last date on which a recurring event may occur"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )
    api_reload: bool = Field(
        default=True,
        description="Enable auto-reload in development"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.python_env == "production"

    @property
    def uses_database(self) -> bool:
        """Check if the SQL database is the configured storage backend."""
        return self.storage_backend == "database"

    @property
    def uses_sqlite(self) -> bool:
        """Check if SQLite is the configured database."""
        return "sqlite" in self.database_url.lower()

    def validate_production_config(self) -> None:
        """
        Validate configuration for production environment.

        Raises:
            ValueError: If required production settings are missing or invalid
        """
        if not self.is_production:
            return

        errors = []

        # An in-memory collection loses every event on restart
        if not self.uses_database:
            errors.append(
                "Production requires persistent storage. "
                "Set STORAGE_BACKEND=database."
            )
        elif ":memory:" in self.database_url:
            errors.append(
                "Production requires a persistent database. "
                "Set DATABASE_URL to a file or server connection string."
            )

        if errors:
            raise ValueError("Production configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure we only load settings once.
    Use this function throughout the application to access settings.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from event_calendar.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.recurrence_horizon)
    """
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from the configured log level."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
