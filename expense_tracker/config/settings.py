"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every setting has a working default, so the tracker runs with no
environment at all; variables and the .env file only override.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where and how the expense collection is persisted."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Key-value backend: durable JSON files or in-memory"
    )
    data_dir: Path = Field(
        default=Path(".expense_tracker"),
        description="Directory holding one file per storage key"
    )
    storage_key: str = Field(
        default="expense-tracker-data",
        min_length=1,
        pattern=r"^[A-Za-z0-9._-]+$",
        description="Key under which the whole collection is stored (letters, digits, . _ -)"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a file write before giving up"
    )


class ExportSettings(BaseSettings):
    """CSV export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    directory: Path = Field(
        default=Path("exports"),
        description="Directory exported CSV files are written to"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )

    # Form validation
    min_description_length: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Minimum description length after stripping whitespace"
    )

    # Dashboard
    recent_expenses_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="How many expenses the recent list shows"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="How many months the spending trend covers"
    )
    currency_code: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO currency code used for display"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("currency_code")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    ``<name>_error`` entry for each group that failed to load.
    """
    results: dict[str, object] = {}
    settings = get_settings()

    for name in ("storage", "export", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
