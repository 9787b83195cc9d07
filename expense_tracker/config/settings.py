"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which knobs exist (where data lives, how totals
treat pending money, how many day-groups a page reveals) and ensures all of
them are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_tracker.models.transaction import Currency


class StorageSettings(BaseSettings):
    """Local snapshot storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the persisted snapshots"
    )
    transactions_filename: str = Field(
        default="transactions.json",
        min_length=1,
        description="File name of the transactions snapshot"
    )
    preferences_filename: str = Field(
        default="preferences.json",
        min_length=1,
        description="File name of the preferences snapshot"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a snapshot write is attempted"
    )

    @property
    def transactions_path(self) -> Path:
        return self.data_dir / self.transactions_filename

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / self.preferences_filename


class LedgerSettings(BaseSettings):
    """
    Ledger behaviour configuration.

    `include_pending_in_totals` selects between the two aggregation policies:
    False counts only settled money toward income, expense and balance;
    True counts pending amounts as committed money as well.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    page_size: int = Field(
        default=7,
        ge=1,
        description="Day-groups revealed per page of history"
    )
    include_pending_in_totals: bool = Field(
        default=False,
        description="Count pending transactions toward headline totals"
    )
    default_currency: Currency = Field(
        default=Currency.USD,
        description="Currency used until the user picks one"
    )
    recent_activity_limit: int = Field(
        default=5,
        ge=0,
        le=50,
        description="How many records the dashboard lists as recent activity"
    )

    @field_validator("default_currency", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        """Accept lowercase currency codes from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (False for human-readable console output)"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Sub-settings are built on access so a bad value in one section
    # does not prevent reading the others.

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
