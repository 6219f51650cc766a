"""
Configuration Management for the Cash-Flow Planner

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The forecast defaults reproduce the planner's fixed policy (warning below
£100, first two weeks routed to the Next-Month Pot). Overriding them changes
forecast output, so they are read once per run.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ForecastSettings(BaseSettings):
    """Forecast engine policy."""

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_",
        extra="ignore"
    )

    warning_balance_threshold: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Ending balance below this (but not negative) is a warning day"
    )
    currency_symbol: str = Field(
        default="£",
        min_length=1,
        max_length=3,
        description="Symbol used in shortfall alerts"
    )
    next_month_weeks: int = Field(
        default=2,
        ge=0,
        description="Weeks whose leftover is routed to the next-month allocation"
    )
    next_month_label: str = Field(
        default="Next-Month Pot",
        description="Leftover allocation label for early weeks"
    )
    buffer_label: str = Field(
        default="Buffer Pot",
        description="Leftover allocation label for later weeks"
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

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # Storage
    profiles_path: Optional[str] = Field(
        default=None,
        description="Directory of JSON profile documents (in-memory storage if unset)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept stdlib level names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def profiles_dir(self) -> Optional[Path]:
        """Get the profiles directory as a Path."""
        return Path(self.profiles_path) if self.profiles_path else None


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
    def forecast(self) -> ForecastSettings:
        return ForecastSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.forecast
        results["forecast"] = True
    except Exception as e:
        results["forecast"] = False
        results["forecast_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
