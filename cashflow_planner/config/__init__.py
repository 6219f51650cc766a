"""Configuration package."""

from cashflow_planner.config.settings import (
    AppSettings,
    ForecastSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ForecastSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
