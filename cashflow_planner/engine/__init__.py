"""Cash-flow forecasting and pot-allocation engine."""

from cashflow_planner.engine.errors import (
    ForecastConfigurationError,
    ForecastError,
    PotReferenceError,
)
from cashflow_planner.engine.forecaster import (
    clone_pots,
    forecast_month,
    month_bounds,
    summarize_week,
)
from cashflow_planner.engine.overview import summarize_profile
from cashflow_planner.engine.simulator import (
    daily_income,
    ensure_pot_references,
    simulate_day,
)

__all__ = [
    "ForecastConfigurationError",
    "ForecastError",
    "PotReferenceError",
    "clone_pots",
    "daily_income",
    "ensure_pot_references",
    "forecast_month",
    "month_bounds",
    "simulate_day",
    "summarize_profile",
    "summarize_week",
]
