"""
Month Forecaster

Drives the daily simulator across every day of a calendar month and rolls
the days up into weekly summaries.

Each call works on a deep copy of the profile's pots. The simulator mutates
those copies day after day; nothing leaks back into the caller's profile or
into the next forecast.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, Optional, Sequence

import structlog

from cashflow_planner.config import ForecastSettings, get_settings
from cashflow_planner.engine.simulator import (
    SUNDAY,
    ensure_pot_references,
    round_money,
    simulate_day,
)
from cashflow_planner.models.finance import Pot, UserProfile
from cashflow_planner.models.forecast import DailyPlan, MonthForecast, WeeklySummary


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def month_bounds(month: date) -> tuple[date, date]:
    """First and last day of the month containing `month`."""
    _, days_in_month = calendar.monthrange(month.year, month.month)
    return month.replace(day=1), month.replace(day=days_in_month)


def iter_month_days(month: date) -> Iterator[date]:
    first, last = month_bounds(month)
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def clone_pots(pots: Sequence[Pot]) -> list[Pot]:
    """Independent copies of the pots for one forecast run."""
    return [pot.model_copy(deep=True) for pot in pots]


def leftover_allocation(week_number: int, settings: ForecastSettings) -> str:
    if week_number <= settings.next_month_weeks:
        return settings.next_month_label
    return settings.buffer_label


def summarize_week(
    week_number: int,
    days: Sequence[DailyPlan],
    settings: Optional[ForecastSettings] = None,
) -> WeeklySummary:
    """
    Roll a run of consecutive days into a WeeklySummary.

    Raises:
        ValueError: If `days` is empty
    """
    if not days:
        raise ValueError("Cannot summarize a week with no days")
    settings = settings or get_settings().forecast

    income = sum((day.earnings for day in days), ZERO)
    expenses = sum((day.total_expenses for day in days), ZERO)
    contributions = sum((day.total_pot_contributions for day in days), ZERO)
    leftover = income - expenses - contributions

    return WeeklySummary(
        week_number=week_number,
        start_date=days[0].date,
        end_date=days[-1].date,
        total_income=round_money(income),
        total_expenses=round_money(expenses),
        total_pot_contributions=round_money(contributions),
        end_balance=days[-1].balance_after,
        leftover=round_money(leftover),
        leftover_allocation=leftover_allocation(week_number, settings),
    )


def forecast_month(
    user: UserProfile,
    month: date,
    settings: Optional[ForecastSettings] = None,
) -> MonthForecast:
    """
    Forecast every day of the month containing `month`.

    Weeks close on Sunday or on the last day of the month, whichever comes
    first, so the final week may be partial.

    Raises:
        PotReferenceError: If an expense references a missing pot.
            Raised before the first day is simulated.
    """
    settings = settings or get_settings().forecast
    first, last = month_bounds(month)

    pots = clone_pots(user.pots)
    ensure_pot_references(user.expenses, pots)

    balance = user.starting_balance
    daily_plans: list[DailyPlan] = []
    weekly_summaries: list[WeeklySummary] = []

    current_week: list[DailyPlan] = []
    week_number = 1

    for day in iter_month_days(month):
        plan = simulate_day(user, day, balance, pots, settings)
        daily_plans.append(plan)
        balance = plan.balance_after
        current_week.append(plan)

        if day.weekday() == SUNDAY or day == last:
            weekly_summaries.append(summarize_week(week_number, current_week, settings))
            current_week = []
            week_number += 1

    forecast = MonthForecast(
        month=first,
        daily_plans=tuple(daily_plans),
        weekly_summaries=tuple(weekly_summaries),
        closing_pots=tuple(pots),
    )

    logger.info(
        "forecast_completed",
        profile_id=user.id,
        month=first.isoformat(),
        days=len(daily_plans),
        weeks=len(weekly_summaries),
        closing_balance=str(forecast.closing_balance),
        shortfall_days=len(forecast.shortfall_days),
    )
    return forecast
