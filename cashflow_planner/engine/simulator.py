"""
Daily Simulator

Simulates a single day of the month:

1. Earn the day's share of income.
2. Charge every expense due today, in declaration order, from its pot.
3. Fund pots from the running balance, lowest priority number first.
4. Classify the ending balance.

The pots passed in are mutated: their balances carry the state of the
forecast run from one day to the next. Callers that need isolation (the
month forecaster does) must pass their own copies.

The schedule rules are literal planner policy, not calendar arithmetic:
weekly means Monday, bi-weekly means a Friday that is the 4th or 18th,
and monthly pots are topped up by a thirtieth of their target every day.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

import structlog

from cashflow_planner.config import ForecastSettings, get_settings
from cashflow_planner.engine.errors import PotReferenceError
from cashflow_planner.models.finance import (
    Expense,
    ExpenseFrequency,
    IncomeType,
    Pot,
    PotFrequency,
    UserProfile,
)
from cashflow_planner.models.forecast import (
    DailyPlan,
    DayStatus,
    PaidExpense,
    PotContribution,
)


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Fixed approximations: a month is 30 days, or 4 weeks
DAYS_PER_WEEK = Decimal("7")
DAYS_PER_MONTH = Decimal("30")
WEEKS_PER_MONTH = Decimal("4")

MONDAY = 0
FRIDAY = 4
SUNDAY = 6
BI_WEEKLY_ANCHOR_DAYS = (4, 18)


def round_money(amount: Decimal) -> Decimal:
    """Round to pence, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Render an amount the way a plain number prints: 20, 12.5, 0.75."""
    return f"{amount.normalize():f}"


def daily_income(user: UserProfile) -> Decimal:
    """The user's income for one day."""
    if user.income_type == IncomeType.DAILY:
        return user.income_amount
    if user.income_type == IncomeType.WEEKLY:
        return user.income_amount / DAYS_PER_WEEK
    return user.income_amount / DAYS_PER_MONTH


def is_expense_due(expense: Expense, day: date) -> bool:
    """Whether the expense is charged on this day."""
    if expense.frequency == ExpenseFrequency.DAILY:
        return True
    if expense.frequency == ExpenseFrequency.WEEKLY:
        return day.weekday() == MONDAY
    if expense.frequency == ExpenseFrequency.BI_WEEKLY:
        return day.weekday() == FRIDAY and day.day in BI_WEEKLY_ANCHOR_DAYS
    # monthly / one-time
    return expense.due_date is not None and expense.due_date == day


def contribution_target(pot: Pot, day: date) -> Optional[Decimal]:
    """
    The most a pot may receive today, or None if it is not funded today.

    Bi-weekly and flexible pots are never funded automatically.
    """
    if pot.frequency in (PotFrequency.DAILY, PotFrequency.MONTHLY):
        return pot.target_amount / DAYS_PER_MONTH
    if pot.frequency == PotFrequency.WEEKLY and day.weekday() == MONDAY:
        return pot.target_amount / WEEKS_PER_MONTH
    return None


def index_pots(pots: Iterable[Pot]) -> dict[str, Pot]:
    """Map pot ids to pots. The first pot wins on duplicate ids."""
    index: dict[str, Pot] = {}
    for pot in pots:
        index.setdefault(pot.id, pot)
    return index


def ensure_pot_references(expenses: Iterable[Expense], pots: Iterable[Pot]) -> dict[str, Pot]:
    """
    Check every expense can find its funding pot.

    Returns the pot index on success.

    Raises:
        PotReferenceError: For the first expense with a dangling pot_id
    """
    index = index_pots(pots)
    for expense in expenses:
        if expense.pot_id not in index:
            raise PotReferenceError(expense.id, expense.name, expense.pot_id)
    return index


def day_status(balance: Decimal, warning_threshold: Decimal) -> DayStatus:
    if balance < 0:
        return DayStatus.DANGER
    if balance < warning_threshold:
        return DayStatus.WARNING
    return DayStatus.GOOD


def simulate_day(
    user: UserProfile,
    day: date,
    incoming_balance: Decimal,
    pots: Sequence[Pot],
    settings: Optional[ForecastSettings] = None,
) -> DailyPlan:
    """
    Simulate one day and return its plan.

    Args:
        user: Income model and expenses (read only)
        day: The calendar day being simulated
        incoming_balance: Balance carried in from the previous day
        pots: Pot states for this run; balances are updated in place
        settings: Forecast policy (defaults to the configured one)

    Raises:
        PotReferenceError: If any expense references a pot not in `pots`.
            Checked before anything is mutated.
    """
    settings = settings or get_settings().forecast
    pot_index = ensure_pot_references(user.expenses, pots)

    earnings = daily_income(user)
    balance = incoming_balance + earnings

    paid: list[PaidExpense] = []
    alerts: list[str] = []

    for expense in user.expenses:
        if not is_expense_due(expense, day):
            continue

        pot = pot_index[expense.pot_id]
        if pot.current_balance >= expense.amount:
            pot.current_balance -= expense.amount
            balance -= expense.amount
            paid.append(PaidExpense(name=expense.name, amount=expense.amount, pot=pot.name))
        else:
            alerts.append(
                f"⚠️ Cannot cover {expense.name}: "
                f"{settings.currency_symbol}{format_amount(expense.amount)}"
            )
            logger.debug(
                "expense_shortfall",
                date=day.isoformat(),
                expense=expense.name,
                amount=str(expense.amount),
                pot=pot.name,
                pot_balance=str(pot.current_balance),
            )

    contributions: list[PotContribution] = []

    for pot in sorted(pots, key=lambda p: p.priority):
        target = contribution_target(pot, day)
        if target is None:
            continue

        needed = pot.target_amount - pot.current_balance
        contribution = min(target, needed, balance)
        if contribution > 0:
            pot.current_balance += contribution
            balance -= contribution
            contributions.append(PotContribution(pot=pot.name, amount=contribution))

    return DailyPlan(
        date=day,
        incoming_balance=incoming_balance,
        earnings=earnings,
        expenses=tuple(paid),
        pot_contributions=tuple(contributions),
        balance_after=round_money(balance),
        day_status=day_status(balance, settings.warning_balance_threshold),
        shortfall_alerts=tuple(alerts),
    )
