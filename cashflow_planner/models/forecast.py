"""
Forecast Output Models

DailyPlan and WeeklySummary are produced once and never changed afterwards.
They are frozen models and hold tuples rather than lists so a presentation
layer cannot mutate a forecast it was handed.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cashflow_planner.models.finance import IncomeType, Pot


ZERO = Decimal("0")


class DayStatus(str, Enum):
    """Health of the running balance at the end of a day."""
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


# =============================================================================
# DAILY / WEEKLY RECORDS
# =============================================================================

class PaidExpense(BaseModel):
    """An expense actually paid on a given day."""
    model_config = ConfigDict(frozen=True)

    name: str
    amount: Decimal
    pot: str = Field(..., description="Name of the funding pot")


class PotContribution(BaseModel):
    """Money moved from the running balance into a pot."""
    model_config = ConfigDict(frozen=True)

    pot: str = Field(..., description="Name of the pot funded")
    amount: Decimal


class DailyPlan(BaseModel):
    """One simulated day."""
    model_config = ConfigDict(frozen=True)

    date: date
    incoming_balance: Decimal = Field(
        ...,
        description="Balance carried in from the previous day"
    )
    earnings: Decimal = Field(
        ...,
        description="Income earned that day"
    )
    expenses: tuple[PaidExpense, ...] = ()
    pot_contributions: tuple[PotContribution, ...] = ()
    balance_after: Decimal = Field(
        ...,
        description="Balance after all activity, rounded to 2 dp"
    )
    day_status: DayStatus
    shortfall_alerts: tuple[str, ...] = ()

    @property
    def total_expenses(self) -> Decimal:
        return sum((expense.amount for expense in self.expenses), ZERO)

    @property
    def total_pot_contributions(self) -> Decimal:
        return sum((item.amount for item in self.pot_contributions), ZERO)

    @property
    def has_shortfall(self) -> bool:
        return bool(self.shortfall_alerts)


class WeeklySummary(BaseModel):
    """
    Roll-up of the days between two week boundaries.

    A week closes on Sunday or on the last day of the month, so the first
    and last week of a month are usually partial.
    """
    model_config = ConfigDict(frozen=True)

    week_number: int = Field(..., ge=1)
    start_date: date
    end_date: date
    total_income: Decimal
    total_expenses: Decimal
    total_pot_contributions: Decimal
    end_balance: Decimal
    leftover: Decimal = Field(
        ...,
        description="Income minus expenses minus pot contributions"
    )
    leftover_allocation: str

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def label(self) -> str:
        """Short range label, e.g. 'Oct 01 - Oct 05'."""
        return f"{self.start_date:%b %d} - {self.end_date:%b %d}"


class MonthForecast(BaseModel):
    """
    Result of forecasting one calendar month.

    closing_pots are the run's own pot copies after the last day; they are
    never the caller's Pot instances.
    """
    model_config = ConfigDict(frozen=True)

    month: date = Field(..., description="First day of the forecast month")
    daily_plans: tuple[DailyPlan, ...]
    weekly_summaries: tuple[WeeklySummary, ...]
    closing_pots: tuple[Pot, ...] = ()

    @property
    def closing_balance(self) -> Optional[Decimal]:
        if not self.daily_plans:
            return None
        return self.daily_plans[-1].balance_after

    @property
    def lowest_balance(self) -> Optional[Decimal]:
        if not self.daily_plans:
            return None
        return min(plan.balance_after for plan in self.daily_plans)

    @property
    def shortfall_days(self) -> list[DailyPlan]:
        return [plan for plan in self.daily_plans if plan.has_shortfall]

    def days_by_status(self, status: DayStatus) -> list[DailyPlan]:
        """All days that ended with the given status."""
        return [plan for plan in self.daily_plans if plan.day_status == status]

    def as_tuple(self) -> tuple[tuple[DailyPlan, ...], tuple[WeeklySummary, ...]]:
        return self.daily_plans, self.weekly_summaries


# =============================================================================
# PROFILE OVERVIEW
# =============================================================================

class ProfileOverview(BaseModel):
    """Headline figures for a profile, before any simulation."""
    model_config = ConfigDict(frozen=True)

    starting_balance: Decimal
    income_amount: Decimal
    income_type: IncomeType
    estimated_monthly_expenses: Decimal
    total_pot_targets: Decimal
    total_pot_balances: Decimal
    pot_count: int = Field(ge=0)
    expense_count: int = Field(ge=0)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field or entity with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'dangling_reference', 'never_charged')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage profile validation.

    Stage 1: Structural validation (references, identity)
    Stage 2: Semantic validation (schedules, feasibility hints)
    """

    profile_id: str
    structure_valid: bool
    semantic_valid: bool
    is_valid: bool = Field(
        ...,
        description="True when no error-level issue was found"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
