"""
Data Models Package

This package contains all Pydantic models used by the Cash-Flow Planner.
"""

from cashflow_planner.models.finance import (
    DATED_FREQUENCIES,
    Expense,
    ExpenseFrequency,
    IncomeType,
    Pot,
    PotFrequency,
    PotType,
    UserProfile,
)
from cashflow_planner.models.forecast import (
    DailyPlan,
    DayStatus,
    MonthForecast,
    PaidExpense,
    PotContribution,
    ProfileOverview,
    ValidationIssue,
    ValidationResult,
    WeeklySummary,
)
from cashflow_planner.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Domain models
    "DATED_FREQUENCIES",
    "Expense",
    "ExpenseFrequency",
    "IncomeType",
    "Pot",
    "PotFrequency",
    "PotType",
    "UserProfile",
    # Forecast models
    "DailyPlan",
    "DayStatus",
    "MonthForecast",
    "PaidExpense",
    "PotContribution",
    "ProfileOverview",
    "ValidationIssue",
    "ValidationResult",
    "WeeklySummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
