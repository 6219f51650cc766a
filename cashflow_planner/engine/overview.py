"""Headline figures for a profile, computed without simulating anything."""

from decimal import Decimal

from cashflow_planner.models.finance import ExpenseFrequency, UserProfile
from cashflow_planner.models.forecast import ProfileOverview


ZERO = Decimal("0")

# Rough occurrences per month; dated expenses count once
MONTHLY_OCCURRENCES = {
    ExpenseFrequency.DAILY: 30,
    ExpenseFrequency.WEEKLY: 4,
    ExpenseFrequency.BI_WEEKLY: 2,
}


def summarize_profile(profile: UserProfile) -> ProfileOverview:
    estimated = sum(
        (
            expense.amount * MONTHLY_OCCURRENCES.get(expense.frequency, 1)
            for expense in profile.expenses
        ),
        ZERO,
    )
    return ProfileOverview(
        starting_balance=profile.starting_balance,
        income_amount=profile.income_amount,
        income_type=profile.income_type,
        estimated_monthly_expenses=estimated,
        total_pot_targets=sum((pot.target_amount for pot in profile.pots), ZERO),
        total_pot_balances=sum((pot.current_balance for pot in profile.pots), ZERO),
        pot_count=len(profile.pots),
        expense_count=len(profile.expenses),
    )
