"""
Sample profile: a daily earner with essential pots, a card repayment and
month-end bills.
"""

from datetime import date
from decimal import Decimal

from cashflow_planner.models.finance import (
    Expense,
    ExpenseFrequency,
    IncomeType,
    Pot,
    PotFrequency,
    PotType,
    UserProfile,
)


def sample_profile(bills_due: date = date(2025, 10, 28)) -> UserProfile:
    """Build a fresh sample profile. Bills fall due on `bills_due`."""
    return UserProfile(
        id="user-1",
        name="Sample User",
        starting_balance=Decimal("300"),
        income_type=IncomeType.DAILY,
        income_amount=Decimal("180"),
        pots=[
            Pot(id="pot-1", name="Petrol", target_amount=Decimal("560"), priority=1,
                frequency=PotFrequency.DAILY, type=PotType.ESSENTIAL),
            Pot(id="pot-2", name="Food", target_amount=Decimal("200"), priority=2,
                frequency=PotFrequency.WEEKLY, type=PotType.ESSENTIAL),
            Pot(id="pot-3", name="Car Rent", target_amount=Decimal("480"), priority=3,
                frequency=PotFrequency.BI_WEEKLY, type=PotType.ESSENTIAL),
            Pot(id="pot-4", name="Bills", target_amount=Decimal("990"), priority=4,
                frequency=PotFrequency.MONTHLY, type=PotType.ESSENTIAL),
            Pot(id="pot-5", name="Amex Repayment", target_amount=Decimal("800"), priority=5,
                frequency=PotFrequency.WEEKLY, type=PotType.DEBT),
            Pot(id="pot-6", name="Next-Month Pot", target_amount=Decimal("700"), priority=6,
                frequency=PotFrequency.MONTHLY, type=PotType.NEXT_MONTH),
            Pot(id="pot-7", name="Buffer", target_amount=Decimal("0"), priority=7,
                frequency=PotFrequency.FLEXIBLE, type=PotType.BUFFER),
        ],
        expenses=[
            Expense(id="exp-1", name="Petrol", amount=Decimal("20"),
                    frequency=ExpenseFrequency.DAILY, pot_id="pot-1", priority=1),
            Expense(id="exp-2", name="Food", amount=Decimal("50"),
                    frequency=ExpenseFrequency.WEEKLY, pot_id="pot-2", priority=2),
            Expense(id="exp-3", name="Car Rent", amount=Decimal("240"),
                    frequency=ExpenseFrequency.BI_WEEKLY, pot_id="pot-3", priority=3),
            Expense(id="exp-4", name="Bills", amount=Decimal("990"),
                    frequency=ExpenseFrequency.MONTHLY, due_date=bills_due,
                    pot_id="pot-4", priority=4),
            Expense(id="exp-5", name="Amex Payment", amount=Decimal("200"),
                    frequency=ExpenseFrequency.WEEKLY, pot_id="pot-5", priority=5),
        ],
    )
