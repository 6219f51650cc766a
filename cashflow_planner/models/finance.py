"""
Domain Models for the Cash-Flow Planner

These models describe a user's finances for one forecast run:
the income profile, the prioritized pots and the recurring expenses.

DESIGN DECISION: Money is Decimal everywhere. Float drift would make
"pot balance >= expense amount" comparisons flaky on exact-fit days.

Pots are deliberately mutable: the simulator threads pot balances from one
day to the next. Every forecast run works on its own deep copy, so a
UserProfile handed in by a caller is never changed.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class IncomeType(str, Enum):
    """How often the user is paid."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PotFrequency(str, Enum):
    """
    How often a pot receives automatic contributions.

    BI_WEEKLY and FLEXIBLE pots are never funded automatically.
    """
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"
    FLEXIBLE = "flexible"


class PotType(str, Enum):
    """Semantic tag for display only. Allocation ignores it."""
    ESSENTIAL = "essential"
    SAVINGS = "savings"
    DEBT = "debt"
    BUFFER = "buffer"
    NEXT_MONTH = "next-month"


class ExpenseFrequency(str, Enum):
    """How often an expense falls due."""
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    ONE_TIME = "one-time"


# Frequencies that are charged on a concrete calendar date
DATED_FREQUENCIES = frozenset({ExpenseFrequency.MONTHLY, ExpenseFrequency.ONE_TIME})


# =============================================================================
# CORE MODELS
# =============================================================================

class Pot(BaseModel):
    """
    A named, prioritized allocation bucket.

    Lower priority numbers are funded first.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Pot identifier referenced by expenses"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    target_amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount the pot is filled towards"
    )
    current_balance: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Money currently held in the pot"
    )
    priority: int = Field(
        ...,
        description="Funding order (lower is funded first)"
    )
    frequency: PotFrequency = Field(
        ...,
        description="Contribution frequency"
    )
    type: PotType = Field(
        default=PotType.ESSENTIAL,
        description="UI classification"
    )

    @property
    def remaining(self) -> Decimal:
        """Amount still needed to reach the target (never negative)."""
        return max(self.target_amount - self.current_balance, Decimal("0"))


class Expense(BaseModel):
    """A recurring or one-off payment drawn from a pot."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Expense identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name (used in alerts)"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount charged each time the expense falls due"
    )
    frequency: ExpenseFrequency
    due_date: Optional[date] = Field(
        default=None,
        description="Exact charge date for monthly and one-time expenses"
    )
    pot_id: str = Field(
        ...,
        min_length=1,
        description="Pot that pays this expense"
    )
    priority: int = Field(
        default=0,
        description="Payment priority (informational, lower is paid first)"
    )

    @model_validator(mode='after')
    def validate_due_date(self) -> 'Expense':
        """Dated expenses need a due date to ever be charged."""
        if self.frequency in DATED_FREQUENCIES and self.due_date is None:
            raise ValueError(
                f"{self.frequency.value} expense '{self.name}' requires a due date"
            )
        return self


class UserProfile(BaseModel):
    """
    Static description of a user's finances for one month.

    Expenses keep their declaration order: that is the order they are
    charged in on any given day.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Profile identifier"
    )
    name: str = Field(
        default="",
        max_length=100,
        description="Profile owner display name"
    )
    starting_balance: Decimal = Field(
        ...,
        description="Balance at the start of the month (may be negative)"
    )
    income_type: IncomeType
    income_amount: Decimal = Field(
        ...,
        ge=0,
        description="Income per income period"
    )
    pots: list[Pot] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)

    def pot_by_id(self, pot_id: str) -> Optional[Pot]:
        """Return the first pot with this id, if any."""
        for pot in self.pots:
            if pot.id == pot_id:
                return pot
        return None
