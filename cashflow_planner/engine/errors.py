"""
Forecast engine errors.

Only configuration problems raise. A shortfall (a pot that cannot cover an
expense) is an expected outcome and is reported on the DailyPlan instead.
"""


class ForecastError(Exception):
    """Base exception for the forecast engine."""
    pass


class ForecastConfigurationError(ForecastError):
    """The profile cannot be forecast as configured."""
    pass


class PotReferenceError(ForecastConfigurationError):
    """An expense points at a pot that does not exist."""

    def __init__(self, expense_id: str, expense_name: str, pot_id: str):
        self.expense_id = expense_id
        self.expense_name = expense_name
        self.pot_id = pot_id
        super().__init__(
            f"Expense '{expense_name}' ({expense_id}) references unknown pot '{pot_id}'"
        )
