"""Profile validation package."""

from cashflow_planner.validation.validator import ProfileValidator

__all__ = ["ProfileValidator"]
