"""
Cash-Flow Planner - Source Package

Forecasts a month of day-by-day cash flow for a personal budget: income
arrives, expenses are paid from their pots, pots are topped up by priority,
and shortfalls are reported rather than hidden.

DESIGN PRINCIPLES:
1. Deterministic: the same profile and month always give the same forecast
2. Fail early on configuration errors, report shortfalls as data
3. Forecasts never mutate the caller's profile
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Cash-Flow Planner Team"
