"""
Pocketbook - Source Package

A personal finance tracker: incomes, expenses, debts, savings goals
and budgets, summarized into dashboards and charts.

DESIGN PRINCIPLES:
1. Records come from an external store; we only read them
2. All dashboard numbers are derived, never persisted
3. Dirty data never breaks the dashboard (skip and log)
4. Aggregation is pure and deterministic
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Pocketbook Team"
