"""
Data Models Package

This package contains all Pydantic models used in Pocketbook.
Records flow in from the store; summaries flow out to the UI.
"""

from pocketbook.models.records import (
    Budget,
    DateRange,
    Debt,
    DebtFilter,
    DebtStatus,
    DebtType,
    EntryKind,
    ExpenseRecord,
    FinanceSnapshot,
    IncomeRecord,
    MoneyEvent,
    SavingsGoal,
)
from pocketbook.models.summaries import (
    Bucket,
    BudgetProgress,
    CategoryTotal,
    DashboardOverview,
    DashboardView,
    DebtProgress,
    DebtSummary,
    RecentTransaction,
    SavingsGoalProgress,
    SavingsPlan,
)

__all__ = [
    # Record models
    "Budget",
    "DateRange",
    "Debt",
    "DebtFilter",
    "DebtStatus",
    "DebtType",
    "EntryKind",
    "ExpenseRecord",
    "FinanceSnapshot",
    "IncomeRecord",
    "MoneyEvent",
    "SavingsGoal",
    # Derived models
    "Bucket",
    "BudgetProgress",
    "CategoryTotal",
    "DashboardOverview",
    "DashboardView",
    "DebtProgress",
    "DebtSummary",
    "RecentTransaction",
    "SavingsGoalProgress",
    "SavingsPlan",
]
