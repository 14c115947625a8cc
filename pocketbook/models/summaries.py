"""
Derived Models for Pocketbook

Everything in this module is computed from records on every call and
never persisted. The rendering layer relies on the invariants stated
on each model (fully populated windows, explicit sort orders).
"""

import json
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pocketbook.models.records import DebtStatus, DebtType, EntryKind


# =============================================================================
# AGGREGATION ENGINE OUTPUT
# =============================================================================

class Bucket(BaseModel):
    """
    A fixed calendar period with aggregated income and expense totals.

    Totals are non-negative sums of the events dated inside
    [period_start, period_end]. A bucket with no events has zero totals;
    it is never omitted from a window.
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(
        ...,
        description="Display label, e.g. 'Jan 2025' or 'Jan 15'"
    )
    period_start: date
    period_end: date
    total_income: Decimal = Field(default=Decimal("0"), ge=0)
    total_expense: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


class CategoryTotal(BaseModel):
    """Aggregated amount and share of the whole for one category label."""
    model_config = ConfigDict(frozen=True)

    category: str
    total: Decimal = Field(..., ge=0)
    percentage_of_whole: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Unrounded share; round only for display"
    )


class RecentTransaction(BaseModel):
    """Common shape for incomes and expenses in the recent activity list."""
    model_config = ConfigDict(frozen=True)

    id: str
    description: Optional[str] = None
    category: Optional[str] = None
    amount: Decimal
    date: Optional[str] = None
    kind: EntryKind


# =============================================================================
# PROGRESS VIEWS
# =============================================================================

class BudgetProgress(BaseModel):
    """Spending against one category budget."""

    budget_id: str
    category: str
    amount: Decimal
    spent: Decimal
    progress: float = Field(
        ...,
        ge=0.0,
        description="spent / amount * 100; may exceed 100 when over budget"
    )

    @property
    def remaining(self) -> Decimal:
        return self.amount - self.spent

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.amount


class DebtProgress(BaseModel):
    """Repayment progress of one debt."""

    debt_id: str
    name: str
    debt_type: DebtType
    amount: Decimal
    paid_amount: Decimal
    remaining: Decimal
    paid_percentage: float = Field(..., ge=0.0)
    status: DebtStatus = Field(
        ...,
        description="Effective status (OVERDUE derived from due date)"
    )
    due_date: date

    @property
    def display_percentage(self) -> float:
        """Percentage clamped to 100 for progress bars."""
        return min(100.0, self.paid_percentage)


class DebtSummary(BaseModel):
    """Totals across all debts, split by direction and status."""

    total_borrowed: Decimal = Decimal("0")
    total_lent: Decimal = Decimal("0")
    total_owed: Decimal = Field(
        default=Decimal("0"),
        description="Remaining balance on borrowed debts"
    )
    total_owing: Decimal = Field(
        default=Decimal("0"),
        description="Remaining balance on lent debts"
    )
    active_debts: int = 0
    overdue_debts: int = 0
    cleared_debts: int = 0

    @property
    def net_balance(self) -> Decimal:
        """Positive when the user is owed more than they owe."""
        return self.total_lent - self.total_borrowed


class SavingsGoalProgress(BaseModel):
    goal_id: str
    name: str
    current_amount: Decimal
    target_amount: Decimal
    progress: float = Field(..., ge=0.0)


class SavingsPlan(BaseModel):
    total_saved: Decimal = Decimal("0")
    total_target: Decimal = Decimal("0")
    goals: list[SavingsGoalProgress] = Field(default_factory=list)


class DashboardOverview(BaseModel):
    """The headline numbers at the top of the dashboard."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    remaining_debt: Decimal = Decimal("0")
    total_saved: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses


# =============================================================================
# DASHBOARD
# =============================================================================

class DashboardView(BaseModel):
    """
    Everything the host application renders on the dashboard.

    Built by pocketbook.dashboard.DashboardService; exportable as a
    JSON report.
    """

    generated_for: date = Field(
        ...,
        description="Reference date the view was computed for"
    )
    period: str
    window: str
    overview: DashboardOverview
    cash_flow: list[Bucket] = Field(default_factory=list)
    spending_by_category: list[CategoryTotal] = Field(default_factory=list)
    income_by_category: list[CategoryTotal] = Field(default_factory=list)
    recent_transactions: list[RecentTransaction] = Field(default_factory=list)
    savings: SavingsPlan = Field(default_factory=SavingsPlan)
    budgets: list[BudgetProgress] = Field(default_factory=list)
    debts: DebtSummary = Field(default_factory=DebtSummary)

    def to_report_json(self) -> str:
        """
        Serialize the view as an indented JSON report.

        Derived properties (balance, net) are included so the report
        reads on its own.
        """
        data = self.model_dump(mode="json")
        data["overview"]["balance"] = str(self.overview.balance)
        data["debts"]["net_balance"] = str(self.debts.net_balance)
        for bucket_data, bucket in zip(data["cash_flow"], self.cash_flow):
            bucket_data["net"] = str(bucket.net)
        return json.dumps(data, indent=2, ensure_ascii=False)
