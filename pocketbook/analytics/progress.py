"""
Progress calculations for budgets, debts and savings goals.

All percentages are unrounded floats. A zero target (budget amount,
debt amount, savings target) yields 0% rather than a division error.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pocketbook.analytics.aggregation import EventLike, coerce_events
from pocketbook.analytics.periods import parse_event_date
from pocketbook.errors import MalformedRecordError
from pocketbook.models.records import (
    Budget,
    DateRange,
    Debt,
    DebtStatus,
    DebtType,
    EntryKind,
    SavingsGoal,
)
from pocketbook.models.summaries import (
    BudgetProgress,
    DashboardOverview,
    DebtProgress,
    DebtSummary,
    SavingsGoalProgress,
    SavingsPlan,
)


def percentage(part: Decimal, whole: Decimal) -> float:
    """part / whole * 100, or 0 when whole is not positive."""
    if whole <= 0:
        return 0.0
    return float(part * 100 / whole)


# =============================================================================
# BUDGETS
# =============================================================================

def _dated_within(event, date_range: DateRange) -> bool:
    try:
        day = parse_event_date(event.occurred_on, record_id=event.id)
    except MalformedRecordError:
        return False
    return date_range.contains(day)


def budget_progress(
    budgets: Iterable[Budget],
    expenses: Iterable[EventLike],
    date_range: Optional[DateRange] = None,
) -> list[BudgetProgress]:
    """
    Spending against each budget, sorted by category.

    An expense counts towards a budget when its category matches the
    budget's category exactly. With `date_range`, only expenses dated
    inside the range count.
    """
    spent_by_category: dict[str, Decimal] = {}
    for event in coerce_events(expenses, EntryKind.EXPENSE):
        if event.category is None:
            continue
        if date_range is not None and not _dated_within(event, date_range):
            continue
        spent_by_category[event.category] = (
            spent_by_category.get(event.category, Decimal("0")) + event.amount
        )

    results = []
    for budget in budgets:
        spent = spent_by_category.get(budget.category, Decimal("0"))
        results.append(BudgetProgress(
            budget_id=budget.id,
            category=budget.category,
            amount=budget.amount,
            spent=spent,
            progress=percentage(spent, budget.amount),
        ))

    results.sort(key=lambda item: (item.category, item.budget_id))
    return results


# =============================================================================
# DEBTS
# =============================================================================

def effective_debt_status(debt: Debt, today: Optional[date] = None) -> DebtStatus:
    """An active debt past its due date is overdue."""
    today = today or date.today()
    if debt.status is DebtStatus.ACTIVE and debt.due_date < today:
        return DebtStatus.OVERDUE
    return debt.status


def remaining_balance(debt: Debt) -> Decimal:
    """Unpaid part of a debt, never negative."""
    return max(debt.amount - debt.paid_amount, Decimal("0"))


def debt_progress(debt: Debt, today: Optional[date] = None) -> DebtProgress:
    return DebtProgress(
        debt_id=debt.id,
        name=debt.name,
        debt_type=debt.debt_type,
        amount=debt.amount,
        paid_amount=debt.paid_amount,
        remaining=remaining_balance(debt),
        paid_percentage=percentage(debt.paid_amount, debt.amount),
        status=effective_debt_status(debt, today),
        due_date=debt.due_date,
    )


def summarize_debts(
    debts: Iterable[Debt],
    today: Optional[date] = None,
) -> DebtSummary:
    """
    Totals across debts.

    Status counts use the effective status, so an active debt past
    its due date counts as overdue, not active.
    """
    today = today or date.today()
    summary = DebtSummary()

    for debt in debts:
        remaining = remaining_balance(debt)
        if debt.debt_type is DebtType.BORROWED:
            summary.total_borrowed += debt.amount
            summary.total_owed += remaining
        else:
            summary.total_lent += debt.amount
            summary.total_owing += remaining

        status = effective_debt_status(debt, today)
        if status is DebtStatus.OVERDUE:
            summary.overdue_debts += 1
        elif status is DebtStatus.CLEARED:
            summary.cleared_debts += 1
        else:
            summary.active_debts += 1

    return summary


# =============================================================================
# SAVINGS
# =============================================================================

def savings_plan(goals: Iterable[SavingsGoal]) -> SavingsPlan:
    """Per-goal progress plus overall saved/target totals."""
    plan = SavingsPlan()
    for goal in goals:
        plan.total_saved += goal.current_amount
        plan.total_target += goal.target_amount
        plan.goals.append(SavingsGoalProgress(
            goal_id=goal.id,
            name=goal.name,
            current_amount=goal.current_amount,
            target_amount=goal.target_amount,
            progress=percentage(goal.current_amount, goal.target_amount),
        ))
    return plan


# =============================================================================
# OVERVIEW
# =============================================================================

def dashboard_overview(
    incomes: Iterable[EventLike],
    expenses: Iterable[EventLike],
    debts: Iterable[Debt] = (),
    goals: Iterable[SavingsGoal] = (),
) -> DashboardOverview:
    """
    Headline totals.

    Remaining debt is the plain sum of (amount - paid) over all debts,
    regardless of direction, as shown on the dashboard card.
    """
    def total(events: Iterable[Any], kind: EntryKind) -> Decimal:
        return sum(
            (event.amount for event in coerce_events(events, kind)),
            Decimal("0"),
        )

    return DashboardOverview(
        total_income=total(incomes, EntryKind.INCOME),
        total_expenses=total(expenses, EntryKind.EXPENSE),
        remaining_debt=sum(
            (debt.amount - debt.paid_amount for debt in debts),
            Decimal("0"),
        ),
        total_saved=sum(
            (goal.current_amount for goal in goals),
            Decimal("0"),
        ),
    )
