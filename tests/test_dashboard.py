"""
Integration tests for the dashboard flow.

Records come from the in-memory store; the reference date is fixed so
period presets and chart windows are deterministic.
"""

import asyncio
import json

import pytest
from datetime import date
from decimal import Decimal

from pocketbook.config import AnalyticsSettings
from pocketbook.dashboard import DashboardService, create_dashboard_service
from pocketbook.models import (
    Budget,
    DateRange,
    Debt,
    DebtType,
    ExpenseRecord,
    IncomeRecord,
    SavingsGoal,
)
from pocketbook.services.storage import InMemoryRecordStore, RecordStoreInterface, StorageError


REFERENCE = date(2025, 1, 31)


def make_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(
        incomes=[
            IncomeRecord(id="i1", source="Salary", amount=5000, income_date="2025-01-01", category="Job"),
            IncomeRecord(id="i2", source="Bonus", amount=1000, income_date="2024-12-20", category="Job"),
            IncomeRecord(id="i3", source="Gift", amount=50, income_date="", category=None),
        ],
        expenses=[
            ExpenseRecord(id="e1", description="Rent", amount=1500, category="Housing", expense_date="2025-01-03"),
            ExpenseRecord(id="e2", description="Groceries", amount=300, category="Food", expense_date="2025-01-15"),
            ExpenseRecord(id="e3", description="Dinner", amount=200, category="Food", expense_date="2024-12-31"),
            ExpenseRecord(id="e4", description="Mystery", amount=10, category="Food", expense_date="not-a-date"),
        ],
        debts=[
            Debt(id="d1", name="Car loan", amount=1000, paid_amount=400, due_date=date(2025, 6, 1)),
            Debt(id="d2", name="Loan to Sam", amount=200, due_date=date(2025, 1, 1), debt_type=DebtType.LENT),
        ],
        savings_goals=[
            SavingsGoal(id="g1", name="Trip", target_amount=2000, current_amount=500),
        ],
        budgets=[
            Budget(id="b1", category="Food", amount=400),
            Budget(id="b2", category="Housing", amount=1500),
        ],
    )


def make_service(**settings) -> DashboardService:
    return DashboardService(make_store(), AnalyticsSettings(**settings))


class TestDashboardService:
    """Tests for DashboardService."""

    def test_load_snapshot(self):
        """Test that every list is loaded."""
        snapshot = asyncio.run(make_service().load_snapshot())
        assert len(snapshot.incomes) == 3
        assert len(snapshot.expenses) == 4
        assert len(snapshot.debts) == 2
        assert len(snapshot.savings_goals) == 1
        assert len(snapshot.budgets) == 2

    def test_this_month_view(self):
        """Test overview, categories and recent list for the current month."""
        view = asyncio.run(make_service().get_dashboard(
            period="this_month",
            reference_date=REFERENCE,
        ))

        assert view.period == "this_month"
        assert view.overview.total_income == Decimal("5000")
        assert view.overview.total_expenses == Decimal("1800")
        assert view.overview.balance == Decimal("3200")
        assert view.overview.remaining_debt == Decimal("800")
        assert view.overview.total_saved == Decimal("500")

        assert [c.category for c in view.spending_by_category] == ["Housing", "Food"]
        assert [c.category for c in view.income_by_category] == ["Job"]
        assert [r.id for r in view.recent_transactions] == ["e2", "e1", "i1"]

    def test_cash_flow_uses_all_records(self):
        """Test that the chart is not limited by the period preset."""
        view = asyncio.run(make_service().get_dashboard(
            period="today",
            reference_date=REFERENCE,
        ))
        assert view.window == "last_12_months"
        assert len(view.cash_flow) == 12
        dec, jan = view.cash_flow[-2:]
        assert (dec.key, dec.total_income, dec.total_expense) == ("Dec 2024", Decimal("1000"), Decimal("200"))
        assert (jan.key, jan.total_income, jan.total_expense) == ("Jan 2025", Decimal("5000"), Decimal("1800"))

    def test_all_time_includes_undated_entries(self):
        """Test that all_time keeps records without a usable date in totals."""
        view = asyncio.run(make_service().get_dashboard(
            period="all_time",
            reference_date=REFERENCE,
        ))
        assert view.overview.total_income == Decimal("6050")
        assert view.overview.total_expenses == Decimal("2010")
        assert view.recent_transactions[-1].id in {"i3", "e4"}

    def test_budgets_and_debts(self):
        """Test budget progress and the overdue count."""
        view = asyncio.run(make_service().get_dashboard(reference_date=REFERENCE))
        food = next(b for b in view.budgets if b.category == "Food")
        assert food.spent == Decimal("510")
        assert food.is_over_budget
        assert view.debts.overdue_debts == 1
        assert view.debts.active_debts == 1
        assert view.savings.goals[0].progress == pytest.approx(25.0)

    def test_window_selection(self):
        """Test switching the cash flow window."""
        view = asyncio.run(make_service().get_dashboard(
            window="last_7_days",
            reference_date=REFERENCE,
        ))
        assert len(view.cash_flow) == 7
        assert view.cash_flow[-1].key == "Jan 31"

    def test_settings_defaults(self):
        """Test that settings drive the default period, window and limit."""
        service = make_service(
            default_period="this_year",
            default_window="last_5_years",
            recent_limit=2,
            uncategorized_label="Other",
        )
        view = asyncio.run(service.get_dashboard(reference_date=REFERENCE))
        assert view.period == "this_year"
        assert view.window == "last_5_years"
        assert len(view.cash_flow) == 5
        assert len(view.recent_transactions) == 2

    def test_custom_date_range(self):
        """Test a custom period."""
        service = make_service()
        snapshot = asyncio.run(service.load_snapshot())
        view = service.build_view(
            snapshot,
            reference_date=REFERENCE,
            date_range=DateRange(start=date(2024, 12, 1), end=date(2024, 12, 31)),
        )
        assert view.period == "custom"
        assert view.overview.total_income == Decimal("1000")
        assert view.overview.total_expenses == Decimal("200")

    def test_unknown_period(self):
        """Test that an unknown preset raises ValueError."""
        service = make_service()
        snapshot = asyncio.run(service.load_snapshot())
        with pytest.raises(ValueError):
            service.build_view(snapshot, period="fortnight", reference_date=REFERENCE)

    def test_report_json(self):
        """Test the downloadable report."""
        view = asyncio.run(make_service().get_dashboard(reference_date=REFERENCE))
        report = json.loads(view.to_report_json())
        assert report["period"] == "this_month"
        assert len(report["cash_flow"]) == 12
        assert report["spending_by_category"][0]["category"] == "Housing"

    def test_store_errors_propagate(self):
        """Test that storage failures reach the caller."""
        class FailingStore(InMemoryRecordStore):
            async def list_debts(self):
                raise StorageError("backend down")

        service = DashboardService(FailingStore(), AnalyticsSettings())
        with pytest.raises(StorageError):
            asyncio.run(service.load_snapshot())


class TestCreateDashboardService:
    """Tests for the service factory."""

    def test_without_store(self):
        """Test that use_store=False gives an in-memory store."""
        service = create_dashboard_service(use_store=False)
        view = asyncio.run(service.get_dashboard(reference_date=REFERENCE))
        assert view.overview.total_income == 0
        assert all(b.total_income == 0 for b in view.cash_flow)

    def test_unconfigured_store_falls_back(self, monkeypatch, tmp_path):
        """Test the fallback when no backend is configured."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
        service = create_dashboard_service(use_store=True)
        assert isinstance(service, DashboardService)
        snapshot = asyncio.run(service.load_snapshot())
        assert snapshot.incomes == []

    def test_interface_is_abstract(self):
        """Test that the store interface cannot be instantiated."""
        with pytest.raises(TypeError):
            RecordStoreInterface()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
