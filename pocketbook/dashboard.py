"""
Dashboard Service for Pocketbook

This module ties the record store to the aggregation engine and
defines the one end-to-end flow the host application needs:
load records → filter by period → aggregate → DashboardView.

DESIGN DECISION: Loading and building are separate steps.
- load_snapshot() is the only async, I/O-bound part
- build_view() is pure, so the host can rebuild the view for another
  period or window without refetching

Which data each section uses:
- Overview totals, category breakdowns and recent activity use the
  records inside the selected period
- The cash flow chart always uses every record; its window decides
  what is shown
- Savings, budgets and debts are not period-filtered
"""

import asyncio
from datetime import date, datetime
from typing import Optional, Union

from pocketbook.analytics import (
    WindowMode,
    bucket_by_period,
    budget_progress,
    combine_and_sort_recent,
    dashboard_overview,
    filter_by_date_range,
    resolve_period_preset,
    savings_plan,
    summarize_debts,
    totals_by_category,
)
from pocketbook.analytics.periods import coerce_reference_date
from pocketbook.audit import get_logger
from pocketbook.config import AnalyticsSettings, get_settings
from pocketbook.models.records import DateRange, EntryKind, FinanceSnapshot
from pocketbook.models.summaries import DashboardView
from pocketbook.services.storage import (
    InMemoryRecordStore,
    RecordStoreInterface,
    RestRecordStore,
)


logger = get_logger(__name__)


class DashboardService:
    """
    Builds dashboard views from a record store.
    
    Usage:
        service = create_dashboard_service()
        view = await service.get_dashboard(period="this_year")
    """
    
    def __init__(
        self,
        store: RecordStoreInterface,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().analytics
    
    @property
    def settings(self) -> AnalyticsSettings:
        return self._settings
    
    async def load_snapshot(self) -> FinanceSnapshot:
        """
        Fetch every record list concurrently.
        
        Raises:
            StorageError: If any list cannot be fetched
        """
        incomes, expenses, debts, goals, budgets = await asyncio.gather(
            self._store.list_incomes(),
            self._store.list_expenses(),
            self._store.list_debts(),
            self._store.list_savings_goals(),
            self._store.list_budgets(),
        )
        return FinanceSnapshot(
            incomes=incomes,
            expenses=expenses,
            debts=debts,
            savings_goals=goals,
            budgets=budgets,
        )
    
    def build_view(
        self,
        snapshot: FinanceSnapshot,
        period: Optional[str] = None,
        window: Union[WindowMode, str, None] = None,
        reference_date: Union[date, datetime, str, None] = None,
        date_range: Optional[DateRange] = None,
    ) -> DashboardView:
        """
        Compute the dashboard for one period preset and chart window.
        
        Args:
            snapshot: Records to aggregate
            period: Period preset (default from settings); ignored when
                    `date_range` is given
            window: Cash flow window (default from settings)
            reference_date: "Today" for presets and windows
            date_range: Explicit range for a custom period
            
        Raises:
            ValueError: Unknown period preset or window
        """
        reference = coerce_reference_date(reference_date)
        window_mode = WindowMode(window or self._settings.default_window)
        
        if date_range is not None:
            period_name = "custom"
        else:
            period_name = period or self._settings.default_period
            date_range = resolve_period_preset(period_name, reference)
        
        incomes = snapshot.income_events()
        expenses = snapshot.expense_events()
        period_incomes = filter_by_date_range(incomes, date_range, EntryKind.INCOME)
        period_expenses = filter_by_date_range(expenses, date_range, EntryKind.EXPENSE)
        
        label = self._settings.uncategorized_label
        view = DashboardView(
            generated_for=reference,
            period=period_name,
            window=window_mode.value,
            overview=dashboard_overview(
                period_incomes,
                period_expenses,
                debts=snapshot.debts,
                goals=snapshot.savings_goals,
            ),
            cash_flow=bucket_by_period(incomes, expenses, window_mode, reference),
            spending_by_category=totals_by_category(
                period_expenses, label, EntryKind.EXPENSE
            ),
            income_by_category=totals_by_category(
                period_incomes, label, EntryKind.INCOME
            ),
            recent_transactions=combine_and_sort_recent(
                period_incomes,
                period_expenses,
                limit=self._settings.recent_limit,
            ),
            savings=savings_plan(snapshot.savings_goals),
            budgets=budget_progress(snapshot.budgets, expenses),
            debts=summarize_debts(snapshot.debts, reference),
        )
        
        logger.info(
            "dashboard_built",
            period=period_name,
            window=window_mode.value,
            reference_date=reference.isoformat(),
            incomes=len(period_incomes),
            expenses=len(period_expenses),
            buckets=len(view.cash_flow),
        )
        return view
    
    async def get_dashboard(
        self,
        period: Optional[str] = None,
        window: Union[WindowMode, str, None] = None,
        reference_date: Union[date, datetime, str, None] = None,
        date_range: Optional[DateRange] = None,
    ) -> DashboardView:
        """Load records and build the view in one call."""
        snapshot = await self.load_snapshot()
        return self.build_view(
            snapshot,
            period=period,
            window=window,
            reference_date=reference_date,
            date_range=date_range,
        )


def create_dashboard_service(use_store: bool = True) -> DashboardService:
    """
    Factory function to create the dashboard service.
    
    Args:
        use_store: Whether to connect to the REST record store.
                   Set to False for demos and tests without a backend.
                   
    Returns:
        A DashboardService. Falls back to an empty in-memory store when
        the record store is not configured.
    """
    store: RecordStoreInterface
    if use_store:
        try:
            store = RestRecordStore(get_settings().record_store)
        except Exception as e:
            # Record store not configured - continue without it
            logger.warning("record_store_unavailable", error=str(e))
            store = InMemoryRecordStore()
    else:
        store = InMemoryRecordStore()
    
    return DashboardService(store)
