"""Aggregation engine and dashboard calculations."""

from pocketbook.analytics.aggregation import (
    UNCATEGORIZED,
    bucket_by_period,
    category_label,
    combine_and_sort_recent,
    recent_active_months,
    totals_by_category,
)
from pocketbook.analytics.filters import (
    ALL_CATEGORIES,
    distinct_categories,
    filter_by_date_range,
    filter_debts,
    search_events,
)
from pocketbook.analytics.periods import (
    PERIOD_LABELS,
    PERIOD_PRESETS,
    Granularity,
    Period,
    WindowMode,
    generate_window,
    parse_event_date,
    resolve_period_preset,
)
from pocketbook.analytics.progress import (
    budget_progress,
    dashboard_overview,
    debt_progress,
    effective_debt_status,
    savings_plan,
    summarize_debts,
)

__all__ = [
    # Aggregation
    "UNCATEGORIZED",
    "bucket_by_period",
    "category_label",
    "combine_and_sort_recent",
    "recent_active_months",
    "totals_by_category",
    # Filters
    "ALL_CATEGORIES",
    "distinct_categories",
    "filter_by_date_range",
    "filter_debts",
    "search_events",
    # Periods
    "PERIOD_LABELS",
    "PERIOD_PRESETS",
    "Granularity",
    "Period",
    "WindowMode",
    "generate_window",
    "parse_event_date",
    "resolve_period_preset",
    # Progress
    "budget_progress",
    "dashboard_overview",
    "debt_progress",
    "effective_debt_status",
    "savings_plan",
    "summarize_debts",
]
