"""
Record filtering for list pages and dashboard periods.

Filtering is kept separate from aggregation: the dashboard filters
first (by period preset) and aggregates the result.
"""

from collections.abc import Iterable
from datetime import date
from typing import Optional

from pocketbook.analytics.aggregation import EventLike, coerce_events
from pocketbook.analytics.periods import parse_event_date
from pocketbook.analytics.progress import effective_debt_status
from pocketbook.errors import MalformedRecordError
from pocketbook.models.records import (
    DateRange,
    Debt,
    DebtFilter,
    EntryKind,
    MoneyEvent,
)


ALL_CATEGORIES = "All"


def filter_by_date_range(
    events: Iterable[EventLike],
    date_range: Optional[DateRange],
    kind: EntryKind = EntryKind.EXPENSE,
) -> list[MoneyEvent]:
    """
    Events dated inside `date_range` (inclusive).

    With no range every event is returned, dated or not. With a range,
    events without a usable date are left out.
    """
    coerced = coerce_events(events, kind)
    if date_range is None:
        return coerced

    selected = []
    for event in coerced:
        try:
            day = parse_event_date(event.occurred_on, record_id=event.id)
        except MalformedRecordError:
            continue
        if date_range.contains(day):
            selected.append(event)
    return selected


def search_events(
    events: Iterable[EventLike],
    search: str = "",
    category: str = ALL_CATEGORIES,
    kind: EntryKind = EntryKind.EXPENSE,
) -> list[MoneyEvent]:
    """
    Case-insensitive search over description and category.

    `category` other than "All" must match exactly.
    """
    needle = search.strip().lower()
    results = []
    for event in coerce_events(events, kind):
        if category != ALL_CATEGORIES and event.category != category:
            continue
        if needle:
            haystacks = (event.description or "", event.category or "")
            if not any(needle in text.lower() for text in haystacks):
                continue
        results.append(event)
    return results


def distinct_categories(
    events: Iterable[EventLike],
    kind: EntryKind = EntryKind.EXPENSE,
) -> list[str]:
    """["All"] followed by the unique non-blank categories, alphabetically."""
    found = {
        event.category.strip()
        for event in coerce_events(events, kind)
        if event.category and event.category.strip()
    }
    return [ALL_CATEGORIES] + sorted(found)


def filter_debts(
    debts: Iterable[Debt],
    debt_filter: Optional[DebtFilter] = None,
    today: Optional[date] = None,
) -> list[Debt]:
    """
    Apply the debts page filters.

    The status filter compares against the effective status, so
    "overdue" also matches active debts past their due date.
    """
    if debt_filter is None or not debt_filter.is_active:
        return list(debts)

    needle = debt_filter.search.strip().lower()
    results = []
    for debt in debts:
        if needle and needle not in debt.name.lower():
            continue
        if (
            debt_filter.status != "all"
            and effective_debt_status(debt, today).value != debt_filter.status
        ):
            continue
        if debt_filter.debt_type != "all" and debt.debt_type.value != debt_filter.debt_type:
            continue
        if debt_filter.due_from and debt.due_date < debt_filter.due_from:
            continue
        if debt_filter.due_to and debt.due_date > debt_filter.due_to:
            continue
        results.append(debt)
    return results
