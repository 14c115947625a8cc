"""
Aggregation Engine

Pure functions that turn flat lists of money events into the series
the dashboard charts:

- bucket_by_period: income/expense totals per day, week, month or year
- totals_by_category: ranked category shares
- combine_and_sort_recent: the recent activity list

DESIGN DECISION: Nothing here performs I/O or keeps state between
calls. Every call builds fresh output, so the functions can be used
from several rendering contexts at once.

Dirty data does not abort an aggregation. An event whose date is
missing or unparseable is excluded and logged; see
pocketbook.audit.log_skipped_record.
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Union

from pocketbook.analytics.periods import (
    Granularity,
    WindowMode,
    coerce_reference_date,
    generate_window,
    parse_event_date,
    period_for,
)
from pocketbook.audit import get_logger, log_skipped_record
from pocketbook.errors import MalformedRecordError
from pocketbook.models.records import EntryKind, MoneyEvent
from pocketbook.models.summaries import Bucket, CategoryTotal, RecentTransaction


UNCATEGORIZED = "Uncategorized"

EventLike = Union[MoneyEvent, Mapping[str, Any]]

logger = get_logger(__name__)


def coerce_event(item: Any, kind: EntryKind) -> MoneyEvent:
    """
    Accept MoneyEvents, stored records and plain mappings.

    Plain mappings take their kind from the list they came in.
    """
    if isinstance(item, MoneyEvent):
        return item
    if hasattr(item, "to_event"):
        return item.to_event()
    return MoneyEvent.model_validate({"kind": kind, **item})


def coerce_events(items: Iterable[Any], kind: EntryKind) -> list[MoneyEvent]:
    return [coerce_event(item, kind) for item in items or ()]


def _dated_events(
    events: Iterable[MoneyEvent],
    kind: EntryKind,
) -> Iterator[tuple[MoneyEvent, date]]:
    """Yield (event, parsed date), skipping and logging undatable events."""
    for event in events:
        try:
            day = parse_event_date(event.occurred_on, record_id=event.id)
        except MalformedRecordError as e:
            log_skipped_record(logger, e, kind.value)
            continue
        yield event, day


# =============================================================================
# TIME BUCKETS
# =============================================================================

def bucket_by_period(
    incomes: Iterable[EventLike],
    expenses: Iterable[EventLike],
    mode: Union[WindowMode, str] = WindowMode.LAST_12_MONTHS,
    reference_date: Union[date, datetime, str, None] = None,
) -> list[Bucket]:
    """
    Aggregate incomes and expenses into a fixed window of periods.

    The window holds exactly `mode.periods` buckets ending with the
    period that contains `reference_date` (default: today), oldest
    first. Every bucket is created with zero totals before any event is
    folded in, so empty periods still appear.

    Events dated outside the window are ignored. Events with a missing
    or unparseable date are skipped and logged. Neither is an error.

    The legacy LAST_6_MONTHS mode is delegated to recent_active_months.
    """
    mode = WindowMode(mode)
    if mode.is_legacy:
        return recent_active_months(
            incomes,
            expenses,
            limit=mode.periods,
            reference_date=reference_date,
        )

    window = generate_window(mode, reference_date)
    granularity = mode.granularity

    # Output order comes from `window`, never from dict iteration
    income_totals = {period.key: Decimal("0") for period in window}
    expense_totals = {period.key: Decimal("0") for period in window}

    _fold(coerce_events(incomes, EntryKind.INCOME), EntryKind.INCOME, granularity, income_totals)
    _fold(coerce_events(expenses, EntryKind.EXPENSE), EntryKind.EXPENSE, granularity, expense_totals)

    return [
        Bucket(
            key=period.label,
            period_start=period.start,
            period_end=period.end,
            total_income=income_totals[period.key],
            total_expense=expense_totals[period.key],
        )
        for period in window
    ]


def _fold(
    events: list[MoneyEvent],
    kind: EntryKind,
    granularity: Granularity,
    totals: dict[tuple, Decimal],
) -> None:
    """Add each event's amount to the bucket its date falls in, if any."""
    for event, day in _dated_events(events, kind):
        key = period_for(day, granularity).key
        if key in totals:
            totals[key] += event.amount


def recent_active_months(
    incomes: Iterable[EventLike],
    expenses: Iterable[EventLike],
    limit: int = 6,
    reference_date: Union[date, datetime, str, None] = None,
) -> list[Bucket]:
    """
    Legacy chart: the `limit` most recent months that contain data.

    Unlike bucket_by_period the window is not pre-populated; only
    months with at least one dated event appear, so the result may be
    shorter than `limit` (empty for empty input). Months after the
    reference month are left out.
    """
    if limit <= 0:
        return []

    reference_key = period_for(coerce_reference_date(reference_date), Granularity.MONTH).key
    months: dict[tuple, list[Decimal]] = {}
    periods = {}

    sources = (
        (coerce_events(incomes, EntryKind.INCOME), EntryKind.INCOME, 0),
        (coerce_events(expenses, EntryKind.EXPENSE), EntryKind.EXPENSE, 1),
    )
    for events, kind, slot in sources:
        for event, day in _dated_events(events, kind):
            period = period_for(day, Granularity.MONTH)
            if period.key > reference_key:
                continue
            if period.key not in months:
                months[period.key] = [Decimal("0"), Decimal("0")]
                periods[period.key] = period
            months[period.key][slot] += event.amount

    latest = sorted(months)[-limit:]
    return [
        Bucket(
            key=periods[key].label,
            period_start=periods[key].start,
            period_end=periods[key].end,
            total_income=months[key][0],
            total_expense=months[key][1],
        )
        for key in latest
    ]


# =============================================================================
# CATEGORIES
# =============================================================================

def category_label(category: Any, uncategorized_label: str = UNCATEGORIZED) -> str:
    """The grouping label for a category value. Blank means uncategorized."""
    if category is None:
        return uncategorized_label
    label = str(category).strip()
    return label or uncategorized_label


def totals_by_category(
    events: Iterable[EventLike],
    uncategorized_label: str = UNCATEGORIZED,
    kind: EntryKind = EntryKind.EXPENSE,
) -> list[CategoryTotal]:
    """
    Group events of one kind by category and rank the groups.

    Sorted by total descending, ties by category label ascending, so
    the input order never affects the result. Returns an empty list
    when the grand total is zero (including empty input).

    `kind` is only used to build MoneyEvents from plain mappings.
    """
    grouped: dict[str, Decimal] = {}
    for event in coerce_events(events, kind):
        label = category_label(event.category, uncategorized_label)
        grouped[label] = grouped.get(label, Decimal("0")) + event.amount

    grand_total = sum(grouped.values(), Decimal("0"))
    if grand_total == 0:
        return []

    ranked = sorted(grouped.items(), key=lambda item: (-item[1], item[0]))
    return [
        CategoryTotal(
            category=label,
            total=total,
            percentage_of_whole=float(total * 100 / grand_total),
        )
        for label, total in ranked
    ]


# =============================================================================
# RECENT ACTIVITY
# =============================================================================

def _to_recent(event: MoneyEvent, kind: EntryKind) -> RecentTransaction:
    return RecentTransaction(
        id=event.id,
        description=event.description,
        category=event.category,
        amount=event.amount,
        date=event.occurred_on,
        kind=kind,
    )


def _recency_key(transaction: RecentTransaction) -> tuple[int, int]:
    try:
        day = parse_event_date(transaction.date, record_id=transaction.id)
    except MalformedRecordError:
        return (1, 0)
    return (0, -day.toordinal())


def combine_and_sort_recent(
    incomes: Iterable[EventLike],
    expenses: Iterable[EventLike],
    limit: int = 10,
) -> list[RecentTransaction]:
    """
    Merge incomes and expenses into one list, most recent first.

    Same-day entries keep their input order (incomes before expenses).
    Entries without a usable date are kept but sorted last.
    """
    if limit <= 0:
        return []

    combined = [
        _to_recent(event, EntryKind.INCOME)
        for event in coerce_events(incomes, EntryKind.INCOME)
    ] + [
        _to_recent(event, EntryKind.EXPENSE)
        for event in coerce_events(expenses, EntryKind.EXPENSE)
    ]

    combined.sort(key=_recency_key)
    return combined[:limit]
