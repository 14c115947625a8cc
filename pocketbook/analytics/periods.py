"""
Calendar periods, windows and date parsing.

DESIGN DECISION: Periods are keyed by structural tuples, never by
formatted strings. A month is (year, month), a day or a week is
(year, month, day) of its first day, a year is (year,). Labels such as
"Jan 2025" are produced only when a bucket is emitted, so nothing is
ever parsed back from a label.
"""

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, NamedTuple, Optional, Union

from pocketbook.errors import MalformedRecordError, MissingDateError
from pocketbook.models.records import DateRange


class Granularity(str, Enum):
    """Size of one bucket."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class WindowMode(str, Enum):
    """
    Chart windows, each ending at the reference date (inclusive).

    LAST_6_MONTHS is the legacy chart: it keeps only the six most
    recent months that contain data instead of a fixed window.
    """
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_12_WEEKS = "last_12_weeks"
    LAST_12_MONTHS = "last_12_months"
    LAST_5_YEARS = "last_5_years"
    LAST_6_MONTHS = "last_6_months"

    @property
    def granularity(self) -> Granularity:
        return _WINDOW_SHAPES[self][0]

    @property
    def periods(self) -> int:
        return _WINDOW_SHAPES[self][1]

    @property
    def is_legacy(self) -> bool:
        return self is WindowMode.LAST_6_MONTHS


_WINDOW_SHAPES = {
    WindowMode.LAST_7_DAYS: (Granularity.DAY, 7),
    WindowMode.LAST_30_DAYS: (Granularity.DAY, 30),
    WindowMode.LAST_12_WEEKS: (Granularity.WEEK, 12),
    WindowMode.LAST_12_MONTHS: (Granularity.MONTH, 12),
    WindowMode.LAST_5_YEARS: (Granularity.YEAR, 5),
    WindowMode.LAST_6_MONTHS: (Granularity.MONTH, 6),
}


class Period(NamedTuple):
    """One calendar period. `key` is the structural identity."""
    key: tuple
    granularity: Granularity
    start: date
    end: date

    @property
    def label(self) -> str:
        return format_label(self.start, self.granularity)


# =============================================================================
# PARSING
# =============================================================================

def parse_event_date(value: Any, record_id: Optional[str] = None) -> date:
    """
    Parse an event date.

    Accepts `YYYY-MM-DD`, ISO datetimes (the date part is used as
    written, no timezone conversion) and date/datetime objects.

    Raises:
        MissingDateError: value is None or blank
        MalformedRecordError: value cannot be parsed
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingDateError(
            "Record has no date",
            record_id=record_id,
            raw_value=value,
        )
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise MalformedRecordError(
            f"Unparseable date: {text!r}",
            record_id=record_id,
            raw_value=value,
        ) from e


def coerce_reference_date(value: Union[date, datetime, str, None] = None) -> date:
    """Turn a reference date argument into a date; None means today."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # A bad reference date is a caller error, not dirty data
    return parse_event_date(value)


# =============================================================================
# PERIOD ARITHMETIC
# =============================================================================

def _month_start(year: int, month: int) -> date:
    return date(year, month, 1)


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def period_for(day: date, granularity: Granularity) -> Period:
    """The period of the given granularity that contains `day`."""
    if granularity is Granularity.DAY:
        return Period((day.year, day.month, day.day), granularity, day, day)
    if granularity is Granularity.WEEK:
        start = day - timedelta(days=day.weekday())
        return Period(
            (start.year, start.month, start.day),
            granularity,
            start,
            start + timedelta(days=6),
        )
    if granularity is Granularity.MONTH:
        return Period(
            (day.year, day.month),
            granularity,
            _month_start(day.year, day.month),
            _month_end(day.year, day.month),
        )
    return Period(
        (day.year,),
        granularity,
        date(day.year, 1, 1),
        date(day.year, 12, 31),
    )


def shift_period(period: Period, steps: int) -> Period:
    """Move a period `steps` units forward (negative moves backward)."""
    granularity = period.granularity
    if granularity is Granularity.DAY:
        return period_for(period.start + timedelta(days=steps), granularity)
    if granularity is Granularity.WEEK:
        return period_for(period.start + timedelta(weeks=steps), granularity)
    if granularity is Granularity.MONTH:
        index = period.start.year * 12 + (period.start.month - 1) + steps
        year, month = divmod(index, 12)
        return period_for(date(year, month + 1, 1), granularity)
    return period_for(date(period.start.year + steps, 1, 1), granularity)


def generate_window(
    mode: WindowMode,
    reference_date: Union[date, datetime, str, None] = None,
) -> list[Period]:
    """
    The full ordered window of periods ending at `reference_date`.

    Returns exactly `mode.periods` periods, oldest first. The last
    period contains the reference date.
    """
    reference = coerce_reference_date(reference_date)
    current = period_for(reference, mode.granularity)
    count = mode.periods
    return [shift_period(current, offset) for offset in range(-(count - 1), 1)]


def format_label(start: date, granularity: Granularity) -> str:
    """Display label for a period starting at `start`."""
    month_name = calendar.month_abbr[start.month]
    if granularity in (Granularity.DAY, Granularity.WEEK):
        return f"{month_name} {start.day}"
    if granularity is Granularity.MONTH:
        return f"{month_name} {start.year}"
    return str(start.year)


# =============================================================================
# DASHBOARD PERIOD PRESETS
# =============================================================================

PERIOD_PRESETS = ("today", "this_week", "this_month", "this_year", "all_time")

PERIOD_LABELS = {
    "today": "Today",
    "this_week": "This Week",
    "this_month": "This Month",
    "this_year": "This Year",
    "all_time": "All Time",
    "custom": "Custom Range",
}


def resolve_period_preset(
    preset: str,
    today: Optional[date] = None,
) -> Optional[DateRange]:
    """
    Date range for a dashboard period preset.

    Weeks run Sunday to Saturday here, as on the dashboard selector.
    Returns None for "all_time" (no filtering).

    Raises:
        ValueError: unknown preset
    """
    today = today or date.today()

    if preset == "today":
        return DateRange(start=today, end=today)
    if preset == "this_week":
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return DateRange(start=start, end=start + timedelta(days=6))
    if preset == "this_month":
        return DateRange(
            start=_month_start(today.year, today.month),
            end=_month_end(today.year, today.month),
        )
    if preset == "this_year":
        return DateRange(start=date(today.year, 1, 1), end=date(today.year, 12, 31))
    if preset == "all_time":
        return None
    raise ValueError(f"Unknown period preset: {preset}")
