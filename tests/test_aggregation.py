"""
Tests for the aggregation engine.

Covers the bucket window invariants, category ranking and the recent
activity list, including dirty data (missing and malformed dates).
"""

import logging
import random

import pytest
from datetime import date
from decimal import Decimal

from pocketbook.analytics.aggregation import (
    bucket_by_period,
    category_label,
    combine_and_sort_recent,
    recent_active_months,
    totals_by_category,
)
from pocketbook.analytics.periods import WindowMode
from pocketbook.models import EntryKind, ExpenseRecord, IncomeRecord, MoneyEvent


REFERENCE = date(2025, 1, 31)


def income(amount, when, category=None, id=None):
    return MoneyEvent(
        id=id,
        amount=Decimal(str(amount)),
        date=when,
        category=category,
        kind=EntryKind.INCOME,
    )


def expense(amount, when, category=None, id=None, description=None):
    return MoneyEvent(
        id=id,
        amount=Decimal(str(amount)),
        date=when,
        category=category,
        description=description,
        kind=EntryKind.EXPENSE,
    )


class TestBucketByPeriod:
    """Tests for fixed-window bucketing."""

    def test_empty_input_yields_full_window(self):
        """Test that empty input still produces 12 zero buckets."""
        buckets = bucket_by_period([], [], WindowMode.LAST_12_MONTHS, REFERENCE)
        assert len(buckets) == 12
        assert all(b.total_income == 0 and b.total_expense == 0 for b in buckets)

    def test_keys_are_the_twelve_months_ending_at_reference(self):
        """Test bucket keys and chronological order."""
        buckets = bucket_by_period([], [], WindowMode.LAST_12_MONTHS, REFERENCE)
        assert [b.key for b in buckets] == [
            "Feb 2024", "Mar 2024", "Apr 2024", "May 2024", "Jun 2024",
            "Jul 2024", "Aug 2024", "Sep 2024", "Oct 2024", "Nov 2024",
            "Dec 2024", "Jan 2025",
        ]
        starts = [b.period_start for b in buckets]
        assert starts == sorted(starts)

    def test_single_month_scenario(self):
        """Test one income and one expense in the reference month."""
        incomes = [{"amount": 1000, "date": "2025-01-15"}]
        expenses = [{"amount": 400, "date": "2025-01-20", "category": "Food"}]

        buckets = bucket_by_period(incomes, expenses, WindowMode.LAST_12_MONTHS, "2025-01-31")

        jan = buckets[-1]
        assert jan.key == "Jan 2025"
        assert jan.total_income == Decimal("1000")
        assert jan.total_expense == Decimal("400")
        for other in buckets[:-1]:
            assert other.total_income == 0
            assert other.total_expense == 0

    def test_idempotent(self):
        """Test that identical inputs give identical outputs."""
        incomes = [income(100, "2024-11-03"), income(50, "2025-01-02")]
        expenses = [expense(20, "2024-12-24", "Gifts")]
        first = bucket_by_period(incomes, expenses, WindowMode.LAST_12_MONTHS, REFERENCE)
        second = bucket_by_period(incomes, expenses, WindowMode.LAST_12_MONTHS, REFERENCE)
        assert first == second

    def test_sum_invariant_with_all_events_in_window(self):
        """Test that totals match the input when every event is dated in range."""
        incomes = [income(n * 10, f"2024-{m:02d}-15") for n, m in enumerate(range(2, 13), 1)]
        buckets = bucket_by_period(incomes, [], WindowMode.LAST_12_MONTHS, REFERENCE)
        assert sum(b.total_income for b in buckets) == sum(e.amount for e in incomes)

    def test_sum_invariant_with_excluded_events(self):
        """Test that out-of-window and undated events only ever reduce totals."""
        incomes = [
            income(100, "2025-01-10"),
            income(200, "2023-05-01"),
            income(300, ""),
            income(400, None),
            income(500, "garbage"),
        ]
        buckets = bucket_by_period(incomes, [], WindowMode.LAST_12_MONTHS, REFERENCE)
        total = sum(b.total_income for b in buckets)
        assert total <= sum(e.amount for e in incomes)
        assert total == Decimal("100")

    def test_empty_date_is_skipped_without_error(self):
        """Test that an event with an empty date contributes nothing."""
        buckets = bucket_by_period(
            [],
            [{"amount": 75, "date": ""}],
            WindowMode.LAST_12_MONTHS,
            REFERENCE,
        )
        assert all(b.total_expense == 0 for b in buckets)

    def test_malformed_date_is_logged(self, caplog):
        """Test that an unparseable date is skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            buckets = bucket_by_period(
                [income(10, "31/01/2025", id="bad-1")],
                [],
                WindowMode.LAST_12_MONTHS,
                REFERENCE,
            )
        assert all(b.total_income == 0 for b in buckets)
        messages = [record.getMessage() for record in caplog.records]
        assert any("record_skipped" in m and "bad-1" in m for m in messages)

    def test_full_period_is_counted(self):
        """Test that events later in the reference period still count."""
        buckets = bucket_by_period(
            [income(10, "2025-01-31")],
            [],
            WindowMode.LAST_12_MONTHS,
            date(2025, 1, 5),
        )
        assert buckets[-1].total_income == Decimal("10")

    def test_future_periods_are_excluded(self):
        """Test that events after the window are ignored."""
        buckets = bucket_by_period(
            [income(10, "2025-02-01")],
            [],
            WindowMode.LAST_12_MONTHS,
            REFERENCE,
        )
        assert sum(b.total_income for b in buckets) == 0

    def test_daily_window(self):
        """Test daily buckets for the last 7 days."""
        buckets = bucket_by_period(
            [income(5, "2025-01-31"), income(7, "2025-01-31T09:00:00Z")],
            [expense(3, "2025-01-25")],
            WindowMode.LAST_7_DAYS,
            REFERENCE,
        )
        assert len(buckets) == 7
        assert buckets[0].key == "Jan 25"
        assert buckets[0].total_expense == Decimal("3")
        assert buckets[-1].key == "Jan 31"
        assert buckets[-1].total_income == Decimal("12")

    def test_weekly_window(self):
        """Test weekly buckets start on Monday."""
        buckets = bucket_by_period(
            [income(5, "2025-01-26")],
            [],
            WindowMode.LAST_12_WEEKS,
            REFERENCE,
        )
        assert len(buckets) == 12
        # 2025-01-31 falls in the week of Monday Jan 27
        assert buckets[-1].period_start == date(2025, 1, 27)
        assert buckets[-2].total_income == Decimal("5")

    def test_yearly_window(self):
        """Test yearly buckets."""
        buckets = bucket_by_period(
            [income(5, "2021-06-01"), income(9, "2020-12-31")],
            [],
            WindowMode.LAST_5_YEARS,
            REFERENCE,
        )
        assert [b.key for b in buckets] == ["2021", "2022", "2023", "2024", "2025"]
        assert buckets[0].total_income == Decimal("5")

    def test_accepts_stored_records(self):
        """Test that stored rows are converted to events."""
        buckets = bucket_by_period(
            [IncomeRecord(id="i", source="Salary", amount=100, income_date="2025-01-01")],
            [ExpenseRecord(id="e", amount=40, expense_date="2025-01-02")],
            WindowMode.LAST_12_MONTHS,
            REFERENCE,
        )
        assert buckets[-1].net == Decimal("60")

    def test_mode_by_value(self):
        """Test that the window can be given by its string value."""
        buckets = bucket_by_period([], [], "last_30_days", REFERENCE)
        assert len(buckets) == 30


class TestRecentActiveMonths:
    """Tests for the legacy six-month chart."""

    def test_only_months_with_data(self):
        """Test that empty months are omitted."""
        buckets = recent_active_months(
            [income(10, "2024-03-05"), income(20, "2024-12-01")],
            [expense(5, "2024-03-20")],
            reference_date=REFERENCE,
        )
        assert [b.key for b in buckets] == ["Mar 2024", "Dec 2024"]
        assert buckets[0].total_income == Decimal("10")
        assert buckets[0].total_expense == Decimal("5")

    def test_keeps_last_six(self):
        """Test that only the six most recent months are kept."""
        incomes = [income(1, f"2024-{m:02d}-01") for m in range(1, 13)]
        buckets = recent_active_months(incomes, [], limit=6, reference_date=REFERENCE)
        assert [b.key for b in buckets] == [
            "Jul 2024", "Aug 2024", "Sep 2024", "Oct 2024", "Nov 2024", "Dec 2024",
        ]

    def test_excludes_months_after_reference(self):
        """Test that future months are left out."""
        buckets = recent_active_months(
            [income(1, "2025-03-01")],
            [],
            reference_date=REFERENCE,
        )
        assert buckets == []

    def test_legacy_mode_delegates(self):
        """Test that the legacy window mode uses the active-months chart."""
        buckets = bucket_by_period(
            [income(1, "2024-10-10")],
            [],
            WindowMode.LAST_6_MONTHS,
            REFERENCE,
        )
        assert [b.key for b in buckets] == ["Oct 2024"]


class TestTotalsByCategory:
    """Tests for category ranking."""

    def test_food_and_travel_scenario(self):
        """Test the two-category share scenario."""
        totals = totals_by_category([
            {"amount": 300, "category": "Food"},
            {"amount": 100, "category": "Food"},
            {"amount": 200, "category": "Travel"},
        ])
        assert [t.category for t in totals] == ["Food", "Travel"]
        assert totals[0].total == Decimal("400")
        assert totals[1].total == Decimal("200")
        assert totals[0].percentage_of_whole == pytest.approx(66.67, abs=0.01)
        assert totals[1].percentage_of_whole == pytest.approx(33.33, abs=0.01)

    def test_empty_input(self):
        """Test that empty input gives an empty result."""
        assert totals_by_category([]) == []

    def test_zero_total(self):
        """Test that all-zero amounts give an empty result."""
        assert totals_by_category([expense(0, "2025-01-01", "Food")]) == []

    def test_percentages_sum_to_100(self):
        """Test that shares add up to the whole."""
        events = [expense(amount, None, cat) for amount, cat in [
            (13, "A"), (7, "B"), (29, "C"), (1, "D"), (3, "A"),
        ]]
        totals = totals_by_category(events)
        assert sum(t.percentage_of_whole for t in totals) == pytest.approx(100.0, abs=1e-6)

    def test_shuffle_does_not_change_result(self):
        """Test that input order never affects the output."""
        events = [
            expense(50, None, "Rent"),
            expense(50, None, "Food"),
            expense(20, None, "Fun"),
            expense(30, None, None),
            expense(10, None, "Food"),
        ]
        expected = totals_by_category(events)
        rng = random.Random(7)
        for _ in range(10):
            shuffled = events[:]
            rng.shuffle(shuffled)
            assert totals_by_category(shuffled) == expected

    def test_ties_break_by_label(self):
        """Test that equal totals are ordered by category name."""
        totals = totals_by_category([
            expense(10, None, "Zoo"),
            expense(10, None, "Apple"),
        ])
        assert [t.category for t in totals] == ["Apple", "Zoo"]

    def test_missing_category_is_uncategorized(self):
        """Test the uncategorized fallback for None and blank categories."""
        totals = totals_by_category([
            expense(10, None, None),
            expense(5, None, "   "),
            expense(1, None, "Food"),
        ])
        assert totals[0].category == "Uncategorized"
        assert totals[0].total == Decimal("15")

    def test_custom_uncategorized_label(self):
        """Test a custom label for uncategorized events."""
        totals = totals_by_category([expense(1, None)], uncategorized_label="Other")
        assert totals[0].category == "Other"

    def test_undated_events_still_count(self):
        """Test that category totals do not depend on dates."""
        totals = totals_by_category([expense(10, "bad", "Food")])
        assert totals[0].total == Decimal("10")

    def test_category_label(self):
        """Test category label normalization."""
        assert category_label(None) == "Uncategorized"
        assert category_label("  Food ") == "Food"
        assert category_label("", "Misc") == "Misc"


class TestCombineAndSortRecent:
    """Tests for the recent activity list."""

    def test_most_recent_first(self):
        """Test ordering across incomes and expenses."""
        recent = combine_and_sort_recent(
            [income(100, "2025-01-10", id="i1")],
            [expense(20, "2025-01-12", id="e1"), expense(5, "2025-01-01", id="e2")],
        )
        assert [r.id for r in recent] == ["e1", "i1", "e2"]
        assert recent[1].kind is EntryKind.INCOME

    def test_limit(self):
        """Test that at most `limit` entries are returned."""
        expenses = [expense(1, f"2025-01-{d:02d}", id=str(d)) for d in range(1, 21)]
        recent = combine_and_sort_recent([], expenses, limit=10)
        assert len(recent) == 10
        assert recent[0].id == "20"
        assert recent[-1].id == "11"

    def test_non_positive_limit(self):
        """Test that a zero limit gives an empty list."""
        assert combine_and_sort_recent([income(1, "2025-01-01")], [], limit=0) == []

    def test_same_day_keeps_input_order(self):
        """Test stable ordering: incomes before expenses on the same day."""
        recent = combine_and_sort_recent(
            [income(1, "2025-01-05", id="i1")],
            [expense(1, "2025-01-05", id="e1"), expense(1, "2025-01-05", id="e2")],
        )
        assert [r.id for r in recent] == ["i1", "e1", "e2"]

    def test_undated_entries_go_last(self):
        """Test that entries without a usable date are kept at the end."""
        recent = combine_and_sort_recent(
            [income(1, "", id="no-date")],
            [expense(1, "2024-01-01", id="old"), expense(1, "oops", id="bad")],
        )
        assert [r.id for r in recent] == ["old", "no-date", "bad"]

    def test_income_source_is_description(self):
        """Test that the income source becomes the description."""
        recent = combine_and_sort_recent(
            [IncomeRecord(id="i", source="Salary", amount=1, income_date="2025-01-01")],
            [],
        )
        assert recent[0].description == "Salary"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
