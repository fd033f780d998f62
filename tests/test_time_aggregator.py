"""Tests for time entry aggregation."""

from datetime import date, time
from decimal import Decimal

from payroll_core.calculators.time_aggregator import (
    aggregate,
    hours_for_entry,
    week_start,
    weekly_hours,
)
from payroll_core.calculators.types import ApprovalStatus

from .conftest import make_entry

MONDAY = date(2024, 3, 4)


def _workweek(days: int = 5, **kwargs):
    return [make_entry(date(2024, 3, 4 + i), **kwargs) for i in range(days)]


class TestHoursForEntry:
    def test_simple_shift(self):
        assert hours_for_entry(make_entry(MONDAY)) == Decimal("8")

    def test_break_is_subtracted(self):
        entry = make_entry(MONDAY, break_minutes=60)
        assert hours_for_entry(entry) == Decimal("7")

    def test_fractional_hours(self):
        entry = make_entry(MONDAY, start=time(8, 0), end=time(16, 45))
        assert hours_for_entry(entry) == Decimal("8.75")

    def test_break_longer_than_shift_clamps_to_zero(self):
        entry = make_entry(MONDAY, start=time(9, 0), end=time(10, 0), break_minutes=120)
        assert hours_for_entry(entry) == Decimal("0")

    def test_open_entry_counts_zero(self):
        assert hours_for_entry(make_entry(MONDAY, end=None)) == Decimal("0")

    def test_unapproved_entries_count_zero(self):
        assert hours_for_entry(make_entry(MONDAY, status=ApprovalStatus.PENDING)) == 0
        assert hours_for_entry(make_entry(MONDAY, status=ApprovalStatus.REJECTED)) == 0


class TestWeekGrouping:
    def test_week_starts_monday(self):
        assert week_start(date(2024, 3, 6)) == MONDAY
        assert week_start(MONDAY) == MONDAY

    def test_sunday_belongs_to_preceding_week(self):
        assert week_start(date(2024, 3, 10)) == MONDAY

    def test_weekly_hours(self):
        entries = _workweek(2) + [make_entry(date(2024, 3, 11))]
        assert weekly_hours(entries) == {
            MONDAY: Decimal("16"),
            date(2024, 3, 11): Decimal("8"),
        }


class TestAggregate:
    def test_overtime_split(self):
        # 5 x (10h - 30min) = 47.5h
        entries = _workweek(start=time(8, 0), end=time(18, 0), break_minutes=30)
        summary = aggregate(entries)

        assert summary.regular_hours == Decimal("40")
        assert summary.overtime_hours == Decimal("7.5")
        assert summary.total_hours == Decimal("47.5")

    def test_no_overtime_at_threshold(self):
        summary = aggregate(_workweek())
        assert summary.regular_hours == Decimal("40")
        assert summary.overtime_hours == Decimal("0")

    def test_sunday_hours_count_toward_previous_week(self):
        entries = _workweek() + [make_entry(date(2024, 3, 10), end=time(14, 0))]
        summary = aggregate(entries)
        assert summary.overtime_hours == Decimal("5")

    def test_overtime_computed_per_week(self):
        """30h in each of two weeks is 60h with no overtime."""
        entries = [
            make_entry(date(2024, 3, 4 + i), start=time(7, 0), end=time(17, 0))
            for i in range(3)
        ] + [
            make_entry(date(2024, 3, 11 + i), start=time(7, 0), end=time(17, 0))
            for i in range(3)
        ]
        summary = aggregate(entries)
        assert summary.regular_hours == Decimal("60")
        assert summary.overtime_hours == Decimal("0")

    def test_date_range_filter(self):
        entries = _workweek()
        summary = aggregate(entries, start=date(2024, 3, 5), end=date(2024, 3, 6))
        assert summary.total_hours == Decimal("16")

    def test_empty(self):
        summary = aggregate([])
        assert summary.total_hours == Decimal("0")
