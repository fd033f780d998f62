"""Time entry aggregation into regular and overtime hours."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal

from payroll_core.calculators.types import (
    ZERO,
    ApprovalStatus,
    HoursSummary,
    TimeEntry,
)

OVERTIME_THRESHOLD_HOURS = Decimal("40")
_SECONDS_PER_HOUR = Decimal("3600")


def week_start(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def hours_for_entry(entry: TimeEntry) -> Decimal:
    """Worked hours for one entry: (end - start) - break, never negative.

    Open entries (no end time) and entries that are not approved count as 0.
    """
    if entry.end_time is None or entry.status != ApprovalStatus.APPROVED:
        return ZERO

    start = datetime.combine(entry.work_date, entry.start_time)
    end = datetime.combine(entry.work_date, entry.end_time)
    worked = (end - start) - entry.break_duration
    seconds = Decimal(worked.days * 86400 + worked.seconds) + (
        Decimal(worked.microseconds) / Decimal(1_000_000)
    )
    return max(ZERO, seconds / _SECONDS_PER_HOUR)


def weekly_hours(entries: Iterable[TimeEntry]) -> dict[date, Decimal]:
    """Total worked hours keyed by week start (Monday)."""
    weeks: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        hours = hours_for_entry(entry)
        if hours > 0:
            weeks[week_start(entry.work_date)] += hours
    return dict(weeks)


def aggregate(
    entries: Iterable[TimeEntry],
    start: date | None = None,
    end: date | None = None,
    threshold: Decimal = OVERTIME_THRESHOLD_HOURS,
) -> HoursSummary:
    """Split hours into regular and overtime per week, summed over all weeks.

    When ``start``/``end`` are given only entries dated inside that inclusive
    range are counted.
    """
    selected = [
        e
        for e in entries
        if (start is None or e.work_date >= start) and (end is None or e.work_date <= end)
    ]

    regular = ZERO
    overtime = ZERO
    for hours in weekly_hours(selected).values():
        regular += min(hours, threshold)
        overtime += max(ZERO, hours - threshold)

    return HoursSummary(regular_hours=regular, overtime_hours=overtime)
