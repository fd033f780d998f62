"""Pay period generation and frequency helpers."""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from payroll_core.calculators.deductions import PERIODS_PER_YEAR
from payroll_core.calculators.types import PayFrequency, PayPeriod
from payroll_core.errors import InvalidInput


def parse_pay_frequency(value: PayFrequency | str) -> PayFrequency:
    try:
        return PayFrequency(value)
    except ValueError:
        raise InvalidInput(f"Unsupported pay frequency '{value}'", field="frequency") from None


def periods_per_year(frequency: PayFrequency | str) -> int:
    """Number of pay periods in a year (52/26/24/12)."""
    return PERIODS_PER_YEAR[parse_pay_frequency(frequency)]


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def _add_months(year: int, month: int, offset: int) -> tuple[int, int]:
    index = (month - 1) + offset
    return year + index // 12, index % 12 + 1


def generate_pay_periods(
    frequency: PayFrequency | str,
    reference_date: date,
    count: int = 12,
    id_prefix: str = "period",
) -> list[PayPeriod]:
    """Generate ``count`` consecutive pending pay periods.

    Weekly and bi-weekly periods run Monday to Sunday starting the week of
    ``reference_date`` and pay on the Friday after they end. Semi-monthly
    periods are the 1st-15th (paid the 20th) and 16th-month end (paid the
    5th of next month). Monthly periods cover the whole month and pay on the
    5th of the next month.
    """
    freq = parse_pay_frequency(frequency)
    if count < 0:
        raise InvalidInput("count cannot be negative", field="count")

    spans: list[tuple[date, date, date]] = []

    if freq in (PayFrequency.WEEKLY, PayFrequency.BI_WEEKLY):
        length = 7 if freq == PayFrequency.WEEKLY else 14
        start = reference_date - timedelta(days=reference_date.weekday())
        for _ in range(count):
            end = start + timedelta(days=length - 1)
            spans.append((start, end, end + timedelta(days=5)))
            start += timedelta(days=length)

    elif freq == PayFrequency.SEMI_MONTHLY:
        for i in range(count):
            year, month = _add_months(reference_date.year, reference_date.month, i // 2)
            if i % 2 == 0:
                spans.append((date(year, month, 1), date(year, month, 15), date(year, month, 20)))
            else:
                next_year, next_month = _add_months(year, month, 1)
                spans.append(
                    (date(year, month, 16), _month_end(year, month), date(next_year, next_month, 5))
                )

    else:
        for i in range(count):
            year, month = _add_months(reference_date.year, reference_date.month, i)
            next_year, next_month = _add_months(year, month, 1)
            spans.append((date(year, month, 1), _month_end(year, month), date(next_year, next_month, 5)))

    return [
        PayPeriod(
            period_id=f"{id_prefix}-{start.isoformat()}",
            start_date=start,
            end_date=end,
            pay_date=pay,
            frequency=freq,
        )
        for start, end, pay in spans
    ]
