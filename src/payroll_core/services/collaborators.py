"""Read/write interfaces the payroll run depends on.

Implementations live in the surrounding application (database, HTTP
clients, queues). Read failures should raise DataUnavailable.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from payroll_core.calculators.types import (
    DeductionDefinition,
    Employee,
    PayPeriod,
    TimeEntry,
)


class EmployeeDirectory(Protocol):
    def get_employee(self, employee_id: str) -> Employee:
        ...

    def get_active_employees(self, company_id: str) -> list[Employee]:
        ...


class TimeEntrySource(Protocol):
    def get_approved_entries(
        self, employee_id: str, start_date: date, end_date: date
    ) -> list[TimeEntry]:
        ...


class DeductionSource(Protocol):
    def get_active_deductions(self, employee_id: str) -> list[DeductionDefinition]:
        ...


class PeriodStore(Protocol):
    def get_period(self, period_id: str) -> PayPeriod:
        ...

    def mark_period_completed(self, period_id: str) -> None:
        """Called once after every disbursement for the period was attempted."""
        ...

    def mark_period_failed(self, period_id: str, reason: str) -> None:
        ...
