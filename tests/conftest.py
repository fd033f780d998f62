"""Pytest fixtures for payroll core tests."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import date, time, timedelta
from decimal import Decimal

import pytest

from payroll_core.calculators.engine import PayrollCalculator
from payroll_core.calculators.tax_calculator import TaxCalculator
from payroll_core.calculators.types import (
    ApprovalStatus,
    CompensationMode,
    DeductionDefinition,
    Employee,
    FilingStatus,
    PayFrequency,
    PayPeriod,
    TimeEntry,
)
from payroll_core.disbursement.router import DisbursementRouter
from payroll_core.disbursement.stub import StubPaymentGateway
from payroll_core.errors import DataUnavailable

PAYER_ID = "employer-1"
COMPANY_ID = "acme"


# =============================================================================
# In-memory collaborators
# =============================================================================


class InMemoryEmployees:
    """Employee directory backed by a dict."""

    def __init__(self, employees: list[Employee] | None = None, fail: bool = False):
        self.employees = {e.employee_id: e for e in employees or []}
        self.fail = fail

    def get_employee(self, employee_id: str) -> Employee:
        if employee_id not in self.employees:
            raise DataUnavailable("employees", f"Employee {employee_id} not found")
        return self.employees[employee_id]

    def get_active_employees(self, company_id: str) -> list[Employee]:
        if self.fail:
            raise DataUnavailable("employees", "directory offline")
        return [
            e
            for e in self.employees.values()
            if e.company_id is None or e.company_id == company_id
        ]


class InMemoryTimeEntries:
    """Time entry source that records which employees were queried."""

    def __init__(self, entries: list[TimeEntry] | None = None):
        self.entries = list(entries or [])
        self.queried: list[str] = []

    def get_approved_entries(
        self, employee_id: str, start_date: date, end_date: date
    ) -> list[TimeEntry]:
        self.queried.append(employee_id)
        return [
            e
            for e in self.entries
            if e.employee_id == employee_id
            and start_date <= e.work_date <= end_date
            and e.status == ApprovalStatus.APPROVED
        ]


class InMemoryDeductions:
    """Deduction source with an optional per-call hook."""

    def __init__(
        self,
        deductions: dict[str, list[DeductionDefinition]] | None = None,
        on_read: Callable[[str], None] | None = None,
    ):
        self.deductions = deductions or {}
        self.on_read = on_read

    def get_active_deductions(self, employee_id: str) -> list[DeductionDefinition]:
        if self.on_read is not None:
            self.on_read(employee_id)
        return list(self.deductions.get(employee_id, []))


class InMemoryPeriods:
    """Period store that counts completion marks."""

    def __init__(self, periods: list[PayPeriod] | None = None):
        self.periods = {p.period_id: p for p in periods or []}
        self.completed: list[str] = []
        self.failed: list[tuple[str, str]] = []

    def get_period(self, period_id: str) -> PayPeriod:
        if period_id not in self.periods:
            raise DataUnavailable("periods", f"Period {period_id} not found")
        return self.periods[period_id]

    def set_status(self, period_id: str, status: str) -> None:
        self.periods[period_id] = dataclasses.replace(self.periods[period_id], status=status)

    def mark_period_completed(self, period_id: str) -> None:
        self.completed.append(period_id)
        self.set_status(period_id, "completed")

    def mark_period_failed(self, period_id: str, reason: str) -> None:
        self.failed.append((period_id, reason))
        self.set_status(period_id, "error")


# =============================================================================
# Domain fixtures
# =============================================================================


def make_employee(employee_id: str = "emp-1", **overrides) -> Employee:
    values = {
        "employee_id": employee_id,
        "compensation_mode": CompensationMode.SALARIED,
        "compensation_amount": Decimal("52000"),
        "state_code": "CA",
        "filing_status": FilingStatus.SINGLE,
    }
    values.update(overrides)
    return Employee(**values)


def make_entry(
    work_date: date,
    start: time = time(9, 0),
    end: time | None = time(17, 0),
    break_minutes: int = 0,
    status: ApprovalStatus = ApprovalStatus.APPROVED,
    employee_id: str = "emp-1",
) -> TimeEntry:
    return TimeEntry(
        employee_id=employee_id,
        work_date=work_date,
        start_time=start,
        end_time=end,
        break_duration=timedelta(minutes=break_minutes),
        status=status,
    )


@pytest.fixture
def biweekly_period() -> PayPeriod:
    """Two weeks starting Monday 2024-03-04."""
    return PayPeriod(
        period_id="period-2024-03-04",
        start_date=date(2024, 3, 4),
        end_date=date(2024, 3, 17),
        pay_date=date(2024, 3, 22),
        frequency=PayFrequency.BI_WEEKLY,
    )


@pytest.fixture
def weekly_period() -> PayPeriod:
    return PayPeriod(
        period_id="period-2024-03-04",
        start_date=date(2024, 3, 4),
        end_date=date(2024, 3, 10),
        pay_date=date(2024, 3, 15),
        frequency=PayFrequency.WEEKLY,
    )


@pytest.fixture
def tax_calculator() -> TaxCalculator:
    return TaxCalculator()


@pytest.fixture
def calculator() -> PayrollCalculator:
    return PayrollCalculator()


@pytest.fixture
def gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def funded_gateway(gateway: StubPaymentGateway) -> StubPaymentGateway:
    gateway.fund(PAYER_ID, Decimal("10000"))
    return gateway


@pytest.fixture
def router(gateway: StubPaymentGateway) -> DisbursementRouter:
    return DisbursementRouter(gateway, gateway)
