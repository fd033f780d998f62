"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from payroll_core.errors import InvalidInput

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Convert a numeric input to Decimal without float artifacts."""
    if isinstance(value, bool) or value is None:
        raise InvalidInput(f"{field_name} must be numeric, got {value!r}", field=field_name)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except ArithmeticError as exc:
            raise InvalidInput(
                f"{field_name} must be numeric, got {value!r}", field=field_name
            ) from exc
    if not result.is_finite():
        raise InvalidInput(f"{field_name} must be finite, got {value!r}", field=field_name)
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class FilingStatus(str, Enum):
    """Federal filing status."""

    SINGLE = "single"
    MARRIED = "married"
    HEAD = "head"


class CompensationMode(str, Enum):
    """How an employee is paid."""

    SALARIED = "salaried"
    HOURLY = "hourly"


class PayFrequency(str, Enum):
    """Pay period frequency."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"


class ApprovalStatus(str, Enum):
    """Time entry approval status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DeductionMethod(str, Enum):
    """How a deduction amount is derived."""

    FIXED = "fixed"
    PERCENTAGE = "percentage"


class DeductionType(str, Enum):
    """Whether a deduction reduces taxable wages."""

    PRE_TAX = "pre_tax"
    POST_TAX = "post_tax"


class DeductionFrequency(str, Enum):
    """Frequency a deduction amount is expressed in."""

    PER_PAYCHECK = "per-paycheck"
    MONTHLY = "monthly"
    ANNUAL = "annual"


class WarningCode(str, Enum):
    """Conditions on a calculation that need manual review."""

    NEGATIVE_NET_PAY = "NEGATIVE_NET_PAY"


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation."""

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.22 for 22%
    flat_amount: Decimal = ZERO  # Cumulative tax owed at bracket start

    def contains(self, amount: Decimal) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount


@dataclass(frozen=True)
class FicaAmounts:
    """Employee share of Social Security and Medicare."""

    social_security: Decimal
    medicare: Decimal

    @property
    def total(self) -> Decimal:
        return self.social_security + self.medicare


@dataclass(frozen=True)
class TaxWithholding:
    """All employee taxes for one paycheck."""

    federal: Decimal
    state: Decimal
    social_security: Decimal
    medicare: Decimal

    @property
    def total(self) -> Decimal:
        return self.federal + self.state + self.social_security + self.medicare


@dataclass(frozen=True)
class HoursSummary:
    """Regular and overtime hours across a set of weeks."""

    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours


@dataclass(frozen=True)
class DeductionTotals:
    """Per-paycheck deduction totals split by tax treatment."""

    pre_tax_total: Decimal = ZERO
    post_tax_total: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.pre_tax_total + self.post_tax_total


@dataclass(frozen=True)
class Employee:
    """Immutable snapshot of an employee as consumed by the calculators."""

    employee_id: str
    compensation_mode: CompensationMode | str
    compensation_amount: Decimal  # Annual salary or hourly rate
    state_code: str
    filing_status: FilingStatus | str = FilingStatus.SINGLE
    allowances: int = 0
    ytd_earnings: Decimal = ZERO
    company_id: str | None = None


@dataclass(frozen=True)
class PayPeriod:
    """A pay period; the core only reads it."""

    period_id: str
    start_date: date
    end_date: date
    pay_date: date
    frequency: PayFrequency | str
    status: str = "pending"

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class TimeEntry:
    """A single clock-in/clock-out record."""

    employee_id: str
    work_date: date
    start_time: time
    end_time: time | None = None
    break_duration: timedelta = timedelta(0)
    status: ApprovalStatus | str = ApprovalStatus.PENDING


@dataclass(frozen=True)
class DeductionDefinition:
    """A deduction assigned to an employee.

    ``calculation_method`` and ``deduction_type`` come from the deduction's
    type record; when that record could not be resolved both are None and
    the deduction is skipped by totals.

    ``amount`` is the employee-specific value. When it is None the type's
    default is used: ``default_amount`` for fixed deductions,
    ``default_percentage`` for percentage deductions.
    """

    deduction_id: str
    calculation_method: DeductionMethod | str | None
    deduction_type: DeductionType | str | None
    frequency: DeductionFrequency | str = DeductionFrequency.PER_PAYCHECK
    amount: Decimal | None = None
    default_amount: Decimal | None = None
    default_percentage: Decimal | None = None
    max_annual_amount: Decimal | None = None  # Declared only; not enforced
    start_date: date | None = None
    end_date: date | None = None
    name: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.calculation_method is not None and self.deduction_type is not None

    def is_active_on(self, day: date) -> bool:
        if self.start_date is not None and day < self.start_date:
            return False
        return self.end_date is None or day <= self.end_date


@dataclass(frozen=True)
class PayrollCalculation:
    """Calculated pay for one employee in one period."""

    employee_id: str
    period_id: str
    gross_pay: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    federal_tax: Decimal
    state_tax: Decimal
    social_security: Decimal
    medicare: Decimal
    pre_tax_deductions: Decimal
    post_tax_deductions: Decimal
    net_pay: Decimal
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    taxable_wages: Decimal = ZERO
    warnings: tuple[WarningCode, ...] = field(default_factory=tuple)

    @property
    def total_taxes(self) -> Decimal:
        return self.federal_tax + self.state_tax + self.social_security + self.medicare

    @property
    def total_deductions(self) -> Decimal:
        return self.pre_tax_deductions + self.post_tax_deductions

    @property
    def needs_review(self) -> bool:
        return len(self.warnings) > 0
