"""Pydantic schemas for API request/response models."""

from datetime import date, time, timedelta
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from payroll_core.calculators.types import (
    DeductionDefinition,
    Employee,
    PayPeriod,
    PayrollCalculation,
    TimeEntry,
)
from payroll_core.disbursement.base import DisbursementResult, DisbursementStatus


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str
    field: str | None = None


# ============================================================================
# Tax withholding
# ============================================================================


class WithholdingRequest(BaseModel):
    """Inputs for a one-off withholding calculation."""

    income: Decimal
    filing_status: str = "single"
    state_code: str
    allowances: int = 0
    ytd_earnings: Decimal = Decimal("0")


class WithholdingResponse(BaseModel):
    """Employee taxes on the requested income."""

    federal: Decimal
    state: Decimal
    social_security: Decimal
    medicare: Decimal
    total: Decimal
    rate_set_version: str


# ============================================================================
# Paycheck preview
# ============================================================================


class EmployeeInput(BaseModel):
    """Employee snapshot used for a preview."""

    employee_id: str
    compensation_mode: str
    compensation_amount: Decimal
    state_code: str
    filing_status: str = "single"
    allowances: int = 0
    ytd_earnings: Decimal = Decimal("0")

    def to_domain(self) -> Employee:
        return Employee(**self.model_dump())


class PayPeriodInput(BaseModel):
    """Pay period for a preview."""

    period_id: str
    start_date: date
    end_date: date
    pay_date: date
    frequency: str

    def to_domain(self) -> PayPeriod:
        return PayPeriod(**self.model_dump())


class TimeEntryInput(BaseModel):
    """A time entry; break duration in minutes."""

    work_date: date
    start_time: time
    end_time: time | None = None
    break_minutes: Decimal = Decimal("0")
    status: str = "approved"

    def to_domain(self, employee_id: str) -> TimeEntry:
        return TimeEntry(
            employee_id=employee_id,
            work_date=self.work_date,
            start_time=self.start_time,
            end_time=self.end_time,
            break_duration=timedelta(minutes=float(self.break_minutes)),
            status=self.status,
        )


class DeductionInput(BaseModel):
    """A deduction assigned to the employee."""

    deduction_id: str
    calculation_method: str | None
    deduction_type: str | None
    frequency: str = "per-paycheck"
    amount: Decimal | None = None
    default_amount: Decimal | None = None
    default_percentage: Decimal | None = None
    max_annual_amount: Decimal | None = None
    start_date: date | None = None
    end_date: date | None = None
    name: str = ""

    def to_domain(self) -> DeductionDefinition:
        return DeductionDefinition(**self.model_dump())


class PaycheckPreviewRequest(BaseModel):
    """Everything needed to preview one paycheck."""

    employee: EmployeeInput
    period: PayPeriodInput
    time_entries: list[TimeEntryInput] = Field(default_factory=list)
    deductions: list[DeductionInput] = Field(default_factory=list)


class PayrollCalculationResponse(BaseModel):
    """Calculated paycheck."""

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
    regular_hours: Decimal
    overtime_hours: Decimal
    warnings: list[str]

    @classmethod
    def from_calculation(cls, calc: PayrollCalculation) -> "PayrollCalculationResponse":
        return cls(
            employee_id=calc.employee_id,
            period_id=calc.period_id,
            gross_pay=calc.gross_pay,
            regular_pay=calc.regular_pay,
            overtime_pay=calc.overtime_pay,
            federal_tax=calc.federal_tax,
            state_tax=calc.state_tax,
            social_security=calc.social_security,
            medicare=calc.medicare,
            pre_tax_deductions=calc.pre_tax_deductions,
            post_tax_deductions=calc.post_tax_deductions,
            net_pay=calc.net_pay,
            regular_hours=calc.regular_hours,
            overtime_hours=calc.overtime_hours,
            warnings=[w.value for w in calc.warnings],
        )


# ============================================================================
# Disbursement
# ============================================================================


class DisbursementRequest(BaseModel):
    """Disburse an amount from an employer wallet to an employee."""

    payer_id: str
    payee_id: str
    amount: Decimal


class DisbursementResponse(BaseModel):
    """Result of a disbursement attempt."""

    success: bool
    method: str | None = None
    transaction_id: str | None = None
    status: str | None = None
    error: str | None = None

    @classmethod
    def from_result(cls, result: DisbursementResult) -> "DisbursementResponse":
        return cls(
            success=result.success,
            method=result.method.value if result.method else None,
            transaction_id=result.transaction_id,
            status=result.status,
            error=result.error,
        )


class DisbursementStatusResponse(BaseModel):
    """Normalized disbursement status."""

    transaction_id: str
    status: str
    details: dict[str, Any]

    @classmethod
    def from_status(
        cls, transaction_id: str, status: DisbursementStatus
    ) -> "DisbursementStatusResponse":
        return cls(
            transaction_id=transaction_id,
            status=status.status.value,
            details=status.details,
        )
