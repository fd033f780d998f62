"""Payroll run orchestration for one pay period."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from payroll_core.calculators.engine import PayrollCalculator
from payroll_core.calculators.rates import TaxRateSet
from payroll_core.calculators.types import (
    ZERO,
    CompensationMode,
    Employee,
    PayPeriod,
    PayrollCalculation,
)
from payroll_core.disbursement.base import DisbursementResult
from payroll_core.disbursement.router import DisbursementRouter
from payroll_core.errors import DataUnavailable, InvalidInput
from payroll_core.services.collaborators import (
    DeductionSource,
    EmployeeDirectory,
    PeriodStore,
    TimeEntrySource,
)
from payroll_core.services.ledger import (
    ClaimState,
    DisbursementLedger,
    InMemoryDisbursementLedger,
    disbursement_key,
)
from payroll_core.services.state_machine import PayPeriodStateMachine, PeriodStatus

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    """Per-employee result of a payroll run."""

    DISBURSED = "disbursed"
    FAILED = "failed"
    FLAGGED = "flagged"  # Calculated but held for manual review
    SKIPPED = "skipped"  # Nothing to pay


@dataclass
class EmployeeOutcome:
    """What happened to one employee in a run."""

    employee_id: str
    status: OutcomeStatus
    calculation: PayrollCalculation | None = None
    disbursement: DisbursementResult | None = None
    reason: str | None = None
    reused: bool = False  # Disbursement came from an earlier attempt


@dataclass
class PayrollRunSummary:
    """Partial-success summary of a payroll run."""

    period_id: str
    outcomes: list[EmployeeOutcome] = field(default_factory=list)
    cancelled: bool = False

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def succeeded(self) -> int:
        return self._count(OutcomeStatus.DISBURSED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def flagged(self) -> int:
        return self._count(OutcomeStatus.FLAGGED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failures(self) -> list[tuple[str, str]]:
        """(employee_id, reason) for every failed or flagged employee."""
        return [
            (o.employee_id, o.reason or "")
            for o in self.outcomes
            if o.status in (OutcomeStatus.FAILED, OutcomeStatus.FLAGGED)
        ]

    def _sum(self, attr: str) -> Decimal:
        return sum(
            (getattr(o.calculation, attr) for o in self.outcomes if o.calculation is not None),
            ZERO,
        )

    @property
    def total_gross(self) -> Decimal:
        return self._sum("gross_pay")

    @property
    def total_net(self) -> Decimal:
        return self._sum("net_pay")

    @property
    def total_taxes(self) -> Decimal:
        return self._sum("total_taxes")

    @property
    def total_deductions(self) -> Decimal:
        return self._sum("total_deductions")


class PayrollRunService:
    """Runs payroll for one period across a company's active employees.

    Per employee: calculate, then disburse net pay at most once per
    (period, employee) through the ledger. One employee's data error or
    failed disbursement never aborts the others. After every employee has
    been attempted the period is marked completed exactly once. A cancelled
    run stops before the next employee, leaves the period unmarked, and does
    not roll back disbursements already made.
    """

    def __init__(
        self,
        calculator: PayrollCalculator,
        router: DisbursementRouter,
        employees: EmployeeDirectory,
        time_entries: TimeEntrySource,
        deductions: DeductionSource,
        periods: PeriodStore,
        ledger: DisbursementLedger | None = None,
        rate_set: TaxRateSet | None = None,
    ):
        self.calculator = calculator
        self.router = router
        self.employees = employees
        self.time_entries = time_entries
        self.deductions = deductions
        self.periods = periods
        self.ledger = ledger or InMemoryDisbursementLedger()
        self.rate_set = rate_set or calculator.tax_calculator.rate_set

    def run_period(
        self,
        period_id: str,
        company_id: str,
        payer_id: str,
        cancel_event: threading.Event | None = None,
    ) -> PayrollRunSummary:
        """Calculate and disburse payroll for a period.

        Raises InvalidTransitionError if the period is not runnable,
        RateSetNotValid if the tax rates do not cover the pay date, and
        DataUnavailable if the period or employee list cannot be read.
        """
        period = self.periods.get_period(period_id)
        PayPeriodStateMachine.validate_transition(period.status, PeriodStatus.PROCESSING)
        self.rate_set.ensure_valid_for(period.pay_date)

        try:
            employees = self.employees.get_active_employees(company_id)
        except DataUnavailable as exc:
            self.periods.mark_period_failed(period.period_id, str(exc))
            raise

        summary = PayrollRunSummary(period_id=period.period_id)
        for employee in employees:
            if cancel_event is not None and cancel_event.is_set():
                summary.cancelled = True
                logger.warning(
                    "Payroll run for %s cancelled after %d of %d employees",
                    period.period_id,
                    len(summary.outcomes),
                    len(employees),
                )
                return summary
            summary.outcomes.append(self._process_employee(employee, period, payer_id))

        self.periods.mark_period_completed(period.period_id)

        logger.info(
            "Payroll run %s: %d disbursed, %d failed, %d flagged, %d skipped",
            period.period_id,
            summary.succeeded,
            summary.failed,
            summary.flagged,
            summary.skipped,
        )
        return summary

    def _process_employee(
        self, employee: Employee, period: PayPeriod, payer_id: str
    ) -> EmployeeOutcome:
        employee_id = employee.employee_id

        try:
            entries = []
            if employee.compensation_mode == CompensationMode.HOURLY:
                entries = self.time_entries.get_approved_entries(
                    employee_id, period.start_date, period.end_date
                )
            deductions = self.deductions.get_active_deductions(employee_id)
            calculation = self.calculator.calculate_for_employee(
                employee, period, entries, deductions
            )
        except (DataUnavailable, InvalidInput) as exc:
            logger.warning("Calculation failed for employee %s: %s", employee_id, exc)
            return EmployeeOutcome(employee_id, OutcomeStatus.FAILED, reason=str(exc))

        if calculation.needs_review:
            return EmployeeOutcome(
                employee_id,
                OutcomeStatus.FLAGGED,
                calculation=calculation,
                reason=", ".join(w.value for w in calculation.warnings),
            )
        if calculation.net_pay == 0:
            return EmployeeOutcome(
                employee_id,
                OutcomeStatus.SKIPPED,
                calculation=calculation,
                reason="No net pay to disburse",
            )

        key = disbursement_key(period.period_id, employee_id)
        claim = self.ledger.claim(key)
        if claim.state == ClaimState.ALREADY_SUCCEEDED:
            return EmployeeOutcome(
                employee_id,
                OutcomeStatus.DISBURSED,
                calculation=calculation,
                disbursement=claim.prior_result,
                reused=True,
            )
        if claim.state == ClaimState.IN_FLIGHT:
            return EmployeeOutcome(
                employee_id,
                OutcomeStatus.FAILED,
                calculation=calculation,
                reason="Disbursement already in flight",
            )

        result = self.router.disburse(payer_id, employee_id, calculation.net_pay)
        self.ledger.record(key, result)

        if result.success:
            return EmployeeOutcome(
                employee_id,
                OutcomeStatus.DISBURSED,
                calculation=calculation,
                disbursement=result,
            )
        return EmployeeOutcome(
            employee_id,
            OutcomeStatus.FAILED,
            calculation=calculation,
            disbursement=result,
            reason=result.error,
        )
