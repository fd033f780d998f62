"""Payroll calculator - per-employee orchestrator."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from payroll_core.calculators.deductions import DeductionEngine
from payroll_core.calculators.periods import periods_per_year
from payroll_core.calculators.rates import RATES_2024, TaxRateSet
from payroll_core.calculators.tax_calculator import TaxCalculator, parse_filing_status
from payroll_core.calculators.time_aggregator import aggregate
from payroll_core.calculators.types import (
    ZERO,
    CompensationMode,
    DeductionDefinition,
    Employee,
    HoursSummary,
    PayPeriod,
    PayrollCalculation,
    TimeEntry,
    WarningCode,
    round_money,
    to_decimal,
)
from payroll_core.errors import InvalidInput

OVERTIME_MULTIPLIER = Decimal("1.5")


class PayrollCalculator:
    """Turns one employee's period inputs into a PayrollCalculation.

    Calculation pipeline (stable order):
    1) Gross pay: salary / periods-per-year, or hours x rate with overtime
    2) Deductions for the period's frequency, split pre/post-tax
    3) Taxable wages = gross - pre-tax deductions
    4) Federal tax on annualized taxable wages, de-annualized
    5) State tax on taxable wages
    6) FICA on gross, with the employee's YTD earnings
    7) Net = gross - taxes - pre-tax - post-tax

    Every amount is rounded to cents as it is produced, so net pay always
    equals gross minus the itemized fields exactly. Nothing here catches
    errors; InvalidInput from any step propagates to the caller.
    """

    def __init__(
        self,
        tax_calculator: TaxCalculator | None = None,
        deduction_engine: DeductionEngine | None = None,
        rate_set: TaxRateSet = RATES_2024,
    ):
        self.tax_calculator = tax_calculator or TaxCalculator(rate_set)
        self.deduction_engine = deduction_engine or DeductionEngine()

    def calculate_for_employee(
        self,
        employee: Employee,
        period: PayPeriod,
        time_entries: Iterable[TimeEntry],
        deductions: Iterable[DeductionDefinition],
    ) -> PayrollCalculation:
        """Calculate pay for a single employee in a single period."""
        periods = periods_per_year(period.frequency)
        status = parse_filing_status(employee.filing_status)

        # 1) Gross pay
        hours, regular_pay, overtime_pay = self._gross_pay(
            employee, period, time_entries, periods
        )
        gross = regular_pay + overtime_pay

        # 2) Deductions
        totals = self.deduction_engine.totals(
            deductions, gross, period.frequency, as_of=period.pay_date
        )

        # 3) Taxable wages
        taxable = max(ZERO, gross - totals.pre_tax_total)

        # 4-6) Taxes
        annual_federal = self.tax_calculator.federal_tax(
            taxable * periods, status, employee.allowances
        )
        federal = round_money(annual_federal / periods)
        state = self.tax_calculator.state_tax(taxable, employee.state_code)
        fica = self.tax_calculator.fica(gross, employee.ytd_earnings)

        # 7) Net pay
        total_taxes = federal + state + fica.social_security + fica.medicare
        net = gross - total_taxes - totals.pre_tax_total - totals.post_tax_total

        warnings: tuple[WarningCode, ...] = ()
        if net < 0:
            warnings = (WarningCode.NEGATIVE_NET_PAY,)

        return PayrollCalculation(
            employee_id=employee.employee_id,
            period_id=period.period_id,
            gross_pay=gross,
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            federal_tax=federal,
            state_tax=state,
            social_security=fica.social_security,
            medicare=fica.medicare,
            pre_tax_deductions=totals.pre_tax_total,
            post_tax_deductions=totals.post_tax_total,
            net_pay=net,
            regular_hours=hours.regular_hours,
            overtime_hours=hours.overtime_hours,
            taxable_wages=taxable,
            warnings=warnings,
        )

    def _gross_pay(
        self,
        employee: Employee,
        period: PayPeriod,
        time_entries: Iterable[TimeEntry],
        periods: int,
    ) -> tuple[HoursSummary, Decimal, Decimal]:
        """Return (hours, regular pay, overtime pay)."""
        try:
            mode = CompensationMode(employee.compensation_mode)
        except ValueError:
            raise InvalidInput(
                f"Unsupported compensation mode '{employee.compensation_mode}'",
                field="compensation_mode",
            ) from None

        amount = to_decimal(employee.compensation_amount, "compensation_amount")
        if amount < 0:
            raise InvalidInput(
                "Compensation amount cannot be negative", field="compensation_amount"
            )

        if mode == CompensationMode.SALARIED:
            return HoursSummary(), round_money(amount / periods), ZERO

        own_entries = [e for e in time_entries if e.employee_id == employee.employee_id]
        hours = aggregate(own_entries, period.start_date, period.end_date)
        regular_pay = round_money(hours.regular_hours * amount)
        overtime_pay = round_money(hours.overtime_hours * amount * OVERTIME_MULTIPLIER)
        return hours, regular_pay, overtime_pay
