"""Per-paycheck deduction amounts."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from payroll_core.calculators.types import (
    ZERO,
    DeductionDefinition,
    DeductionFrequency,
    DeductionMethod,
    DeductionTotals,
    DeductionType,
    PayFrequency,
    round_money,
    to_decimal,
)
from payroll_core.errors import InvalidInput

# Average pay periods per month for converting monthly amounts
PERIODS_PER_MONTH: dict[str, Decimal] = {
    PayFrequency.WEEKLY: Decimal("4.33"),
    PayFrequency.BI_WEEKLY: Decimal("2.17"),
    PayFrequency.SEMI_MONTHLY: Decimal("2"),
    PayFrequency.MONTHLY: Decimal("1"),
}

PERIODS_PER_YEAR: dict[str, int] = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BI_WEEKLY: 26,
    PayFrequency.SEMI_MONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}

DEFAULT_PAY_FREQUENCY = PayFrequency.BI_WEEKLY


def _lookup(table: dict[str, Decimal] | dict[str, int], pay_frequency: str) -> Decimal:
    # Unknown frequencies fall back to bi-weekly.
    return Decimal(table.get(pay_frequency, table[DEFAULT_PAY_FREQUENCY]))


class DeductionEngine:
    """Computes deduction amounts and pre/post-tax totals.

    Annual caps (``max_annual_amount``) are carried on the definition but not
    enforced here; that needs year-to-date deduction history.
    """

    def amount_for(
        self,
        deduction: DeductionDefinition,
        gross_pay: Decimal | int | str,
        pay_frequency: PayFrequency | str = DEFAULT_PAY_FREQUENCY,
    ) -> Decimal:
        """Per-paycheck amount for one deduction, rounded to cents."""
        if not deduction.is_resolved:
            raise InvalidInput(
                f"Deduction {deduction.deduction_id} has no resolved type",
                field="deduction_type",
            )
        gross = to_decimal(gross_pay, "gross_pay")
        value = self._value(deduction)

        if deduction.calculation_method == DeductionMethod.PERCENTAGE:
            amount = gross * (value / Decimal("100"))
        else:
            amount = value

        frequency = deduction.frequency
        if frequency == DeductionFrequency.MONTHLY:
            amount = amount / _lookup(PERIODS_PER_MONTH, pay_frequency)
        elif frequency == DeductionFrequency.ANNUAL:
            amount = amount / _lookup(PERIODS_PER_YEAR, pay_frequency)
        elif frequency != DeductionFrequency.PER_PAYCHECK:
            raise InvalidInput(
                f"Unsupported deduction frequency '{frequency}'", field="frequency"
            )

        return round_money(amount)

    def totals(
        self,
        deductions: Iterable[DeductionDefinition],
        gross_pay: Decimal | int | str,
        pay_frequency: PayFrequency | str = DEFAULT_PAY_FREQUENCY,
        as_of: date | None = None,
    ) -> DeductionTotals:
        """Sum per-paycheck amounts by tax treatment.

        Deductions without a resolved type are skipped, as are deductions
        inactive on ``as_of`` when it is given.
        """
        pre_tax = ZERO
        post_tax = ZERO

        for deduction in deductions:
            if not deduction.is_resolved:
                continue
            if as_of is not None and not deduction.is_active_on(as_of):
                continue

            amount = self.amount_for(deduction, gross_pay, pay_frequency)
            if deduction.deduction_type == DeductionType.PRE_TAX:
                pre_tax += amount
            else:
                post_tax += amount

        return DeductionTotals(pre_tax_total=pre_tax, post_tax_total=post_tax)

    @staticmethod
    def _value(deduction: DeductionDefinition) -> Decimal:
        """Configured value: the employee amount, else the method's default."""
        if deduction.amount is not None:
            value = to_decimal(deduction.amount, "amount")
        elif deduction.calculation_method == DeductionMethod.PERCENTAGE:
            if deduction.default_percentage is None:
                raise InvalidInput(
                    f"Percentage deduction {deduction.deduction_id} has no percentage",
                    field="default_percentage",
                )
            value = to_decimal(deduction.default_percentage, "default_percentage")
        elif deduction.calculation_method == DeductionMethod.FIXED:
            if deduction.default_amount is None:
                raise InvalidInput(
                    f"Fixed deduction {deduction.deduction_id} has no amount",
                    field="default_amount",
                )
            value = to_decimal(deduction.default_amount, "default_amount")
        else:
            raise InvalidInput(
                f"Unsupported calculation method '{deduction.calculation_method}'",
                field="calculation_method",
            )

        if value < 0:
            raise InvalidInput("Deduction value cannot be negative", field="amount")
        return value
