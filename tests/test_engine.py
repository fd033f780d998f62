"""Unit tests for PayrollCalculator."""

from datetime import date, time
from decimal import Decimal

import pytest

from payroll_core.calculators.types import (
    CompensationMode,
    DeductionDefinition,
    DeductionMethod,
    DeductionType,
    WarningCode,
)
from payroll_core.errors import InvalidInput

from .conftest import make_employee, make_entry


def _assert_net_identity(calc):
    assert calc.net_pay == (
        calc.gross_pay
        - calc.federal_tax
        - calc.state_tax
        - calc.social_security
        - calc.medicare
        - calc.pre_tax_deductions
        - calc.post_tax_deductions
    )


class TestSalariedEmployee:
    def test_biweekly_paycheck(self, calculator, biweekly_period):
        calc = calculator.calculate_for_employee(
            make_employee(), biweekly_period, [], []
        )

        assert calc.gross_pay == Decimal("2000.00")
        # 6747.50 / 26 on annualized wages of 52000
        assert calc.federal_tax == Decimal("259.52")
        assert calc.state_tax == Decimal("160.00")
        assert calc.social_security == Decimal("124.00")
        assert calc.medicare == Decimal("29.00")
        assert calc.net_pay == Decimal("1427.48")
        assert calc.warnings == ()
        _assert_net_identity(calc)

    def test_pre_tax_deduction_reduces_income_tax_only(self, calculator, biweekly_period):
        k401 = DeductionDefinition(
            deduction_id="401k",
            calculation_method=DeductionMethod.PERCENTAGE,
            deduction_type=DeductionType.PRE_TAX,
            amount=Decimal("5"),
        )
        calc = calculator.calculate_for_employee(
            make_employee(), biweekly_period, [], [k401]
        )

        assert calc.pre_tax_deductions == Decimal("100.00")
        assert calc.taxable_wages == Decimal("1900.00")
        assert calc.federal_tax == Decimal("237.52")
        assert calc.state_tax == Decimal("152.00")
        # FICA stays on gross
        assert calc.social_security == Decimal("124.00")
        assert calc.net_pay == Decimal("1357.48")
        _assert_net_identity(calc)

    def test_time_entries_ignored(self, calculator, biweekly_period):
        entries = [make_entry(date(2024, 3, 4), start=time(0, 0), end=time(23, 0))]
        calc = calculator.calculate_for_employee(
            make_employee(), biweekly_period, entries, []
        )
        assert calc.gross_pay == Decimal("2000.00")
        assert calc.regular_hours == Decimal("0")


class TestHourlyEmployee:
    def test_overtime_at_time_and_a_half(self, calculator, weekly_period):
        employee = make_employee(
            compensation_mode=CompensationMode.HOURLY,
            compensation_amount=Decimal("20"),
            state_code="TX",
        )
        entries = [
            make_entry(date(2024, 3, 4 + i), start=time(8, 0), end=time(18, 0), break_minutes=30)
            for i in range(5)
        ]
        calc = calculator.calculate_for_employee(employee, weekly_period, entries, [])

        assert calc.regular_hours == Decimal("40")
        assert calc.overtime_hours == Decimal("7.5")
        assert calc.regular_pay == Decimal("800.00")
        assert calc.overtime_pay == Decimal("225.00")
        assert calc.gross_pay == Decimal("1025.00")
        assert calc.state_tax == Decimal("0")
        assert calc.federal_tax == Decimal("135.26")
        assert calc.net_pay == Decimal("811.33")
        _assert_net_identity(calc)

    def test_only_own_entries_in_period_count(self, calculator, weekly_period):
        employee = make_employee(
            compensation_mode="hourly", compensation_amount=Decimal("10"), state_code="TX"
        )
        entries = [
            make_entry(date(2024, 3, 4)),
            make_entry(date(2024, 3, 5), employee_id="someone-else"),
            make_entry(date(2024, 3, 11)),  # next period
        ]
        calc = calculator.calculate_for_employee(employee, weekly_period, entries, [])
        assert calc.regular_hours == Decimal("8")
        assert calc.gross_pay == Decimal("80.00")

    def test_no_entries_means_zero_pay(self, calculator, weekly_period):
        employee = make_employee(compensation_mode="hourly", compensation_amount=Decimal("10"))
        calc = calculator.calculate_for_employee(employee, weekly_period, [], [])
        assert calc.gross_pay == Decimal("0")
        assert calc.net_pay == Decimal("0")


class TestNegativeNetPay:
    def test_flagged_with_warning(self, calculator, biweekly_period):
        garnishment = DeductionDefinition(
            deduction_id="garnish",
            calculation_method=DeductionMethod.FIXED,
            deduction_type=DeductionType.POST_TAX,
            amount=Decimal("2000"),
        )
        calc = calculator.calculate_for_employee(
            make_employee(compensation_amount=Decimal("26000")),
            biweekly_period,
            [],
            [garnishment],
        )

        assert calc.net_pay < 0
        assert calc.warnings == (WarningCode.NEGATIVE_NET_PAY,)
        assert calc.needs_review
        _assert_net_identity(calc)


class TestInvalidInputs:
    def test_unknown_compensation_mode(self, calculator, biweekly_period):
        with pytest.raises(InvalidInput):
            calculator.calculate_for_employee(
                make_employee(compensation_mode="commission"), biweekly_period, [], []
            )

    def test_negative_compensation(self, calculator, biweekly_period):
        with pytest.raises(InvalidInput):
            calculator.calculate_for_employee(
                make_employee(compensation_amount=Decimal("-1")), biweekly_period, [], []
            )

    @pytest.mark.parametrize("amount", [Decimal("NaN"), Decimal("Infinity")])
    def test_non_finite_compensation(self, calculator, biweekly_period, amount):
        with pytest.raises(InvalidInput):
            calculator.calculate_for_employee(
                make_employee(compensation_amount=amount), biweekly_period, [], []
            )

    def test_unknown_state(self, calculator, biweekly_period):
        with pytest.raises(InvalidInput):
            calculator.calculate_for_employee(
                make_employee(state_code="ZZ"), biweekly_period, [], []
            )

