"""Tax calculation from a versioned bracket/rate table."""

from __future__ import annotations

import re
from decimal import Decimal

from payroll_core.calculators.rates import RATES_2024, TaxRateSet
from payroll_core.calculators.types import (
    ZERO,
    FicaAmounts,
    FilingStatus,
    TaxBracket,
    TaxWithholding,
    round_money,
    to_decimal,
)
from payroll_core.errors import InvalidInput

_STATE_CODE = re.compile(r"^[A-Za-z]{2}$")


def parse_filing_status(value: FilingStatus | str) -> FilingStatus:
    """Coerce a filing status, raising InvalidInput when unsupported."""
    try:
        return FilingStatus(value)
    except ValueError:
        raise InvalidInput(
            f"Unsupported filing status '{value}'", field="filing_status"
        ) from None


def normalize_state_code(value: str) -> str:
    """Validate a two-letter state code and upper-case it."""
    if not isinstance(value, str) or not _STATE_CODE.match(value):
        raise InvalidInput(f"Invalid state code '{value}'", field="state_code")
    return value.upper()


def _non_negative(value: Decimal | int | str, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise InvalidInput(f"{field_name} cannot be negative", field=field_name)
    return amount


class TaxCalculator:
    """Calculates employee taxes from an injected TaxRateSet.

    Amounts are annual or per-paycheck depending on what the caller passes;
    federal brackets are annual, so per-paycheck callers annualize first (see
    PayrollCalculator).
    """

    def __init__(self, rate_set: TaxRateSet = RATES_2024):
        self.rate_set = rate_set

    def federal_tax(
        self,
        income: Decimal | int | str,
        filing_status: FilingStatus | str,
        allowances: int = 0,
    ) -> Decimal:
        """Federal income tax on income after allowances."""
        income_d = _non_negative(income, "income")
        status = parse_filing_status(filing_status)
        if allowances < 0:
            raise InvalidInput("Allowances cannot be negative", field="allowances")

        allowance_value = allowances * self.rate_set.allowance_value
        adjusted = max(ZERO, income_d - allowance_value)
        return self._calculate_progressive_tax(adjusted, self.rate_set.brackets_for(status))

    def state_tax(self, income: Decimal | int | str, state_code: str) -> Decimal:
        """Flat-rate state income tax."""
        income_d = _non_negative(income, "income")
        code = normalize_state_code(state_code)

        rate = self.rate_set.state_rate(code)
        if rate is None:
            raise InvalidInput(
                f"No state tax rate for '{code}' in rate set {self.rate_set.version}",
                field="state_code",
            )
        if rate == 0:
            return ZERO
        return round_money(income_d * rate)

    def fica(
        self,
        income: Decimal | int | str,
        ytd_earnings: Decimal | int | str = 0,
    ) -> FicaAmounts:
        """Social Security and Medicare for income on top of YTD earnings."""
        income_d = _non_negative(income, "income")
        ytd = _non_negative(ytd_earnings, "ytd_earnings")
        rates = self.rate_set

        remaining_base = max(ZERO, rates.social_security_wage_base - ytd)
        social_security = round_money(min(income_d, remaining_base) * rates.social_security_rate)

        # Surtax applies only to the part of this income above the threshold.
        threshold = rates.additional_medicare_threshold
        surtax_wages = max(ZERO, ytd + income_d - max(ytd, threshold))
        medicare = round_money(
            income_d * rates.medicare_rate + surtax_wages * rates.additional_medicare_rate
        )

        return FicaAmounts(social_security=social_security, medicare=medicare)

    def withholding(
        self,
        income: Decimal | int | str,
        filing_status: FilingStatus | str,
        state_code: str,
        allowances: int = 0,
        ytd_earnings: Decimal | int | str = 0,
    ) -> TaxWithholding:
        """All four employee taxes on the same income."""
        fica = self.fica(income, ytd_earnings)
        return TaxWithholding(
            federal=self.federal_tax(income, filing_status, allowances),
            state=self.state_tax(income, state_code),
            social_security=fica.social_security,
            medicare=fica.medicare,
        )

    def _calculate_progressive_tax(
        self, wages: Decimal, brackets: tuple[TaxBracket, ...]
    ) -> Decimal:
        """Tax using the bracket containing wages and its precomputed base."""
        if wages <= 0:
            return ZERO

        for bracket in brackets:
            if bracket.contains(wages):
                tax = bracket.flat_amount + (wages - bracket.min_amount) * bracket.rate
                return round_money(tax)

        # Unreachable with a well-formed table (top bracket is unbounded)
        raise InvalidInput(f"No bracket covers {wages}", field="income")
