"""Payroll calculation core."""

from payroll_core.calculators.deductions import DeductionEngine
from payroll_core.calculators.engine import PayrollCalculator
from payroll_core.calculators.rates import RATES_2024, TaxRateSet, load_rate_set
from payroll_core.calculators.tax_calculator import TaxCalculator
from payroll_core.calculators.time_aggregator import aggregate, hours_for_entry

__all__ = [
    "DeductionEngine",
    "PayrollCalculator",
    "RATES_2024",
    "TaxRateSet",
    "load_rate_set",
    "TaxCalculator",
    "aggregate",
    "hours_for_entry",
]
