"""Payroll core: paycheck calculation and disbursement routing."""

__version__ = "0.1.0"
