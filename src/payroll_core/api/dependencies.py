"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from payroll_core.calculators.engine import PayrollCalculator
from payroll_core.calculators.rates import TaxRateSet
from payroll_core.calculators.tax_calculator import TaxCalculator
from payroll_core.disbursement.router import DisbursementRouter
from payroll_core.disbursement.status import DisbursementStatusResolver


def get_rate_set(request: Request) -> TaxRateSet:
    return request.app.state.rate_set


def get_tax_calculator(request: Request) -> TaxCalculator:
    return request.app.state.calculator.tax_calculator


def get_calculator(request: Request) -> PayrollCalculator:
    return request.app.state.calculator


def get_router(request: Request) -> DisbursementRouter:
    return request.app.state.router


def get_resolver(request: Request) -> DisbursementStatusResolver:
    return request.app.state.resolver


# Type aliases for cleaner dependency injection
RateSet = Annotated[TaxRateSet, Depends(get_rate_set)]
Taxes = Annotated[TaxCalculator, Depends(get_tax_calculator)]
Calculator = Annotated[PayrollCalculator, Depends(get_calculator)]
Router = Annotated[DisbursementRouter, Depends(get_router)]
Resolver = Annotated[DisbursementStatusResolver, Depends(get_resolver)]
