"""Tax withholding and paycheck preview endpoints."""

from fastapi import APIRouter, status

from payroll_core.api.dependencies import Calculator, Taxes
from payroll_core.api.schemas import (
    ErrorResponse,
    PaycheckPreviewRequest,
    PayrollCalculationResponse,
    WithholdingRequest,
    WithholdingResponse,
)

router = APIRouter(tags=["paychecks"])


@router.post(
    "/tax/withholding",
    response_model=WithholdingResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_withholding(
    taxes: Taxes,
    payload: WithholdingRequest,
) -> WithholdingResponse:
    """Calculate federal, state and FICA taxes on one income figure."""
    result = taxes.withholding(
        payload.income,
        payload.filing_status,
        payload.state_code,
        allowances=payload.allowances,
        ytd_earnings=payload.ytd_earnings,
    )
    return WithholdingResponse(
        federal=result.federal,
        state=result.state,
        social_security=result.social_security,
        medicare=result.medicare,
        total=result.total,
        rate_set_version=taxes.rate_set.version,
    )


@router.post(
    "/paychecks/preview",
    response_model=PayrollCalculationResponse,
    status_code=status.HTTP_200_OK,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def preview_paycheck(
    calculator: Calculator,
    payload: PaycheckPreviewRequest,
) -> PayrollCalculationResponse:
    """Calculate one paycheck without disbursing it.

    Rejected with 409 if the loaded tax rates do not cover the pay date.
    """
    employee = payload.employee.to_domain()
    period = payload.period.to_domain()
    calculator.tax_calculator.rate_set.ensure_valid_for(period.pay_date)

    calculation = calculator.calculate_for_employee(
        employee,
        period,
        [entry.to_domain(employee.employee_id) for entry in payload.time_entries],
        [deduction.to_domain() for deduction in payload.deductions],
    )
    return PayrollCalculationResponse.from_calculation(calculation)
