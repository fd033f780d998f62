"""Disbursement endpoints."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from payroll_core.api.dependencies import Resolver, Router
from payroll_core.api.schemas import (
    DisbursementRequest,
    DisbursementResponse,
    DisbursementStatusResponse,
)
from payroll_core.config import get_settings
from payroll_core.disbursement.status import wait_for_terminal_status

router = APIRouter(prefix="/disbursements", tags=["disbursements"])


@router.post(
    "",
    response_model=DisbursementResponse,
    status_code=status.HTTP_200_OK,
)
async def create_disbursement(
    disbursement_router: Router,
    payload: DisbursementRequest,
) -> DisbursementResponse:
    """Pay an employee from the employer wallet, falling back to ACH.

    A failed disbursement is still a 200; check ``success``.
    """
    result = await asyncio.to_thread(
        disbursement_router.disburse, payload.payer_id, payload.payee_id, payload.amount
    )
    return DisbursementResponse.from_result(result)


@router.get(
    "/{transaction_id}/status",
    response_model=DisbursementStatusResponse,
)
async def get_disbursement_status(
    resolver: Resolver,
    transaction_id: Annotated[str, Path()],
    wait: Annotated[bool, Query()] = False,
) -> DisbursementStatusResponse:
    """Resolve the current status of a disbursement.

    With ``wait=true`` the status is polled until it is terminal or the
    configured poll timeout passes.
    """
    if wait:
        settings = get_settings()
        current = await wait_for_terminal_status(
            resolver,
            transaction_id,
            interval_seconds=settings.status_poll_interval_seconds,
            timeout_seconds=settings.status_poll_timeout_seconds,
        )
    else:
        current = await asyncio.to_thread(resolver.resolve, transaction_id)
    return DisbursementStatusResponse.from_status(transaction_id, current)
