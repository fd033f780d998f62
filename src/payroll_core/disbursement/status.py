"""Disbursement status resolution and caller-side polling."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from payroll_core.disbursement.base import (
    DisbursementOutcome,
    DisbursementStatus,
    TransactionSource,
)

logger = logging.getLogger(__name__)

COMPLETED_STATUSES = frozenset({"approved"})
PENDING_STATUSES = frozenset({"pending", "processing"})


class DisbursementStatusResolver:
    """Maps a processor's raw status onto pending / completed / failed.

    One fetch per call; no retries and no timeout. Unrecognized statuses are
    treated as failed.
    """

    def __init__(
        self,
        transactions: TransactionSource,
        completed_statuses: Iterable[str] = COMPLETED_STATUSES,
        pending_statuses: Iterable[str] = PENDING_STATUSES,
    ):
        self.transactions = transactions
        self.completed_statuses = frozenset(s.lower() for s in completed_statuses)
        self.pending_statuses = frozenset(s.lower() for s in pending_statuses)

    def resolve(self, transaction_id: str) -> DisbursementStatus:
        try:
            record = self.transactions.get_transaction(transaction_id)
        except Exception as exc:
            logger.warning("Status fetch failed for %s: %s", transaction_id, exc)
            return DisbursementStatus(
                status=DisbursementOutcome.FAILED,
                details={"error": f"Failed to get transaction: {exc}"},
            )

        return DisbursementStatus(
            status=self.map_status(record.status),
            details=record.to_dict(),
        )

    def map_status(self, raw_status: str | None) -> DisbursementOutcome:
        raw = (raw_status or "").lower()
        if raw in self.completed_statuses:
            return DisbursementOutcome.COMPLETED
        if raw in self.pending_statuses:
            return DisbursementOutcome.PENDING
        return DisbursementOutcome.FAILED


async def wait_for_terminal_status(
    resolver: DisbursementStatusResolver,
    transaction_id: str,
    interval_seconds: float,
    timeout_seconds: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> DisbursementStatus:
    """Re-resolve every ``interval_seconds`` until terminal or timed out.

    Each resolve runs in a worker thread so a blocking status read does not
    stall the event loop. Returns the last status seen; on timeout that is
    still pending.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds

    status = await asyncio.to_thread(resolver.resolve, transaction_id)
    while not status.is_terminal:
        if loop.time() + interval_seconds > deadline:
            logger.info("Gave up polling %s after %ss", transaction_id, timeout_seconds)
            break
        await sleep(interval_seconds)
        status = await asyncio.to_thread(resolver.resolve, transaction_id)
    return status
