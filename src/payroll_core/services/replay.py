"""Replay of payroll runs queued while offline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from payroll_core.errors import DataUnavailable, InvalidTransitionError
from payroll_core.services.payroll_run import PayrollRunService, PayrollRunSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedPayrollRun:
    """A payroll-run request captured while offline."""

    idempotency_key: str  # Generated by the client when queuing
    period_id: str
    company_id: str
    payer_id: str
    queued_at: datetime | None = None


class ReplayQueue(Protocol):
    """Durable queue of payroll-run requests."""

    def pending(self) -> list[QueuedPayrollRun]:
        ...

    def acknowledge(self, idempotency_key: str) -> None:
        ...


def replay_queued_runs(
    queue: ReplayQueue,
    service: PayrollRunService,
    processed_keys: set[str] | None = None,
) -> dict[str, PayrollRunSummary]:
    """Replay pending requests in queue order, once per idempotency key.

    ``processed_keys`` persists across calls; keys already in it are
    acknowledged without running. A request whose period has already been
    completed is acknowledged too. Replay stops at the first
    DataUnavailable, leaving that request and the rest queued.
    """
    processed = processed_keys if processed_keys is not None else set()
    summaries: dict[str, PayrollRunSummary] = {}

    for request in queue.pending():
        key = request.idempotency_key
        if key in processed:
            logger.info("Skipping already replayed payroll run %s", key)
            queue.acknowledge(key)
            continue

        try:
            summary = service.run_period(
                request.period_id, request.company_id, request.payer_id
            )
        except InvalidTransitionError as exc:
            logger.warning("Dropping queued payroll run %s: %s", key, exc)
        except DataUnavailable as exc:
            logger.warning("Replay paused at %s: %s", key, exc)
            break
        else:
            summaries[key] = summary

        processed.add(key)
        queue.acknowledge(key)

    return summaries
