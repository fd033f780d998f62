"""Disbursement ledger - at-most-once gate per (period, employee)."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from payroll_core.disbursement.base import DisbursementResult


class ClaimState(str, Enum):
    """Outcome of trying to claim a disbursement slot."""

    CLAIMED = "claimed"
    IN_FLIGHT = "in_flight"
    ALREADY_SUCCEEDED = "already_succeeded"


@dataclass(frozen=True)
class Claim:
    state: ClaimState
    prior_result: DisbursementResult | None = None

    @property
    def granted(self) -> bool:
        return self.state == ClaimState.CLAIMED


def disbursement_key(period_id: str, employee_id: str) -> str:
    return f"{period_id}:{employee_id}"


class DisbursementLedger(Protocol):
    """Idempotency store for disbursement attempts.

    Production implementations back this with a unique constraint on the
    key so the gate holds across processes.
    """

    def claim(self, key: str) -> Claim:
        ...

    def record(self, key: str, result: DisbursementResult) -> None:
        ...


class InMemoryDisbursementLedger:
    """Thread-safe in-process ledger.

    A successful result is kept forever and returned on later claims. A
    failed result releases the slot so the employee can be retried.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()
        self._succeeded: dict[str, DisbursementResult] = {}
        self._last_failure: dict[str, DisbursementResult] = {}

    def claim(self, key: str) -> Claim:
        with self._lock:
            if key in self._succeeded:
                return Claim(ClaimState.ALREADY_SUCCEEDED, self._succeeded[key])
            if key in self._in_flight:
                return Claim(ClaimState.IN_FLIGHT)
            self._in_flight.add(key)
            return Claim(ClaimState.CLAIMED)

    def record(self, key: str, result: DisbursementResult) -> None:
        with self._lock:
            self._in_flight.discard(key)
            if result.success:
                self._succeeded[key] = result
                self._last_failure.pop(key, None)
            else:
                self._last_failure[key] = result

    def result_for(self, key: str) -> DisbursementResult | None:
        """Successful result if any, else the last failure."""
        return self._succeeded.get(key) or self._last_failure.get(key)
