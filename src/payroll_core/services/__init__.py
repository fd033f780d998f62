"""Payroll run services."""

from payroll_core.services.ledger import InMemoryDisbursementLedger
from payroll_core.services.payroll_run import PayrollRunService, PayrollRunSummary
from payroll_core.services.replay import replay_queued_runs
from payroll_core.services.state_machine import PayPeriodStateMachine, PeriodStatus

__all__ = [
    "InMemoryDisbursementLedger",
    "PayrollRunService",
    "PayrollRunSummary",
    "replay_queued_runs",
    "PayPeriodStateMachine",
    "PeriodStatus",
]
