"""Net pay disbursement: routing and status resolution."""

from payroll_core.disbursement.base import (
    AchGateway,
    AchSubmission,
    Balance,
    DisbursementMethod,
    DisbursementOutcome,
    DisbursementResult,
    DisbursementStatus,
    TransactionRecord,
    TransactionSource,
    WalletService,
)
from payroll_core.disbursement.router import DisbursementRouter
from payroll_core.disbursement.status import (
    DisbursementStatusResolver,
    wait_for_terminal_status,
)
from payroll_core.disbursement.stub import StubPaymentGateway

__all__ = [
    "AchGateway",
    "AchSubmission",
    "Balance",
    "DisbursementMethod",
    "DisbursementOutcome",
    "DisbursementResult",
    "DisbursementStatus",
    "TransactionRecord",
    "TransactionSource",
    "WalletService",
    "DisbursementRouter",
    "DisbursementStatusResolver",
    "wait_for_terminal_status",
    "StubPaymentGateway",
]
