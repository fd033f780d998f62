"""Base protocols and types for disbursement collaborators.

The router and status resolver depend only on these protocols; wallet
stores, ACH processors and transaction stores each provide an adapter.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol


class DisbursementMethod(str, Enum):
    """How net pay was (or was going to be) moved."""

    WALLET = "wallet"
    ACH = "ach"


class DisbursementOutcome(str, Enum):
    """Normalized transaction status exposed to clients."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Balance:
    """Payer wallet balance in one currency."""

    amount: Decimal
    currency: str = "USD"
    as_of: datetime.datetime | None = None


@dataclass(frozen=True)
class AchSubmission:
    """Result of submitting an ACH credit."""

    transaction_id: str
    status: str  # Processor vocabulary, e.g. approved / pending


@dataclass(frozen=True)
class TransactionRecord:
    """Raw transaction as stored by the payment processor."""

    transaction_id: str
    status: str
    amount: Decimal
    currency: str = "USD"
    created_at: datetime.datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "status": self.status,
            "amount": str(self.amount),
            "currency": self.currency,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class DisbursementResult:
    """Outcome of one disbursement attempt. A retry produces a new result."""

    success: bool
    method: DisbursementMethod | None = None  # None if failed before routing
    transaction_id: str | None = None
    status: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class DisbursementStatus:
    """Normalized status of a disbursement transaction."""

    status: DisbursementOutcome
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.status != DisbursementOutcome.PENDING


class WalletService(Protocol):
    """Employer wallet balances and atomic wallet-to-wallet transfers."""

    def get_balance(self, payer_id: str, currency: str) -> Balance:
        """Return the payer's current balance in a currency."""
        ...

    def transfer(self, from_wallet_id: str, to_employee_id: str, amount: Decimal) -> str:
        """Debit payer and credit payee as one operation; return transaction id.

        Must be all-or-nothing.
        """
        ...


class AchGateway(Protocol):
    """ACH credit submission."""

    def submit_ach(self, payee_account: str, amount: Decimal) -> AchSubmission:
        """Submit an ACH credit to the payee's account."""
        ...


class TransactionSource(Protocol):
    """Read access to processor transactions."""

    def get_transaction(self, transaction_id: str) -> TransactionRecord:
        """Fetch a transaction by id."""
        ...
