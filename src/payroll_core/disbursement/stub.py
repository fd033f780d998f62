"""In-memory payment gateway for local development and testing.

Implements WalletService, AchGateway and TransactionSource. Replace with
real wallet storage and an ACH processor adapter for production.
"""

from __future__ import annotations

import datetime
import threading
import uuid
from decimal import Decimal
from typing import Any

from payroll_core.disbursement.base import AchSubmission, Balance, TransactionRecord
from payroll_core.errors import DataUnavailable, DisbursementFailure


class StubPaymentGateway:
    """Stub wallet store and ACH processor.

    ACH credits are recorded as ``approved`` immediately when
    ``auto_approve`` is True; otherwise they stay ``pending`` until
    ``simulate_settlement`` or ``simulate_decline`` is called.
    """

    provider_name = "stub"

    def __init__(self, currency: str = "USD", auto_approve: bool = False):
        self.currency = currency
        self.auto_approve = auto_approve
        self._lock = threading.Lock()
        self._employer_wallets: dict[str, Decimal] = {}
        self._employee_wallets: dict[str, Decimal] = {}
        self._transactions: dict[str, TransactionRecord] = {}

    def fund(self, payer_id: str, amount: Decimal | int | str) -> Decimal:
        """Deposit into an employer wallet (creating it if needed)."""
        with self._lock:
            balance = self._employer_wallets.get(payer_id, Decimal("0")) + Decimal(str(amount))
            self._employer_wallets[payer_id] = balance
            return balance

    def employee_balance(self, employee_id: str) -> Decimal:
        return self._employee_wallets.get(employee_id, Decimal("0"))

    # WalletService

    def get_balance(self, payer_id: str, currency: str) -> Balance:
        if currency != self.currency:
            raise DataUnavailable("wallet", f"No {currency} wallet for payer {payer_id}")
        if payer_id not in self._employer_wallets:
            raise DataUnavailable("wallet", f"Employer wallet {payer_id} not found")
        return Balance(
            amount=self._employer_wallets[payer_id],
            currency=self.currency,
            as_of=datetime.datetime.now(datetime.timezone.utc),
        )

    def transfer(self, from_wallet_id: str, to_employee_id: str, amount: Decimal) -> str:
        with self._lock:
            available = self._employer_wallets.get(from_wallet_id)
            if available is None:
                raise DisbursementFailure(f"Employer wallet {from_wallet_id} not found")
            if available < amount:
                raise DisbursementFailure(
                    f"Insufficient funds: available {available}, requested {amount}"
                )
            self._employer_wallets[from_wallet_id] = available - amount
            self._employee_wallets[to_employee_id] = (
                self._employee_wallets.get(to_employee_id, Decimal("0")) + amount
            )
            return self._record(
                "WAL",
                status="approved",
                amount=amount,
                metadata={"from": from_wallet_id, "to": to_employee_id, "method": "wallet"},
            )

    # AchGateway

    def submit_ach(self, payee_account: str, amount: Decimal) -> AchSubmission:
        status = "approved" if self.auto_approve else "pending"
        with self._lock:
            transaction_id = self._record(
                "ACH",
                status=status,
                amount=amount,
                metadata={"payee_account": payee_account, "method": "ach"},
            )
        return AchSubmission(transaction_id=transaction_id, status=status)

    # TransactionSource

    def get_transaction(self, transaction_id: str) -> TransactionRecord:
        record = self._transactions.get(transaction_id)
        if record is None:
            raise DataUnavailable("transactions", f"Transaction {transaction_id} not found")
        return record

    # Simulation hooks

    def simulate_settlement(self, transaction_id: str) -> None:
        self._set_status(transaction_id, "approved")

    def simulate_decline(self, transaction_id: str) -> None:
        self._set_status(transaction_id, "declined")

    def _set_status(self, transaction_id: str, status: str) -> None:
        with self._lock:
            record = self.get_transaction(transaction_id)
            self._transactions[transaction_id] = TransactionRecord(
                transaction_id=record.transaction_id,
                status=status,
                amount=record.amount,
                currency=record.currency,
                created_at=record.created_at,
                metadata=record.metadata,
            )

    def _record(
        self, prefix: str, status: str, amount: Decimal, metadata: dict[str, Any]
    ) -> str:
        transaction_id = f"{prefix}-{uuid.uuid4().hex[:12].upper()}"
        self._transactions[transaction_id] = TransactionRecord(
            transaction_id=transaction_id,
            status=status,
            amount=amount,
            currency=self.currency,
            created_at=datetime.datetime.now(datetime.timezone.utc),
            metadata=metadata,
        )
        return transaction_id
