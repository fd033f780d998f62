"""Disbursement routing between employer wallet and ACH."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

import pybreaker

from payroll_core.calculators.types import to_decimal
from payroll_core.disbursement.base import (
    AchGateway,
    DisbursementMethod,
    DisbursementResult,
    WalletService,
)
from payroll_core.errors import InvalidInput

logger = logging.getLogger(__name__)

# Failures before opening, seconds before a half-open trial call
WALLET_BREAKER_FAIL_MAX = 3
WALLET_BREAKER_RESET_TIMEOUT = 30
ACH_BREAKER_FAIL_MAX = 3
ACH_BREAKER_RESET_TIMEOUT = 60


class BreakerStateLogger(pybreaker.CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state) -> None:
        logger.warning(
            "Circuit breaker %s: %s -> %s",
            cb.name,
            old_state.name if old_state else None,
            new_state.name,
        )


def wallet_breaker() -> pybreaker.CircuitBreaker:
    return pybreaker.CircuitBreaker(
        fail_max=WALLET_BREAKER_FAIL_MAX,
        reset_timeout=WALLET_BREAKER_RESET_TIMEOUT,
        listeners=[BreakerStateLogger()],
        name="wallet",
    )


def ach_breaker() -> pybreaker.CircuitBreaker:
    return pybreaker.CircuitBreaker(
        fail_max=ACH_BREAKER_FAIL_MAX,
        reset_timeout=ACH_BREAKER_RESET_TIMEOUT,
        listeners=[BreakerStateLogger()],
        name="ach",
    )


class DisbursementRouter:
    """Routes a payout to a wallet transfer or an ACH credit.

    Flow per call:
    1) Fetch the payer's balance. Failure ends the attempt.
    2) balance >= amount selects wallet, otherwise ACH. No split funding.
    3) Invoke the chosen primitive once.

    Wallet calls (balance and transfer) go through one circuit breaker and
    ACH submissions through another. While a breaker is open its
    collaborator is not called and the attempt fails immediately.

    ``disburse`` never raises; every failure comes back as an unsuccessful
    DisbursementResult. The router does not deduplicate, so callers must not
    invoke it twice for the same (employee, period).
    """

    def __init__(
        self,
        wallet_service: WalletService,
        ach_gateway: AchGateway,
        currency: str = "USD",
        account_resolver: Callable[[str], str] | None = None,
        wallet_circuit: pybreaker.CircuitBreaker | None = None,
        ach_circuit: pybreaker.CircuitBreaker | None = None,
    ):
        self.wallet_service = wallet_service
        self.ach_gateway = ach_gateway
        self.currency = currency
        # Maps payee id to the ACH account reference; identity by default
        self.account_resolver = account_resolver or (lambda payee_id: payee_id)
        self.wallet_circuit = wallet_circuit or wallet_breaker()
        self.ach_circuit = ach_circuit or ach_breaker()

    def disburse(
        self, payer_id: str, payee_id: str, amount: Decimal | int | str
    ) -> DisbursementResult:
        """Move ``amount`` from payer to payee."""
        try:
            amount_d = to_decimal(amount)
            if amount_d <= 0:
                raise InvalidInput(
                    f"Disbursement amount must be positive, got {amount_d}", field="amount"
                )
        except InvalidInput as exc:
            return DisbursementResult(success=False, error=str(exc))

        # 1) Balance
        try:
            balance = self.wallet_circuit.call(
                self.wallet_service.get_balance, payer_id, self.currency
            )
        except Exception as exc:
            logger.warning("Balance fetch failed for payer %s: %s", payer_id, exc)
            return DisbursementResult(
                success=False, error=f"Failed to get employer balance: {exc}"
            )

        if balance.currency != self.currency:
            return DisbursementResult(
                success=False,
                error=f"Balance currency {balance.currency} does not match {self.currency}",
            )

        # 2) Decision
        method = (
            DisbursementMethod.WALLET
            if balance.amount >= amount_d
            else DisbursementMethod.ACH
        )

        # 3) Transfer
        try:
            if method == DisbursementMethod.WALLET:
                transaction_id = self.wallet_circuit.call(
                    self.wallet_service.transfer, payer_id, payee_id, amount_d
                )
                result = DisbursementResult(
                    success=True, method=method, transaction_id=transaction_id
                )
            else:
                account = self.account_resolver(payee_id)
                submission = self.ach_circuit.call(
                    self.ach_gateway.submit_ach, account, amount_d
                )
                result = DisbursementResult(
                    success=True,
                    method=method,
                    transaction_id=submission.transaction_id,
                    status=submission.status,
                )
        except pybreaker.CircuitBreakerError as exc:
            logger.warning(
                "Disbursement via %s refused for payee %s: %s", method.value, payee_id, exc
            )
            return DisbursementResult(success=False, method=method, error=str(exc))
        except Exception as exc:
            logger.exception(
                "Disbursement via %s failed for payee %s", method.value, payee_id
            )
            return DisbursementResult(success=False, method=method, error=str(exc))

        logger.info(
            "Disbursed %s to %s via %s (%s)",
            amount_d,
            payee_id,
            method.value,
            result.transaction_id,
        )
        return result
