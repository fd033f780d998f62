"""Tests for the disbursement router."""

from decimal import Decimal

import pybreaker
import pytest

from payroll_core.disbursement.base import (
    AchSubmission,
    Balance,
    DisbursementMethod,
)
from payroll_core.disbursement.router import DisbursementRouter
from payroll_core.errors import DataUnavailable, DisbursementFailure


class FakeWallet:
    """Wallet service that records calls."""

    def __init__(self, balance: Decimal | None, currency: str = "USD"):
        self.balance = balance
        self.currency = currency
        self.transfers: list[tuple[str, str, Decimal]] = []
        self.fail_transfer = False
        self.balance_calls = 0

    def get_balance(self, payer_id: str, currency: str) -> Balance:
        self.balance_calls += 1
        if self.balance is None:
            raise DataUnavailable("wallet", "timeout")
        return Balance(amount=self.balance, currency=self.currency)

    def transfer(self, from_wallet_id: str, to_employee_id: str, amount: Decimal) -> str:
        if self.fail_transfer:
            raise DisbursementFailure("wallet frozen")
        self.transfers.append((from_wallet_id, to_employee_id, amount))
        return "WAL-1"


class FakeAch:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.submissions: list[tuple[str, Decimal]] = []
        self.attempts = 0

    def submit_ach(self, payee_account: str, amount: Decimal) -> AchSubmission:
        self.attempts += 1
        if self.fail:
            raise DisbursementFailure("processor rejected")
        self.submissions.append((payee_account, amount))
        return AchSubmission(transaction_id="ACH-1", status="pending")


class TestRouting:
    def test_wallet_when_balance_covers_amount(self):
        wallet, ach = FakeWallet(Decimal("10000")), FakeAch()
        result = DisbursementRouter(wallet, ach).disburse("payer", "emp-1", Decimal("5000"))

        assert result.success
        assert result.method == DisbursementMethod.WALLET
        assert result.transaction_id == "WAL-1"
        assert wallet.transfers == [("payer", "emp-1", Decimal("5000"))]
        assert ach.submissions == []

    def test_wallet_when_balance_exactly_equals_amount(self):
        wallet, ach = FakeWallet(Decimal("5000")), FakeAch()
        result = DisbursementRouter(wallet, ach).disburse("payer", "emp-1", "5000")
        assert result.method == DisbursementMethod.WALLET

    def test_ach_when_balance_short(self):
        wallet, ach = FakeWallet(Decimal("1000")), FakeAch()
        result = DisbursementRouter(wallet, ach).disburse("payer", "emp-1", Decimal("5000"))

        assert result.success
        assert result.method == DisbursementMethod.ACH
        assert result.status == "pending"
        # No split funding
        assert wallet.transfers == []
        assert ach.submissions == [("emp-1", Decimal("5000"))]

    def test_account_resolver_maps_payee(self):
        wallet, ach = FakeWallet(Decimal("0")), FakeAch()
        router = DisbursementRouter(
            wallet, ach, account_resolver=lambda payee: f"acct:{payee}"
        )
        router.disburse("payer", "emp-1", Decimal("10"))
        assert ach.submissions == [("acct:emp-1", Decimal("10"))]


class TestFailures:
    def test_balance_error_stops_attempt(self):
        wallet, ach = FakeWallet(None), FakeAch()
        result = DisbursementRouter(wallet, ach).disburse("payer", "emp-1", Decimal("50"))

        assert not result.success
        assert result.method is None
        assert result.error.startswith("Failed to get employer balance")
        assert wallet.transfers == []
        assert ach.submissions == []

    def test_wallet_transfer_failure(self):
        wallet = FakeWallet(Decimal("100"))
        wallet.fail_transfer = True
        result = DisbursementRouter(wallet, FakeAch()).disburse("payer", "emp-1", Decimal("50"))

        assert not result.success
        assert result.method == DisbursementMethod.WALLET
        assert "wallet frozen" in result.error

    def test_ach_failure(self):
        result = DisbursementRouter(FakeWallet(Decimal("0")), FakeAch(fail=True)).disburse(
            "payer", "emp-1", Decimal("50")
        )
        assert not result.success
        assert result.method == DisbursementMethod.ACH

    def test_currency_mismatch(self):
        wallet = FakeWallet(Decimal("1000"), currency="EUR")
        result = DisbursementRouter(wallet, FakeAch()).disburse("payer", "emp-1", Decimal("50"))
        assert not result.success
        assert wallet.transfers == []

    @pytest.mark.parametrize(
        "amount",
        [
            Decimal("0"),
            Decimal("-5"),
            "abc",
            "NaN",
            "Infinity",
            "-Infinity",
            Decimal("Infinity"),
            float("nan"),
        ],
    )
    def test_invalid_amount(self, amount):
        wallet, ach = FakeWallet(Decimal("1000")), FakeAch()
        result = DisbursementRouter(wallet, ach).disburse("payer", "emp-1", amount)

        assert not result.success
        assert wallet.transfers == []
        assert ach.submissions == []

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", Decimal("-Infinity")])
    def test_non_finite_amount_is_reported_not_raised(self, amount):
        wallet, ach = FakeWallet(Decimal("0")), FakeAch()
        result = DisbursementRouter(wallet, ach).disburse("payer", "emp-1", amount)

        assert not result.success
        assert result.method is None
        assert "finite" in result.error
        assert wallet.balance_calls == 0
        assert ach.attempts == 0


def breaker() -> pybreaker.CircuitBreaker:
    return pybreaker.CircuitBreaker(fail_max=3, reset_timeout=60)


class TestCircuitBreaker:
    def test_closed_breakers_pass_calls_through(self):
        wallet, ach = FakeWallet(Decimal("100")), FakeAch()
        router = DisbursementRouter(wallet, ach)

        assert router.disburse("payer", "emp-1", Decimal("50")).success
        assert router.disburse("payer", "emp-1", Decimal("500")).success
        assert router.wallet_circuit.current_state == "closed"
        assert router.ach_circuit.current_state == "closed"
        assert wallet.balance_calls == 2

    def test_default_breaker_settings(self):
        router = DisbursementRouter(FakeWallet(Decimal("0")), FakeAch())

        assert router.wallet_circuit.fail_max == 3
        assert router.wallet_circuit.reset_timeout == 30
        assert router.ach_circuit.fail_max == 3
        assert router.ach_circuit.reset_timeout == 60

    def test_wallet_breaker_opens_after_repeated_balance_failures(self):
        wallet = FakeWallet(None)
        router = DisbursementRouter(wallet, FakeAch(), wallet_circuit=breaker())

        for _ in range(3):
            assert not router.disburse("payer", "emp-1", Decimal("50")).success
        assert router.wallet_circuit.current_state == "open"
        assert wallet.balance_calls == 3

        result = router.disburse("payer", "emp-1", Decimal("50"))

        assert not result.success
        assert result.error.startswith("Failed to get employer balance")
        assert wallet.balance_calls == 3

    def test_open_wallet_breaker_blocks_transfer(self):
        wallet = FakeWallet(Decimal("100"))
        circuit = breaker()
        router = DisbursementRouter(wallet, FakeAch(), wallet_circuit=circuit)
        circuit.open()

        result = router.disburse("payer", "emp-1", Decimal("50"))

        assert not result.success
        assert wallet.balance_calls == 0
        assert wallet.transfers == []

    def test_ach_breaker_opens_after_repeated_failures(self):
        ach = FakeAch(fail=True)
        router = DisbursementRouter(FakeWallet(Decimal("0")), ach, ach_circuit=breaker())

        for _ in range(3):
            result = router.disburse("payer", "emp-1", Decimal("50"))
            assert not result.success
            assert result.method == DisbursementMethod.ACH
        assert router.ach_circuit.current_state == "open"
        assert ach.attempts == 3

        ach.fail = False
        result = router.disburse("payer", "emp-1", Decimal("50"))

        assert not result.success
        assert result.method == DisbursementMethod.ACH
        assert ach.attempts == 3
        assert ach.submissions == []
        # Wallet breaker is independent
        assert router.wallet_circuit.current_state == "closed"

    def test_half_open_success_closes_breaker(self):
        ach = FakeAch()
        circuit = breaker()
        router = DisbursementRouter(FakeWallet(Decimal("0")), ach, ach_circuit=circuit)
        circuit.half_open()

        result = router.disburse("payer", "emp-1", Decimal("50"))

        assert result.success
        assert circuit.current_state == "closed"
        assert ach.submissions == [("emp-1", Decimal("50"))]

    def test_half_open_failure_reopens_breaker(self):
        ach = FakeAch(fail=True)
        circuit = breaker()
        router = DisbursementRouter(FakeWallet(Decimal("0")), ach, ach_circuit=circuit)
        circuit.half_open()

        result = router.disburse("payer", "emp-1", Decimal("50"))

        assert not result.success
        assert circuit.current_state == "open"
        assert ach.attempts == 1
