"""Exception types raised by the payroll core."""

from __future__ import annotations

from datetime import date


class PayrollError(Exception):
    """Base class for payroll core errors."""


class InvalidInput(PayrollError):
    """Raised when a calculation input is out of range or malformed.

    Inputs are never silently coerced: negative income, a malformed state
    code or an unsupported filing status all fail here.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class DataUnavailable(PayrollError):
    """Raised when a collaborator read (employee, time, deductions...) fails."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class DisbursementFailure(PayrollError):
    """Raised by payment gateways when a transfer or submission is rejected.

    The disbursement router never lets this escape; it is converted into an
    unsuccessful ``DisbursementResult``.
    """


class RateSetNotValid(PayrollError):
    """Raised when a tax rate set is used outside its validity window."""

    def __init__(self, version: str, as_of: date):
        self.version = version
        self.as_of = as_of
        super().__init__(f"Tax rate set '{version}' is not valid for {as_of}")


class InvalidTransitionError(PayrollError):
    """Raised when an invalid pay period state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
