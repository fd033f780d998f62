"""Pay period state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from payroll_core.errors import InvalidTransitionError


class PeriodStatus(str, Enum):
    """Pay period status values."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class PayPeriodStateMachine:
    """State machine for pay period status transitions.

    Allowed transitions:
    - pending → processing
    - processing → completed
    - processing → error
    - error → processing (re-run)
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PeriodStatus.PENDING: [PeriodStatus.PROCESSING],
        PeriodStatus.PROCESSING: [PeriodStatus.COMPLETED, PeriodStatus.ERROR],
        PeriodStatus.ERROR: [PeriodStatus.PROCESSING],
        PeriodStatus.COMPLETED: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

