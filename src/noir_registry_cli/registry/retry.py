"""Backoff policy for registry lookups.

The policy is a pure function of the attempt number and what that attempt
observed; ``RegistryClient`` drives it and does the sleeping. Keeping it free
of I/O lets the schedule be tested without real delays.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

MAX_ATTEMPTS = 3
TRANSPORT_BASE_DELAY = 0.1
UNAVAILABLE_BASE_DELAY = 0.5
RETRYABLE_STATUSES = (502, 503)


class Action(Enum):
    """What to do after an attempt."""
    SUCCEED = "succeed"
    RETRY = "retry"
    FAIL = "fail"


class FailureReason(Enum):
    """Why a lookup gave up."""
    NETWORK = "network"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"


@dataclass(frozen=True)
class RetryDecision:
    action: Action
    delay: float = 0.0
    reason: Optional[FailureReason] = None


def backoff_delay(attempt: int, base: float) -> float:
    """Exponential backoff: ``base * 2**attempt`` seconds."""
    return base * (2 ** attempt)


def decide(attempt: int, status: Optional[int] = None, transport_error: bool = False,
           max_attempts: int = MAX_ATTEMPTS) -> RetryDecision:
    """Decide the next step after a zero-based ``attempt``.

    Args:
        attempt: Zero-based attempt number
        status: HTTP status of the response, when one was received
        transport_error: True when no response was received at all
        max_attempts: Total attempts allowed

    Returns:
        RetryDecision
    """
    last_attempt = attempt >= max_attempts - 1

    if transport_error:
        if last_attempt:
            return RetryDecision(Action.FAIL, reason=FailureReason.NETWORK)
        return RetryDecision(Action.RETRY, delay=backoff_delay(attempt, TRANSPORT_BASE_DELAY))

    if status is None:
        raise ValueError("Either a status or a transport error is required")

    if 200 <= status < 300:
        return RetryDecision(Action.SUCCEED)

    if status == 404:
        return RetryDecision(Action.FAIL, reason=FailureReason.NOT_FOUND)

    if status in RETRYABLE_STATUSES:
        if last_attempt:
            return RetryDecision(Action.FAIL, reason=FailureReason.UNAVAILABLE)
        return RetryDecision(Action.RETRY, delay=backoff_delay(attempt, UNAVAILABLE_BASE_DELAY))

    return RetryDecision(Action.FAIL, reason=FailureReason.HTTP_ERROR)
