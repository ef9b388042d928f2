"""Tests for the registry backoff policy."""

import pytest

from noir_registry_cli.registry.retry import (
    Action,
    FailureReason,
    backoff_delay,
    decide,
)


class TestBackoffDelay:

    def test_doubles_each_attempt(self):
        assert backoff_delay(0, 0.1) == pytest.approx(0.1)
        assert backoff_delay(1, 0.1) == pytest.approx(0.2)
        assert backoff_delay(1, 0.5) == pytest.approx(1.0)


class TestDecide:
    """Test retry decisions per attempt outcome."""

    def test_success_statuses(self):
        assert decide(0, status=200).action is Action.SUCCEED
        assert decide(2, status=204).action is Action.SUCCEED

    def test_transport_error_schedule(self):
        first = decide(0, transport_error=True)
        second = decide(1, transport_error=True)
        last = decide(2, transport_error=True)

        assert (first.action, first.delay) == (Action.RETRY, pytest.approx(0.1))
        assert (second.action, second.delay) == (Action.RETRY, pytest.approx(0.2))
        assert last.action is Action.FAIL
        assert last.reason is FailureReason.NETWORK

    @pytest.mark.parametrize("status", [502, 503])
    def test_unavailable_schedule(self, status):
        first = decide(0, status=status)
        second = decide(1, status=status)
        last = decide(2, status=status)

        assert (first.action, first.delay) == (Action.RETRY, pytest.approx(0.5))
        assert (second.action, second.delay) == (Action.RETRY, pytest.approx(1.0))
        assert last.action is Action.FAIL
        assert last.reason is FailureReason.UNAVAILABLE

    def test_not_found_fails_immediately(self):
        decision = decide(0, status=404)
        assert decision.action is Action.FAIL
        assert decision.reason is FailureReason.NOT_FOUND

    @pytest.mark.parametrize("status", [400, 401, 500, 504])
    def test_other_errors_fail_immediately(self, status):
        decision = decide(0, status=status)
        assert decision.action is Action.FAIL
        assert decision.reason is FailureReason.HTTP_ERROR

    def test_custom_attempt_budget(self):
        assert decide(0, transport_error=True, max_attempts=1).action is Action.FAIL

    def test_requires_an_outcome(self):
        with pytest.raises(ValueError):
            decide(0)
