"""
Unit tests for the retry policy.

WHAT: Abort/retry decisions and backoff bounds
WHY: Unrecoverable failures must never be retried; transient ones must be, with bounded delay
HOW: Scripted operations plus a recording sleep
"""

import pytest

from anythingllm_client.transport.retry import backoff_delay, should_abort, with_retry
from anythingllm_client.utils.exceptions import DomainError, ErrorKind


class ScriptedOperation:
    """Raises the scripted outcomes in order; returns non-exceptions."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def server_error(status=500):
    return DomainError.unknown_server_error("boom", status)


@pytest.mark.unit
class TestShouldAbort:

    def test_unrecoverable_aborts(self):
        assert should_abort(DomainError.auth_failure()) is True

    def test_client_status_aborts_even_if_recoverable(self):
        error = DomainError(ErrorKind.UNKNOWN_SERVER_ERROR, "conflict", status=409, recoverable=True)
        assert should_abort(error) is True

    def test_rate_limit_retries(self):
        assert should_abort(DomainError.rate_limited()) is False

    def test_timeout_retries(self):
        assert should_abort(DomainError.timeout()) is False


@pytest.mark.unit
class TestWithRetry:

    @pytest.mark.asyncio
    async def test_success_first_try(self, sleep_recorder):
        operation = ScriptedOperation("ok")
        assert await with_retry(operation, 3, sleep=sleep_recorder) == "ok"
        assert operation.calls == 1
        assert sleep_recorder.delays == []

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, sleep_recorder):
        operation = ScriptedOperation(server_error(), DomainError.timeout(), "ok")
        assert await with_retry(operation, 3, sleep=sleep_recorder) == "ok"
        assert operation.calls == 3
        assert len(sleep_recorder.delays) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        DomainError.auth_failure(status=401),
        DomainError.auth_failure(status=403),
        DomainError.resource_not_found("workspace"),
        DomainError.validation_failure(),
    ])
    async def test_unrecoverable_errors_attempt_once(self, error, sleep_recorder):
        operation = ScriptedOperation(error)
        with pytest.raises(DomainError) as exc_info:
            await with_retry(operation, 3, sleep=sleep_recorder)
        assert exc_info.value is error
        assert operation.calls == 1
        assert sleep_recorder.delays == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        DomainError.rate_limited(),
        DomainError.service_unavailable(status=502),
        DomainError.service_unavailable(status=504),
        DomainError.timeout(),
        DomainError.network_failure(),
    ])
    async def test_recoverable_errors_exhaust_ceiling(self, error, sleep_recorder):
        operation = ScriptedOperation(error)
        with pytest.raises(DomainError) as exc_info:
            await with_retry(operation, 3, sleep=sleep_recorder)
        assert exc_info.value is error
        assert operation.calls == 4
        assert len(sleep_recorder.delays) == 3
        assert all(1.0 <= d <= 10.0 for d in sleep_recorder.delays)

    @pytest.mark.asyncio
    async def test_surfaces_last_error(self, sleep_recorder):
        last = DomainError.network_failure("final")
        operation = ScriptedOperation(DomainError.timeout(), last)
        with pytest.raises(DomainError) as exc_info:
            await with_retry(operation, 1, sleep=sleep_recorder)
        assert exc_info.value is last

    @pytest.mark.asyncio
    async def test_zero_retries_runs_once(self, sleep_recorder):
        operation = ScriptedOperation(server_error())
        with pytest.raises(DomainError):
            await with_retry(operation, 0, sleep=sleep_recorder)
        assert operation.calls == 1
        assert sleep_recorder.delays == []

    @pytest.mark.asyncio
    async def test_deterministic_delays_double_then_cap(self, sleep_recorder):
        operation = ScriptedOperation(server_error())
        with pytest.raises(DomainError):
            await with_retry(operation, 6, randomize=False, sleep=sleep_recorder)
        assert sleep_recorder.delays == [1.0, 2.0, 4.0, 8.0, 10.0, 10.0]

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate_unchanged(self, sleep_recorder):
        operation = ScriptedOperation(ValueError("not a domain error"))
        with pytest.raises(ValueError):
            await with_retry(operation, 3, sleep=sleep_recorder)
        assert operation.calls == 1


@pytest.mark.unit
class TestBackoffDelay:

    def test_jittered_delay_within_bounds(self):
        for attempt in range(1, 10):
            for _ in range(50):
                assert 1.0 <= backoff_delay(attempt) <= 10.0

    def test_jitter_range_per_attempt(self):
        for _ in range(50):
            assert 1.0 <= backoff_delay(1) <= 2.0
            assert 2.0 <= backoff_delay(2) <= 4.0
            assert 4.0 <= backoff_delay(3) <= 8.0

    def test_custom_bounds(self):
        assert backoff_delay(1, min_delay=0.5, max_delay=0.6, randomize=False) == 0.5
        assert backoff_delay(5, min_delay=0.5, max_delay=0.6, randomize=False) == 0.6
