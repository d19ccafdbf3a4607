"""Tests for execute_with_retry and RetryPolicy."""

import pytest

from config.settings import Settings
from autotrade.execution.retry import RetryPolicy, execute_with_retry


class FlakyOperation:
    """Fails `failures` times, then returns "ok"."""

    def __init__(self, failures: int):
        self.failures = failures
        self.call_count = 0
        self.errors = []

    async def __call__(self):
        self.call_count += 1
        if self.call_count <= self.failures:
            error = RuntimeError(f"boom {self.call_count}")
            self.errors.append(error)
            raise error
        return "ok"


class TestRetryPolicy:

    def test_exponential_delays(self):
        policy = RetryPolicy()
        assert [policy.delay_for(a) for a in range(3)] == [1.0, 2.0, 4.0]
        assert policy.max_attempts == 4

    def test_from_settings(self, monkeypatch):
        monkeypatch.setattr(Settings, "MAX_RETRIES", 5)
        monkeypatch.setattr(Settings, "BACKOFF_BASE_S", 0.25)
        policy = RetryPolicy.from_settings()
        assert policy.max_retries == 5
        assert policy.delay_for(2) == 1.0


class TestExecuteWithRetry:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failures,delays", [(0, []), (1, [1.0]), (2, [1.0, 2.0]), (3, [1.0, 2.0, 4.0])])
    async def test_recovers_after_transient_failures(self, sleeper, failures, delays):
        op = FlakyOperation(failures)
        assert await execute_with_retry(op, sleep=sleeper) == "ok"
        assert op.call_count == failures + 1
        assert sleeper.delays == delays

    @pytest.mark.asyncio
    async def test_exhaustion_reraises_last_error(self, sleeper):
        op = FlakyOperation(failures=10)
        with pytest.raises(RuntimeError) as exc_info:
            await execute_with_retry(op, sleep=sleeper)

        assert op.call_count == 4
        assert exc_info.value is op.errors[-1]
        assert sleeper.delays == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_on_retry_hook(self, sleeper):
        calls = []
        op = FlakyOperation(failures=2)
        await execute_with_retry(op, sleep=sleeper, on_retry=lambda a, d, e: calls.append((a, d, str(e))))
        assert calls == [(1, 1.0, "boom 1"), (2, 2.0, "boom 2")]

    @pytest.mark.asyncio
    async def test_zero_retries_fails_fast(self, sleeper):
        op = FlakyOperation(failures=1)
        with pytest.raises(RuntimeError):
            await execute_with_retry(op, RetryPolicy(max_retries=0), sleep=sleeper)
        assert op.call_count == 1
        assert sleeper.delays == []
