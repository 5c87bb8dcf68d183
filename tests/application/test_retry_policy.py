"""Unit tests for the bounded rate-limit retry loop."""

import pytest

from secret_tree.application.services.retry_policy import RetryPolicy
from secret_tree.domain.errors import RateLimited, RateLimitExceeded, SecretStoreError


class Flaky:
    """Awaitable operation that fails with queued errors, then returns 'ok'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def policy(sleeps):
    async def record_sleep(seconds):
        sleeps.append(seconds)

    return RetryPolicy(sleep=record_sleep)


@pytest.mark.unit
class TestRetryPolicy:
    async def test_success_on_third_attempt(self, policy, sleeps):
        operation = Flaky(RateLimited("throttled"), RateLimited("throttled"))

        assert await policy.run(operation) == "ok"
        assert operation.calls == 3
        assert sleeps == [RetryPolicy.DELAY_SECONDS, RetryPolicy.DELAY_SECONDS]

    async def test_exhaustion_raises_rate_limit_exceeded(self, policy, sleeps):
        operation = Flaky(*(RateLimited("throttled") for _ in range(3)))

        with pytest.raises(RateLimitExceeded) as exc_info:
            await policy.run(operation, description="get_secret:ns/dev/a")

        assert exc_info.value.attempts == 3
        assert "3 attempts" in exc_info.value.message
        assert operation.calls == 3
        assert len(sleeps) == 2

    async def test_other_store_errors_are_not_retried(self, policy, sleeps):
        operation = Flaky(SecretStoreError("missing", "ResourceNotFoundException"))

        with pytest.raises(SecretStoreError) as exc_info:
            await policy.run(operation)

        assert exc_info.value.code == "ResourceNotFoundException"
        assert operation.calls == 1
        assert sleeps == []

    async def test_default_constants(self):
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.delay == pytest.approx(1.05)

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
