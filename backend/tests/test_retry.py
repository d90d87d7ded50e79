"""Tests for the retry wrapper and the politeness delay."""

import pytest

from pharmatrack.core.exceptions import FetchError, ProxyConfigurationError
from pharmatrack.scrapers.utils.rate_limiter import RandomDelay
from pharmatrack.scrapers.utils.retry import with_retry


class FlakyOperation:
    """Fails with the given exceptions, then returns a value."""

    def __init__(self, *failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class TestWithRetry:
    async def test_returns_first_success_without_sleeping(self, sleep_recorder):
        operation = FlakyOperation()

        result = await with_retry(operation, sleep=sleep_recorder)

        assert result == "ok"
        assert operation.calls == 1
        assert sleep_recorder.calls == []

    async def test_retries_fetch_errors_with_exponential_backoff(self, sleep_recorder):
        operation = FlakyOperation(
            FetchError("https://a.ro/p", "HTTP 503: Service Unavailable", status_code=503),
            FetchError("https://a.ro/p", "Timeout after 30s (direct)"),
        )

        result = await with_retry(operation, max_attempts=3, base_delay=2.0, sleep=sleep_recorder)

        assert result == "ok"
        assert operation.calls == 3
        assert sleep_recorder.calls == [2.0, 4.0]

    async def test_reraises_last_error_after_max_attempts(self, sleep_recorder):
        operation = FlakyOperation(
            FetchError("https://a.ro/p", "first"),
            FetchError("https://a.ro/p", "second"),
            FetchError("https://a.ro/p", "third"),
        )

        with pytest.raises(FetchError) as exc_info:
            await with_retry(operation, max_attempts=3, base_delay=2.0, sleep=sleep_recorder)

        assert exc_info.value.message == "third"
        assert operation.calls == 3
        assert sleep_recorder.calls == [2.0, 4.0]

    async def test_configuration_errors_are_not_retried(self, sleep_recorder):
        operation = FlakyOperation(ProxyConfigurationError("drmax.ro"))

        with pytest.raises(ProxyConfigurationError):
            await with_retry(operation, max_attempts=3, sleep=sleep_recorder)

        assert operation.calls == 1
        assert sleep_recorder.calls == []

    async def test_single_attempt_never_sleeps(self, sleep_recorder):
        operation = FlakyOperation(FetchError("https://a.ro/p", "boom"))

        with pytest.raises(FetchError):
            await with_retry(operation, max_attempts=1, sleep=sleep_recorder)

        assert sleep_recorder.calls == []


class TestRandomDelay:
    async def test_delay_within_bounds(self, sleep_recorder):
        delay = RandomDelay(2.0, 5.0, sleep=sleep_recorder)

        for _ in range(20):
            slept = await delay.wait()
            assert 2.0 <= slept <= 5.0

        assert len(sleep_recorder.calls) == 20

    def test_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            RandomDelay(5.0, 2.0)

    def test_rejects_negative_minimum(self):
        with pytest.raises(ValueError):
            RandomDelay(-1.0, 2.0)
