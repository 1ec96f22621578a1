"""
Unit tests for the retry loop.
"""

import logging

import pytest

from jdkkit.core.exceptions import FatalFetchError
from jdkkit.core.retry import MAX_RETRIES_MESSAGE, retry


class FlakyCall:
    """Callable that fails a fixed number of times, then succeeds."""

    def __init__(self, failures: int, result="ok"):
        self.failures = failures
        self.result = result
        self.attempts = 0

    def __call__(self):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError(f"attempt {self.attempts} failed")
        return self.result


@pytest.fixture
def sleeps():
    """Recorded sleep durations (no real sleeping)."""
    return []


class TestRetry:
    """Tests for retry()."""

    def test_first_attempt_succeeds(self, sleeps):
        call = FlakyCall(0)
        assert retry(call, 10, 1000, sleep=sleeps.append) == "ok"
        assert call.attempts == 1
        assert sleeps == []

    @pytest.mark.parametrize("failures,budget", [(1, 1), (3, 10), (10, 10)])
    def test_succeeds_after_n_failures_within_budget(self, failures, budget, sleeps):
        call = FlakyCall(failures)
        assert retry(call, budget, 1000, sleep=sleeps.append) == "ok"
        assert call.attempts == failures + 1
        assert len(sleeps) == failures

    @pytest.mark.parametrize("failures,budget", [(1, 0), (3, 2), (20, 10)])
    def test_exhausted_budget_raises_max_retries(self, failures, budget, sleeps):
        call = FlakyCall(failures)
        with pytest.raises(FatalFetchError, match=MAX_RETRIES_MESSAGE) as exc_info:
            retry(call, budget, 1000, sleep=sleeps.append)
        assert call.attempts == budget + 1
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_zero_budget_never_sleeps(self, sleeps):
        call = FlakyCall(1)
        with pytest.raises(FatalFetchError):
            retry(call, 0, 1000, sleep=sleeps.append)
        assert call.attempts == 1
        assert sleeps == []

    def test_fixed_interval(self, sleeps):
        retry(FlakyCall(3), 5, 250, exponential=False, sleep=sleeps.append)
        assert sleeps == [0.25, 0.25, 0.25]

    def test_exponential_backoff_doubles_delay(self, sleeps):
        retry(FlakyCall(4), 5, 1000, exponential=True, sleep=sleeps.append)
        assert sleeps == [1.0, 2.0, 4.0, 8.0]

    def test_warns_on_each_failed_attempt(self, sleeps, caplog):
        with caplog.at_level(logging.WARNING, logger="jdkkit.core.retry"):
            retry(FlakyCall(2), 5, 1000, sleep=sleeps.append)

        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings.count("Retrying after a grace period of 1000ms.") == 2
        assert "Download failed because of: attempt 1 failed" in warnings
        assert "Download failed because of: attempt 2 failed" in warnings

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            retry(FlakyCall(0), -1)
