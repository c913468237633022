"""Tests for the bounded retry helper.

Run with: pytest tests/test_retry.py -v
"""

import pytest

from sanctuary.domain.errors import CapacityExceededError, ConflictError, RateLimitedError
from sanctuary.services import call_with_retry
from sanctuary.services.retry import backoff_delay


class Flaky:
    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self, value):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return value


class TestCallWithRetry:
    def test_retries_retryable_errors(self):
        fn = Flaky(ConflictError(), ConflictError())
        delays = []
        assert call_with_retry(fn, "ok", attempts=3, sleep=delays.append) == "ok"
        assert fn.calls == 3
        assert len(delays) == 2

    def test_terminal_errors_are_not_retried(self):
        fn = Flaky(CapacityExceededError("evt-1"))
        with pytest.raises(CapacityExceededError):
            call_with_retry(fn, "ok", sleep=lambda delay: None)
        assert fn.calls == 1

    def test_gives_up_after_attempts(self):
        fn = Flaky(ConflictError(), ConflictError(), ConflictError())
        with pytest.raises(ConflictError):
            call_with_retry(fn, "ok", attempts=2, sleep=lambda delay: None)
        assert fn.calls == 2

    def test_honours_retry_after(self):
        fn = Flaky(RateLimitedError(retry_after=1))
        delays = []
        call_with_retry(fn, "ok", max_delay=5, sleep=delays.append)
        assert delays == [1]

    def test_backoff_is_bounded(self):
        for attempt in range(1, 10):
            assert 0 < backoff_delay(attempt, 0.05, 0.4) <= 0.4
