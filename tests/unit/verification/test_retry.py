"""Unit tests for the registry retry helper."""

import pytest
from packmate.verification.retry import MAX_RETRY_AFTER, backoff_delay, call_with_retry
from packmate.verification.verifiers import (
    InvalidPackageIdError,
    RateLimitError,
    RegistryNetworkError,
    RegistryResponseError,
)


class FlakyCall:
    """Callable raising the given errors before returning a value."""

    def __init__(self, errors: list[Exception], value: bool = True) -> None:
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    def __call__(self) -> bool:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


class TestBackoffDelay:
    """Tests for backoff_delay."""

    def test_exponential(self) -> None:
        """The delay doubles with each failed attempt."""
        error = RegistryNetworkError("timeout")
        assert [backoff_delay(n, 1.0, error) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_retry_after_wins(self) -> None:
        """A Retry-After hint replaces the computed delay."""
        assert backoff_delay(1, 1.0, RateLimitError("slow down", 5.0)) == 5.0

    def test_retry_after_capped(self) -> None:
        """Retry-After hints are capped."""
        assert backoff_delay(1, 1.0, RateLimitError("slow down", 3600.0)) == MAX_RETRY_AFTER

    def test_rate_limit_without_hint(self) -> None:
        """Rate limits without a hint use the normal backoff."""
        assert backoff_delay(2, 0.5, RateLimitError("slow down")) == 1.0


class TestCallWithRetry:
    """Tests for call_with_retry."""

    def test_success_first_try(self) -> None:
        """No sleeps happen when the first call succeeds."""
        sleeps: list[float] = []
        func = FlakyCall([])

        assert call_with_retry(func, sleep=sleeps.append) is True
        assert func.calls == 1
        assert sleeps == []

    def test_recovers_after_retryable_errors(self) -> None:
        """Retryable errors are retried with growing delays."""
        sleeps: list[float] = []
        func = FlakyCall([RegistryNetworkError("a"), RegistryNetworkError("b")], value=False)

        assert call_with_retry(func, max_attempts=3, base_delay=1.0, sleep=sleeps.append) is False
        assert func.calls == 3
        assert sleeps == [1.0, 2.0]

    def test_honours_retry_after(self) -> None:
        """A rate limit with Retry-After waits the requested time."""
        sleeps: list[float] = []
        func = FlakyCall([RateLimitError("slow down", 4.0)])

        call_with_retry(func, sleep=sleeps.append)

        assert sleeps == [4.0]

    def test_gives_up_after_max_attempts(self) -> None:
        """The last error is raised once attempts are exhausted."""
        sleeps: list[float] = []
        last = RegistryNetworkError("third")
        func = FlakyCall([RegistryNetworkError("first"), RegistryNetworkError("second"), last])

        with pytest.raises(RegistryNetworkError) as exc_info:
            call_with_retry(func, max_attempts=3, base_delay=0.5, sleep=sleeps.append)

        assert exc_info.value is last
        assert func.calls == 3
        assert sleeps == [0.5, 1.0]

    @pytest.mark.parametrize(
        "error",
        [RegistryResponseError("bad body"), InvalidPackageIdError("bad id")],
    )
    def test_non_retryable_raises_immediately(self, error: Exception) -> None:
        """Non-retryable errors are not retried."""
        sleeps: list[float] = []
        func = FlakyCall([error])

        with pytest.raises(type(error)):
            call_with_retry(func, sleep=sleeps.append)

        assert func.calls == 1
        assert sleeps == []

    def test_other_exceptions_propagate(self) -> None:
        """Exceptions that are not registry errors propagate untouched."""
        func = FlakyCall([RuntimeError("boom")])

        with pytest.raises(RuntimeError):
            call_with_retry(func, sleep=lambda _: None)

        assert func.calls == 1

    def test_single_attempt(self) -> None:
        """With one attempt a retryable error is raised directly."""
        func = FlakyCall([RegistryNetworkError("down")])

        with pytest.raises(RegistryNetworkError):
            call_with_retry(func, max_attempts=1, sleep=lambda _: None)
