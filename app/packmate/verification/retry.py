"""Retry helper for registry requests.

Retryable registry errors (rate limits, timeouts, transport failures and
5xx answers) are retried with exponential backoff. A Retry-After hint from
the registry replaces the computed delay, capped so a single package can
never stall a verification run for long.
"""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from packmate.verification.verifiers.base import RateLimitError, RegistryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0
MAX_RETRY_AFTER = 60.0


def backoff_delay(attempt: int, base_delay: float, error: RegistryError) -> float:
    """Compute the wait before the next attempt.

    Args:
        attempt: Number of the attempt that just failed (1-based).
        base_delay: Delay after the first failure; doubled for each retry.
        error: The error raised by the failed attempt.

    Returns:
        Delay in seconds.
    """
    if isinstance(error, RateLimitError) and error.retry_after is not None:
        return min(error.retry_after, MAX_RETRY_AFTER)
    return base_delay * (2 ** (attempt - 1))


def call_with_retry(
    func: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call a function, retrying retryable registry errors.

    Args:
        func: Function to call (no parameters).
        max_attempts: Total number of attempts, including the first.
        base_delay: Initial backoff delay in seconds.
        sleep: Sleep function, injectable for tests.

    Returns:
        The function's return value.

    Raises:
        RegistryError: The last error once attempts are exhausted, or
            immediately for non-retryable errors.
    """
    attempt = 1
    while True:
        try:
            return func()
        except RegistryError as e:
            if not e.retryable or attempt >= max_attempts:
                raise
            delay = backoff_delay(attempt, base_delay, e)
            logger.warning(
                "Registry request failed (%s). Attempt %d/%d. Retrying in %.1f seconds...",
                e,
                attempt,
                max_attempts,
                delay,
            )
            sleep(delay)
            attempt += 1
