"""
Exponential-backoff retry for async operations.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

from ideaforge.services.errors import is_quota_message
from ideaforge.utils.constants import DEFAULT_MAX_JITTER_MS
from ideaforge.utils.logger import logger

T = TypeVar("T")


def is_retryable(error: Exception) -> bool:
    """
    Decide whether an error is worth another attempt.

    Errors flagged ``retryable`` (rate limits, network failures) are retried,
    as is any unclassified error whose message carries a quota marker.
    """
    if hasattr(error, "retryable"):
        return bool(error.retryable)
    return is_quota_message(str(error))


class RetryPolicy:
    """Retries retryable failures with exponential backoff plus random jitter."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay_ms: int = 1000,
        max_jitter_ms: int = DEFAULT_MAX_JITTER_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ):
        """
        Initialize the retry policy.

        Args:
            max_attempts: Default number of attempts, at least 1
            base_delay_ms: Default delay before the second attempt
            max_jitter_ms: Upper bound of the random delay added to every backoff
            sleep: Coroutine used to wait between attempts
            rng: Source of uniform floats in [0, 1) for jitter
        """
        self._check(max_attempts, base_delay_ms)
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.max_jitter_ms = max(0, max_jitter_ms)
        self._sleep = sleep
        self._rng = rng

    @staticmethod
    def _check(max_attempts: int, base_delay_ms: int):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        if base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must not be negative, got {base_delay_ms}")

    def backoff_ms(self, attempt: int, base_delay_ms: int) -> float:
        """Delay after the given (1-based) failed attempt."""
        return base_delay_ms * (2 ** (attempt - 1)) + self._rng() * self.max_jitter_ms

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        max_attempts: Optional[int] = None,
        base_delay_ms: Optional[int] = None,
    ) -> T:
        """
        Run ``operation`` until it succeeds, fails for good, or attempts run out.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt
            max_attempts: Overrides the policy default
            base_delay_ms: Overrides the policy default

        Returns:
            Whatever the operation returns

        Raises:
            The last error raised by the operation
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        base_delay = self.base_delay_ms if base_delay_ms is None else base_delay_ms
        self._check(attempts, base_delay)

        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except Exception as e:
                if not is_retryable(e):
                    raise
                if attempt == attempts:
                    logger.warning(f"Giving up after {attempts} attempts: {e}")
                    raise
                delay_ms = self.backoff_ms(attempt, base_delay)
                logger.info(
                    f"Retryable failure ({type(e).__name__}), retrying in {round(delay_ms)}ms "
                    f"(attempt {attempt}/{attempts})"
                )
                await self._sleep(delay_ms / 1000)
