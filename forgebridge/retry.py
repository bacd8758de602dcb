"""
Retry policy for provider calls.

Bounded exponential backoff with jitter. Whether an error is retried depends
only on its kind (see ``forgebridge.exceptions.is_retryable``).
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from forgebridge.exceptions import ProviderError
from forgebridge.logging import get_logger

T = TypeVar("T")

RetryCallback = Callable[[float, ProviderError], None]

logger = get_logger()


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 30.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


DEFAULT_RETRY_CONFIG = RetryConfig()


def compute_backoff(attempt: int, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> float:
    """
    Calculate the delay before the retry that follows ``attempt``.

    Args:
        attempt: Zero-based index of the attempt that just failed
        config: Retry configuration

    Returns:
        Time to wait in seconds, within [0, config.max_delay]
    """
    base_wait = config.initial_delay * config.backoff_factor ** attempt

    # Apply jitter (±jitter%)
    jitter_range = base_wait * config.jitter
    wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

    return max(0.0, min(wait_time, config.max_delay))


def _log_retry(description: str) -> RetryCallback:
    def notify(delay: float, error: ProviderError) -> None:
        logger.warning("%s retry after %.2fs: %s", description, delay, error)

    return notify


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    on_retry: RetryCallback | None = None,
    description: str = "Provider call",
) -> T:
    """
    Await ``operation`` until it succeeds or fails terminally.

    Retryable ``ProviderError``s are retried up to ``config.max_retries``
    times. Non-retryable errors propagate on their first occurrence, and
    exceptions that are not ``ProviderError`` propagate unchanged.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        config: Retry configuration (default: 3 retries, 1s initial, 30s cap)
        on_retry: Called with (delay, error) before each retry sleep.
            Defaults to a warning on the ``forgebridge`` logger.
        description: Label used in the default retry log line

    Returns:
        The operation's result

    Raises:
        ProviderError: The first non-retryable error, or the last error once
            retries are exhausted
    """
    config = config or DEFAULT_RETRY_CONFIG
    notify = on_retry or _log_retry(description)

    attempt = 0
    while True:
        try:
            return await operation()
        except ProviderError as error:
            if not error.retryable or attempt >= config.max_retries:
                raise

            delay = compute_backoff(attempt, config)
            notify(delay, error)
            await asyncio.sleep(delay)
            attempt += 1
