"""
Retry policy for client requests.

WHAT: Bounded exponential backoff with jitter around one async operation
WHY: Transient failures (timeouts, 5xx, 429, network) should heal without caller code
HOW: Loop over attempts, consult DomainError.recoverable/status, asyncio.sleep between
"""

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from ..utils.exceptions import DomainError
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def should_abort(error: DomainError) -> bool:
    """Return True if the error must not be retried."""
    if not error.recoverable:
        return True
    status = error.status
    return status is not None and 400 <= status < 500 and status != 429


def backoff_delay(
    attempt: int,
    *,
    min_delay: float = 1.0,
    max_delay: float = 10.0,
    randomize: bool = True,
) -> float:
    """
    Compute the wait before retry number `attempt` (1-based).

    Args:
        attempt: Retry number, starting at 1
        min_delay: Base delay in seconds
        max_delay: Upper bound in seconds
        randomize: Multiply by a random factor in [1, 2]

    Returns:
        Delay in seconds, within [min_delay, max_delay]
    """
    factor = random.uniform(1.0, 2.0) if randomize else 1.0
    return min(min_delay * (2 ** (attempt - 1)) * factor, max_delay)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    retries: int = 3,
    *,
    min_delay: float = 1.0,
    max_delay: float = 10.0,
    randomize: bool = True,
    description: str = "request",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run `operation` with up to `retries` retries.

    Args:
        operation: Zero-argument coroutine factory; each call is one attempt
        retries: Number of retries after the first attempt (0 = run once)
        min_delay: Base backoff in seconds
        max_delay: Backoff cap in seconds
        randomize: Apply jitter to the delay
        description: Label used in log messages
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        The operation's result

    Raises:
        DomainError: The first unrecoverable error, or the last error once
            attempts are exhausted
    """
    attempts = retries + 1

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except DomainError as e:
            if should_abort(e):
                logger.debug(f"{description} failed with {e.code} (not retryable)")
                raise

            if attempt >= attempts:
                logger.error(f"{description} failed after {attempts} attempts: {e.code} {e.message}")
                raise

            delay = backoff_delay(attempt, min_delay=min_delay, max_delay=max_delay, randomize=randomize)
            logger.warning(
                f"{description} failed with {e.code} (attempt {attempt}/{attempts}), "
                f"retrying in {delay:.2f}s"
            )
            await sleep(delay)

    # retries < 0 is rejected by ClientConfig; keep the type checker happy
    raise DomainError.client_unexpected(f"{description} was never attempted")
