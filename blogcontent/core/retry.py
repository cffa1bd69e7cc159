"""
Retry Decorator with Exponential Backoff

Provides a decorator for retrying async functions with exponential backoff
and jitter. Used by the DynamoDB store for transient failures
(throttling, dropped connections, timeouts).

Key features:
- Exponential backoff with configurable base and max delay
- Jitter to prevent thundering herd
- Selective exception catching
- Maximum retry attempts
- Detailed logging of retry attempts
"""

import asyncio
import functools
import logging
import random
from typing import Callable, Optional, Type, Tuple, Any

logger = logging.getLogger(__name__)


def compute_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """
    Delay before retry number ``attempt`` (0-based).

    Formula: min(base_delay * exponential_base ** attempt, max_delay),
    then +/-20% jitter when enabled, never negative.
    """
    delay = min(base_delay * (exponential_base ** attempt), max_delay)
    if jitter:
        jitter_amount = delay * 0.2
        delay = delay + random.uniform(-jitter_amount, jitter_amount)
    return max(0.0, delay)


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    retry_if: Optional[Callable[[Exception], bool]] = None
):
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
            Total attempts = max_retries + 1
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay in seconds (default: 60.0)
        exponential_base: Base for exponential growth (default: 2.0)
            Delay formula: base_delay * (exponential_base ** attempt)
        jitter: Whether to add random jitter (default: True)
            Jitter range: +/-20% of calculated delay
        exceptions: Tuple of exceptions to catch (default: (Exception,))
            Only these exceptions trigger retries
        retry_if: Optional predicate on a caught exception; when it
            returns False the exception propagates without retrying

    Returns:
        Decorated async function that retries on failure

    Example:
        @retry_with_backoff(max_retries=3, base_delay=0.2,
                            exceptions=(StoreUnavailable,))
        async def put_item(item):
            ...

    Note:
        - Non-matching exceptions propagate immediately
        - Cancellation is never retried (CancelledError is not an Exception)
        - Logs each retry attempt at INFO level
        - Final failure logged at ERROR level
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)

                except exceptions as e:
                    if retry_if is not None and not retry_if(e):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            f"{func.__name__} failed after {max_retries + 1} attempts: {e}"
                        )
                        raise

                    delay = compute_delay(
                        attempt, base_delay, max_delay, exponential_base, jitter
                    )

                    logger.info(
                        f"{func.__name__} attempt {attempt + 1}/{max_retries + 1} "
                        f"failed with {type(e).__name__}: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )

                    await asyncio.sleep(delay)

        return wrapper
    return decorator
