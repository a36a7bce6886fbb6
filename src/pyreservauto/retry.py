"""Fixed-delay retry for awaitable operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_RETRY_DELAY,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Await *operation*, retrying on failure with a constant delay.

    Parameters
    ----------
    operation : callable
        Zero-argument coroutine factory; called once per attempt.
    retries : int
        Additional attempts after the first one.  ``retries + 1`` calls
        are made at most.
    delay : float
        Seconds to wait between attempts.  The delay does not grow.
    retry_on : tuple of exception types
        Failures that are retried.  Anything else propagates at once.

    Returns
    -------
    T
        The first successful result.

    Raises
    ------
    Exception
        The exception from the last attempt, unchanged, once the retry
        budget is spent.
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")

    remaining = retries
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except retry_on as exc:
            if remaining <= 0:
                _logger.debug("Giving up after %d attempt(s)", attempt)
                raise
            _logger.warning(
                "Function failed with error %s. Trying again in %s seconds (attempt %d/%d)",
                exc,
                delay,
                attempt,
                retries + 1,
            )
            remaining -= 1
            if delay > 0:
                await asyncio.sleep(delay)
