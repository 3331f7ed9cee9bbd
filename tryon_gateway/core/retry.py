"""Bounded retry with a fixed delay for transient backend failures."""

import asyncio
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from tryon_gateway.config import TRYON_MAX_RETRIES, TRYON_RETRY_DELAY_SECONDS, logger
from tryon_gateway.core.errors import TRANSIENT_ERRORS

T = TypeVar("T")


async def with_retry(
    operation: Callable[[int], Awaitable[T]],
    max_attempts: int = TRYON_MAX_RETRIES,
    delay: float = TRYON_RETRY_DELAY_SECONDS,
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
) -> T:
    """
    Await ``operation(attempt)`` until it succeeds or ``max_attempts`` is reached.

    Only exceptions in ``retry_on`` are retried; anything else propagates at
    once. When every attempt fails the last error is raised. The pause uses
    ``asyncio.sleep`` so other requests keep running.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation(attempt)
        except retry_on as exc:
            if attempt >= max_attempts:
                logger.error(f"Giving up after {attempt} attempt(s): {exc}")
                raise
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed ({exc}); "
                f"retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")  # pragma: no cover
