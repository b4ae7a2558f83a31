"""Bounded retry with exponential backoff for collaborator calls."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)
_BASE_DELAY_SECONDS = 0.5
_MAX_DELAY_SECONDS = 8.0
_JITTER_SCALE = 1000

T = TypeVar("T")


def compute_delay_seconds(attempt: int) -> float:
    """Return bounded exponential backoff delay with jitter."""
    base_delay = _BASE_DELAY_SECONDS * (2 ** min(attempt, 10))
    jitter_ratio = secrets.randbelow(_JITTER_SCALE) / _JITTER_SCALE
    return min(
        _MAX_DELAY_SECONDS,
        base_delay + (base_delay * jitter_ratio),
    )


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    retry_on: tuple[type[BaseException], ...],
    description: str,
) -> T:
    """Await ``operation()`` up to ``attempts`` times.

    Only exceptions in ``retry_on`` trigger another attempt; the last one is
    re-raised once attempts run out.
    """
    attempts = max(attempts, 1)
    for attempt in range(attempts):
        try:
            return await operation()
        except retry_on:
            if attempt + 1 >= attempts:
                raise
            delay = compute_delay_seconds(attempt)
            logger.warning(
                "%s failed (attempt %d/%d); retrying in %.1fs",
                description,
                attempt + 1,
                attempts,
                delay,
                exc_info=True,
            )
            await asyncio.sleep(delay)
    msg = "unreachable"
    raise AssertionError(msg)
