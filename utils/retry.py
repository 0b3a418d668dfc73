"""Exponential-backoff retry for flaky network calls."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from models.data import RetryExhaustedError
from utils.helpers import get_logger

log = get_logger(__name__)

T = TypeVar("T")


async def retry_async(
    func: Callable[[int], Awaitable[T]],
    max_retries: int,
    error_cls: type[RetryExhaustedError],
    describe: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await ``func(attempt)`` until it succeeds or attempts run out.

    Waits ``2 ** attempt`` seconds after each failed attempt except the
    last one, then raises ``error_cls`` chained to the last failure.
    """
    attempts = max(1, max_retries)
    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            return await func(attempt)
        except Exception as exc:
            last_error = exc
            log.warning("Attempt %d/%d to %s failed: %s", attempt + 1, attempts, describe, exc)
            if attempt < attempts - 1:
                delay = 2 ** attempt
                log.info("Retrying in %ds", delay)
                await sleep(delay)

    raise error_cls(
        f"Failed to {describe} after {attempts} attempts: {last_error}",
        attempts=attempts,
        last_error=last_error,
    ) from last_error
