"""
Bounded retry for backend calls.
Only errors classified as transient are retried, with a fixed pause between attempts.
"""
import asyncio
from typing import Awaitable, Callable, TypeVar

from config import Config
from llm_utils import is_transient_error

T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = Config.max_retries,
    is_transient: Callable[[BaseException], bool] = is_transient_error,
    backoff_seconds: float = Config.retry_backoff_seconds,
) -> T:
    """
    Await operation(), retrying up to max_retries more times on transient errors.

    Permanent errors, and the last transient error once the budget is spent, are
    re-raised unchanged.
    """
    while True:
        try:
            return await operation()
        except Exception as e:
            if max_retries <= 0 or not is_transient(e):
                raise
            print(f"[RETRY] Retrying API call due to error: {e}. Retries left: {max_retries}")
            await asyncio.sleep(backoff_seconds)
            max_retries -= 1
