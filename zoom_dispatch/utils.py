"""
Helpers for callers that want to wait out throttling instead of failing.
"""
import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    before_sleep_log,
)

from zoom_dispatch.exceptions import ThrottledError
from zoom_dispatch.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


def wait_for_retry_after(max_wait: float = 60.0) -> Callable[[RetryCallState], float]:
    """
    Tenacity wait strategy that sleeps for the ThrottledError's retry-after hint.

    Args:
        max_wait: Upper bound in seconds for a single wait
    """
    def _wait(retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception()
        if isinstance(error, ThrottledError):
            return min(error.retry_after, max_wait)
        return 0.0
    return _wait


def retry_throttled(max_attempts: int = 3, max_wait: float = 60.0, sleep: Callable[[float], Awaitable[Any]] = None):
    """
    Decorator retrying an async endpoint call after ThrottledError.

    The dispatcher never retries on its own; wrap the endpoint call (not a
    descriptor) so every attempt builds a fresh request.

    Args:
        max_attempts: Total attempts including the first
        max_wait: Longest single wait in seconds
        sleep: Async sleep function (defaults to asyncio.sleep)

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            async for attempt in AsyncRetrying(
                sleep=sleep or asyncio.sleep,
                stop=stop_after_attempt(max_attempts),
                wait=wait_for_retry_after(max_wait),
                retry=retry_if_exception_type(ThrottledError),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    return await func(*args, **kwargs)
        return wrapper
    return decorator
