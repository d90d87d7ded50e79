"""Retry utilities with exponential backoff for page fetches."""

import asyncio
from typing import Awaitable, Callable, Tuple, Type, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pharmatrack.core.exceptions import FetchError


logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a failed attempt before tenacity sleeps."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "fetch_retry_scheduled",
        attempt=retry_state.attempt_number,
        wait_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(exc) if exc else None,
    )


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 2.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    retry_on: Tuple[Type[BaseException], ...] = (FetchError,),
) -> T:
    """Run ``operation`` with bounded retries and exponential backoff.

    Waits ``base_delay * 2 ** attempt_index`` seconds between attempts
    (2s, 4s, ... with the defaults) without jitter. Exceptions outside
    ``retry_on`` propagate on the first attempt.

    Args:
        operation: Zero-argument coroutine function to call
        max_attempts: Total number of attempts, including the first
        base_delay: Delay before the first retry, in seconds
        sleep: Awaitable sleep function (injected in tests)
        retry_on: Exception types considered transient

    Returns:
        The operation's result

    Raises:
        The last exception raised by ``operation``, unchanged
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, exp_base=2, min=0),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)
