import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from meeting_digest.core.errors import should_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    delay = state.next_action.sleep if state.next_action else 0.0
    logger.warning("attempt %d failed, retrying in %.0fms: %s", state.attempt_number, delay * 1000, exc)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run `operation` until it succeeds, at most `max_attempts` times.

    Before attempt i+1 (0-indexed i) waits base_delay_ms * 2**i. Failures classified as
    auth, quota or bad-request errors are re-raised straight away; once attempts run out
    the last failure is re-raised. No state is shared between calls.
    """
    retrying = AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=base_delay_ms / 1000, exp_base=2, min=0),
        retry=retry_if_exception(should_retry),
        before_sleep=_log_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await operation()
    raise AssertionError("retry loop exited without a result")
