"""Retry loop with exponential backoff and a continuation veto."""

from __future__ import annotations

import inspect
import logging
from asyncio import sleep
from typing import Awaitable, Callable, TypeVar, Union

from .config import RetryPolicy

logger = logging.getLogger(__name__)

Result = TypeVar("Result")

ContinuePredicate = Callable[[Exception], Union[bool, Awaitable[bool]]]


async def _can_continue(predicate: ContinuePredicate, error: Exception) -> bool:
    verdict = predicate(error)
    if inspect.isawaitable(verdict):
        verdict = await verdict
    return bool(verdict)


async def retry(
    operation: Callable[[], Awaitable[Result]],
    policy: RetryPolicy,
    can_continue: ContinuePredicate | None = None,
    *,
    operation_name: str = "operation",
) -> Result:
    """Run ``operation`` until it succeeds or the policy gives up.

    After each failure, in order: stop if the retry budget is spent, stop if
    ``can_continue`` returns False, otherwise sleep and try again. The last
    failure is re-raised when the loop stops.

    Args:
        operation: Coroutine factory performing one attempt.
        policy: Budget and backoff settings.
        can_continue: Optional veto consulted after every failure.
        operation_name: Human-readable name for logging.

    Returns:
        The first successful result of ``operation``.
    """
    retries = 0
    delay = policy.init_retry_delay_seconds
    while True:
        try:
            result = await operation()
        except Exception as e:
            if not policy.unlimited_retries and retries >= policy.retry_count:
                logger.debug(
                    f"{operation_name} giving up after {retries + 1} attempt(s): {e}"
                )
                raise

            if can_continue is not None and not await _can_continue(can_continue, e):
                logger.debug(
                    f"{operation_name} retry vetoed after {retries + 1} attempt(s)"
                )
                raise

            retries += 1
            logger.warning(
                f"{operation_name} attempt {retries} failed: {e}. "
                f"Retrying in {delay:.2f}s..."
            )
            await sleep(delay)
            delay = policy.next_delay(delay)
            continue

        if retries > 0:
            logger.info(f"{operation_name} succeeded on attempt {retries + 1}")
        return result
