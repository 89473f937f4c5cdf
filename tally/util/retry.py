"""Retry helpers for idempotent storage reads."""

from typing import Awaitable, Callable, TypeVar

import logfire
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from tally.config import LedgerSettings
from tally.domain.error import StorageUnavailableError

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    exc = outcome.exception() if outcome is not None else None
    logfire.warn(
        "Retrying storage read",
        attempt=retry_state.attempt_number,
        error=str(exc) if exc else None,
    )


async def retry_read(
    call: Callable[[], Awaitable[T]], settings: LedgerSettings
) -> T:
    """Run an idempotent read, retrying while storage is unavailable.

    Only ``StorageUnavailableError`` is retried; the last one is re-raised
    once attempts are exhausted. Never use this for writes.

    Args:
        call: Zero-argument coroutine factory performing the read
        settings: Ledger settings with attempt count and backoff bounds

    Returns:
        Result of the read
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(settings.read_retry_attempts),
        retry=retry_if_exception_type(StorageUnavailableError),
        wait=wait_random_exponential(
            min=settings.read_retry_min_wait, max=settings.read_retry_max_wait
        ),
        before_sleep=_log_retry,
        reraise=True,
    )
    return await retrying(call)
