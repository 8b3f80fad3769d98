"""Bounded retry for optimistic-concurrency writes.

Credential mutations are read-modify-write cycles guarded by a version
compare-and-set in the store. When a concurrent writer wins, the store raises
``ConcurrencyConflictError`` and the whole cycle is replayed from a fresh read.
"""

from typing import Awaitable, Callable, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from place_identity.core.exceptions import ConcurrencyConflictError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_conflict(retry_state: RetryCallState) -> None:
    logger.info(
        "Optimistic concurrency conflict, retrying",
        attempt=retry_state.attempt_number,
    )


async def retry_on_conflict(operation: Callable[[], Awaitable[T]], attempts: int) -> T:
    """Run ``operation`` until it stops losing concurrency races.

    Args:
        operation: Zero-argument coroutine function performing one full
            read-modify-write cycle.
        attempts: Total attempts, including the first one.

    Returns:
        Whatever ``operation`` returns on its first non-conflicting run.

    Raises:
        ConcurrencyConflictError: If every attempt lost a race.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.005, max=0.05),
        retry=retry_if_exception_type(ConcurrencyConflictError),
        before_sleep=_log_conflict,
        reraise=True,
    )
    return await retrying(operation)
