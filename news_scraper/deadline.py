"""Deadline-bounded awaitables and a retry policy composed on top of them."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Tuple, Type, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Completed(Generic[T]):
    """The operation settled before its deadline."""

    value: T


@dataclass(frozen=True)
class DeadlineExceeded:
    """The deadline fired first; the operation was cancelled."""

    seconds: float


@dataclass(frozen=True)
class Failed:
    """The operation raised one of the retryable exception types."""

    error: BaseException


BoundedResult = Union[Completed[T], DeadlineExceeded]
AttemptResult = Union[Completed[T], DeadlineExceeded, Failed]


@dataclass(frozen=True)
class RetryPolicy:
    """How many bounded attempts to make and how long to pause between them."""

    max_attempts: int = 3
    delay: float = 2.0


async def run_with_deadline(operation: Awaitable[T], seconds: float) -> BoundedResult:
    """Race ``operation`` against a timer and report which one won."""
    try:
        value = await asyncio.wait_for(operation, timeout=seconds)
    except asyncio.TimeoutError:
        return DeadlineExceeded(seconds)
    return Completed(value)


async def retry_with_deadline(
    factory: Callable[[], Awaitable[T]],
    seconds: float,
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> List[AttemptResult]:
    """Call ``factory`` until one attempt completes or the policy runs out.

    Every attempt is bounded by ``seconds``. Exceptions matching ``retry_on``
    count as a failed attempt; anything else propagates. The returned log
    holds one entry per attempt, in order; the last entry is ``Completed``
    exactly when an attempt succeeded.
    """
    log: List[AttemptResult] = []
    for attempt in range(1, policy.max_attempts + 1):
        try:
            result: AttemptResult = await run_with_deadline(factory(), seconds)
        except retry_on as exc:
            result = Failed(exc)
        log.append(result)
        if isinstance(result, Completed):
            break
        if attempt < policy.max_attempts and policy.delay > 0:
            await asyncio.sleep(policy.delay)
    return log
