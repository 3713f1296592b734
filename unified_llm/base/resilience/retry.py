"""Retry policy and asynchronous retry executor.

The executor retries any exception raised by the operation with exponential
backoff plus random jitter, and re-raises the last failure unchanged once
``max_attempts`` is exhausted. Task cancellation is never retried, nor is a
failure rejected by the optional ``retry_if`` predicate. Whether retrying is
allowed at all is decided by the caller: the HTTP invoker only routes a call
through here when the request carries an idempotency key.
"""
from __future__ import annotations

import asyncio
import functools
import random
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: BaseException | None,
    ) -> None: ...


class RetryPolicy(BaseModel):
    """Exponential backoff policy with jitter (all durations in seconds).

    Attributes:
        max_attempts: Total attempts including the first one.
        initial_delay: Delay before the first retry.
        max_delay: Upper bound for the exponential part of each delay.
        jitter: Random extra delay drawn from ``[0, jitter]`` per retry.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=1, ge=1)
    initial_delay: float = Field(default=0.1, ge=0.0)
    max_delay: float = Field(default=1.0, ge=0.0)
    jitter: float = Field(default=0.1, ge=0.0)

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> "RetryPolicy":
        if self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= initial_delay ({self.initial_delay})"
            )
        return self

    @property
    def retries_enabled(self) -> bool:
        return self.max_attempts > 1

    def next_delay(self, current_delay: float) -> float:
        """Return the wait before the next attempt given the running delay."""
        jitter = random.uniform(0.0, self.jitter) if self.jitter > 0 else 0.0  # nosec B311 - backoff jitter, not crypto
        return min(current_delay, self.max_delay) + jitter


NO_RETRY = RetryPolicy(max_attempts=1, initial_delay=0.0, max_delay=0.0, jitter=0.0)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = NO_RETRY,
    *,
    sleep: Sleep = asyncio.sleep,
    attempt_logger: Optional[AttemptLogger] = None,
    retry_if: Optional[Callable[[BaseException], bool]] = None,
) -> T:
    """Run ``operation`` under ``policy``.

    Parameters:
        operation: Zero-argument coroutine factory; invoked once per attempt.
        policy: Retry policy. ``max_attempts == 1`` never waits or retries.
        sleep: Non-blocking wait used between attempts (injectable for tests).
        attempt_logger: Optional observer called after every attempt.
        retry_if: Optional predicate; a failure it rejects is re-raised at once
            without waiting. ``None`` retries every failure.

    Returns:
        The first successful result.

    Raises:
        The exception from the final attempt, unchanged.
    """
    attempt = 0
    current_delay = policy.initial_delay
    while True:
        attempt += 1
        try:
            result = await operation()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if attempt >= policy.max_attempts or (retry_if is not None and not retry_if(exc)):
                if attempt_logger:
                    attempt_logger(attempt=attempt, max_attempts=policy.max_attempts, delay=None, error=exc)
                raise
            delay = policy.next_delay(current_delay)
            if attempt_logger:
                attempt_logger(attempt=attempt, max_attempts=policy.max_attempts, delay=delay, error=exc)
            await sleep(delay)
            current_delay *= 2
            continue
        if attempt_logger:
            attempt_logger(attempt=attempt, max_attempts=policy.max_attempts, delay=None, error=None)
        return result


def retry(policy: RetryPolicy = NO_RETRY, *, sleep: Sleep = asyncio.sleep):
    """Return a decorator applying ``policy`` to an async callable.

    The wrapped function's arguments are captured once and replayed on every
    attempt.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await execute_with_retry(lambda: func(*args, **kwargs), policy, sleep=sleep)

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryPolicy",
    "NO_RETRY",
    "execute_with_retry",
    "retry",
]
