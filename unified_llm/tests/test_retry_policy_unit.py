from __future__ import annotations

import asyncio

import httpx
import pytest
from pydantic import ValidationError

from unified_llm.base.errors import LlmError
from unified_llm.base.http.invoker import is_retryable
from unified_llm.base.resilience.retry import NO_RETRY, RetryPolicy, execute_with_retry, retry


class _Flaky:
    def __init__(self, fail_times: int, exc: Exception | None = None):
        self.calls = 0
        self.fail_times = fail_times
        self.exc = exc or ValueError("boom")

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise self.exc
        return "ok"


class _Sleeps:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_retry_succeeds_after_transient():
    flaky = _Flaky(fail_times=2)
    sleeps = _Sleeps()
    attempt_log = []

    def attempt_logger(**kw):
        attempt_log.append(kw)

    policy = RetryPolicy(max_attempts=3, initial_delay=0.5, max_delay=1.0, jitter=0.0)
    out = await execute_with_retry(flaky, policy, sleep=sleeps, attempt_logger=attempt_logger)

    assert out == "ok"  # nosec B101 - asserts are appropriate in unit tests
    assert flaky.calls == 3  # nosec B101
    # Exponential growth is capped by max_delay.
    assert sleeps.delays == [0.5, 1.0]  # nosec B101
    assert [e["attempt"] for e in attempt_log] == [1, 2, 3]  # nosec B101
    assert attempt_log[-1]["error"] is None  # nosec B101


@pytest.mark.asyncio
async def test_single_attempt_never_sleeps():
    flaky = _Flaky(fail_times=5)
    sleeps = _Sleeps()
    with pytest.raises(ValueError, match="boom"):
        await execute_with_retry(flaky, NO_RETRY, sleep=sleeps)
    assert flaky.calls == 1  # nosec B101
    assert sleeps.delays == []  # nosec B101


@pytest.mark.asyncio
async def test_rejected_failure_is_raised_without_waiting():
    flaky = _Flaky(fail_times=5, exc=KeyError("fatal"))
    sleeps = _Sleeps()
    policy = RetryPolicy(max_attempts=4, initial_delay=0.0, max_delay=0.0, jitter=0.0)
    with pytest.raises(KeyError):
        await execute_with_retry(flaky, policy, sleep=sleeps, retry_if=lambda exc: not isinstance(exc, KeyError))
    assert flaky.calls == 1  # nosec B101
    assert sleeps.delays == []  # nosec B101


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (httpx.ConnectError("refused"), True),
        (LlmError.rate_limit(retry_after_seconds=3), True),
        (LlmError.provider_http(503, "busy"), True),
        (LlmError.provider_http(408), True),
        (LlmError.provider_http(400, "bad"), False),
        (LlmError.provider_http(401), False),
        (LlmError.deserialization("not json"), False),
    ],
)
def test_chat_retry_predicate(exc, expected):
    assert is_retryable(exc) is expected  # nosec B101

@pytest.mark.asyncio
async def test_last_failure_is_reraised_unchanged():
    err = RuntimeError("still down")
    flaky = _Flaky(fail_times=10, exc=err)
    policy = RetryPolicy(max_attempts=2, initial_delay=0.0, max_delay=0.0, jitter=0.0)
    with pytest.raises(RuntimeError) as info:
        await execute_with_retry(flaky, policy, sleep=_Sleeps())
    assert info.value is err  # nosec B101
    assert flaky.calls == 2  # nosec B101


@pytest.mark.asyncio
async def test_task_cancellation_is_not_retried():
    flaky = _Flaky(fail_times=3, exc=asyncio.CancelledError())
    policy = RetryPolicy(max_attempts=3, initial_delay=0.0, max_delay=0.0, jitter=0.0)
    with pytest.raises(asyncio.CancelledError):
        await execute_with_retry(flaky, policy, sleep=_Sleeps())
    assert flaky.calls == 1  # nosec B101


@pytest.mark.asyncio
async def test_retry_decorator_replays_arguments():
    calls = []

    @retry(RetryPolicy(max_attempts=2, initial_delay=0.0, max_delay=0.0, jitter=0.0), sleep=_Sleeps())
    async def add(a, b):
        calls.append((a, b))
        if len(calls) == 1:
            raise ConnectionError("reset")
        return a + b

    assert await add(2, 3) == 5  # nosec B101
    assert calls == [(2, 3), (2, 3)]  # nosec B101


def test_jitter_stays_within_bound():
    policy = RetryPolicy(max_attempts=2, initial_delay=0.2, max_delay=0.2, jitter=0.05)
    for _ in range(50):
        delay = policy.next_delay(0.2)
        assert 0.2 <= delay <= 0.25  # nosec B101


def test_policy_validation():
    with pytest.raises(ValidationError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValidationError):
        RetryPolicy(initial_delay=-1.0)
    with pytest.raises(ValidationError):
        RetryPolicy(initial_delay=2.0, max_delay=1.0)
    assert NO_RETRY.retries_enabled is False  # nosec B101
    assert RetryPolicy(max_attempts=2).retries_enabled is True  # nosec B101
