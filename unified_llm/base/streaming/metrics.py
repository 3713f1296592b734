"""Streaming metrics and the observing wrapper every facade stream runs through.

``observe_stream`` logs ``stream.start``, counts emitted chunks, classifies a
fatal failure into ``LlmError`` and always emits one terminal ``stream.end``
or ``stream.error`` event. Closing the wrapper closes the wrapped source, so
an early ``break`` by the consumer releases the HTTP response right away.
"""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import AsyncGenerator, AsyncIterator, Optional, TypeVar

from ..errors import classify_exception
from ..logging import LogContext, normalized_log_event

C = TypeVar("C")


@dataclass
class StreamMetrics:
    """Collected metrics for a single streaming invocation.

    Attributes:
        emitted: Number of chunks yielded to the consumer.
        time_to_first_chunk_ms: Latency from stream start to first yield.
        total_duration_ms: Wall time from start to finalize.
    """

    emitted: int = 0
    time_to_first_chunk_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    started_at: float = field(default_factory=time.perf_counter)

    def record_emit(self) -> None:
        if self.emitted == 0:
            self.time_to_first_chunk_ms = (time.perf_counter() - self.started_at) * 1000.0
        self.emitted += 1

    def stop(self) -> None:
        self.total_duration_ms = (time.perf_counter() - self.started_at) * 1000.0


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext],
    metrics: StreamMetrics,
    error: Optional[str] = None,
) -> None:
    """Emit the terminal ``stream.end`` / ``stream.error`` event."""
    metrics.stop()
    error_code: Optional[str] = None
    if error and ":" in error:
        error_code = error.split(":", 1)[0].strip() or None
    normalized_log_event(
        logger,
        "stream.end" if error is None else "stream.error",
        ctx,
        phase="finalize",
        level=logging.INFO if error is None else logging.ERROR,
        error_code=error_code,
        emitted=metrics.emitted > 0,
        emitted_count=metrics.emitted,
        time_to_first_chunk_ms=metrics.time_to_first_chunk_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=error,
    )


async def observe_stream(
    source: AsyncGenerator[C, None],
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext] = None,
) -> AsyncIterator[C]:
    """Yield from ``source`` with metrics, logging and error classification.

    Raises:
        LlmError: Any non-cancellation failure of ``source``, classified.
    """
    metrics = StreamMetrics()
    error: Optional[str] = None
    normalized_log_event(logger, "stream.start", ctx, phase="start", emitted=False)
    try:
        async with aclosing(source) as items:
            async for item in items:
                metrics.record_emit()
                yield item
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        classified = classify_exception(exc)
        error = f"{classified.kind.value}: {classified.message}"
        if classified is exc:
            raise
        raise classified from exc
    finally:
        finalize_stream(logger=logger, ctx=ctx, metrics=metrics, error=error)


__all__ = ["StreamMetrics", "finalize_stream", "observe_stream"]
