"""Streaming decoder: raw response lines to content chunks.

Three modes (see :class:`StreamParsingMode`):

- ``iter_text``: per-line incremental text. Each ``data:`` payload is parsed
  as its own JSON event and the ``choices[0].delta.content`` fragment is
  emitted. Malformed lines are logged and skipped; ``[DONE]`` ends the
  sequence.
- ``iter_typed`` in NDJSON_PER_LINE: text deltas accumulate and every
  complete delimiter-terminated line is decoded into the target on its own.
  A line that does not decode becomes an error chunk; the stream goes on.
- ``iter_typed`` in BUFFER_AND_PARSE_FINAL: deltas accumulate silently and
  the whole buffer is decoded once when the stream completes.
- ``single_shot_text`` / ``single_shot_typed``: no incremental body at all;
  a regular call is awaited and its content emitted as one chunk.

A ``CancellationToken`` is polled before each line. Once cancelled the
sequence ends quietly (``stream.cancelled``), without flushing partial data.
The decoder never closes the transport itself; callers run it inside the
invoker's stream context.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncIterable, AsyncIterator, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from ..cancellation import CancellationToken
from ..errors import classify_exception
from ..logging import LogContext, normalized_log_event
from ..models import StreamChunk, TypedStreamChunk
from ..response.processor import ResponseProcessor, default_processor
from .sse import delta_content, is_done, unwrap_line
from .stream_parsing_mode import StreamParsingMode

T = TypeVar("T")

SINGLE_SHOT_ERROR_PREFIX = "Error generating content: "


class StreamDecoder:
    """Turns an async line source into ``StreamChunk``/``TypedStreamChunk`` items.

    Parameters:
        mode: Parsing mode used by :meth:`iter_typed`.
        processor: Typed decoder; defaults to the shared processor.
        delimiter: Unit separator inside the accumulated text (NDJSON mode).
        logger: Structured logger of the owning facade.
        ctx: Log context attached to decoder events.
    """

    def __init__(
        self,
        mode: StreamParsingMode,
        processor: Optional[ResponseProcessor] = None,
        *,
        delimiter: str = "\n",
        logger: logging.Logger,
        ctx: Optional[LogContext] = None,
    ) -> None:
        if not delimiter:
            raise ValueError("delimiter must be non-empty")
        self.mode = mode
        self.processor = processor or default_processor()
        self.delimiter = delimiter
        self._logger = logger
        self._ctx = ctx

    # ---- line level helpers ----
    def _cancelled(self, cancel_token: Optional[CancellationToken]) -> bool:
        if cancel_token is None or not cancel_token.cancelled:
            return False
        normalized_log_event(
            self._logger,
            "stream.cancelled",
            self._ctx,
            phase="cancel",
            reason=cancel_token.reason,
        )
        return True

    def _read_line(self, line: str) -> Tuple[bool, Optional[str]]:
        """Return ``(done, delta)`` for one raw line."""
        payload = unwrap_line(line)
        if payload is None:
            return False, None
        if is_done(payload):
            return True, None
        try:
            event = json.loads(payload)
        except json.JSONDecodeError as exc:
            normalized_log_event(
                self._logger,
                "stream.decode_error",
                self._ctx,
                phase="decode",
                level=logging.WARNING,
                error_code=type(exc).__name__,
                error=str(exc),
                line=payload[:200],
            )
            return False, None
        return False, delta_content(event)

    def _decode_unit(self, raw: str, target: Type[T]) -> TypedStreamChunk[T]:
        text = raw.strip()
        try:
            value = self.processor.process(text, target)
        except ValueError as exc:  # pydantic.ValidationError is a ValueError
            normalized_log_event(
                self._logger,
                "stream.decode_error",
                self._ctx,
                phase="decode",
                level=logging.WARNING,
                error_code=type(exc).__name__,
                error=str(exc),
            )
            return TypedStreamChunk(content=None, raw_content=text, error=str(exc))
        return TypedStreamChunk(content=value, raw_content=text)

    # ---- incremental modes ----
    async def iter_text(
        self,
        lines: AsyncIterable[str],
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        async for line in lines:
            if self._cancelled(cancel_token):
                return
            done, delta = self._read_line(line)
            if done:
                return
            if delta:
                yield StreamChunk(content=delta)

    async def iter_typed(
        self,
        lines: AsyncIterable[str],
        target: Type[T],
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[TypedStreamChunk[T]]:
        """Decode accumulated deltas into ``target`` per the configured mode."""
        if self.mode is StreamParsingMode.SINGLE_SHOT:
            raise ValueError("SINGLE_SHOT streams have no line source; use single_shot_typed")
        per_line = self.mode is StreamParsingMode.NDJSON_PER_LINE
        buffer = ""
        async for line in lines:
            if self._cancelled(cancel_token):
                return
            done, delta = self._read_line(line)
            if done:
                break
            if not delta:
                continue
            buffer += delta
            if not per_line:
                continue
            while self.delimiter in buffer:
                unit, buffer = buffer.split(self.delimiter, 1)
                if unit.strip():
                    yield self._decode_unit(unit, target)
        if buffer.strip():
            yield self._decode_unit(buffer, target)

    # ---- single shot ----
    async def single_shot_text(self, fetch: Callable[[], Awaitable[str]]) -> AsyncIterator[StreamChunk]:
        """Await ``fetch`` and emit its content as a single chunk; failures propagate."""
        content = await fetch()
        yield StreamChunk(content=content)

    async def single_shot_typed(
        self,
        fetch: Callable[[], Awaitable[str]],
        target: Type[T],
    ) -> AsyncIterator[TypedStreamChunk[T]]:
        """Await ``fetch`` and emit one typed chunk.

        Failures become an error chunk prefixed with ``Error generating
        content:`` instead of ending the sequence with an exception.
        """
        raw = ""
        try:
            raw = await fetch()
            value = self.processor.process(raw, target)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            err = classify_exception(exc)
            yield TypedStreamChunk(content=None, raw_content=raw, error=f"{SINGLE_SHOT_ERROR_PREFIX}{err.message}")
            return
        yield TypedStreamChunk(content=value, raw_content=raw)


__all__ = ["StreamDecoder", "SINGLE_SHOT_ERROR_PREFIX"]
