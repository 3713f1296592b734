"""Shared HTTP-backed client facade.

``BaseHttpLlmClient`` centralizes what every provider facade does the same
way:

- build the wire payload through the provider's request builder
- POST through :class:`HttpInvoker` (retries only for idempotent requests)
- extract text with the provider's content extractor
- decode into the caller's target with :class:`ResponseProcessor`
- classify any failure and return it inside :class:`LlmResult`
- emit ``chat.start`` / ``chat.end`` / ``chat.error`` structured events

Subclasses supply the endpoint (URL, headers, query parameters) and their
streaming strategy. ``asyncio.CancelledError`` is never caught or classified.
"""
from __future__ import annotations

import asyncio
import logging
import time
from abc import abstractmethod
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Mapping, Optional, Tuple, Type, TypeVar

import httpx

from .cancellation import CancellationToken
from .errors import classify_exception
from .http.headers import format_tags_header
from .http.invoker import HttpInvoker
from .interfaces import ContentExtractor, LlmClient, RequestBuilder
from .logging import LogContext, normalized_log_event
from .models import GenerationRequest, LlmResult, StreamChunk, TypedStreamChunk, UsageSink
from .resilience import NO_RETRY, RetryPolicy
from .response.processor import ResponseProcessor, default_processor
from .streaming import StreamDecoder, StreamParsingMode, observe_stream
from .tokens.extraction import UsageExtractor

T = TypeVar("T")

Endpoint = Tuple[str, Dict[str, str], Optional[Dict[str, str]]]


class BaseHttpLlmClient(LlmClient):
    """Template facade over one provider's HTTP API.

    Parameters:
        http_client: Shared ``httpx.AsyncClient`` (owned by the caller).
        builder: Provider request builder.
        extractor: Provider content extractor.
        retry_policy: Policy applied to idempotent calls.
        usage_extractor: Maps a success body to ``LlmUsage``.
        usage_sink: Optional caller hook receiving usage.
        logger: Structured logger for this provider.
        processor: Typed decoder; defaults to the shared processor.
    """

    provider: str = "provider"
    provider_label: str = "provider"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        builder: RequestBuilder,
        extractor: ContentExtractor,
        retry_policy: RetryPolicy = NO_RETRY,
        usage_extractor: Optional[UsageExtractor] = None,
        usage_sink: Optional[UsageSink] = None,
        logger: logging.Logger,
        processor: Optional[ResponseProcessor] = None,
    ) -> None:
        self._builder = builder
        self._extractor = extractor
        self._retry_policy = retry_policy
        self._usage_extractor = usage_extractor
        self._usage_sink = usage_sink
        self._logger = logger
        self._processor = processor or default_processor()
        self._invoker = HttpInvoker(
            http_client,
            provider=self.provider,
            provider_label=self.provider_label,
            logger=logger,
        )

    # ---- provider hooks ----
    @abstractmethod
    def _endpoint(self, request: GenerationRequest) -> Endpoint:
        """Return ``(url, headers, params)`` for ``request``."""

    @property
    @abstractmethod
    def stream_parsing_mode(self) -> StreamParsingMode:
        """Mode used by :meth:`stream_typed`."""

    # ---- helpers ----
    def _log_context(self, request: GenerationRequest) -> LogContext:
        return LogContext(
            provider=self.provider,
            model=self.get_model_name(),
            idempotency_key=request.idempotency_key or None,
            tags=format_tags_header(request.tags),
        )

    def _decoder(self, ctx: LogContext, *, delimiter: str = "\n") -> StreamDecoder:
        return StreamDecoder(
            self.stream_parsing_mode,
            self._processor,
            delimiter=delimiter,
            logger=self._logger,
            ctx=ctx,
        )

    async def _fetch_json(self, payload: Mapping[str, Any], request: GenerationRequest, ctx: LogContext) -> Dict[str, Any]:
        url, headers, params = self._endpoint(request)
        return await self._invoker.post_json(
            url,
            payload,
            headers,
            params=params,
            idempotent=request.is_idempotent,
            retry_policy=self._retry_policy,
            usage_extractor=self._usage_extractor,
            usage_sink=self._usage_sink,
            ctx=ctx,
        )

    async def _fetch_content(self, request: GenerationRequest, ctx: LogContext) -> str:
        """Run the non-streaming call and return the extracted text (raises)."""
        data = await self._fetch_json(self._builder.build(request), request, ctx)
        return self._extractor.extract(data)

    # ---- LlmClient ----
    async def generate(self, request: GenerationRequest, target: Type[T]) -> LlmResult[T]:
        ctx = self._log_context(request)
        t0 = time.perf_counter()
        normalized_log_event(
            self._logger,
            "chat.start",
            ctx,
            phase="start",
            has_system_message=bool(request.system_message),
            target=getattr(target, "__name__", str(target)),
        )
        try:
            content = await self._fetch_content(request, ctx)
            value = self._processor.process(content, target)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            err = classify_exception(exc)
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                level=logging.ERROR,
                error_code=err.kind.value,
                emitted=False,
                error=err.message,
                status=err.status_code,
                latency_ms=(time.perf_counter() - t0) * 1000.0,
            )
            return LlmResult.failure(err)
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=True,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
            response_chars=len(content),
        )
        return LlmResult.success(value)

    def stream(
        self,
        request: GenerationRequest,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        ctx = self._log_context(request)
        return observe_stream(self._text_source(request, ctx, cancel_token), logger=self._logger, ctx=ctx)

    def stream_typed(
        self,
        request: GenerationRequest,
        target: Type[T],
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[TypedStreamChunk[T]]:
        ctx = self._log_context(request)
        return observe_stream(
            self._typed_source(request, target, ctx, cancel_token), logger=self._logger, ctx=ctx
        )

    # ---- stream sources (overridden by incremental providers) ----
    async def _text_source(
        self,
        request: GenerationRequest,
        ctx: LogContext,
        cancel_token: Optional[CancellationToken],
    ) -> AsyncGenerator[StreamChunk, None]:
        if cancel_token is not None and cancel_token.cancelled:
            return
        async for chunk in self._decoder(ctx).single_shot_text(lambda: self._fetch_content(request, ctx)):
            yield chunk

    async def _typed_source(
        self,
        request: GenerationRequest,
        target: Type[T],
        ctx: LogContext,
        cancel_token: Optional[CancellationToken],
    ) -> AsyncGenerator[TypedStreamChunk[T], None]:
        if cancel_token is not None and cancel_token.cancelled:
            return
        async for chunk in self._decoder(ctx).single_shot_typed(lambda: self._fetch_content(request, ctx), target):
            yield chunk


__all__ = ["BaseHttpLlmClient", "Endpoint"]
