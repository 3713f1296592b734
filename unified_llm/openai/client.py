"""OpenAI chat completions facade.

``OpenAiClient`` implements :class:`LlmClient` on top of the shared
``BaseHttpLlmClient`` and adds:

- true incremental streaming over server-push (``data:`` / ``[DONE]``) lines
- typed streaming in any :class:`StreamParsingMode` (SINGLE_SHOT falls back to
  one regular call)
- image generation through the Images API (``generate_image``)

Authentication is ``Authorization: Bearer <api_key>`` plus the optional
``OpenAI-Organization`` header.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from typing import AsyncGenerator, List, Optional, Type, TypeVar

import httpx

from ..base.cancellation import CancellationToken
from ..base.client_base import BaseHttpLlmClient, Endpoint
from ..base.errors import LlmError, classify_exception, classify_http_response
from ..base.http.headers import build_request_headers, format_tags_header
from ..base.http.invoker import request_id_of
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import GenerationRequest, LlmResult, StreamChunk, TypedStreamChunk
from ..base.streaming import StreamParsingMode
from ..base.timeouts import get_timeout_config
from ..base.tokens.extraction import extract_openai_usage
from .config import OpenAiConfig
from .content_extractor import OpenAiContentExtractor
from .images import (
    TRANSIENT_IMAGE_STATUSES,
    ImageGenerationRequest,
    ImageResult,
    build_image_payload,
    images_url,
    parse_image_results,
    provider_error_message,
    validate_image_request,
)
from .request_builder import OpenAiRequestBuilder

T = TypeVar("T")

__all__ = ["OpenAiClient"]


class OpenAiClient(BaseHttpLlmClient):
    """OpenAI facade; see module docstring for the surface it adds."""

    provider = "openai"
    provider_label = "OpenAI"

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[OpenAiConfig] = None) -> None:
        self.config = config or OpenAiConfig.default_config()
        super().__init__(
            http_client,
            builder=OpenAiRequestBuilder(self.config),
            extractor=OpenAiContentExtractor(),
            retry_policy=self.config.retry_policy,
            usage_extractor=extract_openai_usage,
            usage_sink=self.config.usage_sink,
            logger=get_logger("openai"),
        )

    # ---- LlmClient ----
    def get_model_name(self) -> str:
        return self.config.model_name

    def get_api_key(self) -> str:
        return self.config.api_key

    @property
    def stream_parsing_mode(self) -> StreamParsingMode:
        return self.config.stream_parsing_mode

    def _headers(self, idempotency_key: Optional[str], tags) -> dict:
        return build_request_headers(
            bearer_token=self.config.api_key,
            organization=self.config.organization,
            idempotency_key=idempotency_key,
            tags=tags,
        )

    def _endpoint(self, request: GenerationRequest) -> Endpoint:
        return self.config.api_url, self._headers(request.idempotency_key, request.tags), None

    # ---- incremental streaming ----
    async def _text_source(
        self,
        request: GenerationRequest,
        ctx: LogContext,
        cancel_token: Optional[CancellationToken],
    ) -> AsyncGenerator[StreamChunk, None]:
        payload = self._builder.build_stream(request)
        url, headers, params = self._endpoint(request)
        async with self._invoker.open_stream(
            url, payload, headers, params=params, timeout=get_timeout_config().to_httpx_stream(), ctx=ctx
        ) as response:
            decoder = self._decoder(ctx)
            async with aclosing(decoder.iter_text(response.aiter_lines(), cancel_token=cancel_token)) as chunks:
                async for chunk in chunks:
                    yield chunk

    async def _typed_source(
        self,
        request: GenerationRequest,
        target: Type[T],
        ctx: LogContext,
        cancel_token: Optional[CancellationToken],
    ) -> AsyncGenerator[TypedStreamChunk[T], None]:
        if self.stream_parsing_mode is StreamParsingMode.SINGLE_SHOT:
            async for chunk in super()._typed_source(request, target, ctx, cancel_token):
                yield chunk
            return
        payload = self._builder.build_stream(request)
        url, headers, params = self._endpoint(request)
        async with self._invoker.open_stream(
            url, payload, headers, params=params, timeout=get_timeout_config().to_httpx_stream(), ctx=ctx
        ) as response:
            decoder = self._decoder(ctx, delimiter=self.config.ndjson_delimiter)
            async with aclosing(
                decoder.iter_typed(response.aiter_lines(), target, cancel_token=cancel_token)
            ) as chunks:
                async for chunk in chunks:
                    yield chunk

    # ---- images ----
    def _check_transient_image_status(self, response: httpx.Response, ctx: LogContext) -> None:
        """Raise inside the retried attempt for statuses worth another try."""
        if response.is_success or response.status_code not in TRANSIENT_IMAGE_STATUSES:
            return
        normalized_log_event(
            self._logger,
            "image.error",
            ctx,
            phase="attempt",
            level=logging.WARNING,
            error_code=str(response.status_code),
            status=response.status_code,
            body=response.text,
            request_id=request_id_of(response),
        )
        raise LlmError.provider_http(response.status_code, response.text)

    def _image_error(self, response: httpx.Response, ctx: LogContext) -> LlmError:
        body = response.text
        normalized_log_event(
            self._logger,
            "image.error",
            ctx,
            phase="response",
            level=logging.ERROR,
            error_code=str(response.status_code),
            status=response.status_code,
            body=body,
            provider_message=provider_error_message(body),
            request_id=request_id_of(response),
        )
        return classify_http_response(
            response.status_code, response.headers, body, provider_label=self.provider_label
        )

    async def generate_image(self, request: ImageGenerationRequest) -> LlmResult[List[ImageResult]]:
        """Generate images; failures are returned, never raised."""
        ctx = LogContext(
            provider=self.provider,
            model=request.effective_model.value,
            idempotency_key=request.idempotency_key or None,
            tags=format_tags_header(request.tags),
        )
        try:
            validate_image_request(request)
        except ValueError as exc:
            return LlmResult.failure(LlmError.invalid_request(str(exc), cause=exc))

        normalized_log_event(self._logger, "image.start", ctx, phase="start", n=request.n, size=request.size)
        try:
            response = await self._invoker.send(
                images_url(self.config.api_url),
                build_image_payload(request),
                self._headers(request.idempotency_key, request.tags),
                idempotent=request.is_idempotent,
                retry_policy=self._retry_policy,
                check_response=(lambda r: self._check_transient_image_status(r, ctx)) if request.is_idempotent else None,
                ctx=ctx,
            )
            if not response.is_success:
                return LlmResult.failure(self._image_error(response, ctx))
            data = response.json()
            if not isinstance(data, dict):
                raise LlmError.deserialization("Expected a JSON object in provider response")
            return LlmResult.success(parse_image_results(data))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            err = classify_exception(exc)
            normalized_log_event(
                self._logger,
                "image.error",
                ctx,
                phase="finalize",
                level=logging.ERROR,
                error_code=err.kind.value,
                error=err.message,
                status=err.status_code,
            )
            return LlmResult.failure(err)
