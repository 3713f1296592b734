"""Gemini generateContent facade.

The API key travels as the ``key`` query parameter (no ``Authorization``
header). Gemini exposes no incremental body here, so both ``stream`` and
``stream_typed`` run one regular call and emit a single chunk:

- ``stream`` raises the classified ``LlmError`` when that call fails.
- ``stream_typed`` reports the failure as one error chunk instead.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..base.client_base import BaseHttpLlmClient, Endpoint
from ..base.constants import API_KEY_QUERY_PARAM
from ..base.http.headers import build_request_headers
from ..base.logging import get_logger
from ..base.models import GenerationRequest
from ..base.streaming import StreamParsingMode
from ..base.tokens.extraction import extract_gemini_usage
from .config import GeminiConfig
from .content_extractor import GeminiContentExtractor
from .request_builder import GeminiRequestBuilder

__all__ = ["GeminiClient"]


class GeminiClient(BaseHttpLlmClient):
    """Gemini facade over the shared HTTP client base."""

    provider = "gemini"
    provider_label = "Gemini"

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[GeminiConfig] = None) -> None:
        self.config = config or GeminiConfig.default_config()
        super().__init__(
            http_client,
            builder=GeminiRequestBuilder(self.config),
            extractor=GeminiContentExtractor(clean_markdown=self.config.clean_markdown_code_blocks),
            retry_policy=self.config.retry_policy,
            usage_extractor=extract_gemini_usage,
            usage_sink=self.config.usage_sink,
            logger=get_logger("gemini"),
        )

    def get_model_name(self) -> str:
        return self.config.model_name

    def get_api_key(self) -> str:
        return self.config.api_key

    @property
    def stream_parsing_mode(self) -> StreamParsingMode:
        return StreamParsingMode.SINGLE_SHOT

    def _endpoint(self, request: GenerationRequest) -> Endpoint:
        headers = build_request_headers(idempotency_key=request.idempotency_key, tags=request.tags)
        return self.config.resolved_api_url, headers, {API_KEY_QUERY_PARAM: self.config.api_key}
