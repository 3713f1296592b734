"""LlmClient abstract base class (single-class module).

The one interface every provider facade implements. Non-streaming calls
return :class:`LlmResult` and never raise taxonomy errors; streaming calls
return async iterators that raise a classified ``LlmError`` on fatal failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional, Type, TypeVar

from ..cancellation import CancellationToken
from ..models import GenerationRequest, LlmResult, StreamChunk, TypedStreamChunk

T = TypeVar("T")


class LlmClient(ABC):
    """Provider-agnostic text generation client."""

    @abstractmethod
    async def generate(self, request: GenerationRequest, target: Type[T]) -> LlmResult[T]:
        """Generate content and decode it into ``target`` (``str`` passes through)."""

    async def generate_text(self, request: GenerationRequest) -> LlmResult[str]:
        """Generate plain text."""
        return await self.generate(request, str)

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the configured model identifier."""

    @abstractmethod
    def get_api_key(self) -> str:
        """Return the API key this client authenticates with."""

    @abstractmethod
    def stream(
        self,
        request: GenerationRequest,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream incremental text chunks."""

    @abstractmethod
    def stream_typed(
        self,
        request: GenerationRequest,
        target: Type[T],
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[TypedStreamChunk[T]]:
        """Stream chunks decoded into ``target``."""


__all__ = ["LlmClient"]
