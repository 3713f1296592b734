"""SupportsImageGeneration Protocol (single-class module).

Capability marker for clients exposing an image generation endpoint.
"""

from __future__ import annotations

from typing import Any, List, Protocol, runtime_checkable

from ..models import LlmResult


@runtime_checkable
class SupportsImageGeneration(Protocol):
    async def generate_image(self, request: Any) -> LlmResult[List[Any]]:  # pragma: no cover - interface
        ...
