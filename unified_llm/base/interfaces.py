"""
Provider-agnostic interfaces (ABCs/Protocols) for the client layer.

Re-exports the single-class modules under ``unified_llm.base.interfaces_parts``
so upstream code has one stable import path.
"""

from __future__ import annotations

from .interfaces_parts import (
    ContentExtractor,
    LlmClient,
    RequestBuilder,
    SupportsImageGeneration,
)

__all__ = [
    "LlmClient",
    "RequestBuilder",
    "ContentExtractor",
    "SupportsImageGeneration",
]
