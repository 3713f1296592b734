"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``unified_llm.base.models_parts`` to keep a single stable import path.
"""

from .models_parts.generation_request import GenerationRequest, build_generation_request
from .models_parts.stream_chunk import StreamChunk, TypedStreamChunk
from .models_parts.llm_usage import LlmUsage, UsageSink
from .models_parts.llm_result import LlmResult

__all__ = [
    "GenerationRequest",
    "build_generation_request",
    "StreamChunk",
    "TypedStreamChunk",
    "LlmUsage",
    "UsageSink",
    "LlmResult",
]
