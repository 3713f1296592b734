"""Unified LLM error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``unified_llm.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_kind import ErrorKind
from .errors_parts.llm_error import LlmError
from .errors_parts.extraction_error import ContentExtractionError
from .errors_parts.classification import (
    classify_exception,
    classify_http_response,
    parse_retry_after_seconds,
)

__all__ = [
    "ErrorKind",
    "LlmError",
    "ContentExtractionError",
    "classify_exception",
    "classify_http_response",
    "parse_retry_after_seconds",
]
