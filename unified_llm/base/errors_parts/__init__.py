"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `unified_llm.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind
from .llm_error import LlmError
from .extraction_error import ContentExtractionError
from .classification import classify_exception, classify_http_response, parse_retry_after_seconds

__all__ = [
    "ErrorKind",
    "LlmError",
    "ContentExtractionError",
    "classify_exception",
    "classify_http_response",
    "parse_retry_after_seconds",
]
