"""
Normalized LLM error kinds (closed taxonomy).

Defines the `ErrorKind` enumeration used as the variant tag of
:class:`~unified_llm.base.errors_parts.llm_error.LlmError`. Values are
lowercase snake_case and are considered a stable public contract for logging
and pattern matching by callers.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated error kinds representing every failure a call can report."""

    TRANSPORT = "transport"
    PROVIDER_HTTP = "provider_http"
    RATE_LIMIT = "rate_limit"
    AUTH = "auth"
    DESERIALIZATION = "deserialization"
    INVALID_REQUEST = "invalid_request"
    PROVIDER_SPECIFIC = "provider_specific"


__all__ = ["ErrorKind"]
