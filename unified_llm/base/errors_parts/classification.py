"""
Error classification helpers mapping failures onto the ``LlmError`` taxonomy.

Two entry points:

- :func:`classify_http_response` turns a non-2xx HTTP response into a
  structured error (429 with ``Retry-After`` parsing, everything else as
  ``PROVIDER_HTTP``).
- :func:`classify_exception` is a total function over arbitrary exceptions.
  Structured errors pass through; timeouts and decode failures map by type;
  everything else falls back to message substring heuristics.
"""
from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Mapping, Optional, Tuple

import httpx
from pydantic import ValidationError

from .error_kind import ErrorKind
from .llm_error import LlmError

UNKNOWN_TRANSPORT_ERROR = "Unknown transport error"

# Markers embedded by the content extractors when a provider reports an error
# object inside an otherwise successful response.
PROVIDER_ERROR_MARKERS: Tuple[str, ...] = ("OpenAI API error", "Gemini API error")

_TIMEOUT_TYPES = (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)
_DECODE_TYPES = (json.JSONDecodeError, ValidationError)


def parse_retry_after_seconds(header: Optional[str], *, now: Optional[datetime] = None) -> Optional[int]:
    """Parse a ``Retry-After`` header into a non-negative second count.

    Accepts either an integer number of seconds or an RFC 1123 HTTP date. A
    date is converted to seconds relative to ``now``; dates at or before
    ``now`` yield ``None`` rather than a negative number. Unparseable values
    also yield ``None``.
    """
    if header is None or not header.strip():
        return None
    trimmed = header.strip()
    if trimmed.isdigit():
        return int(trimmed)
    try:
        when = parsedate_to_datetime(trimmed)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    seconds = int((when - current).total_seconds())
    return seconds if seconds > 0 else None


def classify_http_response(
    status_code: int,
    headers: Mapping[str, str],
    body: Optional[str],
    *,
    provider_label: str = "provider",
) -> LlmError:
    """Map a non-success HTTP response onto the taxonomy.

    Parameters:
        status_code: HTTP status of the response.
        headers: Response headers (case-insensitive mapping preferred).
        body: Raw response body text, kept on ``PROVIDER_HTTP`` errors.
        provider_label: Display name used in the rate-limit message.
    """
    if status_code == 429:
        retry_after = parse_retry_after_seconds(headers.get("Retry-After"))
        return LlmError.rate_limit(
            retry_after_seconds=retry_after,
            message=f"Rate limited by {provider_label}",
        )
    return LlmError.provider_http(status_code, body)


def _heuristic_from_message(exc: BaseException, msg: str) -> LlmError:
    """Legacy substring heuristic for failures without structured status."""
    lowered = msg.lower()
    if "401" in msg or "unauthorized" in lowered:
        return LlmError(kind=ErrorKind.AUTH, message=msg, cause=exc)
    if "429" in msg or "rate limit" in lowered:
        return LlmError(kind=ErrorKind.RATE_LIMIT, message=msg, cause=exc)
    if "400" in msg or "422" in msg:
        return LlmError(kind=ErrorKind.INVALID_REQUEST, message=msg, cause=exc)
    if any(marker in msg for marker in PROVIDER_ERROR_MARKERS):
        return LlmError.provider_specific(message=msg, cause=exc)
    return LlmError.transport(message=msg if msg.strip() else UNKNOWN_TRANSPORT_ERROR, cause=exc)


def classify_exception(exc: BaseException) -> LlmError:
    """Classify an exception into an :class:`LlmError`.

    Precedence:
        1. ``LlmError`` passthrough (idempotent).
        2. Timeout exceptions map to ``TRANSPORT``.
        3. JSON / pydantic decode failures map to ``DESERIALIZATION``.
        4. Message substring heuristics.
        5. ``TRANSPORT`` fallback.
    """
    if isinstance(exc, LlmError):
        return exc
    if isinstance(exc, _TIMEOUT_TYPES):
        return LlmError.transport("Request timed out", cause=exc)
    if isinstance(exc, _DECODE_TYPES):
        return LlmError.deserialization(cause=exc)
    return _heuristic_from_message(exc, str(exc))


__all__ = [
    "classify_exception",
    "classify_http_response",
    "parse_retry_after_seconds",
    "PROVIDER_ERROR_MARKERS",
    "UNKNOWN_TRANSPORT_ERROR",
]
