"""Token usage extraction helpers.

Best-effort mapping of provider usage blocks onto :class:`LlmUsage`:

OpenAI:
    ``usage.prompt_tokens`` / ``usage.completion_tokens`` / ``usage.total_tokens``
Gemini:
    ``usageMetadata.promptTokenCount`` / ``usageMetadata.candidatesTokenCount``
    / ``usageMetadata.totalTokenCount``

An extractor returns ``None`` unless both the prompt and the completion count
are integers; ``total`` stays optional. :func:`report_usage` is the only place
the caller-supplied sink is invoked and it never raises: usage reporting must
not fail a call that otherwise succeeded.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from ..logging import LogContext, normalized_log_event
from ..models import LlmUsage, UsageSink

UsageExtractor = Callable[[Mapping[str, Any]], Optional[LlmUsage]]


def _as_count(value: Any) -> Optional[int]:
    """Return ``value`` when it is a genuine integer (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _usage_from(block: Any, prompt_key: str, completion_key: str, total_key: str) -> Optional[LlmUsage]:
    if not isinstance(block, Mapping):
        return None
    prompt = _as_count(block.get(prompt_key))
    completion = _as_count(block.get(completion_key))
    if prompt is None or completion is None:
        return None
    return LlmUsage(
        prompt_tokens=prompt,
        completion_tokens=completion,
        total_tokens=_as_count(block.get(total_key)),
    )


def extract_openai_usage(response_json: Mapping[str, Any]) -> Optional[LlmUsage]:
    """Map an OpenAI chat completion ``usage`` block."""
    return _usage_from(response_json.get("usage"), "prompt_tokens", "completion_tokens", "total_tokens")


def extract_gemini_usage(response_json: Mapping[str, Any]) -> Optional[LlmUsage]:
    """Map a Gemini ``usageMetadata`` block."""
    return _usage_from(
        response_json.get("usageMetadata"),
        "promptTokenCount",
        "candidatesTokenCount",
        "totalTokenCount",
    )


def report_usage(
    response_json: Mapping[str, Any],
    extractor: UsageExtractor,
    sink: UsageSink,
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext] = None,
) -> Optional[LlmUsage]:
    """Extract usage and hand it to ``sink``; returns the usage that was reported.

    Any failure (malformed block, sink raising) is logged at debug and
    swallowed.
    """
    try:
        usage = extractor(response_json)
        if usage is None:
            return None
        sink(usage)
    except Exception as exc:  # noqa: BLE001 - usage reporting is best-effort
        normalized_log_event(
            logger,
            "usage.report",
            ctx,
            phase="usage",
            level=logging.DEBUG,
            error_code=type(exc).__name__,
            emitted=False,
            error=str(exc),
        )
        return None
    normalized_log_event(
        logger,
        "usage.report",
        ctx,
        phase="usage",
        level=logging.DEBUG,
        emitted=True,
        tokens=usage,
    )
    return usage


__all__ = [
    "UsageExtractor",
    "extract_openai_usage",
    "extract_gemini_usage",
    "report_usage",
]
