"""Server-push line helpers.

Wire format: ``data: <json>`` lines separated by blank lines and terminated by
a literal ``data: [DONE]`` line.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..constants import SSE_DATA_PREFIX, SSE_DONE_SENTINEL

# Non-data SSE fields carry no content for us.
_IGNORED_FIELD_PREFIXES = (":", "event:", "id:", "retry:")


def unwrap_line(line: str) -> Optional[str]:
    """Return the payload of one raw stream line, or ``None`` to skip it.

    ``data:`` prefixed lines are unwrapped; unprefixed lines are passed
    through as-is so bare NDJSON bodies work too.
    """
    stripped = line.strip()
    if not stripped:
        return None
    if stripped.startswith(SSE_DATA_PREFIX):
        payload = stripped[len(SSE_DATA_PREFIX):].strip()
        return payload or None
    if stripped.startswith(_IGNORED_FIELD_PREFIXES):
        return None
    return stripped


def is_done(payload: str) -> bool:
    return payload == SSE_DONE_SENTINEL


def delta_content(event: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when it is a non-empty string."""
    if not isinstance(event, Mapping):
        return None
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, Mapping):
        return None
    delta = first.get("delta")
    if not isinstance(delta, Mapping):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


__all__ = ["unwrap_line", "is_done", "delta_content"]
