"""Stream parsing modes selectable per provider configuration."""
from __future__ import annotations

from enum import Enum


class StreamParsingMode(str, Enum):
    """How a streamed response body is turned into chunks.

    SINGLE_SHOT: perform a normal call and emit the whole content once.
    NDJSON_PER_LINE: decode each complete delimiter-terminated line of the
        accumulated text as its own unit.
    BUFFER_AND_PARSE_FINAL: accumulate everything, decode once at the end.
    """

    SINGLE_SHOT = "single_shot"
    NDJSON_PER_LINE = "ndjson_per_line"
    BUFFER_AND_PARSE_FINAL = "buffer_and_parse_final"


__all__ = ["StreamParsingMode"]
