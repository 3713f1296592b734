"""Streaming package for the client layer.

Exposes the parsing modes, the line decoder and the metrics wrapper under a
single namespace.
"""

from .stream_parsing_mode import StreamParsingMode
from .decoder import SINGLE_SHOT_ERROR_PREFIX, StreamDecoder
from .metrics import StreamMetrics, finalize_stream, observe_stream
from .sse import delta_content, is_done, unwrap_line

__all__ = [
    "StreamParsingMode",
    "StreamDecoder",
    "SINGLE_SHOT_ERROR_PREFIX",
    "StreamMetrics",
    "finalize_stream",
    "observe_stream",
    "delta_content",
    "is_done",
    "unwrap_line",
]
