"""
Content extraction failure type.

Raised by provider content extractors when a parsed response body carries a
provider-reported error or lacks the fields holding generated text. The
message is diagnostic and is later mapped onto the taxonomy by
``classify_exception``.
"""
from __future__ import annotations


class ContentExtractionError(Exception):
    """Raised when textual content cannot be extracted from a response body."""


__all__ = ["ContentExtractionError"]
