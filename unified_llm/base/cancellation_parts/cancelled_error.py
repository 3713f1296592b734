"""Cancellation error type.

Defines the public ``CancelledError`` raised when a stream observes a
cancelled token. Stream decoders treat it as a quiet end of sequence, never
as an application failure.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively."""


__all__ = ["CancelledError"]
