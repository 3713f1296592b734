"""
Streaming chunk DTOs.

``StreamChunk`` carries an untyped text delta. ``TypedStreamChunk`` carries a
decoded unit of the caller's target type together with the raw text it was
decoded from; ``content`` is ``None`` exactly when ``error`` is set or no
complete unit was available.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class StreamChunk:
    """A chunk of streamed text."""

    content: str


@dataclass(frozen=True)
class TypedStreamChunk(Generic[T]):
    """A streamed unit decoded into ``T``.

    Attributes:
        content: Decoded value, or ``None`` when decoding failed.
        raw_content: Text the value was decoded from, kept for debugging.
        error: Decode failure description, if any.
    """

    content: Optional[T]
    raw_content: str
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


__all__ = ["StreamChunk", "TypedStreamChunk"]
