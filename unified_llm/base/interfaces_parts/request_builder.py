"""RequestBuilder Protocol (single-class module)."""

from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable

from ..models import GenerationRequest


@runtime_checkable
class RequestBuilder(Protocol):
    """Maps a :class:`GenerationRequest` onto a provider wire payload."""

    def build(self, request: GenerationRequest) -> Dict[str, Any]:  # pragma: no cover - interface
        ...

    def build_stream(self, request: GenerationRequest) -> Dict[str, Any]:  # pragma: no cover - interface
        """Same as :meth:`build` with streaming forced on where the wire has a flag."""
        ...
