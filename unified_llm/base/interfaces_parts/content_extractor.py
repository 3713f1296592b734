"""ContentExtractor Protocol (single-class module)."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class ContentExtractor(Protocol):
    """Pulls the generated text out of a parsed provider response.

    Implementations raise ``ContentExtractionError`` with a diagnostic message
    for embedded provider errors and for each missing-field case.
    """

    def extract(self, response_json: Mapping[str, Any]) -> str:  # pragma: no cover - interface
        ...
