"""OpenAI chat completion content extraction."""
from __future__ import annotations

from typing import Any, Mapping

from ..base.errors import ContentExtractionError


def _field(obj: Mapping[str, Any], key: str, default: str) -> str:
    value = obj.get(key)
    return default if value is None else str(value)


class OpenAiContentExtractor:
    """Returns ``choices[0].message.content`` or raises ``ContentExtractionError``.

    An embedded ``error`` object wins over everything else, even on HTTP 200.
    """

    def extract(self, response_json: Mapping[str, Any]) -> str:
        error = response_json.get("error")
        if isinstance(error, Mapping):
            raise ContentExtractionError(
                "OpenAI API error: "
                f"{_field(error, 'type', 'Unknown type')} "
                f"({_field(error, 'code', 'Unknown code')}) - "
                f"{_field(error, 'message', 'Unknown error')}"
            )

        choices = response_json.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ContentExtractionError("No choices found in OpenAI response")

        first = choices[0]
        message = first.get("message") if isinstance(first, Mapping) else None
        content = message.get("content") if isinstance(message, Mapping) else None
        if not isinstance(content, str):
            raise ContentExtractionError("No content found in OpenAI response")
        return content


__all__ = ["OpenAiContentExtractor"]
