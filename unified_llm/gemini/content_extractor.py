"""Gemini generateContent content extraction and text cleanup."""
from __future__ import annotations

import re
import textwrap
from typing import Any, Mapping

from ..base.errors import ContentExtractionError

_LEADING_FENCE = re.compile(r"^```\w*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def normalize_text(text: str) -> str:
    """Remove common indentation, strip every line and drop blank edge lines."""
    lines = [line.strip() for line in textwrap.dedent(text).split("\n")]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def strip_code_fences(text: str) -> str:
    """Strip one leading ```` ```lang ```` fence and one trailing ```` ``` ````."""
    try:
        cleaned = _LEADING_FENCE.sub("", text.strip(), count=1)
        cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
        return cleaned.strip()
    except (re.error, TypeError):
        return text


class GeminiContentExtractor:
    """Returns ``candidates[0].content.parts[0].text`` or raises ``ContentExtractionError``.

    Parameters:
        clean_markdown: Strip one pair of outer code fences (default on).
    """

    def __init__(self, *, clean_markdown: bool = True) -> None:
        self.clean_markdown = clean_markdown

    def extract(self, response_json: Mapping[str, Any]) -> str:
        error = response_json.get("error")
        if isinstance(error, Mapping):
            code = error.get("code")
            message = error.get("message")
            raise ContentExtractionError(
                "Gemini API error: "
                f"{'Unknown code' if code is None else code} - "
                f"{'Unknown error' if message is None else message}"
            )

        candidates = response_json.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise ContentExtractionError("No candidates found in Gemini response")

        first = candidates[0]
        content = first.get("content") if isinstance(first, Mapping) else None
        parts = content.get("parts") if isinstance(content, Mapping) else None
        if not isinstance(parts, list) or not parts:
            raise ContentExtractionError("No parts found in Gemini response")

        text = parts[0].get("text") if isinstance(parts[0], Mapping) else None
        if not isinstance(text, str):
            raise ContentExtractionError("No text content found in Gemini response")

        normalized = normalize_text(text)
        return strip_code_fences(normalized) if self.clean_markdown else normalized


__all__ = ["GeminiContentExtractor", "normalize_text", "strip_code_fences"]
