"""Token usage helpers package."""

from .extraction import (
    UsageExtractor,
    extract_gemini_usage,
    extract_openai_usage,
    report_usage,
)

__all__ = [
    "UsageExtractor",
    "extract_openai_usage",
    "extract_gemini_usage",
    "report_usage",
]
