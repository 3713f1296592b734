"""Gemini generateContent client."""

from .client import GeminiClient
from .config import GeminiConfig, GeminiModel
from .content_extractor import GeminiContentExtractor
from .request_builder import GeminiRequestBuilder

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiModel",
    "GeminiContentExtractor",
    "GeminiRequestBuilder",
]
