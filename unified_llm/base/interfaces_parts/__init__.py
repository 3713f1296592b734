"""Interfaces split into single-class modules.

``unified_llm.base.interfaces`` re-exports these under a stable import path.
"""

from .llm_client import LlmClient
from .request_builder import RequestBuilder
from .content_extractor import ContentExtractor
from .supports_image_generation import SupportsImageGeneration

__all__ = [
    "LlmClient",
    "RequestBuilder",
    "ContentExtractor",
    "SupportsImageGeneration",
]
