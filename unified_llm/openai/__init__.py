"""OpenAI chat completions and Images API client."""

from .client import OpenAiClient
from .config import Models, OpenAiConfig, ResponseFormat
from .content_extractor import OpenAiContentExtractor
from .images import (
    ImageGenerationRequest,
    ImageResponseFormat,
    ImageResult,
    OpenAiImageModel,
    validate_image_request,
)
from .request_builder import OpenAiRequestBuilder

__all__ = [
    "OpenAiClient",
    "OpenAiConfig",
    "Models",
    "ResponseFormat",
    "OpenAiRequestBuilder",
    "OpenAiContentExtractor",
    "ImageGenerationRequest",
    "ImageResponseFormat",
    "ImageResult",
    "OpenAiImageModel",
    "validate_image_request",
]
