"""OpenAI Images API request/response types and helpers.

Model constraints are checked before any I/O; the client turns a violation
into an ``INVALID_REQUEST`` failure.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..config.defaults import (
    OPENAI_API_VERSION_MARKER,
    OPENAI_DEFAULT_IMAGES_URL,
    OPENAI_IMAGES_PATH,
)

_SIZE_RE = re.compile(r"^\d+x\d+$")

# Retried inside the attempt when the call carries an idempotency key.
TRANSIENT_IMAGE_STATUSES = frozenset({408, 500, 501, 502, 503, 504})


class OpenAiImageModel(str, Enum):
    GPT_IMAGE_1 = "gpt-image-1"
    DALL_E_3 = "dall-e-3"


class ImageResponseFormat(str, Enum):
    URL = "url"
    B64_JSON = "b64_json"


DALL_E_3_SIZES = ("1024x1024", "1024x1792", "1792x1024")
DALL_E_3_QUALITIES = ("standard", "hd")
GPT_IMAGE_1_SIZES = ("256x256", "512x512", "1024x1024")


@dataclass(frozen=True)
class ImageGenerationRequest:
    """Image generation parameters.

    Raises:
        ValueError: On a blank prompt, ``n`` outside 1..10, or a size not of
            the form ``WIDTHxHEIGHT``.
    """

    prompt: str
    n: int = 1
    size: str = "1024x1024"
    quality: Optional[str] = None
    response_format: ImageResponseFormat = ImageResponseFormat.URL
    model: Optional[OpenAiImageModel] = None
    user: Optional[str] = None
    idempotency_key: Optional[str] = None
    tags: Optional[Mapping[str, str]] = None

    def __post_init__(self) -> None:
        if not self.prompt or not self.prompt.strip():
            raise ValueError("Prompt cannot be blank")
        if not 1 <= self.n <= 10:
            raise ValueError(f"OpenAI supports generating between 1 and 10 images per request, got: {self.n}")
        if not _SIZE_RE.match(self.size):
            raise ValueError("Size must be in the format WIDTHxHEIGHT, e.g., 1024x1024")

    @property
    def effective_model(self) -> OpenAiImageModel:
        return self.model or OpenAiImageModel.GPT_IMAGE_1

    @property
    def is_idempotent(self) -> bool:
        return bool(self.idempotency_key and self.idempotency_key.strip())


@dataclass(frozen=True)
class ImageResult:
    """One generated image: a URL or base64 payload, per the requested format."""

    url: Optional[str] = None
    b64_json: Optional[str] = None


def validate_image_request(req: ImageGenerationRequest) -> None:
    """Check model-specific constraints; raises ``ValueError``."""
    model = req.effective_model
    if model is OpenAiImageModel.DALL_E_3:
        if req.n != 1:
            raise ValueError(f"dall-e-3 supports n=1 only, got: {req.n}")
        if req.size not in DALL_E_3_SIZES:
            raise ValueError(f"Invalid size for dall-e-3: {req.size}. Allowed: {', '.join(DALL_E_3_SIZES)}")
        if req.quality is not None and req.quality not in DALL_E_3_QUALITIES:
            raise ValueError(f"Invalid quality for dall-e-3: {req.quality}. Allowed: standard, hd")
    elif req.size not in GPT_IMAGE_1_SIZES:
        raise ValueError(f"Invalid size for gpt-image-1: {req.size}. Allowed: {', '.join(GPT_IMAGE_1_SIZES)}")


def build_image_payload(req: ImageGenerationRequest) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"prompt": req.prompt, "n": req.n, "size": req.size}
    if req.quality is not None:
        payload["quality"] = req.quality
    payload["response_format"] = req.response_format.value
    payload["model"] = req.effective_model.value
    if req.user is not None:
        payload["user"] = req.user
    return payload


def images_url(chat_api_url: str) -> str:
    """Derive the images endpoint from the chat URL (prefix through ``/v1/``)."""
    idx = chat_api_url.find(OPENAI_API_VERSION_MARKER)
    if idx > 0:
        return chat_api_url[: idx + len(OPENAI_API_VERSION_MARKER)] + OPENAI_IMAGES_PATH
    return OPENAI_DEFAULT_IMAGES_URL


def provider_error_message(body: Optional[str]) -> Optional[str]:
    """Return ``error.message`` from a JSON error body, if there is one."""
    if not body or not body.strip():
        return None
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return None
    error = parsed.get("error") if isinstance(parsed, Mapping) else None
    message = error.get("message") if isinstance(error, Mapping) else None
    return message if isinstance(message, str) else None


def parse_image_results(response_json: Mapping[str, Any]) -> List[ImageResult]:
    """Map ``data[]`` entries to :class:`ImageResult`; no ``data`` means no images."""
    data = response_json.get("data")
    if not isinstance(data, list):
        return []
    results: List[ImageResult] = []
    for item in data:
        if not isinstance(item, Mapping):
            continue
        results.append(ImageResult(url=item.get("url"), b64_json=item.get("b64_json")))
    return results


__all__ = [
    "OpenAiImageModel",
    "ImageResponseFormat",
    "ImageGenerationRequest",
    "ImageResult",
    "TRANSIENT_IMAGE_STATUSES",
    "validate_image_request",
    "build_image_payload",
    "images_url",
    "provider_error_message",
    "parse_image_results",
]
