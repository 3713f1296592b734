"""Gemini generateContent configuration.

Validated at construction like ``OpenAiConfig``. The endpoint URL may be left
empty; :meth:`GeminiConfig.with_api_key` then derives it from the model.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..base.models import UsageSink
from ..base.resilience import NO_RETRY, RetryPolicy
from ..base.streaming import StreamParsingMode
from ..config.defaults import (
    GEMINI_API_URL_TEMPLATE,
    GEMINI_DEFAULT_CANDIDATE_COUNT,
    GEMINI_DEFAULT_MAX_OUTPUT_TOKENS,
    GEMINI_DEFAULT_TEMPERATURE,
    GEMINI_DEFAULT_TOP_K,
    GEMINI_DEFAULT_TOP_P,
)


class GeminiModel(str, Enum):
    GEMINI_1_5_FLASH_LATEST = "gemini-1.5-flash-latest"
    GEMINI_1_5_PRO_LATEST = "gemini-1.5-pro-latest"


class GeminiConfig(BaseModel):
    """Sampling parameters, credentials and call policy for Gemini."""

    model_config = ConfigDict(frozen=True, protected_namespaces=(), arbitrary_types_allowed=True)

    model: Union[GeminiModel, str] = GeminiModel.GEMINI_1_5_FLASH_LATEST
    temperature: float = Field(default=GEMINI_DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    top_k: int = Field(default=GEMINI_DEFAULT_TOP_K, gt=0)
    top_p: float = Field(default=GEMINI_DEFAULT_TOP_P, ge=0.0, le=1.0)
    max_output_tokens: int = Field(default=GEMINI_DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    candidate_count: int = Field(default=GEMINI_DEFAULT_CANDIDATE_COUNT, gt=0)
    stop_sequences: List[str] = Field(default_factory=list)
    api_key: str = ""
    api_url: str = ""
    retry_policy: RetryPolicy = NO_RETRY
    usage_sink: Optional[UsageSink] = None
    clean_markdown_code_blocks: bool = True
    stream_parsing_mode: StreamParsingMode = StreamParsingMode.SINGLE_SHOT

    @field_validator("model")
    @classmethod
    def _check_model(cls, value: Union[GeminiModel, str]) -> Union[GeminiModel, str]:
        name = value.value if isinstance(value, GeminiModel) else value
        if not name or not name.strip():
            raise ValueError("Model name cannot be empty")
        return value

    @field_validator("stream_parsing_mode")
    @classmethod
    def _check_stream_mode(cls, value: StreamParsingMode) -> StreamParsingMode:
        if value is not StreamParsingMode.SINGLE_SHOT:
            raise ValueError("Gemini only supports SINGLE_SHOT stream parsing")
        return value

    @property
    def model_name(self) -> str:
        return self.model.value if isinstance(self.model, GeminiModel) else self.model

    @property
    def resolved_api_url(self) -> str:
        return self.api_url or GEMINI_API_URL_TEMPLATE.format(model=self.model_name)

    def with_api_key(self, api_key: str) -> "GeminiConfig":
        """Copy with ``api_key`` set; an empty ``api_url`` is derived from the model."""
        return self.model_copy(update={"api_key": api_key, "api_url": self.resolved_api_url})

    def with_updates(self, **changes) -> "GeminiConfig":
        """Return a re-validated copy with ``changes`` applied."""
        return type(self).model_validate({**dict(self), **changes})

    @classmethod
    def default_config(cls) -> "GeminiConfig":
        return cls()

    @classmethod
    def with_model(cls, model: Union[GeminiModel, str]) -> "GeminiConfig":
        return cls(model=model)


__all__ = ["GeminiModel", "GeminiConfig"]
