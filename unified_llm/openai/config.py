"""OpenAI chat completion configuration.

``OpenAiConfig`` is a frozen pydantic model validated at construction: an
out-of-range sampling parameter fails immediately with
``pydantic.ValidationError`` rather than at call time. ``with_*`` helpers and
the preset constructors return new instances.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..base.models import UsageSink
from ..base.resilience import NO_RETRY, RetryPolicy
from ..base.streaming import StreamParsingMode
from ..config.defaults import (
    OPENAI_DEFAULT_API_URL,
    OPENAI_DEFAULT_FREQUENCY_PENALTY,
    OPENAI_DEFAULT_MAX_TOKENS,
    OPENAI_DEFAULT_MODEL,
    OPENAI_DEFAULT_PRESENCE_PENALTY,
    OPENAI_DEFAULT_TEMPERATURE,
    OPENAI_DEFAULT_TOP_P,
    OPENAI_JSON_TEMPERATURE,
    OPENAI_JSON_TOP_P,
    OPENAI_MAX_LOGIT_BIAS_ENTRIES,
    OPENAI_MAX_STOP_SEQUENCES,
    OPENAI_TEXT_TEMPERATURE,
    OPENAI_TEXT_TOP_P,
)


class Models:
    """Well-known chat model identifiers (any non-empty string is accepted)."""

    GPT_4O = "gpt-4o"
    GPT_4O_2024_05_13 = "gpt-4o-2024-05-13"
    GPT_4O_2024_08_06 = "gpt-4o-2024-08-06"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_1 = "gpt-4.1"
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_4_TURBO_2024_04_09 = "gpt-4-turbo-2024-04-09"


class ResponseFormat(str, Enum):
    """Wire ``response_format`` type."""

    TEXT = "text"
    JSON_OBJECT = "json_object"
    JSON_SCHEMA = "json_schema"


class OpenAiConfig(BaseModel):
    """Sampling parameters, credentials and call policy for OpenAI."""

    model_config = ConfigDict(frozen=True, protected_namespaces=(), arbitrary_types_allowed=True)

    model_name: str = Field(default=OPENAI_DEFAULT_MODEL, min_length=1)
    temperature: float = Field(default=OPENAI_DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=OPENAI_DEFAULT_MAX_TOKENS, gt=0)
    top_p: float = Field(default=OPENAI_DEFAULT_TOP_P, ge=0.0, le=1.0)
    frequency_penalty: float = Field(default=OPENAI_DEFAULT_FREQUENCY_PENALTY, ge=-2.0, le=2.0)
    presence_penalty: float = Field(default=OPENAI_DEFAULT_PRESENCE_PENALTY, ge=-2.0, le=2.0)
    stop_sequences: List[str] = Field(default_factory=list)
    seed: Optional[int] = None
    response_format: ResponseFormat = ResponseFormat.JSON_OBJECT
    json_schema: Optional[str] = None
    user: Optional[str] = None
    logit_bias: Dict[str, float] = Field(default_factory=dict)
    stream: bool = False
    api_key: str = ""
    api_url: str = Field(default=OPENAI_DEFAULT_API_URL, min_length=1)
    organization: Optional[str] = None
    retry_policy: RetryPolicy = NO_RETRY
    usage_sink: Optional[UsageSink] = None
    stream_parsing_mode: StreamParsingMode = StreamParsingMode.NDJSON_PER_LINE
    ndjson_delimiter: str = Field(default="\n", min_length=1)

    @field_validator("stop_sequences")
    @classmethod
    def _check_stop_sequences(cls, value: List[str]) -> List[str]:
        if len(value) > OPENAI_MAX_STOP_SEQUENCES:
            raise ValueError(
                f"OpenAI supports maximum {OPENAI_MAX_STOP_SEQUENCES} stop sequences, got: {len(value)}"
            )
        return value

    @field_validator("logit_bias")
    @classmethod
    def _check_logit_bias(cls, value: Dict[str, float]) -> Dict[str, float]:
        if len(value) > OPENAI_MAX_LOGIT_BIAS_ENTRIES:
            raise ValueError(
                f"OpenAI supports maximum {OPENAI_MAX_LOGIT_BIAS_ENTRIES} logit bias entries, got: {len(value)}"
            )
        for bias in value.values():
            if not -100.0 <= bias <= 100.0:
                raise ValueError(f"Logit bias values must be between -100.0 and 100.0, got: {bias}")
        return value

    @model_validator(mode="after")
    def _check_json_schema(self) -> "OpenAiConfig":
        if self.response_format is not ResponseFormat.JSON_SCHEMA:
            return self
        if not self.json_schema:
            raise ValueError("json_schema is required when response_format is JSON_SCHEMA")
        try:
            parsed = json.loads(self.json_schema)
        except json.JSONDecodeError as exc:
            raise ValueError(f"json_schema is not valid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ValueError("json_schema must be a JSON object")
        return self

    # ---- copies ----
    def with_api_key(self, api_key: str) -> "OpenAiConfig":
        return self.model_copy(update={"api_key": api_key})

    def with_updates(self, **changes) -> "OpenAiConfig":
        """Return a re-validated copy with ``changes`` applied."""
        return type(self).model_validate({**dict(self), **changes})

    # ---- presets ----
    @classmethod
    def default_config(cls) -> "OpenAiConfig":
        return cls()

    @classmethod
    def with_model(cls, model_name: str) -> "OpenAiConfig":
        return cls(model_name=model_name)

    @classmethod
    def json_config(cls) -> "OpenAiConfig":
        """Low temperature, JSON object output."""
        return cls(
            temperature=OPENAI_JSON_TEMPERATURE,
            top_p=OPENAI_JSON_TOP_P,
            response_format=ResponseFormat.JSON_OBJECT,
        )

    @classmethod
    def text_config(cls) -> "OpenAiConfig":
        """Higher temperature, free text output."""
        return cls(
            temperature=OPENAI_TEXT_TEMPERATURE,
            top_p=OPENAI_TEXT_TOP_P,
            response_format=ResponseFormat.TEXT,
        )


__all__ = ["Models", "ResponseFormat", "OpenAiConfig"]
