"""OpenAI chat completion payload construction."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..base.models import GenerationRequest
from ..config.defaults import OPENAI_JSON_INSTRUCTION
from .config import OpenAiConfig, ResponseFormat


def _mentions_json(text: str) -> bool:
    return "json" in text.lower()


class OpenAiRequestBuilder:
    """Maps a :class:`GenerationRequest` onto the chat completions wire shape.

    The system message is always sent, as an empty string when absent. In
    ``JSON_OBJECT`` mode the prompt gets an explicit JSON instruction appended
    unless the prompt or system message already mentions JSON.
    """

    def __init__(self, config: OpenAiConfig) -> None:
        self.config = config

    def build(self, request: GenerationRequest, *, stream: Optional[bool] = None) -> Dict[str, Any]:
        cfg = self.config
        system_message = request.system_message or ""
        prompt = request.prompt
        if (
            cfg.response_format is ResponseFormat.JSON_OBJECT
            and not _mentions_json(system_message)
            and not _mentions_json(prompt)
        ):
            prompt = f"{prompt}{OPENAI_JSON_INSTRUCTION}"

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_message},
            {"role": "user", "content": prompt},
        ]
        payload: Dict[str, Any] = {
            "model": cfg.model_name,
            "messages": messages,
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
            "top_p": cfg.top_p,
            "frequency_penalty": cfg.frequency_penalty,
            "presence_penalty": cfg.presence_penalty,
            "stream": cfg.stream if stream is None else stream,
        }
        if cfg.stop_sequences:
            payload["stop"] = list(cfg.stop_sequences)
        if cfg.seed is not None:
            payload["seed"] = cfg.seed
        if cfg.user is not None:
            payload["user"] = cfg.user
        if cfg.logit_bias:
            payload["logit_bias"] = dict(cfg.logit_bias)
        payload["response_format"] = self._response_format()
        return payload

    def build_stream(self, request: GenerationRequest) -> Dict[str, Any]:
        return self.build(request, stream=True)

    def _response_format(self) -> Dict[str, Any]:
        fmt = self.config.response_format
        if fmt is ResponseFormat.JSON_SCHEMA:
            # Presence and shape are checked by OpenAiConfig.
            return {"type": fmt.value, "json_schema": json.loads(self.config.json_schema or "{}")}
        return {"type": fmt.value}


__all__ = ["OpenAiRequestBuilder"]
