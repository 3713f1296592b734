"""Gemini generateContent payload construction."""
from __future__ import annotations

from typing import Any, Dict

from ..base.models import GenerationRequest
from ..config.defaults import SYSTEM_PROMPT_SEPARATOR
from .config import GeminiConfig


class GeminiRequestBuilder:
    """Maps a :class:`GenerationRequest` onto ``{contents, generationConfig}``.

    Gemini has a single text channel here, so a non-empty system message is
    joined in front of the prompt.
    """

    def __init__(self, config: GeminiConfig) -> None:
        self.config = config

    @staticmethod
    def combined_text(request: GenerationRequest) -> str:
        if request.system_message:
            return f"{request.system_message}{SYSTEM_PROMPT_SEPARATOR}{request.prompt}"
        return request.prompt

    def build(self, request: GenerationRequest) -> Dict[str, Any]:
        cfg = self.config
        return {
            "contents": [{"parts": [{"text": self.combined_text(request)}]}],
            "generationConfig": {
                "temperature": cfg.temperature,
                "topK": cfg.top_k,
                "topP": cfg.top_p,
                "maxOutputTokens": cfg.max_output_tokens,
                "candidateCount": cfg.candidate_count,
                "stopSequences": list(cfg.stop_sequences),
            },
        }

    def build_stream(self, request: GenerationRequest) -> Dict[str, Any]:
        # No stream flag on this wire; streaming is emulated with one call.
        return self.build(request)


__all__ = ["GeminiRequestBuilder"]
