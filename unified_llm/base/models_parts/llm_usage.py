"""
Normalized token usage reported by providers.

All counts are optional: ``None`` means the provider did not report the value.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional


@dataclass(frozen=True)
class LlmUsage:
    """Token counts for one call."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def to_dict(self) -> Dict[str, Optional[int]]:
        return asdict(self)


UsageSink = Callable[[LlmUsage], None]
"""Caller hook invoked with usage after each successful call."""


__all__ = ["LlmUsage", "UsageSink"]
