"""
GenerationRequest DTO: the normalized request every provider client accepts.

The dataclass constructor performs no checks; :func:`build_generation_request`
(also available as ``GenerationRequest.of``) is the validating factory and
rejects an empty prompt. Instances are frozen; the ``with_*`` helpers return
modified copies.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class GenerationRequest:
    """Normalized generation request.

    Attributes:
        prompt: User prompt. When no system message is given it is the whole
            instruction.
        system_message: Optional system instructions; providers without a
            separate system channel prepend it to the prompt.
        idempotency_key: Caller token marking the call as safe to retry. Sent
            as a header and required for the retry policy to engage.
        tags: Optional ordered correlation tags sent as ``X-Request-Tags``.
    """

    prompt: str
    system_message: Optional[str] = None
    idempotency_key: Optional[str] = None
    tags: Optional[Mapping[str, str]] = None

    @property
    def is_idempotent(self) -> bool:
        return bool(self.idempotency_key and self.idempotency_key.strip())

    def with_idempotency_key(self, idempotency_key: Optional[str]) -> "GenerationRequest":
        return replace(self, idempotency_key=idempotency_key)

    def with_tags(self, tags: Optional[Mapping[str, str]]) -> "GenerationRequest":
        return replace(self, tags=dict(tags) if tags is not None else None)

    @classmethod
    def of(
        cls,
        prompt: str,
        system_message: Optional[str] = None,
        *,
        idempotency_key: Optional[str] = None,
        tags: Optional[Mapping[str, str]] = None,
    ) -> "GenerationRequest":
        """Shortcut for :func:`build_generation_request`."""
        return build_generation_request(
            prompt, system_message=system_message, idempotency_key=idempotency_key, tags=tags
        )


def build_generation_request(
    prompt: str,
    *,
    system_message: Optional[str] = None,
    idempotency_key: Optional[str] = None,
    tags: Optional[Mapping[str, str]] = None,
) -> GenerationRequest:
    """Validate inputs and return a :class:`GenerationRequest`.

    Raises:
        ValueError: If ``prompt`` is empty.
    """
    if not prompt:
        raise ValueError("Prompt cannot be empty")
    frozen_tags: Optional[Dict[str, str]] = dict(tags) if tags is not None else None
    return GenerationRequest(
        prompt=prompt,
        system_message=system_message,
        idempotency_key=idempotency_key,
        tags=frozen_tags,
    )


__all__ = ["GenerationRequest", "build_generation_request"]
