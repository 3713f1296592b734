"""Decode extracted provider text into the caller's requested type.

``str`` targets pass through untouched. Every other target is decoded with a
pydantic ``TypeAdapter`` (models, dataclasses, ``dict``, ``list[int]``, ...).
Adapters are built once per target and reused.
"""
from __future__ import annotations

from typing import Any, Dict, Type, TypeVar, cast

from pydantic import TypeAdapter

T = TypeVar("T")


class ResponseProcessor:
    """Typed decoder for extracted content.

    Raises ``pydantic.ValidationError`` when the content is not valid JSON
    or does not match the target; callers classify that as a
    deserialization failure.
    """

    def __init__(self) -> None:
        self._adapters: Dict[Any, TypeAdapter[Any]] = {}

    def adapter_for(self, target: Type[T]) -> TypeAdapter[T]:
        adapter = self._adapters.get(target)
        if adapter is None:
            adapter = TypeAdapter(target)
            self._adapters[target] = adapter
        return cast(TypeAdapter[T], adapter)

    def process(self, content: str, target: Type[T]) -> T:
        if target is str:
            return cast(T, content)
        return self.adapter_for(target).validate_json(content)


_DEFAULT = ResponseProcessor()


def default_processor() -> ResponseProcessor:
    """Return the process-wide processor (adapter cache only, no other state)."""
    return _DEFAULT


__all__ = ["ResponseProcessor", "default_processor"]
