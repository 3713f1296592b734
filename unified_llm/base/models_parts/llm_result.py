"""
Result container returned by every client facade call.

A result holds either a value or an :class:`LlmError`, never both, so callers
can branch on ``ok`` (or match on ``error.kind``) without catching exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from ..errors_parts.llm_error import LlmError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class LlmResult(Generic[T]):
    """Success value or taxonomy error for one call.

    Prefer the ``success`` / ``failure`` constructors over the raw initializer.
    """

    value: Optional[T] = None
    error: Optional[LlmError] = None

    def __post_init__(self) -> None:
        if self.value is not None and self.error is not None:
            raise ValueError("LlmResult cannot hold both a value and an error")

    @classmethod
    def success(cls, value: T) -> "LlmResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LlmError) -> "LlmResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: Union[T, U]) -> Union[T, U]:
        return default if self.error is not None else self.value  # type: ignore[return-value]

    def map(self, fn: Callable[[T], U]) -> "LlmResult[U]":
        if self.error is not None:
            return LlmResult(error=self.error)
        return LlmResult(value=fn(self.value))  # type: ignore[arg-type]


__all__ = ["LlmResult"]
