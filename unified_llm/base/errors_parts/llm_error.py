"""
Structured LLM error exception type.

`LlmError` is a tagged value: the :class:`ErrorKind` tag selects the variant
and only the payload fields relevant to that variant are populated. It is an
``Exception`` so the transport layer can raise it through the retry executor,
but client facades always deliver it inside an ``LlmResult`` rather than
letting it escape.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_kind import ErrorKind


@dataclass(eq=False)
class LlmError(Exception):
    """Represents one member of the closed LLM error taxonomy.

    Attributes:
        kind: Variant tag.
        message: Human-readable error message suitable for logging.
        status_code: HTTP status (``PROVIDER_HTTP`` only).
        body: Raw response body (``PROVIDER_HTTP`` only).
        retry_after_seconds: Server supplied back-off hint (``RATE_LIMIT`` only).
        code: Provider error code (``PROVIDER_SPECIFIC`` only).
        cause: Original exception, kept for diagnostics.
    """

    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    body: Optional[str] = None
    retry_after_seconds: Optional[int] = None
    code: Optional[str] = None
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.cause is not None:
            self.__cause__ = self.cause

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.kind.value}: {self.message}"

    # ---- variant constructors ----
    @classmethod
    def transport(cls, message: str = "Request timed out", cause: Optional[BaseException] = None) -> "LlmError":
        return cls(kind=ErrorKind.TRANSPORT, message=message, cause=cause)

    @classmethod
    def provider_http(
        cls, status_code: int, body: Optional[str] = None, cause: Optional[BaseException] = None
    ) -> "LlmError":
        return cls(
            kind=ErrorKind.PROVIDER_HTTP,
            message=f"Provider HTTP error: status={status_code}",
            status_code=status_code,
            body=body,
            cause=cause,
        )

    @classmethod
    def rate_limit(
        cls,
        retry_after_seconds: Optional[int] = None,
        message: str = "Rate limited",
        cause: Optional[BaseException] = None,
    ) -> "LlmError":
        return cls(
            kind=ErrorKind.RATE_LIMIT,
            message=message,
            retry_after_seconds=retry_after_seconds,
            cause=cause,
        )

    @classmethod
    def auth(
        cls, message: str = "Authentication/Authorization failed", cause: Optional[BaseException] = None
    ) -> "LlmError":
        return cls(kind=ErrorKind.AUTH, message=message, cause=cause)

    @classmethod
    def deserialization(
        cls, message: str = "Failed to parse provider response", cause: Optional[BaseException] = None
    ) -> "LlmError":
        return cls(kind=ErrorKind.DESERIALIZATION, message=message, cause=cause)

    @classmethod
    def invalid_request(cls, message: str = "Invalid request", cause: Optional[BaseException] = None) -> "LlmError":
        return cls(kind=ErrorKind.INVALID_REQUEST, message=message, cause=cause)

    @classmethod
    def provider_specific(
        cls, message: str, code: Optional[str] = None, cause: Optional[BaseException] = None
    ) -> "LlmError":
        return cls(kind=ErrorKind.PROVIDER_SPECIFIC, message=message, code=code, cause=cause)


__all__ = ["LlmError"]
