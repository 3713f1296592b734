"""Caller-held switch that stops an in-flight stream.

Stream decoders check the token before each line. After ``cancel`` the stream
reads nothing more from the transport and the HTTP response is closed as the
generator unwinds.
"""

from __future__ import annotations

from typing import List, Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """Cancellation flag with an optional parent.

    Cancelling a token cancels every token derived from it through ``child``
    or ``parent=``; the first reason given wins. Tokens belong to a single
    event loop and are not locked.
    """

    def __init__(self, *, parent: Optional["CancellationToken"] = None) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Flip the token; repeat calls keep the original reason."""
        if self._cancelled:
            return
        self._cancelled, self._reason = True, reason
        for child in tuple(self._children):
            child.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Attach ``token`` below this one; it is cancelled at once if this one already is."""
        self._children.append(token)
        if self._cancelled:
            token.cancel(self._reason)
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        state = f"cancelled, reason={self._reason!r}" if self._cancelled else "active"
        return f"CancellationToken({state}, children={len(self._children)})"


__all__ = ["CancellationToken"]
