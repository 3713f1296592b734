"""Per-call correlation fields attached to every structured log event."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class LogContext:
    """Who and what a log event is about.

    ``tags`` holds the already-encoded ``X-Request-Tags`` value. ``extra``
    entries are merged into the event next to the named fields.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    idempotency_key: Optional[str] = None
    tags: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into event fields, leaving out anything that is ``None``."""
        merged = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        merged.update((key, value) for key, value in (self.extra or {}).items() if value is not None)
        return {key: value for key, value in merged.items() if value is not None}


__all__ = ["LogContext"]
