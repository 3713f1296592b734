"""Shared asynchronous HTTP client construction.

The factory owns exactly one ``httpx.AsyncClient`` and hands it to every
facade it creates; ``httpx.AsyncClient`` is safe for concurrent use by
simultaneous calls, and the core only ever reads from it. Timeouts derive
from :func:`get_timeout_config` so no numeric literals leak into call sites.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import TimeoutConfig, get_timeout_config


def create_async_client(
    *,
    timeout: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured with shared timeouts.

    Parameters:
        timeout: Explicit timeout configuration; defaults to the cached
            environment-derived config.
        transport: Optional custom transport (e.g. ``httpx.MockTransport``).

    The caller owns the returned client and must ``await client.aclose()``
    when done (``LlmClientFactory.aclose`` does this for factory-owned ones).
    """
    cfg = timeout or get_timeout_config()
    return httpx.AsyncClient(timeout=cfg.to_httpx(), transport=transport)


__all__ = ["create_async_client"]
