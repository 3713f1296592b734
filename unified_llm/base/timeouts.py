"""Unified timeout configuration for the shared HTTP transport.

Centralizes the timeout values used when the factory creates its
``httpx.AsyncClient``. Values are read from the environment once and cached;
tests may call :func:`reset_timeout_config` after changing variables.

Supported environment variables (all optional, positive floats):
    UNIFIED_LLM_HTTP_TIMEOUT_SECONDS     overall read/write/pool timeout
    UNIFIED_LLM_CONNECT_TIMEOUT_SECONDS  connection establishment timeout
    UNIFIED_LLM_STREAM_TIMEOUT_SECONDS   idle read timeout while streaming
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

from .constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_HTTP_TIMEOUT, DEFAULT_STREAM_TIMEOUT


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds)."""

    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT
    stream_timeout_seconds: float = DEFAULT_STREAM_TIMEOUT

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds)

    def to_httpx_stream(self) -> httpx.Timeout:
        return httpx.Timeout(self.stream_timeout_seconds, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default`` otherwise."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603 - documented module cache
    if _CACHED is None:
        _CACHED = TimeoutConfig(
            http_timeout_seconds=_parse_env_float("UNIFIED_LLM_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT),
            connect_timeout_seconds=_parse_env_float("UNIFIED_LLM_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT),
            stream_timeout_seconds=_parse_env_float("UNIFIED_LLM_STREAM_TIMEOUT_SECONDS", DEFAULT_STREAM_TIMEOUT),
        )
    return _CACHED


def reset_timeout_config() -> None:
    """Drop the cached config so the next lookup re-reads the environment."""
    global _CACHED  # noqa: PLW0603
    _CACHED = None


__all__ = ["TimeoutConfig", "get_timeout_config", "reset_timeout_config"]
