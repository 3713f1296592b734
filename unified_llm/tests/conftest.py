"""Shared fixtures for the unified_llm test-suite.

Keeps provider tests hermetic: credentials and overrides from the developer's
shell never leak into factory/env tests, and retry policies never sleep.
"""
from __future__ import annotations

import logging
from typing import List

import pytest

from unified_llm.base.logging import get_logger
from unified_llm.base.resilience import RetryPolicy
from unified_llm.base.timeouts import reset_timeout_config

_ENV_VARS = (
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_API_URL",
    "GEMINI_MODEL",
    "GEMINI_API_URL",
    "UNIFIED_LLM_HTTP_TIMEOUT_SECONDS",
    "UNIFIED_LLM_CONNECT_TIMEOUT_SECONDS",
    "UNIFIED_LLM_STREAM_TIMEOUT_SECONDS",
)


@pytest.fixture()
def clean_env(monkeypatch):
    """Remove provider variables so each test sets exactly what it needs."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_timeout_config()
    yield monkeypatch
    reset_timeout_config()


@pytest.fixture()
def fast_retry() -> RetryPolicy:
    """Three attempts with no waiting between them."""
    return RetryPolicy(max_attempts=3, initial_delay=0.0, max_delay=0.0, jitter=0.0)


@pytest.fixture()
def log_records():
    """Capture records reaching the shared ``unified_llm`` logger (it does not propagate to root)."""
    records: List[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = records.append  # type: ignore[assignment]
    base = get_logger()
    base.addHandler(handler)
    try:
        yield records
    finally:
        base.removeHandler(handler)
