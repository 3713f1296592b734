"""Configuration layer: provider defaults and environment lookups.

Environment Variable Conventions
--------------------------------
OPENAI_API_KEY, GEMINI_API_KEY (alias GOOGLE_API_KEY) for credentials;
<PROVIDER>_MODEL and <PROVIDER>_API_URL for optional overrides, e.g.
OPENAI_MODEL, GEMINI_API_URL. Transport timeouts and log level are read by
``unified_llm.base.timeouts`` and ``unified_llm.base.logging``.
"""
from __future__ import annotations

from .env import (
    ENV_ALIASES,
    ENV_MAP,
    get_env_var_candidates,
    get_env_var_name,
    get_provider_settings,
    is_placeholder,
    resolve_provider_key,
)

__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "get_env_var_candidates",
    "get_env_var_name",
    "get_provider_settings",
    "is_placeholder",
    "resolve_provider_key",
]
