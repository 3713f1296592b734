"""unified_llm.config.env
======================

Centralized environment variable mapping for provider credentials and
settings.

- ``ENV_MAP`` holds the canonical provider → API key variable mapping.
- ``ENV_ALIASES`` lists every accepted variable per provider, canonical first
  (Gemini keys are accepted from ``GEMINI_API_KEY`` or ``GOOGLE_API_KEY``).
- ``<PROVIDER>_MODEL`` and ``<PROVIDER>_API_URL`` optionally override the
  built-in model and endpoint (see :func:`get_provider_settings`).

Helpers never raise on unknown providers or unset variables; callers decide
how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

SETTING_SUFFIXES: Dict[str, str] = {
    "model": "MODEL",
    "api_url": "API_URL",
}


_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """Whether ``val`` is a template value such as ``sk-changeme`` or ``test_key``."""
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(marker in lowered for marker in _PLACEHOLDER_MARKERS)


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical API key variable for ``provider`` (or ``None``)."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable API key variables for a provider, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):  # pragma: no branch - small tuples
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for ``provider`` from the process environment.

    Returns:
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


def get_provider_settings(provider: str) -> Dict[str, str]:
    """Return non-empty ``<PROVIDER>_MODEL`` / ``<PROVIDER>_API_URL`` overrides."""
    prefix = (provider or "").upper()
    out: Dict[str, str] = {}
    for field, suffix in SETTING_SUFFIXES.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val and val.strip():
            out[field] = val.strip()
    return out


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
    "get_provider_settings",
]
