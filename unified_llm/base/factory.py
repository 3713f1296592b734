"""Client factory.

Purpose
-------
Hold one shared ``httpx.AsyncClient`` plus provider credentials and build
facades on demand, injecting the API key into a copy of the provider
configuration.

Provider modules are imported lazily with ``importlib`` so importing the
factory has no side effects beyond the base package.

Timeout and fallback semantics
------------------------------
No timeouts are introduced here; the transport carries them. The factory
performs no retries or fallbacks: it returns a client or raises a clear
error (``ValueError`` for a missing key, :class:`UnknownProviderError` for an
unknown provider name).
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Optional, Tuple

import httpx

from ..config.env import get_provider_settings, resolve_provider_key
from .constants import MISSING_API_KEY_ERROR
from .http.client import create_async_client
from .interfaces import LlmClient
from .logging import get_logger, normalized_log_event


class UnknownProviderError(Exception):
    """Raised when a provider name is not registered with the factory."""


class LlmClientFactory:
    """Creates provider facades sharing one transport.

    Parameters
    ----------
    http_client:
        Shared transport. When ``None`` a client is created from the
        environment timeout config and owned (closed) by the factory.
    openai_api_key / gemini_api_key:
        Credentials injected into configs passed to the ``create_*`` methods.
    """

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "unified_llm.openai", "client": "OpenAiClient", "config": "OpenAiConfig", "label": "OpenAI"},
        "gemini": {"module": "unified_llm.gemini", "client": "GeminiClient", "config": "GeminiConfig", "label": "Gemini"},
    }

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        *,
        openai_api_key: Optional[str] = None,
        gemini_api_key: Optional[str] = None,
    ) -> None:
        self._owns_client = http_client is None
        self.http_client = http_client or create_async_client()
        self._keys: Dict[str, Optional[str]] = {"openai": openai_api_key, "gemini": gemini_api_key}
        self._settings: Dict[str, Dict[str, str]] = {}
        self._logger = get_logger("factory")

    @classmethod
    def from_env(cls, http_client: Optional[httpx.AsyncClient] = None) -> "LlmClientFactory":
        """Build a factory whose keys and optional model/URL overrides come from the environment."""
        factory = cls(
            http_client,
            openai_api_key=resolve_provider_key("openai")[0],
            gemini_api_key=resolve_provider_key("gemini")[0],
        )
        for name in cls._PROVIDERS:
            factory._settings[name] = get_provider_settings(name)
        return factory

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        return tuple(cls._PROVIDERS.keys())

    def _default_config(self, name: str, config_cls: Any) -> Any:
        settings = self._settings.get(name) or {}
        if not settings:
            return config_cls.default_config()
        fields: Dict[str, str] = {}
        if "model" in settings:
            fields["model_name" if name == "openai" else "model"] = settings["model"]
        if "api_url" in settings:
            fields["api_url"] = settings["api_url"]
        return config_cls(**fields)

    def create(self, provider: str, config: Any = None) -> LlmClient:
        """Create the facade registered under ``provider``.

        Raises
        ------
        UnknownProviderError
            If ``provider`` is not registered.
        ValueError
            If no API key is configured for it.
        """
        name = (provider or "").lower().strip()
        entry = self._PROVIDERS.get(name)
        if not entry:
            raise UnknownProviderError(f"Unknown provider '{provider}'")
        api_key = self._keys.get(name)
        if not api_key:
            raise ValueError(MISSING_API_KEY_ERROR.format(provider=entry["label"]))

        mod = import_module(entry["module"])
        client_cls = getattr(mod, entry["client"])
        base_config = config if config is not None else self._default_config(name, getattr(mod, entry["config"]))
        client = client_cls(self.http_client, base_config.with_api_key(api_key))
        normalized_log_event(
            self._logger,
            "factory.create",
            None,
            phase="start",
            provider=name,
            model=client.get_model_name(),
        )
        return client

    def create_openai_client(self, config: Any = None) -> LlmClient:
        return self.create("openai", config)

    def create_gemini_client(self, config: Any = None) -> LlmClient:
        return self.create("gemini", config)

    async def aclose(self) -> None:
        """Release the transport if this factory created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "LlmClientFactory":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["LlmClientFactory", "UnknownProviderError"]
