from __future__ import annotations

from unified_llm.base.timeouts import get_timeout_config, reset_timeout_config
from unified_llm.config.env import (
    get_env_var_candidates,
    get_env_var_name,
    get_provider_settings,
    is_placeholder,
    resolve_provider_key,
)


def test_placeholder_detection():
    for val in ("placeholder", "CHANGEME", "sk-example-123", "test_key"):
        assert is_placeholder(val)  # nosec B101 - asserts are appropriate in unit tests
    assert not is_placeholder("sk-real")  # nosec B101
    assert not is_placeholder(None)  # nosec B101


def test_env_names_and_aliases():
    assert get_env_var_name("OpenAI") == "OPENAI_API_KEY"  # nosec B101
    assert get_env_var_name("unknown") is None  # nosec B101
    assert list(get_env_var_candidates("gemini")) == ["GEMINI_API_KEY", "GOOGLE_API_KEY"]  # nosec B101


def test_resolve_prefers_canonical_then_alias(clean_env):
    assert resolve_provider_key("gemini") == (None, None)  # nosec B101
    clean_env.setenv("GOOGLE_API_KEY", "g-alias")
    assert resolve_provider_key("gemini") == ("g-alias", "GOOGLE_API_KEY")  # nosec B101
    clean_env.setenv("GEMINI_API_KEY", "g-canonical")
    assert resolve_provider_key("gemini") == ("g-canonical", "GEMINI_API_KEY")  # nosec B101


def test_resolve_skips_placeholders(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "changeme")
    assert resolve_provider_key("openai") == (None, None)  # nosec B101


def test_provider_settings_overrides(clean_env):
    assert get_provider_settings("openai") == {}  # nosec B101
    clean_env.setenv("OPENAI_MODEL", " gpt-4o-mini ")
    clean_env.setenv("OPENAI_API_URL", "   ")
    assert get_provider_settings("openai") == {"model": "gpt-4o-mini"}  # nosec B101


def test_timeouts_read_from_env(clean_env):
    clean_env.setenv("UNIFIED_LLM_HTTP_TIMEOUT_SECONDS", "5")
    clean_env.setenv("UNIFIED_LLM_CONNECT_TIMEOUT_SECONDS", "-1")
    clean_env.setenv("UNIFIED_LLM_STREAM_TIMEOUT_SECONDS", "abc")
    reset_timeout_config()
    cfg = get_timeout_config()
    assert cfg.http_timeout_seconds == 5.0  # nosec B101
    assert cfg.connect_timeout_seconds == 10.0  # nosec B101
    assert cfg.stream_timeout_seconds == 120.0  # nosec B101
    assert get_timeout_config() is cfg  # nosec B101
