"""Base shared constants for the client layer.

Central location to avoid scattering header names, wire sentinels and default
numbers across provider modules.

# pragma: allowlist secret
"""
from __future__ import annotations

# Request headers
AUTHORIZATION_HEADER = "Authorization"
ORGANIZATION_HEADER = "OpenAI-Organization"
IDEMPOTENCY_HEADER = "Idempotency-Key"
TAGS_HEADER = "X-Request-Tags"
REQUEST_ID_HEADERS = ("x-request-id", "X-Request-Id")

# Query parameter carrying the API key for providers without bearer auth
API_KEY_QUERY_PARAM = "key"  # pragma: allowlist secret - parameter name, not a secret

# Server-push stream framing
SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"

# Tag header sanitization (characters with meaning in the k=v;k=v encoding)
TAG_PAIR_SEPARATOR = ";"
TAG_KV_SEPARATOR = "="
TAG_PAIR_SEPARATOR_REPLACEMENT = "_"
TAG_KV_SEPARATOR_REPLACEMENT = ":"

# Statuses worth another attempt on idempotent chat calls
RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})

# Default HTTP timeouts (seconds)
DEFAULT_HTTP_TIMEOUT = 60.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_STREAM_TIMEOUT = 120.0

# Missing credential message used by the factory
MISSING_API_KEY_ERROR = "{provider} API key must be provided"  # pragma: allowlist secret

__all__ = [
    "AUTHORIZATION_HEADER",
    "ORGANIZATION_HEADER",
    "IDEMPOTENCY_HEADER",
    "TAGS_HEADER",
    "REQUEST_ID_HEADERS",
    "RETRYABLE_STATUSES",
    "API_KEY_QUERY_PARAM",
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
    "TAG_PAIR_SEPARATOR",
    "TAG_KV_SEPARATOR",
    "TAG_PAIR_SEPARATOR_REPLACEMENT",
    "TAG_KV_SEPARATOR_REPLACEMENT",
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_STREAM_TIMEOUT",
    "MISSING_API_KEY_ERROR",
]
