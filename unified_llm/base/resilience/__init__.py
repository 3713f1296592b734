"""Resilience helpers (retry policy and executor)."""

from .retry import NO_RETRY, RetryPolicy, execute_with_retry, retry

__all__ = ["NO_RETRY", "RetryPolicy", "execute_with_retry", "retry"]
