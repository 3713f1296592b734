"""Transport invoker: issues provider HTTP calls over a shared ``httpx.AsyncClient``.

Responsibilities:
- POST JSON payloads with caller-built headers/query parameters.
- Engage the retry executor only for idempotent calls. The status check runs
  inside the retried operation; only transport failures and the statuses in
  ``RETRYABLE_STATUSES`` get another attempt, so a 400 or 401 fails at once.
- Classify non-2xx responses into ``LlmError`` (429 becomes RATE_LIMIT with
  ``Retry-After``, anything else PROVIDER_HTTP).
- Parse success bodies as JSON objects and report token usage best-effort.
- Open long-lived streaming responses whose lifetime is bound to an async
  context, so closing the consumer closes the connection.

Transport exceptions (timeouts, connection errors) propagate unchanged; the
facades classify them with ``classify_exception``.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional

import httpx

from ..constants import REQUEST_ID_HEADERS, RETRYABLE_STATUSES
from ..errors import ErrorKind, LlmError, classify_http_response
from ..logging import LogContext, normalized_log_event
from ..resilience.retry import NO_RETRY, RetryPolicy, execute_with_retry
from ..tokens.extraction import UsageExtractor, report_usage
from ..models import UsageSink

ResponseCheck = Callable[[httpx.Response], None]
RetryPredicate = Callable[[BaseException], bool]


def request_id_of(response: httpx.Response) -> Optional[str]:
    """Return the provider request id header, if any."""
    for name in REQUEST_ID_HEADERS:
        if value := response.headers.get(name):
            return value
    return None


def is_retryable(exc: BaseException) -> bool:
    """Whether a failed chat attempt may be repeated.

    Transport failures always qualify. Classified errors qualify only for
    rate limiting and the transient statuses.
    """
    if not isinstance(exc, LlmError):
        return True
    if exc.kind is ErrorKind.RATE_LIMIT:
        return True
    return exc.kind is ErrorKind.PROVIDER_HTTP and exc.status_code in RETRYABLE_STATUSES


class HttpInvoker:
    """Provider-agnostic HTTP call executor.

    Parameters:
        client: Shared ``httpx.AsyncClient``; treated as read-only.
        provider: Provider slug used in log events.
        provider_label: Display name used in rate-limit messages.
        logger: Structured logger for the owning facade.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        provider: str,
        provider_label: str,
        logger: logging.Logger,
    ) -> None:
        self._client = client
        self._provider = provider
        self._provider_label = provider_label
        self._logger = logger

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    def raise_for_status(self, response: httpx.Response, ctx: Optional[LogContext] = None) -> None:
        """Raise a classified ``LlmError`` when ``response`` is not 2xx.

        The body must already be loaded (``aread`` for streamed responses).
        """
        if response.is_success:
            return
        body = response.text
        normalized_log_event(
            self._logger,
            "http.error_response",
            ctx,
            phase="response",
            level=logging.ERROR,
            error_code=str(response.status_code),
            status=response.status_code,
            body=body,
            request_id=request_id_of(response),
        )
        raise classify_http_response(
            response.status_code,
            response.headers,
            body,
            provider_label=self._provider_label,
        )

    async def send(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
        *,
        params: Optional[Mapping[str, str]] = None,
        idempotent: bool = False,
        retry_policy: RetryPolicy = NO_RETRY,
        check_response: Optional[ResponseCheck] = None,
        retry_if: Optional[RetryPredicate] = None,
        ctx: Optional[LogContext] = None,
    ) -> httpx.Response:
        """POST ``payload`` and return the raw response.

        ``check_response`` runs inside every attempt; raising from it marks
        the attempt as failed. Retries happen only when ``idempotent`` and, when
        given, ``retry_if`` accepts the failure.
        """

        async def _attempt() -> httpx.Response:
            response = await self._client.post(url, json=dict(payload), headers=dict(headers), params=params)
            if check_response is not None:
                check_response(response)
            return response

        def _log_attempt(*, attempt: int, max_attempts: int, delay: float | None, error: BaseException | None) -> None:
            if error is None:
                return
            normalized_log_event(
                self._logger,
                "retry.attempt",
                ctx,
                phase="attempt",
                attempt=attempt,
                level=logging.WARNING,
                error_code=type(error).__name__,
                max_attempts=max_attempts,
                delay_seconds=delay,
                error=str(error),
            )

        if idempotent:
            return await execute_with_retry(
                _attempt, retry_policy, attempt_logger=_log_attempt, retry_if=retry_if
            )
        return await _attempt()

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
        *,
        params: Optional[Mapping[str, str]] = None,
        idempotent: bool = False,
        retry_policy: RetryPolicy = NO_RETRY,
        usage_extractor: Optional[UsageExtractor] = None,
        usage_sink: Optional[UsageSink] = None,
        ctx: Optional[LogContext] = None,
    ) -> Dict[str, Any]:
        """POST ``payload`` and return the parsed JSON object body.

        Raises:
            LlmError: For non-2xx responses or a non-object body.
            json.JSONDecodeError: When the body is not JSON.
            httpx.HTTPError: For transport failures.
        """
        t0 = time.perf_counter()
        response = await self.send(
            url,
            payload,
            headers,
            params=params,
            idempotent=idempotent,
            retry_policy=retry_policy,
            check_response=lambda r: self.raise_for_status(r, ctx),
            retry_if=is_retryable,
            ctx=ctx,
        )
        data = response.json()
        if not isinstance(data, dict):
            raise LlmError.deserialization("Expected a JSON object in provider response")
        normalized_log_event(
            self._logger,
            "http.response",
            ctx,
            phase="response",
            level=logging.DEBUG,
            emitted=True,
            status=response.status_code,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
            request_id=request_id_of(response),
        )
        if usage_extractor is not None and usage_sink is not None:
            report_usage(data, usage_extractor, usage_sink, logger=self._logger, ctx=ctx)
        return data

    @asynccontextmanager
    async def open_stream(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
        *,
        params: Optional[Mapping[str, str]] = None,
        timeout: Optional[httpx.Timeout] = None,
        ctx: Optional[LogContext] = None,
    ) -> AsyncIterator[httpx.Response]:
        """Open a streaming POST; yields the response once its status is OK.

        Leaving the context (normally, by exception, or by task cancellation)
        closes the response and releases the connection.
        """
        extra: Dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout
        async with self._client.stream(
            "POST", url, json=dict(payload), headers=dict(headers), params=params, **extra
        ) as response:
            if not response.is_success:
                await response.aread()
                self.raise_for_status(response, ctx)
            yield response


__all__ = ["HttpInvoker", "is_retryable", "request_id_of"]
