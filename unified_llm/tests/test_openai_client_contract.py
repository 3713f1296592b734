"""Contract tests for the OpenAI facade against a mocked chat completions API.

The transport is mocked with ``respx`` so retry, status classification,
streaming and typed decoding run through the real ``httpx`` stack.
"""
from __future__ import annotations

import json
from contextlib import aclosing

import httpx
import pytest
import respx
from pydantic import BaseModel

from unified_llm.base.cancellation import CancellationToken
from unified_llm.base.errors import ErrorKind, LlmError
from unified_llm.base.models import GenerationRequest
from unified_llm.base.streaming import StreamParsingMode
from unified_llm.openai import OpenAiClient, OpenAiConfig, ResponseFormat

URL = "https://api.openai.com/v1/chat/completions"


class Person(BaseModel):
    name: str
    age: int


def _completion(content, **extra):
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    body.update(extra)
    return httpx.Response(200, json=body)


def _sse(*deltas: str) -> httpx.Response:
    events = "".join(
        "data: " + json.dumps({"choices": [{"delta": {"content": d}}]}) + "\n\n" for d in deltas
    )
    return httpx.Response(
        200,
        content=(events + "data: [DONE]\n\n").encode(),
        headers={"Content-Type": "text/event-stream"},
    )


def _config(**kw) -> OpenAiConfig:
    kw.setdefault("response_format", ResponseFormat.TEXT)
    return OpenAiConfig(**kw).with_api_key("sk-test")


@pytest.mark.asyncio
@respx.mock
async def test_generate_text_success_and_wire_shape():
    usage = []
    route = respx.post(URL).mock(
        return_value=_completion(
            "Hello world", usage={"prompt_tokens": 4, "completion_tokens": 2, "total_tokens": 6}
        )
    )
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(organization="org-1", usage_sink=usage.append))
        request = GenerationRequest("Say hello", system_message="Be terse", tags={"team": "core"})
        result = await client.generate_text(request)

    assert result.ok and result.value == "Hello world"  # nosec B101 - asserts are appropriate in unit tests
    sent = route.calls.last.request
    assert sent.headers["Authorization"] == "Bearer sk-test"  # nosec B101
    assert sent.headers["OpenAI-Organization"] == "org-1"  # nosec B101
    assert sent.headers["X-Request-Tags"] == "team=core"  # nosec B101
    assert "Idempotency-Key" not in sent.headers  # nosec B101
    body = json.loads(sent.content)
    assert body["model"] == "gpt-4o-2024-08-06"  # nosec B101
    assert body["messages"][0] == {"role": "system", "content": "Be terse"}  # nosec B101
    assert body["stream"] is False  # nosec B101
    assert [u.total_tokens for u in usage] == [6]  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_generate_typed_target():
    respx.post(URL).mock(return_value=_completion('{"name": "Ada", "age": 36}'))
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config())
        result = await client.generate(GenerationRequest("who?"), Person)
    assert result.value == Person(name="Ada", age=36)  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_generate_typed_mismatch_is_deserialization_failure():
    respx.post(URL).mock(return_value=_completion('{"name": "Ada"}'))
    async with httpx.AsyncClient() as http:
        result = await OpenAiClient(http, _config()).generate(GenerationRequest("who?"), Person)
    assert result.error.kind is ErrorKind.DESERIALIZATION  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_idempotent_request_retries_transport_failure(fast_retry):
    route = respx.post(URL).mock(
        side_effect=[httpx.ConnectTimeout("timed out"), _completion("OK after retry")]
    )
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(retry_policy=fast_retry))
        result = await client.generate_text(GenerationRequest("hi", idempotency_key="req-1"))

    assert result.value == "OK after retry"  # nosec B101
    assert route.call_count == 2  # nosec B101
    assert all(c.request.headers["Idempotency-Key"] == "req-1" for c in route.calls)  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_request_without_key_is_sent_once(fast_retry):
    route = respx.post(URL).mock(
        side_effect=[httpx.ConnectTimeout("timed out"), _completion("never reached")]
    )
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(retry_policy=fast_retry))
        result = await client.generate_text(GenerationRequest("hi"))

    assert route.call_count == 1  # nosec B101
    assert result.error.kind is ErrorKind.TRANSPORT  # nosec B101
    assert result.error.message == "Request timed out"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_idempotent_request_retries_server_errors(fast_retry):
    route = respx.post(URL).mock(
        side_effect=[httpx.Response(503, text="busy"), _completion("recovered")]
    )
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(retry_policy=fast_retry))
        result = await client.generate_text(GenerationRequest("hi", idempotency_key="req-2"))
    assert result.value == "recovered"  # nosec B101
    assert route.call_count == 2  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_idempotent_request_does_not_retry_client_errors(fast_retry):
    route = respx.post(URL).mock(
        side_effect=[httpx.Response(400, text="bad request"), _completion("never reached")]
    )
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(retry_policy=fast_retry))
        result = await client.generate_text(GenerationRequest("hi", idempotency_key="req-3"))
    assert route.call_count == 1  # nosec B101
    assert result.error.kind is ErrorKind.PROVIDER_HTTP  # nosec B101
    assert result.error.status_code == 400  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_idempotent_request_retries_rate_limit(fast_retry):
    route = respx.post(URL).mock(
        side_effect=[httpx.Response(429, headers={"Retry-After": "1"}), _completion("after wait")]
    )
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(retry_policy=fast_retry))
        result = await client.generate_text(GenerationRequest("hi", idempotency_key="req-4"))
    assert result.value == "after wait"  # nosec B101
    assert route.call_count == 2  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_rate_limit_carries_retry_after():
    respx.post(URL).mock(return_value=httpx.Response(429, headers={"Retry-After": "120"}, text="slow down"))
    async with httpx.AsyncClient() as http:
        result = await OpenAiClient(http, _config()).generate_text(GenerationRequest("hi"))
    assert result.error.kind is ErrorKind.RATE_LIMIT  # nosec B101
    assert result.error.retry_after_seconds == 120  # nosec B101
    assert result.error.message == "Rate limited by OpenAI"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_other_status_is_provider_http_with_body():
    respx.post(URL).mock(return_value=httpx.Response(500, text='{"error": "internal"}'))
    async with httpx.AsyncClient() as http:
        result = await OpenAiClient(http, _config()).generate_text(GenerationRequest("hi"))
    assert result.error.kind is ErrorKind.PROVIDER_HTTP  # nosec B101
    assert result.error.status_code == 500  # nosec B101
    assert result.error.body == '{"error": "internal"}'  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_error_object_in_success_body_is_provider_specific():
    body = {"error": {"type": "server_error", "code": "overloaded", "message": "Try again later"}}
    respx.post(URL).mock(return_value=httpx.Response(200, json=body))
    async with httpx.AsyncClient() as http:
        result = await OpenAiClient(http, _config()).generate_text(GenerationRequest("hi"))
    assert result.error.kind is ErrorKind.PROVIDER_SPECIFIC  # nosec B101
    assert result.error.message == "OpenAI API error: server_error (overloaded) - Try again later"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_non_json_body_is_deserialization_failure():
    respx.post(URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))
    async with httpx.AsyncClient() as http:
        result = await OpenAiClient(http, _config()).generate_text(GenerationRequest("hi"))
    assert result.error.kind is ErrorKind.DESERIALIZATION  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_yields_deltas_in_order():
    route = respx.post(URL).mock(return_value=_sse("Hel", "lo", " world"))
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config())
        chunks = [c.content async for c in client.stream(GenerationRequest("greet"))]
    assert chunks == ["Hel", "lo", " world"]  # nosec B101
    assert json.loads(route.calls.last.request.content)["stream"] is True  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_bad_status_fails_whole_sequence():
    respx.post(URL).mock(return_value=httpx.Response(401, text="bad key"))
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config())
        with pytest.raises(LlmError) as info:
            async for _ in client.stream(GenerationRequest("greet")):
                pass
    assert info.value.kind is ErrorKind.PROVIDER_HTTP  # nosec B101
    assert info.value.status_code == 401  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_with_cancelled_token_emits_nothing():
    respx.post(URL).mock(return_value=_sse("a", "b"))
    token = CancellationToken()
    token.cancel("not needed")
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config())
        chunks = [c async for c in client.stream(GenerationRequest("greet"), cancel_token=token)]
    assert chunks == []  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_typed_ndjson_keeps_going_after_bad_line():
    respx.post(URL).mock(return_value=_sse('{"name": "Ada", "age": 36}\n{"name": ', '"Alan", "age": 41}\n', "junk\n"))
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config())
        chunks = [c async for c in client.stream_typed(GenerationRequest("people"), Person)]
    assert [c.content for c in chunks[:2]] == [Person(name="Ada", age=36), Person(name="Alan", age=41)]  # nosec B101
    assert len(chunks) == 3 and chunks[2].is_error  # nosec B101
    assert chunks[2].raw_content == "junk"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_typed_buffer_mode_single_result():
    respx.post(URL).mock(return_value=_sse('{"name": "Grace",', ' "age": 85}'))
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(stream_parsing_mode=StreamParsingMode.BUFFER_AND_PARSE_FINAL))
        chunks = [c async for c in client.stream_typed(GenerationRequest("person"), Person)]
    assert len(chunks) == 1  # nosec B101
    assert chunks[0].content == Person(name="Grace", age=85)  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_typed_single_shot_uses_regular_call():
    route = respx.post(URL).mock(return_value=_completion('{"name": "Ada", "age": 36}'))
    async with httpx.AsyncClient() as http:
        client = OpenAiClient(http, _config(stream_parsing_mode=StreamParsingMode.SINGLE_SHOT))
        chunks = [c async for c in client.stream_typed(GenerationRequest("person"), Person)]
    assert [c.content for c in chunks] == [Person(name="Ada", age=36)]  # nosec B101
    assert json.loads(route.calls.last.request.content)["stream"] is False  # nosec B101


class _TrackedBody(httpx.AsyncByteStream):
    """Response body that records how much was read and whether it was closed."""

    def __init__(self, events):
        self._events = events
        self.sent = 0
        self.closed = False

    async def __aiter__(self):
        for event in self._events:
            self.sent += 1
            yield event

    async def aclose(self) -> None:
        self.closed = True


@pytest.mark.asyncio
async def test_stopping_early_closes_response_body():
    events = [
        ("data: " + json.dumps({"choices": [{"delta": {"content": d}}]}) + "\n\n").encode()
        for d in ("first", "second", "third")
    ]
    body = _TrackedBody(events + [b"data: [DONE]\n\n"])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=body, headers={"Content-Type": "text/event-stream"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = OpenAiClient(http, _config())
        async with aclosing(client.stream(GenerationRequest("greet"))) as stream:
            async for chunk in stream:
                first = chunk.content
                break

    assert first == "first"  # nosec B101
    assert body.closed  # nosec B101
    assert body.sent == 1  # nosec B101
