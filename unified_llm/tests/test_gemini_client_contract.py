"""Contract tests for the Gemini facade against a mocked generateContent API."""
from __future__ import annotations

import json

import httpx
import pytest
import respx

from unified_llm.base.errors import ErrorKind, LlmError
from unified_llm.base.models import GenerationRequest
from unified_llm.gemini import GeminiClient, GeminiConfig

URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash-latest:generateContent"
KEYED_URL = URL + "?key=g-key"


def _candidate(text, **extra):
    body = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    body.update(extra)
    return httpx.Response(200, json=body)


def _client(http, **kw) -> GeminiClient:
    return GeminiClient(http, GeminiConfig(**kw).with_api_key("g-key"))


@pytest.mark.asyncio
@respx.mock
async def test_generate_sends_key_as_query_parameter():
    usage = []
    route = respx.post(KEYED_URL).mock(
        return_value=_candidate(
            "Hi there",
            usageMetadata={"promptTokenCount": 5, "candidatesTokenCount": 2, "totalTokenCount": 7},
        )
    )
    async with httpx.AsyncClient() as http:
        client = _client(http, usage_sink=usage.append)
        result = await client.generate_text(GenerationRequest("Say hi", system_message="Be kind"))

    assert result.value == "Hi there"  # nosec B101 - asserts are appropriate in unit tests
    sent = route.calls.last.request
    assert sent.url.params["key"] == "g-key"  # nosec B101
    assert "Authorization" not in sent.headers  # nosec B101
    body = json.loads(sent.content)
    assert body["contents"][0]["parts"][0]["text"] == "Be kind\n\nSay hi"  # nosec B101
    assert [u.total_tokens for u in usage] == [7]  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_generate_typed_strips_code_fences():
    respx.post(KEYED_URL).mock(return_value=_candidate('```json\n{"ok": true, "n": 2}\n```'))
    async with httpx.AsyncClient() as http:
        result = await _client(http).generate(GenerationRequest("status"), dict)
    assert result.value == {"ok": True, "n": 2}  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_error_object_is_provider_specific():
    body = {"error": {"code": 503, "message": "The model is overloaded"}}
    respx.post(KEYED_URL).mock(return_value=httpx.Response(200, json=body))
    async with httpx.AsyncClient() as http:
        result = await _client(http).generate_text(GenerationRequest("hi"))
    assert result.error.kind is ErrorKind.PROVIDER_SPECIFIC  # nosec B101
    assert result.error.message == "Gemini API error: 503 - The model is overloaded"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_rate_limit_names_gemini():
    respx.post(KEYED_URL).mock(return_value=httpx.Response(429, text="quota"))
    async with httpx.AsyncClient() as http:
        result = await _client(http).generate_text(GenerationRequest("hi"))
    assert result.error.kind is ErrorKind.RATE_LIMIT  # nosec B101
    assert result.error.retry_after_seconds is None  # nosec B101
    assert result.error.message == "Rate limited by Gemini"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_idempotent_call_retries(fast_retry):
    route = respx.post(KEYED_URL).mock(
        side_effect=[httpx.ReadTimeout("slow"), _candidate("second time lucky")]
    )
    async with httpx.AsyncClient() as http:
        client = _client(http, retry_policy=fast_retry)
        result = await client.generate_text(GenerationRequest("hi", idempotency_key="g-1"))
    assert result.value == "second time lucky"  # nosec B101
    assert route.call_count == 2  # nosec B101
    assert route.calls.last.request.headers["Idempotency-Key"] == "g-1"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_emits_single_chunk():
    route = respx.post(KEYED_URL).mock(return_value=_candidate("all at once"))
    async with httpx.AsyncClient() as http:
        chunks = [c.content async for c in _client(http).stream(GenerationRequest("hi"))]
    assert chunks == ["all at once"]  # nosec B101
    assert route.call_count == 1  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_failure_raises_classified_error():
    respx.post(KEYED_URL).mock(return_value=httpx.Response(500, text="boom"))
    async with httpx.AsyncClient() as http:
        with pytest.raises(LlmError) as info:
            async for _ in _client(http).stream(GenerationRequest("hi")):
                pass
    assert info.value.kind is ErrorKind.PROVIDER_HTTP  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_typed_failure_becomes_error_chunk():
    respx.post(KEYED_URL).mock(return_value=httpx.Response(500, text="boom"))
    async with httpx.AsyncClient() as http:
        chunks = [c async for c in _client(http).stream_typed(GenerationRequest("hi"), dict)]
    assert len(chunks) == 1  # nosec B101
    assert chunks[0].content is None  # nosec B101
    assert chunks[0].error == "Error generating content: Provider HTTP error: status=500"  # nosec B101


@pytest.mark.asyncio
@respx.mock
async def test_stream_typed_success():
    respx.post(KEYED_URL).mock(return_value=_candidate('{"answer": 42}'))
    async with httpx.AsyncClient() as http:
        chunks = [c async for c in _client(http).stream_typed(GenerationRequest("hi"), dict)]
    assert [c.content for c in chunks] == [{"answer": 42}]  # nosec B101
    assert chunks[0].raw_content == '{"answer": 42}'  # nosec B101
