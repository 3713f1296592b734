"""Unit tests for the line decoder and the observing stream wrapper.

Lines are fed from in-memory async generators so every parsing mode can be
exercised without a transport.
"""
from __future__ import annotations

import json
from contextlib import aclosing

import pytest

from unified_llm.base.cancellation import CancellationToken
from unified_llm.base.errors import ErrorKind, LlmError
from unified_llm.base.logging import get_logger
from unified_llm.base.models import StreamChunk
from unified_llm.base.streaming import StreamDecoder, StreamParsingMode, observe_stream
from unified_llm.base.streaming.sse import delta_content, unwrap_line

LOGGER = get_logger("tests.streaming")


def _event(delta: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": delta}}]})


async def _lines(*items):
    for item in items:
        yield item


def _decoder(mode=StreamParsingMode.NDJSON_PER_LINE, **kw):
    return StreamDecoder(mode, logger=LOGGER, **kw)


async def _collect(aiter):
    return [item async for item in aiter]


def test_unwrap_line_variants():
    assert unwrap_line("data: {\"a\": 1}") == '{"a": 1}'  # nosec B101 - asserts are appropriate in unit tests
    assert unwrap_line("   ") is None  # nosec B101
    assert unwrap_line(": keep-alive") is None  # nosec B101
    assert unwrap_line("event: message") is None  # nosec B101
    assert unwrap_line("data:") is None  # nosec B101
    assert unwrap_line('{"raw": true}') == '{"raw": true}'  # nosec B101
    assert delta_content({"choices": [{"delta": {"content": ""}}]}) is None  # nosec B101
    assert delta_content({"choices": [{"delta": {"role": "assistant"}}]}) is None  # nosec B101
    assert delta_content([1, 2]) is None  # nosec B101


@pytest.mark.asyncio
async def test_text_mode_emits_each_delta_until_done():
    lines = _lines(_event("Hel"), "", _event("lo"), _event(" there"), "data: [DONE]", _event("ignored"))
    chunks = await _collect(_decoder().iter_text(lines))
    assert chunks == [StreamChunk("Hel"), StreamChunk("lo"), StreamChunk(" there")]  # nosec B101


@pytest.mark.asyncio
async def test_text_mode_skips_malformed_lines():
    lines = _lines(_event("a"), "data: {not json", ": comment", _event("b"))
    chunks = await _collect(_decoder().iter_text(lines))
    assert [c.content for c in chunks] == ["a", "b"]  # nosec B101


@pytest.mark.asyncio
async def test_ndjson_mode_decodes_each_line_and_keeps_going():
    lines = _lines(_event('{"n": 1}\n{"n"'), _event(": 2}\n"), _event("oops\n"), _event('{"n": 3}'), "data: [DONE]")
    chunks = await _collect(_decoder().iter_typed(lines, dict))
    assert [c.content for c in chunks] == [{"n": 1}, {"n": 2}, None, {"n": 3}]  # nosec B101
    bad = chunks[2]
    assert bad.is_error and bad.raw_content == "oops"  # nosec B101
    assert chunks[1].raw_content == '{"n": 2}'  # nosec B101


@pytest.mark.asyncio
async def test_ndjson_mode_custom_delimiter():
    lines = _lines(_event('{"n": 1}|{"n": 2}|'))
    chunks = await _collect(_decoder(delimiter="|").iter_typed(lines, dict))
    assert [c.content for c in chunks] == [{"n": 1}, {"n": 2}]  # nosec B101


@pytest.mark.asyncio
async def test_buffer_mode_decodes_once_at_end():
    lines = _lines(_event('{"items": '), _event("[1, 2"), _event(", 3]}"), "data: [DONE]")
    chunks = await _collect(_decoder(StreamParsingMode.BUFFER_AND_PARSE_FINAL).iter_typed(lines, dict))
    assert len(chunks) == 1  # nosec B101
    assert chunks[0].content == {"items": [1, 2, 3]}  # nosec B101
    assert chunks[0].error is None  # nosec B101


@pytest.mark.asyncio
async def test_buffer_mode_reports_bad_document_as_error_chunk():
    lines = _lines(_event('{"items": [1, 2'))
    chunks = await _collect(_decoder(StreamParsingMode.BUFFER_AND_PARSE_FINAL).iter_typed(lines, dict))
    assert len(chunks) == 1 and chunks[0].is_error  # nosec B101
    assert chunks[0].raw_content == '{"items": [1, 2'  # nosec B101


@pytest.mark.asyncio
async def test_buffer_mode_empty_stream_emits_nothing():
    chunks = await _collect(_decoder(StreamParsingMode.BUFFER_AND_PARSE_FINAL).iter_typed(_lines("data: [DONE]"), dict))
    assert chunks == []  # nosec B101


@pytest.mark.asyncio
async def test_single_shot_mode_has_no_line_decoder():
    with pytest.raises(ValueError):
        await _collect(_decoder(StreamParsingMode.SINGLE_SHOT).iter_typed(_lines(), dict))


def test_empty_delimiter_rejected():
    with pytest.raises(ValueError):
        _decoder(delimiter="")


@pytest.mark.asyncio
async def test_cancellation_stops_text_stream_between_lines():
    token = CancellationToken()
    seen = []
    async for chunk in _decoder().iter_text(_lines(_event("a"), _event("b"), _event("c")), cancel_token=token):
        seen.append(chunk.content)
        token.cancel("user stop")
    assert seen == ["a"]  # nosec B101


@pytest.mark.asyncio
async def test_cancellation_does_not_flush_partial_buffer():
    token = CancellationToken()
    token.cancel()
    lines = _lines(_event('{"n": 1}'))
    chunks = await _collect(_decoder(StreamParsingMode.BUFFER_AND_PARSE_FINAL).iter_typed(lines, dict, cancel_token=token))
    assert chunks == []  # nosec B101


@pytest.mark.asyncio
async def test_single_shot_typed_success_and_failures():
    decoder = _decoder(StreamParsingMode.SINGLE_SHOT)

    async def ok():
        return '{"a": 1}'

    async def not_json():
        return "nope"

    async def failing():
        raise LlmError.provider_http(500, "boom")

    [chunk] = await _collect(decoder.single_shot_typed(ok, dict))
    assert chunk.content == {"a": 1} and chunk.raw_content == '{"a": 1}'  # nosec B101

    [chunk] = await _collect(decoder.single_shot_typed(not_json, dict))
    assert chunk.content is None and chunk.raw_content == "nope"  # nosec B101
    assert chunk.error == "Error generating content: Failed to parse provider response"  # nosec B101

    [chunk] = await _collect(decoder.single_shot_typed(failing, dict))
    assert chunk.raw_content == ""  # nosec B101
    assert chunk.error == "Error generating content: Provider HTTP error: status=500"  # nosec B101


@pytest.mark.asyncio
async def test_single_shot_text_propagates_failure():
    async def failing():
        raise LlmError.auth()

    with pytest.raises(LlmError):
        await _collect(_decoder(StreamParsingMode.SINGLE_SHOT).single_shot_text(failing))


@pytest.mark.asyncio
async def test_observe_stream_classifies_plain_exceptions():
    async def source():
        yield StreamChunk("partial")
        raise ConnectionError("connection reset")

    got = []
    with pytest.raises(LlmError) as info:
        async for chunk in observe_stream(source(), logger=LOGGER):
            got.append(chunk)
    assert got == [StreamChunk("partial")]  # nosec B101
    assert info.value.kind is ErrorKind.TRANSPORT  # nosec B101
    assert info.value.message == "connection reset"  # nosec B101


@pytest.mark.asyncio
async def test_observe_stream_passes_llm_errors_through():
    err = LlmError.rate_limit(retry_after_seconds=3)

    async def source():
        raise err
        yield  # pragma: no cover - makes this an async generator

    with pytest.raises(LlmError) as info:
        await _collect(observe_stream(source(), logger=LOGGER))
    assert info.value is err  # nosec B101


@pytest.mark.asyncio
async def test_observe_stream_closes_source_on_early_exit():
    state = {"closed": False}

    async def source():
        try:
            for i in range(10):
                yield StreamChunk(str(i))
        finally:
            state["closed"] = True

    async with aclosing(observe_stream(source(), logger=LOGGER)) as stream:
        async for _ in stream:
            break
    assert state["closed"] is True  # nosec B101
