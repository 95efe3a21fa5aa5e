"""
Unit tests for the Explain Module.

Tests cover:
- Ordered delivery of streamed fragments
- Tolerance of malformed and non-data frames
- Provider request shape and authentication
- Configuration errors before any network call
- Transport failures keeping partial text
- Cancellation between frames
"""

import asyncio
import os
import sys

import httpx
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import content_frame, sse_body, stalled_stream
from irconsole.config.provider import AIProviderConfig, AISettings, StaticSettingsProvider
from irconsole.modules.errors import ConfigurationError, StreamParseError, StreamTransportError
from irconsole.modules.explain import StreamingExplanationClient, parse_frame


# =============================================================================
# Streaming
# =============================================================================


class TestStreaming:
    @pytest.mark.asyncio
    async def test_fragments_in_order(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"), content_frame("B"), "[DONE]")
        received = []

        session = await explanation_client.explain("Title", "cmd", "out", sink=received.append)

        assert received == ["A", "B"]
        assert session.accumulated_text == "AB"
        assert session.completed is True
        assert session.streaming is False

    @pytest.mark.asyncio
    async def test_frames_without_space_after_prefix(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"), content_frame("B"), "[DONE]", separator="data:")
        received = []

        await explanation_client.explain("Title", "cmd", "out", sink=received.append)

        assert received == ["A", "B"]

    @pytest.mark.asyncio
    async def test_malformed_frame_is_skipped(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"), "{not json", content_frame("B"), "[DONE]")
        received = []

        session = await explanation_client.explain("Title", "cmd", "out", sink=received.append)

        assert received == ["A", "B"]
        assert session.accumulated_text == "AB"

    @pytest.mark.asyncio
    async def test_done_ends_stream(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"), "[DONE]", content_frame("late"))
        received = []

        await explanation_client.explain("Title", "cmd", "out", sink=received.append)

        assert received == ["A"]

    @pytest.mark.asyncio
    async def test_non_data_lines_and_empty_deltas_ignored(self, explanation_client, stream_recorder):
        stream_recorder.body = (
            b": keep-alive\n\n"
            b"event: ping\n\n"
            + sse_body(
                '{"choices":[{"delta":{"role":"assistant"}}]}',
                content_frame("A"),
                '{"choices":[]}',
                "[DONE]",
            )
        )
        received = []

        await explanation_client.explain("Title", "cmd", "out", sink=received.append)

        assert received == ["A"]

    @pytest.mark.asyncio
    async def test_stream_closed_without_done(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"))

        session = await explanation_client.explain("Title", "cmd", "out")

        assert session.accumulated_text == "A"
        assert session.completed is True

    @pytest.mark.asyncio
    async def test_async_sink(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"), content_frame("B"), "[DONE]")
        received = []

        async def sink(fragment):
            received.append(fragment)

        await explanation_client.explain("Title", "cmd", "out", sink=sink)

        assert received == ["A", "B"]


# =============================================================================
# Request
# =============================================================================


class TestRequest:
    @pytest.mark.asyncio
    async def test_request_body_and_headers(self, explanation_client, stream_recorder):
        await explanation_client.explain("Process 1234 - Command line", "cat /proc/1234/cmdline", "nginx: master")

        request = stream_recorder.requests[0]
        body = stream_recorder.last_json
        assert request.method == "POST"
        assert request.url == "https://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert body["model"] == "gpt-3.5-turbo"
        assert body["stream"] is True
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 1000
        assert body["messages"][0]["role"] == "system"
        prompt = body["messages"][0]["content"]
        assert "Process 1234 - Command line" in prompt
        assert "cat /proc/1234/cmdline" in prompt
        assert "nginx: master" in prompt

    @pytest.mark.asyncio
    async def test_output_is_not_truncated(self, explanation_client, stream_recorder):
        output = "x" * 50000

        await explanation_client.explain("Title", "cmd", output)

        assert output in stream_recorder.last_json["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_keyless_provider(self, stream_recorder):
        settings = AISettings(
            current_provider="ollama",
            providers={"ollama": AIProviderConfig("Ollama", "", "llama3", "http://localhost:11434/v1")},
        )
        client = StreamingExplanationClient(
            StaticSettingsProvider(settings),
            client=httpx.AsyncClient(transport=httpx.MockTransport(stream_recorder)),
        )

        await client.explain("Title", "cmd", "out")

        assert "Authorization" not in stream_recorder.requests[0].headers


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    @pytest.mark.asyncio
    async def test_missing_key_makes_no_network_call(self, stream_recorder):
        client = StreamingExplanationClient(
            StaticSettingsProvider(AISettings()),
            client=httpx.AsyncClient(transport=httpx.MockTransport(stream_recorder)),
        )

        with pytest.raises(ConfigurationError):
            await client.explain("Title", "cmd", "out")

        assert stream_recorder.requests == []

    @pytest.mark.asyncio
    async def test_http_error_status(self, explanation_client, stream_recorder):
        stream_recorder.status_code = 401
        stream_recorder.body = b'{"error": "invalid api key"}'

        with pytest.raises(StreamTransportError) as exc_info:
            await explanation_client.explain("Title", "cmd", "out")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_connect_failure(self, explanation_client, stream_recorder):
        stream_recorder.error = httpx.ConnectError("connection refused")

        with pytest.raises(StreamTransportError):
            await explanation_client.explain("Title", "cmd", "out")

    @pytest.mark.asyncio
    async def test_mid_stream_failure_keeps_partial_text(self, explanation_client, stream_recorder):
        async def broken_stream():
            yield sse_body(content_frame("A"))
            raise httpx.ReadError("connection reset")

        stream_recorder.body = broken_stream
        received = []
        session = explanation_client.start_session("Title", "cmd", "out")

        with pytest.raises(StreamTransportError):
            await explanation_client.stream(session, sink=received.append)

        assert received == ["A"]
        assert session.accumulated_text == "A"
        assert session.error is not None
        assert session.streaming is False


# =============================================================================
# Cancellation
# =============================================================================


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_between_frames(self, explanation_client, stream_recorder):
        stream_recorder.body = sse_body(content_frame("A"), content_frame("B"), "[DONE]")
        cancel = asyncio.Event()
        received = []

        def sink(fragment):
            received.append(fragment)
            cancel.set()

        session = await explanation_client.explain("Title", "cmd", "out", sink=sink, cancel_event=cancel)

        assert received == ["A"]
        assert session.cancelled is True
        assert session.completed is False

    @pytest.mark.asyncio
    async def test_cancel_releases_stalled_stream(self, explanation_client, stream_recorder):
        stream_recorder.body = stalled_stream(content_frame("A"))
        cancel = asyncio.Event()
        first = asyncio.Event()

        def sink(fragment):
            first.set()

        task = asyncio.create_task(
            explanation_client.explain("Title", "cmd", "out", sink=sink, cancel_event=cancel)
        )
        await asyncio.wait_for(first.wait(), timeout=2)
        cancel.set()

        session = await asyncio.wait_for(task, timeout=2)

        assert session.accumulated_text == "A"
        assert session.cancelled is True
        assert session.streaming is False


# =============================================================================
# Frame Parsing
# =============================================================================


class TestParseFrame:
    def test_content(self):
        assert parse_frame(content_frame("hello")) == "hello"

    def test_no_content(self):
        assert parse_frame('{"choices":[{"delta":{}}]}') == ""
        assert parse_frame('{"id":"x"}') == ""
        assert parse_frame("[1, 2]") == ""

    def test_malformed(self):
        with pytest.raises(StreamParseError) as exc_info:
            parse_frame("{broken")

        assert exc_info.value.frame == "{broken"
