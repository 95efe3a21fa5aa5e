"""
Shared pytest fixtures for irconsole tests.

This module provides common fixtures including:
- A mocked execution gateway with a canned connection list
- StreamRecorder: httpx MockTransport handler serving canned SSE frames
- Ready-made AppContext and controllers
"""

import asyncio
import json
import os
import sys
from typing import Any, Callable, List, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irconsole.config.provider import AIProviderConfig, AISettings, StaticSettingsProvider
from irconsole.modules.catalog import EntityKind
from irconsole.modules.controller import AppContext, EntityController
from irconsole.modules.explain import StreamingExplanationClient
from irconsole.modules.gateway import ExecutionOutcome


# =============================================================================
# SSE Frame Helpers
# =============================================================================


def content_frame(text: str) -> str:
    """One chat-completion delta frame payload."""
    return json.dumps({"choices": [{"delta": {"content": text}}]})


def sse_body(*payloads: str, separator: str = "data: ") -> bytes:
    """Encode payloads as `data: ...` frames separated by blank lines."""
    return "".join(f"{separator}{payload}\n\n" for payload in payloads).encode("utf-8")


def stalled_stream(*payloads: str) -> Callable[[], Any]:
    """Body factory that sends the given frames and then never sends another byte."""

    async def body():
        yield sse_body(*payloads)
        await asyncio.Event().wait()

    return body


class StreamRecorder:
    """
    MockTransport handler that records requests and replies with SSE frames.

    Usage:
        def test_stream(stream_recorder, explanation_client):
            stream_recorder.body = sse_body(content_frame("A"), "[DONE]")
            ...
            assert len(stream_recorder.requests) == 1
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Union[bytes, Callable[[], Any]] = sse_body("[DONE]")
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        content = self.body() if callable(self.body) else self.body
        return httpx.Response(
            self.status_code,
            headers={"content-type": "text/event-stream"},
            content=content,
        )

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


# =============================================================================
# Settings and Clients
# =============================================================================


@pytest.fixture
def ai_settings():
    """AI settings with a keyed OpenAI-compatible provider."""
    return AISettings(
        current_provider="openai",
        providers={
            "openai": AIProviderConfig(
                name="OpenAI",
                api_key="sk-test",
                model="gpt-3.5-turbo",
                base_url="https://llm.test/v1",
            )
        },
    )


@pytest.fixture
def stream_recorder():
    return StreamRecorder()


@pytest.fixture
def explanation_client(ai_settings, stream_recorder):
    """Explanation client whose HTTP traffic goes to the stream recorder."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(stream_recorder))
    return StreamingExplanationClient(StaticSettingsProvider(ai_settings), client=http_client)


# =============================================================================
# Gateway and Controllers
# =============================================================================


@pytest.fixture
def connections():
    return [
        {
            "name": "web-01",
            "accounts": [
                {"username": "root", "description": "admin", "is_default": True},
                {"username": "alice", "is_default": False},
            ],
        },
        {"name": "db-01", "accounts": [{"username": "postgres", "is_default": True}]},
    ]


@pytest.fixture
def mock_gateway(connections):
    """Gateway mock that answers every command with fixed output."""
    gateway = AsyncMock()
    gateway.execute = AsyncMock(return_value=ExecutionOutcome(output="bash -l \n", exit_code=0))
    gateway.list_connections = AsyncMock(return_value=connections)
    return gateway


@pytest.fixture
def clipboard():
    return MagicMock()


@pytest.fixture
def app_context(mock_gateway, explanation_client):
    return AppContext(gateway=mock_gateway, explanation_client=explanation_client)


@pytest.fixture
def process_controller(app_context):
    return EntityController(EntityKind.PROCESS, app_context)


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
