"""
Streaming Explanation Client.

Opens a streamed chat-completion request and forwards text deltas to a sink
strictly in arrival order. A frame that fails to parse is logged and skipped;
a transport failure ends the session but leaves the partial text in place.
"""

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

import httpx

from irconsole.config.provider import AIProviderConfig, SettingsProvider
from irconsole.modules.config.prompts import get_prompt
from irconsole.modules.errors import StreamParseError, StreamTransportError

logger = logging.getLogger("irconsole.explain")

DONE_MARKER = "[DONE]"

Sink = Callable[[str], Union[None, Awaitable[None]]]


@dataclass
class ExplanationSession:
    """One streamed explanation. A new request replaces it, never merges."""

    prompt: str
    provider: AIProviderConfig
    accumulated_text: str = ""
    streaming: bool = False
    completed: bool = False
    cancelled: bool = False
    error: Optional[str] = None


class StreamingExplanationClient:
    """Explains a title + command + output triple through an LLM provider."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        client: Optional[httpx.AsyncClient] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self.settings_provider = settings_provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def start_session(self, title: str, command: str, output: str) -> ExplanationSession:
        """
        Resolve the provider and build the prompt. Performs no network I/O.

        Raises:
            ConfigurationError: If no usable provider is configured
        """
        provider = self.settings_provider.get_ai_settings().active_provider()
        prompt = get_prompt(
            "explain",
            variables={"title": title, "command": command, "output": output},
        )
        return ExplanationSession(prompt=prompt, provider=provider)

    async def stream(
        self,
        session: ExplanationSession,
        sink: Optional[Sink] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExplanationSession:
        """
        Stream the explanation for a prepared session into ``sink``.

        Stops as soon as ``cancel_event`` is set, abandoning a pending read
        and closing the response.

        Raises:
            StreamTransportError: If the request fails or the stream breaks;
                ``session.accumulated_text`` keeps whatever already arrived
        """
        provider = session.provider
        body = {
            "model": provider.model,
            "messages": [{"role": "system", "content": session.prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": True,
        }
        headers = {"Content-Type": "application/json"}
        if provider.api_key:
            headers["Authorization"] = f"Bearer {provider.api_key}"

        logger.info(f"Requesting explanation from {provider.name} ({provider.model})")
        session.streaming = True
        try:
            async with self._get_client().stream(
                "POST", provider.completions_url, json=body, headers=headers
            ) as response:
                if response.status_code >= 400:
                    error_text = (await response.aread()).decode("utf-8", errors="replace")
                    logger.error(f"AI API responded {response.status_code}: {error_text[:500]}")
                    raise StreamTransportError(
                        f"AI API request failed: {response.status_code} {response.reason_phrase}",
                        status_code=response.status_code,
                    )

                lines = response.aiter_lines()
                while True:
                    line = await _next_line(lines, cancel_event)
                    if line is _CANCELLED:
                        session.cancelled = True
                        logger.debug("Explanation cancelled")
                        break
                    if line is _END:
                        # Stream closed without [DONE]; whatever arrived is the answer
                        session.completed = True
                        break
                    data = _frame_data(line)
                    if data is None:
                        continue
                    if data == DONE_MARKER:
                        session.completed = True
                        break
                    try:
                        fragment = parse_frame(data)
                    except StreamParseError as e:
                        logger.warning(str(e))
                        continue
                    if fragment:
                        session.accumulated_text += fragment
                        if sink is not None:
                            result = sink(fragment)
                            if inspect.isawaitable(result):
                                await result
        except httpx.HTTPError as e:
            session.error = f"AI stream failed: {e}"
            logger.error(session.error)
            raise StreamTransportError(session.error) from e
        except StreamTransportError as e:
            session.error = str(e)
            raise
        finally:
            session.streaming = False

        return session

    async def explain(
        self,
        title: str,
        command: str,
        output: str,
        sink: Optional[Sink] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExplanationSession:
        """Prepare a session and stream it. See start_session() and stream()."""
        session = self.start_session(title, command, output)
        return await self.stream(session, sink=sink, cancel_event=cancel_event)


_END = object()
_CANCELLED = object()


async def _read(lines: AsyncIterator[str]) -> Any:
    try:
        return await lines.__anext__()
    except StopAsyncIteration:
        return _END


async def _next_line(lines: AsyncIterator[str], cancel_event: Optional[asyncio.Event]) -> Any:
    """
    Next line of the response, ``_END`` when the stream closes, or
    ``_CANCELLED`` once ``cancel_event`` is set, even while a read is pending.
    """
    if cancel_event is None:
        return await _read(lines)
    if cancel_event.is_set():
        return _CANCELLED

    read = asyncio.ensure_future(_read(lines))
    cancelled = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({read, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancelled.cancel()
        if not read.done():
            read.cancel()
            await asyncio.wait({read})
    if read.cancelled():
        return _CANCELLED
    return read.result()


def _frame_data(line: str) -> Optional[str]:
    """Payload of a ``data:`` line, or None for anything else."""
    line = line.strip()
    if not line.startswith("data:"):
        return None
    return line[len("data:"):].strip()


def parse_frame(data: str) -> str:
    """
    Extract ``choices[0].delta.content`` from one frame payload.

    Returns "" when the frame carries no content.

    Raises:
        StreamParseError: If the payload is not valid JSON
    """
    try:
        parsed: Any = json.loads(data)
    except json.JSONDecodeError as e:
        raise StreamParseError(data, str(e)) from e

    if not isinstance(parsed, dict):
        return ""
    choices = parsed.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return ""
    content = delta.get("content")
    return content if isinstance(content, str) else ""
