"""
Remote Execution Gateway.

A single async round trip to an already-authenticated backend session.
There is no client-side timeout (the backend owns it) and no retry: every
action is fire-once and the user may simply trigger it again.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx

from irconsole.modules.errors import ExecutionError

logger = logging.getLogger("irconsole.gateway")


@dataclass(frozen=True)
class ExecutionOutcome:
    """Raw backend reply for one command."""

    output: str
    exit_code: Optional[int] = None


@dataclass(frozen=True)
class ExecutionResult:
    """The current content of a modal: what ran and what came back."""

    command: str
    output: str
    exit_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"command": self.command, "output": self.output, "exit_code": self.exit_code}


class ExecutionGateway(Protocol):
    """Boundary to the backend that runs commands on the remote host."""

    async def execute(self, command: str, account: Optional[str] = None) -> ExecutionOutcome:
        """Run a command. Raises ExecutionError on any failure."""
        ...

    async def list_connections(self) -> List[Dict[str, Any]]:
        """Return the configured SSH connections with their accounts."""
        ...


class HttpExecutionGateway:
    """Gateway speaking JSON over HTTP to the console backend."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: Backend root, e.g. http://127.0.0.1:9000
            token: Optional bearer token for the backend session
            client: Optional pre-built client (tests pass a MockTransport one)
        """
        self.base_url = base_url.rstrip("/")
        self.headers = {"Authorization": f"Bearer {token}"} if token else {}
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

    async def _call(self, method: str, payload: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/rpc/{method}"
        try:
            response = await self._get_client().post(url, json=payload, headers=self.headers)
        except httpx.InvalidURL as e:
            logger.error(f"Backend URL is invalid: {e}")
            raise ExecutionError(f"Invalid backend URL: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Backend call {method} failed: {e}")
            raise ExecutionError(f"Backend unreachable: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"Backend call {method} returned {response.status_code}: {message}")
            raise ExecutionError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ExecutionError(f"Invalid backend response: {e}") from e

    async def execute(self, command: str, account: Optional[str] = None) -> ExecutionOutcome:
        payload: Dict[str, Any] = {"command": command}
        if account:
            payload["username"] = account

        logger.info(f"Executing command (account: {account or 'default'}): {command[:100]}")
        data = await self._call("execute_command", payload)
        if not isinstance(data, dict):
            raise ExecutionError("Invalid backend response: expected an object")

        exit_code = data.get("exit_code")
        return ExecutionOutcome(
            output=str(data.get("output") or ""),
            exit_code=exit_code if isinstance(exit_code, int) else None,
        )

    async def list_connections(self) -> List[Dict[str, Any]]:
        data = await self._call("load_ssh_connections", {})
        if not isinstance(data, list):
            raise ExecutionError("Invalid backend response: expected a list of connections")
        return data


def _error_message(response: httpx.Response) -> str:
    """Pull a display-ready message out of a failed backend reply."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str) and body:
        return body
    return response.text or f"Backend error (HTTP {response.status_code})"
