"""
Error taxonomy shared by all irconsole modules.

Every error is caught at the controller boundary and rendered inline as
plain text; none of these are meant to reach a process-level handler.
"""

from dataclasses import dataclass
from typing import Optional


class ConsoleError(Exception):
    """Base class for console errors."""


class ExecutionError(ConsoleError):
    """Remote execution failed (transport loss, backend error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ConsoleError):
    """AI provider settings are missing or invalid."""


class StreamParseError(ConsoleError):
    """A single stream frame could not be parsed. Never fatal."""

    def __init__(self, frame: str, reason: str):
        super().__init__(f"Unparseable frame ({reason}): {frame[:200]}")
        self.frame = frame
        self.reason = reason


class StreamTransportError(ConsoleError):
    """The explanation stream failed. Fatal to the current session only."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class UnknownAction:
    """Catalog lookup result for an action key the kind does not offer."""

    kind: str
    key: str

    @property
    def message(self) -> str:
        return f"Unknown action: {self.key} (for {self.kind})"
