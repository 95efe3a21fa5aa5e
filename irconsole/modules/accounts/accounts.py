"""
Account selection for remote execution.

The resolver is owned by exactly one controller; it is never shared across
entity kinds. It is read when an action is clicked, not when the menu is
opened, so a dropdown change made in between is honored.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from irconsole.modules.errors import ExecutionError
from irconsole.modules.gateway import ExecutionGateway

logger = logging.getLogger("irconsole.accounts")


class AccountContextResolver:
    """Holds the chosen account; empty means the connection's default."""

    def __init__(self):
        self._selected: Optional[str] = None

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    def select(self, username: Optional[str]) -> None:
        self._selected = username or None

    def reset(self) -> None:
        self._selected = None

    def resolve(self) -> Optional[str]:
        """Account to pass to the gateway, or None for the default."""
        return self._selected


@dataclass(frozen=True)
class AccountOption:
    username: str
    description: Optional[str] = None
    is_default: bool = False

    @property
    def label(self) -> str:
        label = self.username
        if self.description:
            label += f" ({self.description})"
        if self.is_default:
            label += " [default]"
        return label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "description": self.description,
            "is_default": self.is_default,
            "label": self.label,
        }


class AccountDirectory:
    """Loads selectable accounts from the backend's SSH connection list."""

    def __init__(self, gateway: ExecutionGateway):
        self.gateway = gateway

    async def load(self) -> List[AccountOption]:
        """
        Get the accounts of the first configured connection.

        Only connection index 0 is read, whichever host is active. A failed
        load leaves just the default entry, so it returns an empty list.
        """
        try:
            connections = await self.gateway.list_connections()
        except ExecutionError as e:
            logger.error(f"Failed to load accounts: {e}")
            return []

        if not connections:
            return []

        accounts = connections[0].get("accounts") or []
        options = []
        for account in accounts:
            if not isinstance(account, dict) or not account.get("username"):
                continue
            options.append(
                AccountOption(
                    username=account["username"],
                    description=account.get("description") or None,
                    is_default=bool(account.get("is_default", False)),
                )
            )
        return options
