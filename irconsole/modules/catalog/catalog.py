"""
Command template catalog.

A Catalog maps action keys to pure builders for one entity kind. Builders
interpolate entity fields straight into shell text with no quoting: many
templates depend on raw shell features (&&, ||, pipes, subshells), so the
command-injection exposure is kept as-is and must be addressed at the
product level, not here.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from irconsole.modules.catalog.entities import EntityKind
from irconsole.modules.errors import UnknownAction

logger = logging.getLogger("irconsole.catalog")


class ActionCategory(str, Enum):
    """Menu groups an action is listed under."""

    INFO = "info"
    MANAGEMENT = "management"
    SECURITY_CHECK = "security-check"
    NETWORK_DIAGNOSTICS = "network-diagnostics"
    LOG_QUERY = "log-query"


class ActionMode(str, Enum):
    """How an action's built text is used."""

    REMOTE = "remote"  # shell command sent to the gateway
    LOCAL = "local"  # text rendered directly from the snapshot
    CLIPBOARD = "clipboard"  # value placed on the clipboard


@dataclass(frozen=True)
class ActionDescriptor:
    key: str
    label: str
    category: ActionCategory
    builder: Callable[[Any], str]
    title_template: str
    mode: ActionMode = ActionMode.REMOTE
    fields: Optional[Callable[[Any], Dict[str, Any]]] = None

    def build(self, entity) -> str:
        """Build the command (or local text) for an entity. Never does I/O."""
        return self.builder(entity)

    def title(self, entity) -> str:
        values = self.fields(entity) if self.fields else entity.model_dump()
        return self.title_template.format(**values)

    def to_dict(self) -> Dict[str, str]:
        return {
            "key": self.key,
            "label": self.label,
            "category": self.category.value,
            "mode": self.mode.value,
        }


class Catalog:
    """Action table for a single entity kind."""

    def __init__(
        self,
        kind: EntityKind,
        fields: Optional[Callable[[Any], Dict[str, Any]]] = None,
    ):
        """
        Args:
            kind: Entity kind this table serves
            fields: Optional entity -> dict used to format titles; defaults
                to the entity's own fields
        """
        self.kind = kind
        self._fields = fields
        self._actions: Dict[str, ActionDescriptor] = {}

    def action(
        self,
        key: str,
        label: str,
        category: ActionCategory,
        title: str,
        mode: ActionMode = ActionMode.REMOTE,
    ):
        """Decorator registering a builder under ``key``."""

        def register(builder: Callable[[Any], str]) -> Callable[[Any], str]:
            if key in self._actions:
                raise ValueError(f"Duplicate action '{key}' for {self.kind.value}")
            self._actions[key] = ActionDescriptor(
                key=key,
                label=label,
                category=category,
                builder=builder,
                title_template=title,
                mode=mode,
                fields=self._fields,
            )
            return builder

        return register

    def lookup(self, key: str) -> Union[ActionDescriptor, UnknownAction]:
        descriptor = self._actions.get(key)
        if descriptor is None:
            logger.warning(f"Unknown action '{key}' requested for {self.kind.value}")
            return UnknownAction(kind=self.kind.value, key=key)
        return descriptor

    def actions(self, category: Optional[ActionCategory] = None) -> List[ActionDescriptor]:
        """Actions in registration order, optionally limited to one category."""
        return [
            a for a in self._actions.values() if category is None or a.category == category
        ]

    def keys(self) -> List[str]:
        return list(self._actions)

    def __contains__(self, key: str) -> bool:
        return key in self._actions

    def __len__(self) -> int:
        return len(self._actions)
