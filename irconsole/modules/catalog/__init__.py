"""
Catalog Module - Black Box Interface

Purpose: Map (entity kind, action key) to a shell command builder
Interface: get_catalog(), CATALOGS, Catalog, ActionDescriptor, entity models
Hidden: Per-kind command templates, title formatting

Builders are pure: the same entity always yields the same string and no
I/O is performed.
"""

from typing import Dict, Union

from irconsole.modules.catalog import cron, firewall, network, process, service, startup, user
from irconsole.modules.catalog.catalog import ActionCategory, ActionDescriptor, ActionMode, Catalog
from irconsole.modules.catalog.entities import (
    ENTITY_TYPES,
    CronJob,
    DiagnosticEntity,
    EntityKind,
    FirewallRule,
    NetworkConnection,
    Process,
    Service,
    StartupItem,
    User,
)
from irconsole.modules.catalog.network import extract_ip, extract_port

CATALOGS: Dict[EntityKind, Catalog] = {
    EntityKind.PROCESS: process.catalog,
    EntityKind.NETWORK: network.catalog,
    EntityKind.SERVICE: service.catalog,
    EntityKind.USER: user.catalog,
    EntityKind.CRON: cron.catalog,
    EntityKind.FIREWALL: firewall.catalog,
    EntityKind.STARTUP: startup.catalog,
}


def get_catalog(kind: Union[EntityKind, str]) -> Catalog:
    """
    Get the action table for an entity kind.

    Raises:
        ValueError: If the kind is not known
    """
    return CATALOGS[EntityKind(kind)]


__all__ = [
    "ActionCategory",
    "ActionDescriptor",
    "ActionMode",
    "CATALOGS",
    "Catalog",
    "CronJob",
    "DiagnosticEntity",
    "ENTITY_TYPES",
    "EntityKind",
    "FirewallRule",
    "NetworkConnection",
    "Process",
    "Service",
    "StartupItem",
    "User",
    "extract_ip",
    "extract_port",
    "get_catalog",
]
