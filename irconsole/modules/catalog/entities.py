"""
Diagnostic entity snapshots.

An entity is captured once when its menu is opened and never refreshed;
if the system changes underneath, the snapshot simply goes stale.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    """Kinds of inspectable objects, one controller each."""

    PROCESS = "process"
    NETWORK = "network"
    SERVICE = "service"
    USER = "user"
    CRON = "cron"
    FIREWALL = "firewall"
    STARTUP = "startup"


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)


class Process(_Snapshot):
    kind: Literal["process"] = "process"
    pid: str = Field(..., min_length=1, description="Process ID")


class NetworkConnection(_Snapshot):
    kind: Literal["network"] = "network"
    protocol: str = ""
    local: str = Field(..., description="Local address, e.g. 10.0.0.5:22")
    foreign: str = Field(..., description="Foreign address, e.g. 1.2.3.4:51234")
    state: str = ""
    pid: str = ""
    process: str = ""


class Service(_Snapshot):
    kind: Literal["service"] = "service"
    name: str = Field(..., min_length=1)


class User(_Snapshot):
    kind: Literal["user"] = "user"
    username: str = Field(..., min_length=1)


class CronJob(_Snapshot):
    kind: Literal["cron"] = "cron"
    user: str
    schedule: str
    command: str


class FirewallRule(_Snapshot):
    kind: Literal["firewall"] = "firewall"
    chain: str
    target: str = ""
    protocol: str = ""
    source: str = ""
    destination: str = ""
    options: str = ""


class StartupItem(_Snapshot):
    kind: Literal["startup"] = "startup"
    name: str
    type: str = Field(..., description="systemd, rc.local, cron or init.d")
    path: str = ""
    command: str = ""


DiagnosticEntity = Annotated[
    Union[Process, NetworkConnection, Service, User, CronJob, FirewallRule, StartupItem],
    Field(discriminator="kind"),
]

ENTITY_TYPES = {
    EntityKind.PROCESS: Process,
    EntityKind.NETWORK: NetworkConnection,
    EntityKind.SERVICE: Service,
    EntityKind.USER: User,
    EntityKind.CRON: CronJob,
    EntityKind.FIREWALL: FirewallRule,
    EntityKind.STARTUP: StartupItem,
}
