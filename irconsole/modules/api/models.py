"""
irconsole HTTP data models.

Request and response bodies of the console API. Entity snapshots themselves
live in the catalog module.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# Request Models (API Input)


class AccountSelectionRequest(BaseModel):
    """Select the account used for the next action; null means default."""

    username: Optional[str] = Field(None, description="Account username, or null for the default")


# Response Models (API Output)


class ActionInfo(BaseModel):
    key: str
    label: str
    category: str
    mode: str


class CatalogResponse(BaseModel):
    kind: str
    actions: List[ActionInfo]


class AccountInfo(BaseModel):
    username: str
    description: Optional[str] = None
    is_default: bool = False
    label: str


class AccountsResponse(BaseModel):
    accounts: List[AccountInfo]
