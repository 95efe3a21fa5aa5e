"""
API Module - Black Box Interface

Purpose: HTTP request and response models
Interface: AccountSelectionRequest, CatalogResponse, AccountsResponse
Hidden: Field validation

The API layer only orchestrates; all logic is delegated to the controllers.
"""

from .models import AccountInfo, AccountSelectionRequest, AccountsResponse, ActionInfo, CatalogResponse

__all__ = [
    "AccountInfo",
    "AccountSelectionRequest",
    "AccountsResponse",
    "ActionInfo",
    "CatalogResponse",
]
