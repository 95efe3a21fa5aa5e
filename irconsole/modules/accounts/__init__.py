"""
Accounts Module - Black Box Interface

Purpose: Choose which remote credential executes a command
Interface: AccountContextResolver, AccountDirectory.load(), AccountOption
Hidden: Connection list shape, label formatting
"""

from .accounts import AccountContextResolver, AccountDirectory, AccountOption

__all__ = ["AccountContextResolver", "AccountDirectory", "AccountOption"]
