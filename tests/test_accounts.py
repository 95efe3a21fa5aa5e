"""
Unit tests for the Accounts Module.

Tests cover:
- AccountContextResolver selection and reset
- AccountOption labels
- AccountDirectory loading from the first connection only
"""

import os
import sys
from unittest.mock import AsyncMock

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irconsole.modules.accounts import AccountContextResolver, AccountDirectory, AccountOption
from irconsole.modules.errors import ExecutionError


class TestAccountContextResolver:
    def test_defaults_to_connection_account(self):
        resolver = AccountContextResolver()

        assert resolver.selected is None
        assert resolver.resolve() is None

    def test_select_and_reset(self):
        resolver = AccountContextResolver()

        resolver.select("alice")
        assert resolver.resolve() == "alice"

        resolver.reset()
        assert resolver.resolve() is None

    def test_empty_selection_means_default(self):
        resolver = AccountContextResolver()
        resolver.select("alice")

        resolver.select("")

        assert resolver.resolve() is None

    def test_resolvers_are_independent(self):
        first, second = AccountContextResolver(), AccountContextResolver()

        first.select("alice")

        assert second.resolve() is None


class TestAccountOption:
    def test_plain_label(self):
        assert AccountOption(username="alice").label == "alice"

    def test_full_label(self):
        option = AccountOption(username="root", description="admin", is_default=True)

        assert option.label == "root (admin) [default]"
        assert option.to_dict()["label"] == "root (admin) [default]"


class TestAccountDirectory:
    @pytest.mark.asyncio
    async def test_reads_only_first_connection(self, mock_gateway):
        options = await AccountDirectory(mock_gateway).load()

        assert [o.username for o in options] == ["root", "alice"]
        assert options[0].is_default is True
        assert options[0].description == "admin"
        assert "postgres" not in [o.username for o in options]

    @pytest.mark.asyncio
    async def test_no_connections(self):
        gateway = AsyncMock()
        gateway.list_connections = AsyncMock(return_value=[])

        assert await AccountDirectory(gateway).load() == []

    @pytest.mark.asyncio
    async def test_load_failure_returns_empty(self):
        gateway = AsyncMock()
        gateway.list_connections = AsyncMock(side_effect=ExecutionError("SSH session not connected"))

        assert await AccountDirectory(gateway).load() == []

    @pytest.mark.asyncio
    async def test_skips_entries_without_username(self):
        gateway = AsyncMock()
        gateway.list_connections = AsyncMock(
            return_value=[{"accounts": [{"description": "broken"}, {"username": "bob"}]}]
        )

        options = await AccountDirectory(gateway).load()

        assert [o.username for o in options] == ["bob"]
