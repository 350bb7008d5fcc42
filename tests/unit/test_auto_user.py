"""Tests for vcs_mcp/tools/auto_user.py - owner/username auto-detection."""

from unittest.mock import AsyncMock

import httpx
import pytest

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import AutoUserDetectionError
from vcs_mcp.tools.auto_user import AUTO_USER_RULES, apply_auto_user


class TestAutoUserRules:
    """Tests for the rule table."""

    def test_rules_cover_provider_tools(self) -> None:
        """Should have a rule for every provider-backed tool except git ones."""
        assert set(AUTO_USER_RULES) == set(ToolName) - {ToolName.GIT_LOCAL, ToolName.GIT_SYNC}

    def test_repositories_rule(self) -> None:
        """Should fill owner for single-repo actions and username for list."""
        rule = AUTO_USER_RULES[ToolName.REPOSITORIES]

        assert rule.owner_actions == frozenset({"get", "update", "delete", "fork"})
        assert rule.username_actions == frozenset({"list"})

    def test_files_and_commits_rules(self) -> None:
        """Should treat every files and commits action as repository-scoped."""
        assert AUTO_USER_RULES[ToolName.FILES].owner_actions == frozenset({"get", "list", "create", "update", "delete"})
        assert AUTO_USER_RULES[ToolName.COMMITS].owner_actions == frozenset({"list", "get"})
        assert not AUTO_USER_RULES[ToolName.FILES].username_actions

    def test_rules_are_read_only(self) -> None:
        """Should not allow the table to be modified."""
        with pytest.raises(TypeError):
            AUTO_USER_RULES[ToolName.GIT_LOCAL] = AUTO_USER_RULES[ToolName.TAGS]  # type: ignore[index]


class TestApplyAutoUser:
    """Tests for apply_auto_user."""

    @pytest.mark.asyncio
    async def test_fills_owner(self, mock_provider: AsyncMock) -> None:
        """Should fill a missing owner with the current login."""
        result = await apply_auto_user(ToolName.ISSUES, "get", {"repo": "app", "number": 3}, mock_provider)

        assert result == {"repo": "app", "number": 3, "owner": "alice"}
        mock_provider.get_current_user.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_keeps_explicit_owner(self, mock_provider: AsyncMock) -> None:
        """Should not look up the user when owner is given."""
        result = await apply_auto_user(ToolName.ISSUES, "get", {"owner": "bob", "repo": "app"}, mock_provider)

        assert result["owner"] == "bob"
        mock_provider.get_current_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_does_not_mutate_input(self, mock_provider: AsyncMock) -> None:
        """Should return a new mapping."""
        params = {"repo": "app"}

        await apply_auto_user(ToolName.BRANCHES, "list", params, mock_provider)

        assert params == {"repo": "app"}

    @pytest.mark.asyncio
    async def test_files_list_gets_owner(self, mock_provider: AsyncMock) -> None:
        """Should fill owner rather than username for a files listing."""
        result = await apply_auto_user(ToolName.FILES, "list", {"repo": "app"}, mock_provider)

        assert result == {"repo": "app", "owner": "alice"}
        mock_provider.get_current_user.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repositories_list_fills_username(self, mock_provider: AsyncMock) -> None:
        """Should fill username (not owner) for repositories list."""
        result = await apply_auto_user(ToolName.REPOSITORIES, "list", {}, mock_provider)

        assert result == {"username": "alice"}
        mock_provider.get_current_user.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_with_owner_only_does_not_add_username(self, mock_provider: AsyncMock) -> None:
        """Should fill only owner for a list action that uses owner."""
        result = await apply_auto_user(ToolName.PULLS, "list", {"repo": "app"}, mock_provider)

        assert result == {"repo": "app", "owner": "alice"}
        assert mock_provider.get_current_user.await_count == 1

    @pytest.mark.asyncio
    async def test_users_get_fills_username(self, mock_provider: AsyncMock) -> None:
        """Should default users get to the authenticated account."""
        result = await apply_auto_user(ToolName.USERS, "get", {}, mock_provider)

        assert result == {"username": "alice"}

    @pytest.mark.asyncio
    async def test_action_outside_rule_untouched(self, mock_provider: AsyncMock) -> None:
        """Should leave actions without a rule entry unchanged."""
        result = await apply_auto_user(ToolName.REPOSITORIES, "create", {"name": "new"}, mock_provider)

        assert result == {"name": "new"}
        mock_provider.get_current_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tool_without_rule_untouched(self, mock_provider: AsyncMock) -> None:
        """Should leave tools with no rule unchanged."""
        result = await apply_auto_user(ToolName.GIT_LOCAL, "status", {"working_dir": "."}, mock_provider)

        assert result == {"working_dir": "."}
        mock_provider.get_current_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_is_not_cached(self, mock_provider: AsyncMock) -> None:
        """Should query the current user on every call."""
        await apply_auto_user(ToolName.TAGS, "list", {"repo": "app"}, mock_provider)
        await apply_auto_user(ToolName.TAGS, "list", {"repo": "app"}, mock_provider)

        assert mock_provider.get_current_user.await_count == 2

    @pytest.mark.asyncio
    async def test_lookup_failure(self, mock_provider: AsyncMock) -> None:
        """Should wrap the lookup failure, naming the field and action."""
        mock_provider.get_current_user.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(AutoUserDetectionError) as exc_info:
            await apply_auto_user(ToolName.RELEASES, "get", {"repo": "app"}, mock_provider)

        error = exc_info.value
        assert error.field == "owner"
        assert error.action == "get"
        assert error.message.startswith(
            "Owner is required for action 'get' and the current user could not be auto-detected"
        )
        assert "connection refused" in error.message
        mock_provider.get_current_user.assert_awaited_once()
