"""Tests for vcs_mcp/tools/registry.py - validation, provider resolution and envelopes."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
import requests
from github import GithubException

from vcs_mcp.enums import MergeMethod, ToolName
from vcs_mcp.models.domain import Branch, MergeResult, Repository
from vcs_mcp.providers.factory import ProviderFactory
from vcs_mcp.providers.gitea_rest import GiteaRestProvider
from vcs_mcp.tools import TOOLS, TOOLS_BY_NAME, ToolContext, dispatch


def _repository(name: str = "app") -> Repository:
    return Repository(id=1, name=name, full_name=f"alice/{name}", owner="alice")


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    """Tests for the tool table."""

    def test_every_tool_registered(self) -> None:
        """Should publish one tool per ToolName."""
        assert {tool.name for tool in TOOLS} == set(ToolName)
        assert "branch-protection" in TOOLS_BY_NAME

    def test_schemas_require_action(self) -> None:
        """Should require the action field in every input schema."""
        for tool in TOOLS:
            schema = tool.input_schema()
            assert "action" in schema["required"], tool.name
            assert schema["properties"]["action"]["enum"]

    def test_only_git_local_and_sync_skip_provider_resolution(self) -> None:
        """Should resolve providers for everything but the git tools."""
        skipping = {tool.name for tool in TOOLS if not tool.uses_provider}
        assert skipping == {ToolName.GIT_LOCAL, ToolName.GIT_SYNC}


# =============================================================================
# Validation
# =============================================================================


class TestDispatchValidation:
    """Tests for argument validation."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self, tool_context: ToolContext) -> None:
        """Should return a failure envelope for an unknown tool."""
        result = await dispatch(tool_context, "wiki", {"action": "list"})

        assert result.success is False
        assert result.message == "Unknown tool: wiki"

    @pytest.mark.asyncio
    async def test_validation_names_every_field(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should list each invalid field in the error."""
        result = await dispatch(tool_context, "issues", {"action": "explode", "page": 0, "limit": 500})

        assert result.success is False
        assert result.message == "issues explode failed"
        assert "action:" in result.error
        assert "page:" in result.error
        assert "limit:" in result.error
        assert result.error.count("; ") == 2
        mock_provider.get_current_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_action(self, tool_context: ToolContext) -> None:
        """Should report a missing action."""
        result = await dispatch(tool_context, "tags", {})

        assert result.success is False
        assert result.action == "unknown"
        assert result.error.startswith("action:")

    @pytest.mark.asyncio
    async def test_action_specific_requirement(self, tool_context: ToolContext) -> None:
        """Should name fields an action needs but the schema leaves optional."""
        result = await dispatch(tool_context, "branches", {"action": "create", "repo": "app", "branch_name": "x"})

        assert result.success is False
        assert result.error == "Missing required field(s) for action 'create': from_branch"


# =============================================================================
# Provider resolution and auto-detection
# =============================================================================


class TestDispatchProviders:
    """Tests for provider resolution and owner/username auto-detection."""

    @pytest.mark.asyncio
    async def test_repositories_list_resolves_username_first(
        self, tool_context: ToolContext, mock_provider: AsyncMock
    ) -> None:
        """Should look up the current user before listing their repositories."""
        mock_provider.list_repositories.return_value = [_repository("app"), _repository("lib")]

        result = await dispatch(tool_context, "repositories", {"action": "list", "provider": "gitea"})

        assert result.success is True
        assert [call[0] for call in mock_provider.method_calls] == ["get_current_user", "list_repositories"]
        mock_provider.list_repositories.assert_awaited_once_with(username="alice", page=1, limit=30)
        assert result.data["total"] == 2
        assert result.data["repositories"][0]["full_name"] == "alice/app"

    @pytest.mark.asyncio
    async def test_unknown_provider(self, tool_context: ToolContext) -> None:
        """Should fail with the list of available providers."""
        result = await dispatch(tool_context, "repositories", {"action": "get", "provider": "nope", "repo": "x"})

        assert result.success is False
        assert result.error == "Provider 'nope' not found. Available providers: gitea"

    @pytest.mark.asyncio
    async def test_no_default_provider(self) -> None:
        """Should fail when no provider is configured."""
        ctx = ToolContext(factory=ProviderFactory())

        result = await dispatch(ctx, "issues", {"action": "list", "owner": "a", "repo": "b"})

        assert result.success is False
        assert result.error == "No default provider configured"

    @pytest.mark.asyncio
    async def test_named_provider_is_used(
        self, tool_context: ToolContext, mock_provider: AsyncMock, provider_builder
    ) -> None:
        """Should route the call to the named provider."""
        github = provider_builder(login="octocat")
        github.get_branch.return_value = Branch(name="main", sha="abc")
        tool_context.factory.register("github", github)

        result = await dispatch(
            tool_context, "branches", {"action": "get", "provider": "github", "repo": "r", "branch_name": "main"}
        )

        assert result.success is True
        github.get_branch.assert_awaited_once_with("octocat", "r", "main")
        mock_provider.get_branch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_auto_detection_failure(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should report an auto-detection failure without calling the handler."""
        mock_provider.get_current_user.side_effect = httpx.ConnectError("unreachable")

        result = await dispatch(tool_context, "tags", {"action": "list", "repo": "app"})

        assert result.success is False
        assert "Owner is required for action 'list'" in result.error
        mock_provider.list_tags.assert_not_awaited()


# =============================================================================
# Error envelopes
# =============================================================================


class TestDispatchErrors:
    """Tests for conversion of provider failures."""

    @pytest.mark.asyncio
    async def test_http_status_error(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should describe HTTP status failures readably."""
        request = httpx.Request("GET", "https://gitea.example.com/api/v1/repos/alice/x")
        response = httpx.Response(404, json={"message": "repo does not exist"}, request=request)
        mock_provider.get_repository.side_effect = httpx.HTTPStatusError("404", request=request, response=response)

        result = await dispatch(tool_context, "repositories", {"action": "get", "repo": "x"})

        assert result.success is False
        assert result.message == "repositories get failed"
        assert result.error.startswith("Not found")
        assert "(HTTP 404)" in result.error
        assert "repo does not exist" in result.error

    @pytest.mark.asyncio
    async def test_network_error(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should report network errors as such."""
        mock_provider.list_releases.side_effect = httpx.ConnectError("connection refused")

        result = await dispatch(tool_context, "releases", {"action": "list", "owner": "o", "repo": "r"})

        assert result.error.startswith("Network error - no response received")

    @pytest.mark.asyncio
    async def test_github_exception(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should describe PyGithub failures with their status."""
        mock_provider.merge_pull_request.side_effect = GithubException(405, {"message": "Pull Request is not mergeable"})

        result = await dispatch(tool_context, "pulls", {"action": "merge", "owner": "o", "repo": "r", "number": 4})

        assert result.success is False
        assert "(HTTP 405)" in result.error
        assert "not mergeable" in result.error

    @pytest.mark.asyncio
    async def test_requests_connection_error(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should report PyGithub transport failures as network errors."""
        mock_provider.get_current_user.side_effect = requests.exceptions.ConnectionError("Connection refused")

        result = await dispatch(tool_context, "users", {"action": "current"})

        assert result.success is False
        assert result.message == "users current failed"
        assert result.error.startswith("Network error - no response received")

    @pytest.mark.asyncio
    async def test_non_json_response(self) -> None:
        """Should wrap a non-JSON body from Gitea instead of raising."""
        provider = GiteaRestProvider(base_url="https://gitea.example.com", token="t")
        provider._pool._client = httpx.AsyncClient(
            base_url=provider._pool.base_url,
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, text="<html>Sign in</html>", headers={"content-type": "text/html"})
            ),
        )
        factory = ProviderFactory()
        factory.register("gitea", provider)

        result = await dispatch(ToolContext(factory=factory), "repositories", {"action": "list", "username": "bob"})

        assert result.success is False
        assert result.message == "repositories list failed"
        assert "not JSON" in result.error
        assert "(HTTP 200)" in result.error
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_unexpected_exception(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should still return an envelope for exceptions of any other type."""
        mock_provider.list_tags.side_effect = RuntimeError("boom")

        result = await dispatch(tool_context, "tags", {"action": "list", "owner": "o", "repo": "r"})

        assert result.success is False
        assert result.message == "tags list failed"
        assert result.error == "Unexpected error: boom"

    @pytest.mark.asyncio
    async def test_envelope_json_omits_empty_fields(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should omit data on failure and error on success."""
        mock_provider.delete_tag.return_value = None

        result = await dispatch(tool_context, "tags", {"action": "delete", "owner": "o", "repo": "r", "tag_name": "v1"})
        payload = json.loads(result.to_json())

        assert payload == {"success": True, "action": "delete", "message": "Tag v1 deleted"}


# =============================================================================
# Handlers
# =============================================================================


class TestHandlers:
    """Spot checks of individual handlers through dispatch."""

    @pytest.mark.asyncio
    async def test_repositories_update_requires_a_field(self, tool_context: ToolContext) -> None:
        """Should refuse an update with nothing to change."""
        result = await dispatch(tool_context, "repositories", {"action": "update", "owner": "o", "repo": "r"})

        assert result.success is False
        assert result.error.startswith("No update fields provided")

    @pytest.mark.asyncio
    async def test_repositories_search_requires_query(self, tool_context: ToolContext) -> None:
        """Should require query for search."""
        result = await dispatch(tool_context, "repositories", {"action": "search"})

        assert result.error == "Missing required field(s) for action 'search': query"

    @pytest.mark.asyncio
    async def test_pull_merge_passes_method(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should pass the merge method to the provider."""
        mock_provider.merge_pull_request.return_value = MergeResult(merged=True, message="done", sha="abc")

        result = await dispatch(
            tool_context,
            "pulls",
            {"action": "merge", "owner": "o", "repo": "r", "number": 7, "merge_method": "squash"},
        )

        assert result.success is True
        args, kwargs = mock_provider.merge_pull_request.await_args
        assert args == ("o", "r", 7)
        assert kwargs["method"] == MergeMethod.SQUASH
        assert result.message == "Pull request #7 merged (squash)"

    @pytest.mark.asyncio
    async def test_pull_merge_not_merged(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should fail when the provider reports the merge did not happen."""
        mock_provider.merge_pull_request.return_value = MergeResult(merged=False, message="Head branch was modified")

        result = await dispatch(tool_context, "pulls", {"action": "merge", "owner": "o", "repo": "r", "number": 7})

        assert result.success is False
        assert result.error == "Pull request #7 was not merged: Head branch was modified"

    @pytest.mark.asyncio
    async def test_issue_close(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should close an issue by updating its state."""
        from vcs_mcp.models.domain import Issue, IssueState

        mock_provider.update_issue.return_value = Issue(
            id=1, number=5, title="Bug", body="", state=IssueState.CLOSED
        )

        result = await dispatch(tool_context, "issues", {"action": "close", "owner": "o", "repo": "r", "number": 5})

        assert result.success is True
        assert result.data["state"] == "closed"
        assert mock_provider.update_issue.await_args.kwargs["state"] == "closed"

    @pytest.mark.asyncio
    async def test_webhook_create_defaults(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should default events to push and active to True."""
        from vcs_mcp.models.domain import Webhook

        mock_provider.create_webhook.return_value = Webhook(id=9, url="https://ci.example.com/hook", events=["push"])

        result = await dispatch(
            tool_context,
            "webhooks",
            {"action": "create", "owner": "o", "repo": "r", "url": "https://ci.example.com/hook"},
        )

        assert result.success is True
        mock_provider.create_webhook.assert_awaited_once_with(
            "o",
            "r",
            "https://ci.example.com/hook",
            ["push"],
            content_type="json",
            secret=None,
            active=True,
        )

    @pytest.mark.asyncio
    async def test_branch_protection_update_passes_only_given(
        self, tool_context: ToolContext, mock_provider: AsyncMock
    ) -> None:
        """Should pass unset settings through as None."""
        from vcs_mcp.models.domain import BranchProtection

        mock_provider.update_branch_protection.return_value = BranchProtection(branch_name="main", required_approvals=2)

        result = await dispatch(
            tool_context,
            "branch-protection",
            {"action": "update", "owner": "o", "repo": "r", "branch_name": "main", "required_approvals": 2},
        )

        assert result.success is True
        kwargs = mock_provider.update_branch_protection.await_args.kwargs
        assert kwargs["required_approvals"] == 2
        assert kwargs["enforce_admins"] is None

    @pytest.mark.asyncio
    async def test_users_search(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should search users with the given limit."""
        mock_provider.search_users.return_value = []

        result = await dispatch(tool_context, "users", {"action": "search", "query": "ali", "limit": 5})

        assert result.success is True
        assert result.message == "0 users found"
        mock_provider.search_users.assert_awaited_once_with("ali", limit=5)
