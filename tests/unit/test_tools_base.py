"""Tests for vcs_mcp/tools/base.py and the release and tag tools."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import httpx
import pytest
import requests

from vcs_mcp.enums import MergeMethod
from vcs_mcp.git.runner import GitCommandResult
from vcs_mcp.models.domain import Release, Tag, User
from vcs_mcp.tools import dispatch
from vcs_mcp.tools.base import ToolContext, ToolResult, describe_error, git_result, to_data

# =============================================================================
# Envelope helpers
# =============================================================================


class TestToData:
    """Tests for converting domain values to JSON-ready data."""

    def test_dataclass_with_datetime(self) -> None:
        """Should flatten dataclasses and render datetimes as ISO strings."""
        release = Release(
            id=7,
            tag_name="v1.0",
            name="First",
            created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )

        data = to_data(release)

        assert data["id"] == 7
        assert data["created_at"] == "2024-05-01T12:00:00+00:00"
        assert data["published_at"] is None

    def test_nested_collections_and_enums(self) -> None:
        """Should recurse into lists and dicts and unwrap enums."""
        data = to_data({"users": [User(id=1, login="alice")], "method": MergeMethod.SQUASH})

        assert data == {
            "users": [{"id": 1, "login": "alice", "full_name": "", "email": "", "url": "", "avatar_url": ""}],
            "method": "squash",
        }

    def test_ok_envelope_json(self) -> None:
        """Should serialize the envelope without an error key."""
        payload = json.loads(ToolResult.ok("get", "Tag v1 retrieved", Tag(name="v1", sha="abc")).to_json())

        assert payload == {
            "success": True,
            "action": "get",
            "message": "Tag v1 retrieved",
            "data": {"name": "v1", "sha": "abc", "message": ""},
        }


class TestGitResult:
    """Tests for mapping git invocations to envelopes."""

    def test_success(self) -> None:
        """Should succeed on exit code 0 and carry the output."""
        result = git_result("status", GitCommandResult(["status"], "## main\n", "", 0), "Status retrieved")

        assert result.success is True
        assert result.data == {"stdout": "## main\n", "stderr": "", "exit_code": 0}

    def test_failure(self) -> None:
        """Should fail with the command and exit code in the message."""
        result = git_result("push", GitCommandResult(["push", "origin"], "", "rejected\n", 1), "Pushed")

        assert result.success is False
        assert result.message == "git push exited with code 1"
        assert result.error == "rejected"


class TestDescribeError:
    """Tests for rendering exceptions as error text."""

    def test_status_error_with_plain_body(self) -> None:
        """Should fall back to the response text when the body is not JSON."""
        request = httpx.Request("GET", "https://gitea.example.com/api/v1/repos/a/b")
        response = httpx.Response(502, text="upstream down", request=request)
        error = httpx.HTTPStatusError("bad gateway", request=request, response=response)

        assert describe_error(error) == "Bad gateway - the provider is unreachable (HTTP 502): upstream down"

    def test_unlisted_server_status(self) -> None:
        """Should describe unknown 5xx codes generically."""
        request = httpx.Request("GET", "https://gitea.example.com/")
        response = httpx.Response(507, request=request)
        error = httpx.HTTPStatusError("x", request=request, response=response)

        assert describe_error(error) == "Server error on the provider (HTTP 507)"

    def test_timeout(self) -> None:
        """Should call out timeouts."""
        assert describe_error(httpx.ReadTimeout("read timed out")).startswith("Network error - request timed out")

    def test_requests_timeout(self) -> None:
        """Should call out PyGithub transport timeouts."""
        error = requests.exceptions.ReadTimeout("read timed out")

        assert describe_error(error).startswith("Network error - request timed out")

    def test_plain_exception(self) -> None:
        """Should use the class name when there is no message."""
        assert describe_error(RuntimeError()) == "RuntimeError"


# =============================================================================
# Release and tag tools
# =============================================================================


class TestReleasesTool:
    """Tests for the releases tool."""

    @pytest.mark.asyncio
    async def test_create(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should create a release with defaults for unset flags."""
        mock_provider.create_release.return_value = Release(id=1, tag_name="v1.0", name="v1.0")

        result = await dispatch(tool_context, "releases", {"action": "create", "repo": "demo", "tag_name": "v1.0"})

        assert result.success is True
        assert result.message == "Release v1.0 created"
        mock_provider.create_release.assert_awaited_once_with(
            "alice",
            "demo",
            "v1.0",
            name=None,
            body="",
            draft=False,
            prerelease=False,
            target_commitish=None,
        )

    @pytest.mark.asyncio
    async def test_update_requires_a_field(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should refuse an update that changes nothing."""
        result = await dispatch(tool_context, "releases", {"action": "update", "repo": "demo", "release_id": 3})

        assert result.success is False
        assert "No update fields provided" in result.error
        mock_provider.update_release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_requires_id(self, tool_context: ToolContext) -> None:
        """Should name release_id when it is missing."""
        result = await dispatch(tool_context, "releases", {"action": "get", "repo": "demo"})

        assert result.success is False
        assert "release_id" in result.error


class TestTagsTool:
    """Tests for the tags tool."""

    @pytest.mark.asyncio
    async def test_create_requires_target(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should require a target for create."""
        result = await dispatch(tool_context, "tags", {"action": "create", "repo": "demo", "tag_name": "v1"})

        assert result.success is False
        assert "target" in result.error
        mock_provider.create_tag.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_lightweight(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should pass an empty message for a lightweight tag."""
        mock_provider.create_tag.return_value = Tag(name="v1", sha="abc123")

        result = await dispatch(
            tool_context, "tags", {"action": "create", "repo": "demo", "tag_name": "v1", "target": "main"}
        )

        assert result.success is True
        assert result.message == "Tag v1 created at main"
        mock_provider.create_tag.assert_awaited_once_with("alice", "demo", "v1", "main", "")

    @pytest.mark.asyncio
    async def test_delete(self, tool_context: ToolContext, mock_provider: AsyncMock) -> None:
        """Should report the deleted tag."""
        result = await dispatch(
            tool_context, "tags", {"action": "delete", "owner": "org", "repo": "demo", "tag_name": "v1"}
        )

        assert result.success is True
        assert result.message == "Tag v1 deleted"
        mock_provider.delete_tag.assert_awaited_once_with("org", "demo", "v1")
