"""Commit history tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class CommitsInput(RepoToolInput):
    action: Literal["list", "get"] = Field(..., description="Operation to perform")
    branch: str | None = Field(default=None, description="Branch to list from; defaults to the default branch (list)")
    sha: str | None = Field(default=None, description="Commit SHA (get)")


async def handle(ctx: ToolContext, params: CommitsInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        commits = await provider.list_commits(owner, repo, branch=params.branch, page=params.page, limit=params.limit)
        return ToolResult.ok(action, f"{len(commits)} commits found", commits)

    require(params, action, "sha")
    commit = await provider.get_commit(owner, repo, params.sha)
    return ToolResult.ok(action, f"Commit {commit.sha[:12]} retrieved", commit)


TOOL = ToolSpec(
    name=ToolName.COMMITS,
    description="List the commit history of a branch or get one commit of a hosted repository.",
    input_model=CommitsInput,
    handler=handle,
)
