"""Remote branch management tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class BranchesInput(RepoToolInput):
    action: Literal["list", "get", "create", "delete"] = Field(..., description="Operation to perform")
    branch_name: str | None = Field(default=None, description="Branch name (get, create, delete)")
    from_branch: str | None = Field(default=None, description="Branch to start from (create)")


async def handle(ctx: ToolContext, params: BranchesInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        branches = await provider.list_branches(owner, repo, page=params.page, limit=params.limit)
        return ToolResult.ok(action, f"{len(branches)} branches found", branches)

    require(params, action, "branch_name")

    if action == "get":
        branch = await provider.get_branch(owner, repo, params.branch_name)
        return ToolResult.ok(action, f"Branch {branch.name} retrieved", branch)

    if action == "create":
        require(params, action, "from_branch")
        branch = await provider.create_branch(owner, repo, params.branch_name, params.from_branch)
        return ToolResult.ok(action, f"Branch {branch.name} created from {params.from_branch}", branch)

    await provider.delete_branch(owner, repo, params.branch_name)
    return ToolResult.ok(action, f"Branch {params.branch_name} deleted")


TOOL = ToolSpec(
    name=ToolName.BRANCHES,
    description="List, get, create and delete branches of a hosted repository.",
    input_model=BranchesInput,
    handler=handle,
)
