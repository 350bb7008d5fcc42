"""Pull request tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import MergeMethod, ToolName
from vcs_mcp.exceptions import ExternalServiceError, ToolInputError
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class PullsInput(RepoToolInput):
    action: Literal["list", "get", "create", "update", "merge", "close"] = Field(
        ..., description="Operation to perform"
    )
    number: int | None = Field(default=None, ge=1, description="Pull request number")
    title: str | None = Field(default=None, description="Title (create, update)")
    body: str | None = Field(default=None, description="Description (create, update)")
    head: str | None = Field(default=None, description="Source branch (create)")
    base: str | None = Field(default=None, description="Target branch (create, update)")
    state: Literal["open", "closed", "all"] = Field(default="open", description="State filter (list)")
    merge_method: MergeMethod = Field(default=MergeMethod.MERGE, description="Merge strategy (merge)")
    merge_message: str | None = Field(default=None, description="Merge commit message (merge)")


async def handle(ctx: ToolContext, params: PullsInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        pulls = await provider.list_pull_requests(owner, repo, state=params.state, page=params.page, limit=params.limit)
        return ToolResult.ok(action, f"{len(pulls)} pull requests found", pulls)

    if action == "create":
        require(params, action, "title", "head", "base")
        pr = await provider.create_pull_request(owner, repo, params.title, params.head, params.base, params.body or "")
        return ToolResult.ok(action, f"Pull request #{pr.number} created", pr)

    require(params, action, "number")

    if action == "get":
        pr = await provider.get_pull_request(owner, repo, params.number)
        return ToolResult.ok(action, f"Pull request #{pr.number} retrieved", pr)

    if action == "update":
        if params.title is None and params.body is None and params.base is None:
            raise ToolInputError("No update fields provided: set title, body or base")
        pr = await provider.update_pull_request(
            owner,
            repo,
            params.number,
            title=params.title,
            body=params.body,
            base=params.base,
        )
        return ToolResult.ok(action, f"Pull request #{pr.number} updated", pr)

    if action == "merge":
        result = await provider.merge_pull_request(
            owner,
            repo,
            params.number,
            method=params.merge_method,
            message=params.merge_message,
        )
        if not result.merged:
            raise ExternalServiceError(f"Pull request #{params.number} was not merged: {result.message}")
        return ToolResult.ok(action, f"Pull request #{params.number} merged ({params.merge_method})", result)

    pr = await provider.update_pull_request(owner, repo, params.number, state="closed")
    return ToolResult.ok(action, f"Pull request #{pr.number} closed", pr)


TOOL = ToolSpec(
    name=ToolName.PULLS,
    description="List, get, create, update, merge and close pull requests of a hosted repository.",
    input_model=PullsInput,
    handler=handle,
)
