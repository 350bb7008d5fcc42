"""Issue tracking tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class IssuesInput(RepoToolInput):
    action: Literal["list", "get", "create", "update", "close", "comment"] = Field(
        ..., description="Operation to perform"
    )
    number: int | None = Field(default=None, ge=1, description="Issue number (get, update, close, comment)")
    title: str | None = Field(default=None, description="Issue title (create, update)")
    body: str | None = Field(default=None, description="Issue body or comment text")
    state: Literal["open", "closed", "all"] = Field(default="open", description="State filter (list)")
    new_state: Literal["open", "closed"] | None = Field(default=None, description="New state (update)")
    labels: list[str] | None = Field(default=None, description="Label filter (list)")


async def handle(ctx: ToolContext, params: IssuesInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        issues = await provider.list_issues(
            owner,
            repo,
            state=params.state,
            labels=params.labels,
            page=params.page,
            limit=params.limit,
        )
        return ToolResult.ok(action, f"{len(issues)} issues found", issues)

    if action == "create":
        require(params, action, "title")
        issue = await provider.create_issue(owner, repo, params.title, params.body or "")
        return ToolResult.ok(action, f"Issue #{issue.number} created", issue)

    require(params, action, "number")

    if action == "get":
        issue = await provider.get_issue(owner, repo, params.number)
        return ToolResult.ok(action, f"Issue #{issue.number} retrieved", issue)

    if action == "update":
        if params.title is None and params.body is None and params.new_state is None:
            raise ToolInputError("No update fields provided: set title, body or new_state")
        issue = await provider.update_issue(
            owner,
            repo,
            params.number,
            title=params.title,
            body=params.body,
            state=params.new_state,
        )
        return ToolResult.ok(action, f"Issue #{issue.number} updated", issue)

    if action == "close":
        issue = await provider.update_issue(owner, repo, params.number, state="closed")
        return ToolResult.ok(action, f"Issue #{issue.number} closed", issue)

    require(params, action, "body")
    comment = await provider.add_comment(owner, repo, params.number, params.body)
    return ToolResult.ok(action, f"Comment added to issue #{params.number}", comment)


TOOL = ToolSpec(
    name=ToolName.ISSUES,
    description="List, get, create, update, close and comment on issues of a hosted repository.",
    input_model=IssuesInput,
    handler=handle,
)
