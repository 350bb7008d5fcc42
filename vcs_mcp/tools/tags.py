"""Remote tag tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class TagsInput(RepoToolInput):
    action: Literal["list", "get", "create", "delete"] = Field(..., description="Operation to perform")
    tag_name: str | None = Field(default=None, description="Tag name (get, create, delete)")
    target: str | None = Field(default=None, description="Branch or commit SHA to tag (create)")
    message: str | None = Field(default=None, description="Annotation message; omit for a lightweight tag")


async def handle(ctx: ToolContext, params: TagsInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        tags = await provider.list_tags(owner, repo, page=params.page, limit=params.limit)
        return ToolResult.ok(action, f"{len(tags)} tags found", tags)

    require(params, action, "tag_name")

    if action == "get":
        tag = await provider.get_tag(owner, repo, params.tag_name)
        return ToolResult.ok(action, f"Tag {tag.name} retrieved", tag)

    if action == "create":
        require(params, action, "target")
        tag = await provider.create_tag(owner, repo, params.tag_name, params.target, params.message or "")
        return ToolResult.ok(action, f"Tag {tag.name} created at {params.target}", tag)

    await provider.delete_tag(owner, repo, params.tag_name)
    return ToolResult.ok(action, f"Tag {params.tag_name} deleted")


TOOL = ToolSpec(
    name=ToolName.TAGS,
    description="List, get, create and delete tags of a hosted repository.",
    input_model=TagsInput,
    handler=handle,
)
