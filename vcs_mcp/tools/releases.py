"""Release management tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class ReleasesInput(RepoToolInput):
    action: Literal["list", "get", "create", "update", "delete"] = Field(..., description="Operation to perform")
    release_id: int | None = Field(default=None, ge=1, description="Release ID (get, update, delete)")
    tag_name: str | None = Field(default=None, description="Tag of the release (create, update)")
    name: str | None = Field(default=None, description="Release title (create, update)")
    body: str | None = Field(default=None, description="Release notes (create, update)")
    draft: bool | None = Field(default=None, description="Mark as draft")
    prerelease: bool | None = Field(default=None, description="Mark as pre-release")
    target_commitish: str | None = Field(
        default=None,
        description="Branch or commit to tag when the tag does not exist yet (create)",
    )


async def handle(ctx: ToolContext, params: ReleasesInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        releases = await provider.list_releases(owner, repo, page=params.page, limit=params.limit)
        return ToolResult.ok(action, f"{len(releases)} releases found", releases)

    if action == "create":
        require(params, action, "tag_name")
        release = await provider.create_release(
            owner,
            repo,
            params.tag_name,
            name=params.name,
            body=params.body or "",
            draft=bool(params.draft),
            prerelease=bool(params.prerelease),
            target_commitish=params.target_commitish,
        )
        return ToolResult.ok(action, f"Release {release.tag_name} created", release)

    require(params, action, "release_id")

    if action == "get":
        release = await provider.get_release(owner, repo, params.release_id)
        return ToolResult.ok(action, f"Release {release.tag_name} retrieved", release)

    if action == "update":
        changes = {
            "tag_name": params.tag_name,
            "name": params.name,
            "body": params.body,
            "draft": params.draft,
            "prerelease": params.prerelease,
        }
        if all(value is None for value in changes.values()):
            raise ToolInputError("No update fields provided: set tag_name, name, body, draft or prerelease")
        release = await provider.update_release(owner, repo, params.release_id, **changes)
        return ToolResult.ok(action, f"Release {release.tag_name} updated", release)

    await provider.delete_release(owner, repo, params.release_id)
    return ToolResult.ok(action, f"Release {params.release_id} deleted")


TOOL = ToolSpec(
    name=ToolName.RELEASES,
    description="List, get, create, update and delete releases of a hosted repository.",
    input_model=ReleasesInput,
    handler=handle,
)
