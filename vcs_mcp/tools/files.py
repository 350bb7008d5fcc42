"""Repository file tool backed by the contents API."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require


class FilesInput(RepoToolInput):
    action: Literal["get", "list", "create", "update", "delete"] = Field(..., description="Operation to perform")
    path: str | None = Field(
        default=None,
        description="File path from the repository root (list defaults to the root directory)",
    )
    content: str | None = Field(default=None, description="File text (create, update)")
    message: str | None = Field(default=None, description="Commit message (create, update, delete)")
    sha: str | None = Field(default=None, description="Blob SHA of the file being replaced (update, delete)")
    branch: str | None = Field(default=None, description="Branch to commit to; defaults to the default branch")
    ref: str | None = Field(default=None, description="Branch, tag or commit to read from (get, list)")


async def handle(ctx: ToolContext, params: FilesInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        entries = await provider.list_files(owner, repo, params.path or "", ref=params.ref)
        return ToolResult.ok(action, f"{len(entries)} entries found", entries)

    require(params, action, "path")
    path = params.path

    if action == "get":
        entry = await provider.get_file(owner, repo, path, ref=params.ref)
        return ToolResult.ok(action, f"File {entry.path} retrieved", entry)

    require(params, action, "message")

    if action == "delete":
        require(params, action, "sha")
        await provider.delete_file(owner, repo, path, params.message, params.sha, branch=params.branch)
        return ToolResult.ok(action, f"File {path} deleted")

    # empty content is a valid (empty) file
    if params.content is None:
        raise ToolInputError(
            f"Missing required field(s) for action '{action}': content",
            errors=[f"content: required for action '{action}'"],
        )

    if action == "create":
        entry = await provider.create_file(owner, repo, path, params.content, params.message, branch=params.branch)
        return ToolResult.ok(action, f"File {entry.path} created", entry)

    require(params, action, "sha")
    entry = await provider.update_file(
        owner,
        repo,
        path,
        params.content,
        params.message,
        params.sha,
        branch=params.branch,
    )
    return ToolResult.ok(action, f"File {entry.path} updated", entry)


TOOL = ToolSpec(
    name=ToolName.FILES,
    description=(
        "Read, list, create, update and delete files of a hosted repository. "
        "Each write is a commit; update and delete need the current blob sha from get."
    ),
    input_model=FilesInput,
    handler=handle,
)
