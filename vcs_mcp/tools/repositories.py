"""Repository management tool.

Remote actions (list, get, create, update, delete, fork, search) go through
the provider; ``init`` and ``clone`` run git locally.
"""

from typing import Literal

import structlog
from pydantic import Field, field_validator

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError
from vcs_mcp.git.runner import run_git
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import (
    RepoToolInput,
    ToolContext,
    ToolResult,
    ToolSpec,
    git_result,
    reject_option_like,
    require,
)

log = structlog.get_logger(__name__)


class RepositoriesInput(RepoToolInput):
    action: Literal["list", "get", "create", "update", "delete", "fork", "search", "init", "clone"] = Field(
        ..., description="Operation to perform"
    )
    username: str | None = Field(default=None, description="List this user's repositories (list)")
    name: str | None = Field(default=None, description="Repository name (create)")
    description: str | None = Field(default=None, description="Repository description (create)")
    private: bool = Field(default=False, description="Create as private repository (create)")
    auto_init: bool = Field(default=False, description="Initialize with a README (create)")
    new_name: str | None = Field(default=None, description="New repository name (update)")
    new_description: str | None = Field(default=None, description="New description (update)")
    new_private: bool | None = Field(default=None, description="New visibility (update)")
    archived: bool | None = Field(default=None, description="Archive or unarchive (update)")
    organization: str | None = Field(default=None, description="Fork into this organization (fork)")
    query: str | None = Field(default=None, description="Search query (search)")
    working_dir: str | None = Field(default=None, description="Local directory (init, clone)")
    remote_url: str | None = Field(default=None, description="Remote to add as origin (init) or clone from (clone)")
    target_path: str | None = Field(default=None, description="Destination directory name (clone)")
    timeout: float | None = Field(default=None, gt=0, description="Git timeout in seconds (init, clone)")

    @field_validator("remote_url", "target_path")
    @classmethod
    def reject_options(cls, value: str | None) -> str | None:
        return reject_option_like(value)


async def handle(ctx: ToolContext, params: RepositoriesInput, provider: VcsProvider | None) -> ToolResult:
    action = params.action

    if action == "init":
        return await _init(ctx, params)

    if action == "clone":
        return await _clone(ctx, params)

    assert provider is not None

    if action == "list":
        repos = await provider.list_repositories(username=params.username, page=params.page, limit=params.limit)
        return ToolResult.ok(
            action,
            f"{len(repos)} repositories found",
            {"repositories": repos, "page": params.page, "limit": params.limit, "total": len(repos)},
        )

    if action == "create":
        require(params, action, "name")
        repo = await provider.create_repository(
            name=params.name,
            description=params.description or "",
            private=params.private,
            auto_init=params.auto_init,
        )
        return ToolResult.ok(action, f"Repository {repo.full_name} created", repo)

    if action == "search":
        require(params, action, "query")
        repos = await provider.search_repositories(params.query, page=params.page, limit=params.limit)
        return ToolResult.ok(action, f"{len(repos)} repositories found", {"repositories": repos, "query": params.query})

    require(params, action, "owner", "repo")

    if action == "get":
        repo = await provider.get_repository(params.owner, params.repo)
        return ToolResult.ok(action, f"Repository {repo.full_name} retrieved", repo)

    if action == "update":
        changes = {
            "name": params.new_name,
            "description": params.new_description,
            "private": params.new_private,
            "archived": params.archived,
        }
        if all(value is None for value in changes.values()):
            raise ToolInputError(
                "No update fields provided: set new_name, new_description, new_private or archived"
            )
        repo = await provider.update_repository(params.owner, params.repo, **changes)
        return ToolResult.ok(action, f"Repository {repo.full_name} updated", repo)

    if action == "delete":
        await provider.delete_repository(params.owner, params.repo)
        return ToolResult.ok(action, f"Repository {params.owner}/{params.repo} deleted")

    # fork
    repo = await provider.fork_repository(params.owner, params.repo, organization=params.organization)
    return ToolResult.ok(action, f"Repository {params.owner}/{params.repo} forked to {repo.full_name}", repo)


async def _init(ctx: ToolContext, params: RepositoriesInput) -> ToolResult:
    require(params, "init", "working_dir")
    timeout = params.timeout or ctx.git_timeout

    result = await run_git("init", cwd=params.working_dir, timeout=timeout)
    if not result.succeeded or not params.remote_url:
        return git_result("init", result, f"Repository initialized in {params.working_dir}")

    remote = await run_git(
        "remote", "add", "--end-of-options", "origin", params.remote_url, cwd=params.working_dir, timeout=timeout
    )
    return git_result("init", remote, f"Repository initialized in {params.working_dir} with origin {params.remote_url}")


async def _clone(ctx: ToolContext, params: RepositoriesInput) -> ToolResult:
    require(params, "clone", "working_dir")
    secrets: list[str] = []
    url = params.remote_url
    if not url:
        require(params, "clone", "owner", "repo")
        provider = ctx.factory.get(params.provider)
        url = provider.clone_url(params.owner, params.repo, authenticated=True)
        secrets.append(provider.token)

    args = ["clone", "--end-of-options", url]
    if params.target_path:
        args.append(params.target_path)

    log.info("clone_repository", working_dir=params.working_dir, target=params.target_path)
    result = await run_git(*args, cwd=params.working_dir, timeout=params.timeout or ctx.git_timeout, secrets=secrets)
    return git_result("clone", result, f"Repository cloned into {params.working_dir}")


TOOL = ToolSpec(
    name=ToolName.REPOSITORIES,
    description=(
        "Manage repositories: list, get, create, update, delete, fork and search on the provider, "
        "or init/clone a local working copy with git. owner/username default to the authenticated user."
    ),
    input_model=RepositoriesInput,
    handler=handle,
    local_actions=frozenset({"init", "clone"}),
)
