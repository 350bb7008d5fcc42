"""Mirror a repository from one provider to another.

``status`` compares branch heads through both providers' APIs without
touching git. ``sync`` makes a bare mirror clone of the source in a
temporary directory and pushes it to the target, either wholesale
(``--mirror``) or only the requested branches. Both remote URLs carry
tokens, so every reported string is redacted.
"""

import tempfile
from pathlib import Path
from typing import Literal

import structlog
from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.git.runner import run_git
from vcs_mcp.models.domain import Branch
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import ToolContext, ToolInput, ToolResult, ToolSpec, git_result

log = structlog.get_logger(__name__)

BRANCH_PAGE_SIZE = 100


class GitSyncInput(ToolInput):
    action: Literal["status", "sync"] = Field(..., description="Compare (status) or mirror (sync)")
    source_provider: str | None = Field(default=None, description="Provider holding the source (default: provider)")
    source_owner: str = Field(..., min_length=1, description="Source repository owner")
    source_repo: str = Field(..., min_length=1, description="Source repository name")
    target_provider: str | None = Field(default=None, description="Provider holding the target (default: provider)")
    target_owner: str = Field(..., min_length=1, description="Target repository owner")
    target_repo: str = Field(..., min_length=1, description="Target repository name")
    branches: list[str] | None = Field(default=None, description="Only sync these branches (default: mirror all refs)")
    dry_run: bool = Field(default=False, description="Report what would be pushed without pushing (sync)")
    timeout: float | None = Field(default=None, gt=0, description="Git timeout in seconds per step (sync)")


async def _all_branches(provider: VcsProvider, owner: str, repo: str) -> dict[str, Branch]:
    branches: dict[str, Branch] = {}
    page = 1
    while True:
        batch = await provider.list_branches(owner, repo, page=page, limit=BRANCH_PAGE_SIZE)
        branches.update((b.name, b) for b in batch)
        if len(batch) < BRANCH_PAGE_SIZE:
            return branches
        page += 1


async def _status(params: GitSyncInput, source: VcsProvider, target: VcsProvider) -> ToolResult:
    source_branches = await _all_branches(source, params.source_owner, params.source_repo)
    target_branches = await _all_branches(target, params.target_owner, params.target_repo)

    names = params.branches or sorted(source_branches)
    missing = [name for name in names if name not in target_branches]
    different = [
        {"branch": name, "source_sha": source_branches[name].sha, "target_sha": target_branches[name].sha}
        for name in names
        if name in source_branches and name in target_branches
        and source_branches[name].sha != target_branches[name].sha
    ]
    extra = sorted(name for name in target_branches if name not in source_branches)
    in_sync = not missing and not different and (bool(params.branches) or not extra)

    summary = "in sync" if in_sync else f"{len(missing)} missing, {len(different)} different"
    return ToolResult.ok(
        "status",
        f"{params.source_owner}/{params.source_repo} -> {params.target_owner}/{params.target_repo}: {summary}",
        {
            "in_sync": in_sync,
            "missing_on_target": missing,
            "different": different,
            "extra_on_target": extra,
        },
    )


async def _sync(ctx: ToolContext, params: GitSyncInput, source: VcsProvider, target: VcsProvider) -> ToolResult:
    timeout = params.timeout or ctx.git_timeout
    secrets = [source.token, target.token]
    source_url = source.clone_url(params.source_owner, params.source_repo, authenticated=True)
    target_url = target.clone_url(params.target_owner, params.target_repo, authenticated=True)

    log.info(
        "git_sync_started",
        source=f"{params.source_owner}/{params.source_repo}",
        target=f"{params.target_owner}/{params.target_repo}",
        branches=params.branches,
        dry_run=params.dry_run,
    )

    with tempfile.TemporaryDirectory(prefix="vcs-mcp-sync-") as workdir:
        mirror = Path(workdir) / "mirror.git"
        cloned = await run_git("clone", "--mirror", source_url, str(mirror), cwd=workdir, timeout=timeout, secrets=secrets)
        if not cloned.succeeded:
            return git_result("sync", cloned, "")

        push_args = ["push"]
        if params.dry_run:
            push_args.append("--dry-run")
        if params.branches:
            push_args.append(target_url)
            push_args.extend(f"refs/heads/{b}:refs/heads/{b}" for b in params.branches)
        else:
            push_args.extend(["--mirror", target_url])

        pushed = await run_git(*push_args, cwd=mirror, timeout=timeout, secrets=secrets)

    scope = ", ".join(params.branches) if params.branches else "all refs"
    verb = "Would push" if params.dry_run else "Pushed"
    return git_result(
        "sync",
        pushed,
        f"{verb} {scope} from {params.source_owner}/{params.source_repo} to {params.target_owner}/{params.target_repo}",
    )


async def handle(ctx: ToolContext, params: GitSyncInput, provider: VcsProvider | None) -> ToolResult:
    source = ctx.factory.get(params.source_provider or params.provider)
    target = ctx.factory.get(params.target_provider or params.provider)

    if params.action == "status":
        return await _status(params, source, target)
    return await _sync(ctx, params, source, target)


TOOL = ToolSpec(
    name=ToolName.GIT_SYNC,
    description=(
        "Mirror a repository between providers. status compares branch heads; "
        "sync clones the source with --mirror and pushes to the target (optionally only some branches)."
    ),
    input_model=GitSyncInput,
    handler=handle,
    uses_provider=False,
)
