"""Local git operations in a working copy.

Each action is a thin wrapper over one ``git`` invocation in
``working_dir``. The outcome is reported as-is: exit code 0 is a success
carrying stdout/stderr, anything else is a failure whose ``error`` holds
git's own output.
"""

from typing import Literal

import structlog
from pydantic import Field, field_validator

from vcs_mcp.enums import ToolName
from vcs_mcp.git.runner import run_git
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import (
    ToolContext,
    ToolInput,
    ToolResult,
    ToolSpec,
    git_result,
    reject_option_like,
    require,
)

log = structlog.get_logger(__name__)


class GitLocalInput(ToolInput):
    action: Literal["status", "add", "commit", "push", "pull", "fetch", "log", "diff", "checkout", "branch"] = Field(
        ..., description="Git operation to run"
    )
    working_dir: str = Field(..., min_length=1, description="Path of the local working copy")
    files: list[str] | None = Field(default=None, description="Paths to stage (add; default: everything)")
    message: str | None = Field(default=None, description="Commit message (commit)")
    remote: str = Field(default="origin", min_length=1, description="Remote name (push, pull, fetch)")
    branch: str | None = Field(default=None, description="Branch name (push, pull, checkout)")
    create: bool = Field(default=False, description="Create the branch while checking it out (checkout)")
    set_upstream: bool = Field(default=False, description="Set the pushed branch as upstream (push)")
    max_count: int = Field(default=10, ge=1, le=1000, description="Number of commits to show (log)")
    staged: bool = Field(default=False, description="Diff the index instead of the working tree (diff)")
    all_branches: bool = Field(default=False, description="Include remote branches (branch)")
    timeout: float | None = Field(default=None, gt=0, description="Git timeout in seconds")

    @field_validator("remote", "branch")
    @classmethod
    def reject_options(cls, value: str | None) -> str | None:
        return reject_option_like(value)


def _build_args(params: GitLocalInput) -> tuple[list[str], str]:
    """Translate an action into git arguments and a success message."""
    action = params.action

    if action == "status":
        return ["status", "--porcelain=v1", "--branch"], "Status retrieved"

    if action == "add":
        files = params.files or ["."]
        return ["add", "--", *files], f"Staged {', '.join(files)}"

    if action == "commit":
        require(params, action, "message")
        return ["commit", "-m", params.message], "Changes committed"

    if action in ("push", "pull", "fetch"):
        args = [action]
        if action == "push" and params.set_upstream:
            args.append("--set-upstream")
        args.extend(["--end-of-options", params.remote])
        if params.branch and action != "fetch":
            args.append(params.branch)
        target = f"{params.remote}/{params.branch}" if params.branch else params.remote
        past = {"push": "Pushed to", "pull": "Pulled from", "fetch": "Fetched from"}[action]
        return args, f"{past} {target}"

    if action == "log":
        return ["log", f"--max-count={params.max_count}", "--pretty=format:%H %an <%ae> %ad%n    %s", "--date=iso"], (
            f"Last {params.max_count} commits retrieved"
        )

    if action == "diff":
        return (["diff", "--cached"] if params.staged else ["diff"]), "Diff retrieved"

    if action == "checkout":
        require(params, action, "branch")
        args = ["checkout", "-b", params.branch] if params.create else ["checkout", "--end-of-options", params.branch]
        return args, f"Switched to branch {params.branch}"

    # branch
    return (["branch", "--all"] if params.all_branches else ["branch"]), "Branches listed"


async def handle(ctx: ToolContext, params: GitLocalInput, provider: VcsProvider | None) -> ToolResult:
    args, message = _build_args(params)
    log.info("git_local", action=params.action, working_dir=params.working_dir)
    result = await run_git(*args, cwd=params.working_dir, timeout=params.timeout or ctx.git_timeout)
    return git_result(params.action, result, message)


TOOL = ToolSpec(
    name=ToolName.GIT_LOCAL,
    description=(
        "Run git in a local working copy: status, add, commit, push, pull, fetch, log, diff, checkout, branch. "
        "Returns git's stdout, stderr and exit code."
    ),
    input_model=GitLocalInput,
    handler=handle,
    uses_provider=False,
)
