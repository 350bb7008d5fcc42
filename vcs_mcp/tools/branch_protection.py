"""Branch protection tool.

Protection settings are normalized across platforms: required approvals,
required status checks (and their contexts), enforcement for admins and
dismissal of stale reviews. Updates only change the fields that are given.
"""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require

SETTING_FIELDS = (
    "required_approvals",
    "require_status_checks",
    "status_check_contexts",
    "enforce_admins",
    "dismiss_stale_reviews",
)


class BranchProtectionInput(RepoToolInput):
    action: Literal["list", "get", "create", "update", "delete"] = Field(..., description="Operation to perform")
    branch_name: str | None = Field(default=None, description="Protected branch or rule name")
    required_approvals: int | None = Field(default=None, ge=0, le=10, description="Approving reviews required")
    require_status_checks: bool | None = Field(default=None, description="Require status checks to pass")
    status_check_contexts: list[str] | None = Field(default=None, description="Status checks that must pass")
    enforce_admins: bool | None = Field(default=None, description="Apply the rule to administrators too")
    dismiss_stale_reviews: bool | None = Field(default=None, description="Dismiss approvals on new commits")


async def handle(ctx: ToolContext, params: BranchProtectionInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        rules = await provider.list_branch_protections(owner, repo)
        return ToolResult.ok(action, f"{len(rules)} branch protections found", rules)

    require(params, action, "branch_name")
    settings = {name: getattr(params, name) for name in SETTING_FIELDS}

    if action == "get":
        rule = await provider.get_branch_protection(owner, repo, params.branch_name)
        return ToolResult.ok(action, f"Branch protection for {rule.branch_name} retrieved", rule)

    if action == "create":
        rule = await provider.create_branch_protection(owner, repo, params.branch_name, **settings)
        return ToolResult.ok(action, f"Branch {rule.branch_name} protected", rule)

    if action == "update":
        if all(value is None for value in settings.values()):
            raise ToolInputError(f"No update fields provided: set one of {', '.join(SETTING_FIELDS)}")
        rule = await provider.update_branch_protection(owner, repo, params.branch_name, **settings)
        return ToolResult.ok(action, f"Branch protection for {rule.branch_name} updated", rule)

    await provider.delete_branch_protection(owner, repo, params.branch_name)
    return ToolResult.ok(action, f"Branch protection for {params.branch_name} removed")


TOOL = ToolSpec(
    name=ToolName.BRANCH_PROTECTION,
    description="List, get, create, update and delete branch protection rules of a hosted repository.",
    input_model=BranchProtectionInput,
    handler=handle,
)
