"""User lookup tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import ToolContext, ToolInput, ToolResult, ToolSpec, require


class UsersInput(ToolInput):
    action: Literal["current", "get", "search"] = Field(..., description="Operation to perform")
    username: str | None = Field(default=None, description="Account to look up (get; defaults to yourself)")
    query: str | None = Field(default=None, description="Search text (search)")
    limit: int = Field(default=10, ge=1, le=100, description="Maximum results (search)")


async def handle(ctx: ToolContext, params: UsersInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action

    if action == "current":
        user = await provider.get_current_user()
        return ToolResult.ok(action, f"Authenticated as {user.login}", user)

    if action == "get":
        require(params, action, "username")
        user = await provider.get_user(params.username)
        return ToolResult.ok(action, f"User {user.login} retrieved", user)

    require(params, action, "query")
    users = await provider.search_users(params.query, limit=params.limit)
    return ToolResult.ok(action, f"{len(users)} users found", users)


TOOL = ToolSpec(
    name=ToolName.USERS,
    description="Show the authenticated user, look up a user, or search users.",
    input_model=UsersInput,
    handler=handle,
)
