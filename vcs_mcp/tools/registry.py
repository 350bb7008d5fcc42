"""Tool registry and the single dispatch path for tool calls.

``dispatch`` is the only place where exceptions become failure results:

    validate -> resolve provider -> auto-detect owner/username -> handler

Any step may raise; the exception is logged and rendered once into a
``{"success": false, ...}`` envelope. Exceptions outside the known
provider, HTTP and git families are logged with a traceback.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import httpx
import requests
import structlog
from github import GithubException  # type: ignore[import-not-found]
from pydantic import ValidationError

from vcs_mcp.exceptions import ToolInputError, VcsMcpError
from vcs_mcp.tools import (
    branch_protection,
    branches,
    commits,
    files,
    git_local,
    git_sync,
    issues,
    pulls,
    releases,
    repositories,
    tags,
    users,
    webhooks,
)
from vcs_mcp.tools.auto_user import apply_auto_user
from vcs_mcp.tools.base import ToolContext, ToolResult, ToolSpec, describe_error

log = structlog.get_logger(__name__)

TOOLS: tuple[ToolSpec, ...] = (
    repositories.TOOL,
    branches.TOOL,
    issues.TOOL,
    pulls.TOOL,
    releases.TOOL,
    tags.TOOL,
    webhooks.TOOL,
    users.TOOL,
    branch_protection.TOOL,
    git_local.TOOL,
    git_sync.TOOL,
    files.TOOL,
    commits.TOOL,
)

TOOLS_BY_NAME: Mapping[str, ToolSpec] = MappingProxyType({tool.name.value: tool for tool in TOOLS})


def format_validation_error(error: ValidationError) -> ToolInputError:
    """Collapse a pydantic error into one message naming every bad field."""
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "input"
        problems.append(f"{field}: {item['msg']}")
    return ToolInputError("; ".join(problems), errors=problems)


async def dispatch(ctx: ToolContext, name: str, arguments: Mapping[str, Any] | None) -> ToolResult:
    """Run one tool call end to end.

    Args:
        ctx: Server context holding the provider factory
        name: Tool name as published (e.g. "branch-protection")
        arguments: Raw arguments from the MCP client

    Returns:
        The handler's result, or a failure envelope if any step raised
    """
    arguments = dict(arguments or {})
    action = str(arguments.get("action") or "unknown")

    tool = TOOLS_BY_NAME.get(name)
    if tool is None:
        log.warning("unknown_tool", tool=name)
        return ToolResult.fail(
            action,
            f"Unknown tool: {name}",
            f"Available tools: {', '.join(TOOLS_BY_NAME)}",
        )

    log.info("tool_called", tool=name, action=action, provider=arguments.get("provider"))

    try:
        try:
            params = tool.input_model.model_validate(arguments)
        except ValidationError as e:
            raise format_validation_error(e) from e

        provider = None
        if tool.needs_provider(action):
            provider = ctx.factory.get(params.provider)
            filled = await apply_auto_user(tool.name, action, params.model_dump(), provider)
            updates = {
                key: value
                for key, value in filled.items()
                if key in type(params).model_fields and value != getattr(params, key)
            }
            if updates:
                params = params.model_copy(update=updates)

        return await tool.handler(ctx, params, provider)

    except (VcsMcpError, httpx.HTTPError, GithubException, requests.RequestException) as e:
        log.error("tool_failed", tool=name, action=action, error_type=type(e).__name__, error=describe_error(e))
        return ToolResult.fail(action, f"{name} {action} failed", describe_error(e))

    except Exception as e:
        log.error("tool_failed", tool=name, action=action, error_type=type(e).__name__, exc_info=True)
        return ToolResult.fail(action, f"{name} {action} failed", f"Unexpected error: {describe_error(e)}")
