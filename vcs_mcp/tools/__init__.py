"""MCP tools exposed by the server."""

from vcs_mcp.tools.base import ToolContext, ToolResult, ToolSpec
from vcs_mcp.tools.registry import TOOLS, TOOLS_BY_NAME, dispatch

__all__ = [
    "TOOLS",
    "TOOLS_BY_NAME",
    "ToolContext",
    "ToolResult",
    "ToolSpec",
    "dispatch",
]
