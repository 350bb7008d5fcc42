"""MCP server wiring.

Publishes every tool in :data:`vcs_mcp.tools.TOOLS` with its pydantic
input schema and routes calls through :func:`vcs_mcp.tools.dispatch`.
Results are returned as a single JSON text block holding the envelope;
failures are reported inside the envelope (``"success": false``) rather
than as protocol errors.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from vcs_mcp.config.settings import ServerSettings
from vcs_mcp.providers.factory import build_factory
from vcs_mcp.tools import TOOLS, ToolContext, dispatch

log = structlog.get_logger(__name__)

SERVER_NAME = "vcs-mcp"


def tool_definitions() -> list[Tool]:
    return [
        Tool(name=tool.name.value, description=tool.description, inputSchema=tool.input_schema())
        for tool in TOOLS
    ]


async def call_tool_content(ctx: ToolContext, name: str, arguments: Mapping[str, Any] | None) -> list[TextContent]:
    result = await dispatch(ctx, name, arguments)
    return [TextContent(type="text", text=result.to_json())]


def create_server(ctx: ToolContext) -> Server:
    """Build an MCP server bound to a tool context."""
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        return await call_tool_content(ctx, name, arguments)

    return server


async def run_stdio(settings: ServerSettings) -> None:
    """Serve MCP over stdin/stdout until the client disconnects.

    Raises:
        ConfigurationError: If the providers cannot be built from settings
    """
    factory = build_factory(settings)
    ctx = ToolContext(factory=factory, git_timeout=settings.git_timeout)
    server = create_server(ctx)

    log.info("server_starting", name=SERVER_NAME, tools=len(TOOLS), providers=factory.names())
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await factory.aclose()
        log.info("server_stopped")
