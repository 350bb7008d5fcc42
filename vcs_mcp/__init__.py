"""vcs-mcp: Git and VCS hosting operations exposed as MCP tools."""

__version__ = "0.1.0"
