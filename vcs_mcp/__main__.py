"""Allow ``python -m vcs_mcp``."""

from vcs_mcp.main import cli

if __name__ == "__main__":
    cli()
