"""CLI entry point for the vcs-mcp server."""

import asyncio
import json
import sys

import click
import structlog

from vcs_mcp import __version__
from vcs_mcp.config.settings import ServerSettings, load_settings
from vcs_mcp.exceptions import ConfigurationError, VcsMcpError
from vcs_mcp.providers.factory import build_factory
from vcs_mcp.server import run_stdio
from vcs_mcp.tools import TOOLS
from vcs_mcp.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Logging level (overrides LOG_LEVEL/DEBUG)")
@click.version_option(__version__, prog_name="vcs-mcp")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """vcs-mcp: Git and VCS hosting operations as MCP tools."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


def _load(ctx: click.Context) -> ServerSettings:
    """Load settings and configure logging, exiting with status 1 on bad configuration."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging(ctx.obj.get("log_level") or "INFO")
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    configure_logging(ctx.obj.get("log_level") or settings.effective_log_level)
    return settings


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server over stdio."""
    settings = _load(ctx)
    try:
        asyncio.run(run_stdio(settings))
    except VcsMcpError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("serve_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def providers(ctx: click.Context, as_json: bool) -> None:
    """List the providers the current environment configures."""
    settings = _load(ctx)
    try:
        factory = build_factory(settings)
    except VcsMcpError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    info = factory.providers_info()
    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    if not info:
        click.echo("No providers configured (demo mode)")
        return

    for entry in info:
        marker = "*" if entry["default"] else " "
        click.echo(f"{marker} {entry['name']:<15} {entry['kind']:<8} {entry['base_url']}")


@cli.command()
def tools() -> None:
    """List the MCP tools and their actions."""
    for tool in TOOLS:
        actions = tool.input_schema()["properties"]["action"].get("enum", [])
        click.echo(f"{tool.name.value:<18} {', '.join(actions)}")


if __name__ == "__main__":
    cli()
