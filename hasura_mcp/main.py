"""CLI entry point for hasura-mcp."""

from __future__ import annotations

import asyncio
import json
import logging

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from hasura_mcp import SERVER_NAME, __version__
from hasura_mcp.config import ServerSettings
from hasura_mcp.helpers.log import setup_logging
from hasura_mcp.tools import TOOL_CLASSES

load_dotenv()

console = Console()
logger = logging.getLogger(__name__)

_LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


def _settings(endpoint: str | None, admin_secret: str | None, timeout: float | None) -> ServerSettings:
    try:
        settings = ServerSettings.resolve(endpoint, admin_secret, timeout)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    logger.info("Targeting Hasura Endpoint: %s", settings.endpoint)
    if settings.admin_secret:
        logger.info("Using Admin Secret.")
    else:
        logger.warning(
            "No Admin Secret provided. Ensure Hasura permissions are configured for the default role."
        )
    return settings


@click.group()
@click.version_option(version=__version__, prog_name="hasura-mcp")
@click.option("--log-level", type=_LOG_LEVELS, default="INFO", help="Logging verbosity (stderr)")
def cli(log_level: str):
    """Explore and query a Hasura GraphQL endpoint over MCP."""
    setup_logging(log_level.upper())


@cli.command()
@click.argument("endpoint", required=False)
@click.argument("admin_secret", required=False)
@click.option("--timeout", type=float, default=None, help="HTTP timeout in seconds for backend requests")
def serve(endpoint: str | None, admin_secret: str | None, timeout: float | None):
    """Serve the tools over stdio for an MCP client.

    ENDPOINT and ADMIN_SECRET fall back to HASURA_GRAPHQL_ENDPOINT and
    HASURA_ADMIN_SECRET.
    """
    from hasura_mcp.server import HasuraServer

    server = HasuraServer(_settings(endpoint, admin_secret, timeout))
    asyncio.run(server.run_stdio())


@cli.command()
def tools():
    """List the tools this server exposes."""
    table = Table(title=f"{SERVER_NAME} v{__version__}")
    table.add_column("Tool", style="cyan")
    table.add_column("Description")
    for cls in TOOL_CLASSES:
        table.add_row(cls.name, cls.description.splitlines()[0])
    console.print(table)


@cli.command()
@click.argument("tool_name")
@click.option("--args", "args_json", default="{}", help="Tool arguments as a JSON object")
@click.option("--endpoint", default=None, help="Hasura GraphQL endpoint (or HASURA_GRAPHQL_ENDPOINT)")
@click.option("--admin-secret", default=None, help="Admin secret (or HASURA_ADMIN_SECRET)")
@click.option("--timeout", type=float, default=None, help="HTTP timeout in seconds for backend requests")
def call(
    tool_name: str,
    args_json: str,
    endpoint: str | None,
    admin_secret: str | None,
    timeout: float | None,
):
    """Invoke a single tool once and print its result."""
    from hasura_mcp.errors import HasuraMcpError
    from hasura_mcp.server import HasuraServer

    try:
        arguments = json.loads(args_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args") from e
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    server = HasuraServer(_settings(endpoint, admin_secret, timeout))
    try:
        result = asyncio.run(server.call_tool(tool_name, arguments))
    except HasuraMcpError as e:
        console.print(f"[red]{tool_name} failed:[/red] {e}")
        raise SystemExit(1) from e

    try:
        console.print_json(result.text)
    except json.JSONDecodeError:
        console.print(result.text)


if __name__ == "__main__":
    cli()
