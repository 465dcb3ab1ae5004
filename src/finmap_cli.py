#!/usr/bin/env python3
"""
Finmap CLI

Command-line interface built with Click for querying exchange snapshots and
running the MCP server.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.

Usage:
    python src/finmap_cli.py --help
    python src/finmap_cli.py market sectors --exchange nasdaq --year 2025 --month 1 --day 10
    python src/finmap_cli.py market rank -e moex --sort-by marketCap --limit 20
    python src/finmap_cli.py --provider local market overview -e lse
    python src/finmap_cli.py serve --port 8000
"""

import logging

import click

# Local application imports
import constants as const
import util
from cli.market import market
from finmap_service import FinmapService
from providers.provider_factory import ProviderFactory


# Initialize logging for CLI application
util.setup_logger(name=None, level=None, console=False, log_file=const.CLI_LOG_FILE)
logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--provider",
    type=click.Choice(ProviderFactory.PROVIDER_NAMES),
    default=None,
    help="Snapshot source (default: FINMAP_SNAPSHOT_PROVIDER or 'github')",
)
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), help="Override log level")
@click.pass_context
def cli(ctx, provider, log_level):
    """
    Finmap Command Line Interface

    Query daily stock exchange snapshots: sectors, tickers, search, overviews and rankings.
    """
    ctx.ensure_object(dict)

    if log_level:
        util.set_log_level(log_level)

    if "service" not in ctx.obj:
        ctx.obj["service"] = FinmapService(ProviderFactory.get_provider(provider))

    logger.info(f"Initializing Finmap CLI with {provider or const.SNAPSHOT_PROVIDER} snapshot provider")


@cli.command("serve")
@click.option("--host", default=const.API_HOST, help="Bind address")
@click.option("--port", type=int, default=const.API_PORT, help="Port")
def serve(host, port):
    """Run the MCP HTTP server"""
    from api import finmap_api

    finmap_api.run(host=host, port=port)


# Register command groups
cli.add_command(market)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
