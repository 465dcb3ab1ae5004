"""
Market Query Commands

Commands for querying exchange snapshots from the terminal.
Uses Click framework for clean, modern CLI interface.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import click
import pandas as pd
from tabulate import tabulate

import constants as const
import market_query
import util
from errors import FinmapError


logger = logging.getLogger(__name__)


def snapshot_options(func):
    """--exchange plus --year/--month/--day (omitted parts default to today)"""
    options = [
        click.option("--exchange", "-e", required=True, type=click.Choice(const.STOCK_EXCHANGES), help="Stock exchange"),
        click.option("--year", type=click.IntRange(min=const.MIN_YEAR), help="Year (default: current)"),
        click.option("--month", type=click.IntRange(1, 12), help="Month (default: current)"),
        click.option("--day", type=click.IntRange(1, 31), help="Day (default: current)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _fail(ctx, action: str, error: Exception):
    if isinstance(error, (FinmapError, ValueError)):
        logger.warning(f"Error {action}: {error}")
    else:
        logger.error(f"Error {action}: {error}", exc_info=True)
    click.secho(f"\n✗ Error {action}: {error}\n", fg="red", err=True)
    ctx.exit(1)


def _show_table(title: str, rows: list[dict], width: int = 100):
    df = pd.DataFrame(rows)
    click.echo()
    click.echo(title)
    click.echo("=" * width)
    click.echo(tabulate(df, headers="keys", tablefmt="psql", showindex=False))
    click.echo("=" * width)


@click.group()
def market():
    """Query daily exchange snapshots"""


@market.command("exchanges")
def list_exchanges():
    """List supported exchanges"""
    rows = [{"id": exchange_id, **info} for exchange_id, info in const.EXCHANGE_INFO.items()]
    _show_table("Supported exchanges", rows, width=120)


@market.command("sectors")
@snapshot_options
@click.pass_context
def list_sectors(ctx, exchange, year, month, day):
    """List sectors with item counts"""
    service = ctx.obj["service"]

    try:
        document = service.list_sectors(exchange, year, month, day)
        sectors = document["sectors"]
        if not sectors:
            click.secho(f"\nNo sectors found for {exchange} on {document['date']}\n", fg="yellow")
            return
        _show_table(f"Sectors on {document['exchange']} ({document['date']})", sectors, width=60)

    except Exception as e:
        _fail(ctx, "listing sectors", e)


@market.command("tickers")
@snapshot_options
@click.option("--sector", help="Filter by specific sector")
@click.option("--english-names/--original-names", default=True, help="Use English or original-language names")
@click.pass_context
def list_tickers(ctx, exchange, year, month, day, sector, english_names):
    """List tickers grouped by sector"""
    service = ctx.obj["service"]

    try:
        document = service.list_tickers(exchange, year, month, day, sector=sector, english_names=english_names)
        groups = document["sectors"]
        if not groups:
            click.secho(f"\nNo tickers found for {exchange} on {document['date']}\n", fg="yellow")
            return
        for sector_name, companies in groups.items():
            _show_table(f"{sector_name} ({len(companies)})", companies)

    except Exception as e:
        _fail(ctx, "listing tickers", e)


@market.command("search")
@snapshot_options
@click.option("--query", "-q", required=True, help="Search term (partial ticker or company name)")
@click.option("--limit", type=click.IntRange(1, const.MAX_SEARCH_LIMIT), default=const.DEFAULT_LIMIT, help="Maximum results")
@click.pass_context
def search_companies(ctx, exchange, year, month, day, query, limit):
    """Search companies by ticker or name"""
    service = ctx.obj["service"]

    try:
        document = service.search_companies(exchange, query, year, month, day, limit=limit)
        matches = document["matches"]
        if not matches:
            click.secho(f"\nNo companies found matching '{query}'\n", fg="yellow")
            return
        _show_table(f"Search results for '{query}' ({len(matches)} found)", matches)

    except Exception as e:
        _fail(ctx, "searching companies", e)


@market.command("overview")
@snapshot_options
@click.pass_context
def market_overview(ctx, exchange, year, month, day):
    """Show market totals and sector breakdown"""
    service = ctx.obj["service"]

    try:
        document = service.get_market_overview(exchange, year, month, day)
        total = document["marketTotal"]

        click.echo()
        click.echo("=" * 60)
        click.secho(f"MARKET: {document['exchange']} ({document['date']})", bold=True)
        click.echo("=" * 60)
        if total:
            click.echo(f"Market cap:  {util.format_number(total['marketCap'])} {document['currency']}")
            click.echo(f"Change:      {total['marketCapChangePct']}%")
            click.echo(f"Volume:      {util.format_number(total['volume'])}")
            click.echo(f"Value:       {util.format_number(total['value'])} {document['currency']}")
            click.echo(f"Trades:      {util.format_number(total['numTrades'])}")
            click.echo(f"Securities:  {total['itemsPerSector']}")
        else:
            click.secho("No market total in snapshot", fg="yellow")
        click.echo(f"Treemap:     {document['charts']['treemap']}")

        if document["sectors"]:
            _show_table("Sectors", document["sectors"], width=120)

    except Exception as e:
        _fail(ctx, "getting market overview", e)


@market.command("performance")
@snapshot_options
@click.option("--sector", help="Show one sector only")
@click.pass_context
def sectors_overview(ctx, exchange, year, month, day, sector):
    """Show aggregated metrics per sector"""
    service = ctx.obj["service"]

    try:
        document = service.get_sectors_overview(exchange, year, month, day, sector=sector)
        if not document["sectors"]:
            click.secho(f"\nNo sector data found for {exchange} on {document['date']}\n", fg="yellow")
            return
        _show_table(f"Sector performance on {document['exchange']} ({document['date']})", document["sectors"], width=120)

    except Exception as e:
        _fail(ctx, "getting sector performance", e)


@market.command("stock")
@snapshot_options
@click.option("--ticker", "-t", required=True, help="Ticker symbol (case-sensitive)")
@click.pass_context
def stock_data(ctx, exchange, year, month, day, ticker):
    """Show market data for one ticker"""
    service = ctx.obj["service"]

    try:
        document = service.get_stock_data(exchange, ticker, year, month, day)

        click.echo()
        click.echo("=" * 60)
        click.secho(f"TICKER: {document['ticker']} ({document['date']})", bold=True)
        click.echo("=" * 60)
        click.echo(f"Name:        {document['nameEng'] or document['nameOriginal'] or 'N/A'}")
        click.echo(f"Sector:      {document['sector'] or 'N/A'}")
        click.echo(f"Open:        {document['priceOpen']}")
        click.echo(f"Last sale:   {document['priceLastSale']}")
        click.echo(f"Change:      {document['priceChangePct']}%")
        click.echo(f"Volume:      {util.format_number(document['volume'])}")
        click.echo(f"Value:       {util.format_number(document['value'])} {document['currency']}")
        click.echo(f"Trades:      {util.format_number(document['numTrades'])}")
        click.echo(f"Market cap:  {util.format_number(document['marketCap'])} {document['currency']}")
        click.echo(f"Listed:      {document['listedFrom'] or 'N/A'} - {document['listedTill'] or 'present'}")
        click.echo("=" * 60)

    except Exception as e:
        _fail(ctx, "getting stock data", e)


@market.command("rank")
@snapshot_options
@click.option("--sort-by", required=True, type=click.Choice(const.SORT_FIELDS), help="Metric to rank by")
@click.option("--order", type=click.Choice(const.SORT_ORDERS), default=const.DEFAULT_SORT_ORDER, help="Sort order (default: desc)")
@click.option("--limit", type=click.IntRange(1, const.MAX_RANK_LIMIT), default=const.DEFAULT_LIMIT, help="Number of results")
@click.option("--sector", help="Filter by specific sector")
@click.option("--ticker", help="Rank a single ticker only")
@click.pass_context
def rank_stocks(ctx, exchange, year, month, day, sort_by, order, limit, sector, ticker):
    """Rank stocks by a metric"""
    service = ctx.obj["service"]

    try:
        document = service.rank_stocks(
            exchange, sort_by, year, month, day, order=order, limit=limit, sector=sector, ticker=ticker
        )
        if not document["stocks"]:
            click.secho("\nNo stocks matched\n", fg="yellow")
            return
        _show_table(
            f"Top {document['count']} by {sort_by} ({order}) on {document['exchange']} ({document['date']})",
            document["stocks"],
            width=140,
        )

    except Exception as e:
        _fail(ctx, "ranking stocks", e)


@market.command("profile")
@click.option("--exchange", "-e", required=True, type=click.Choice(const.US_EXCHANGES), help="US exchange")
@click.option("--ticker", "-t", required=True, help="Ticker symbol (case-sensitive)")
@click.pass_context
def company_profile(ctx, exchange, ticker):
    """Show a US company profile"""
    service = ctx.obj["service"]

    try:
        document = service.get_company_profile(exchange, ticker)
        profile = {k: v for k, v in document.items() if k not in ("info", "charts")}

        click.echo()
        click.echo("=" * 60)
        click.secho(f"PROFILE: {ticker} ({exchange.upper()})", bold=True)
        click.echo("=" * 60)
        for key, value in profile.items():
            click.echo(f"{key}: {value}")
        click.echo("=" * 60)

    except Exception as e:
        _fail(ctx, "getting company profile", e)


@market.command("check")
@snapshot_options
@click.pass_context
def check_snapshot(ctx, exchange, year, month, day):
    """Cross-check sector aggregate item counts against security rows"""
    service = ctx.obj["service"]

    try:
        date, records = service.load_snapshot(exchange, year, month, day)
        mismatches = market_query.sector_count_mismatches(records)
    except Exception as e:
        _fail(ctx, "checking snapshot", e)
        return

    if not mismatches:
        click.secho(f"\n✓ {exchange} {date}: {len(records)} rows, sector counts consistent\n", fg="green")
        return

    rows = [
        {"sector": sector, "declared": declared, "derived": derived}
        for sector, (declared, derived) in mismatches.items()
    ]
    _show_table(f"{exchange} {date}: {len(mismatches)} sector count mismatches", rows, width=60)
    ctx.exit(2)
