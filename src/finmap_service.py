"""
Finmap query service

One method per query: resolve the date, fetch the snapshot (the only I/O),
decode it, run the query engine and assemble the response document. Errors
propagate to the caller; the tool boundary turns them into error payloads.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from typing import Any

import constants as const
import market_query
import response_builder
from market_record import MarketRecord
from providers.provider_factory import ProviderFactory
from providers.snapshot_provider import SnapshotProvider
from snapshot_decoder import decode_snapshot
from trading_date import resolve_date


logger = logging.getLogger(__name__)


class FinmapService:
    """Query orchestration over a snapshot provider"""

    def __init__(self, provider: SnapshotProvider | None = None):
        self.provider = provider or ProviderFactory.get_provider()

    def _check_exchange(self, exchange: str, allowed: tuple[str, ...] = const.STOCK_EXCHANGES) -> None:
        if exchange not in allowed:
            raise ValueError(f"Unknown exchange '{exchange}'. Choose from: {', '.join(allowed)}")

    def load_snapshot(
        self,
        exchange: str,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
    ) -> tuple[str, list[MarketRecord]]:
        """
        Resolve the date and fetch + decode the snapshot.

        Returns:
            (YYYY-MM-DD date, decoded records)
        """
        self._check_exchange(exchange)
        date = resolve_date(year, month, day)
        logger.info(f"Loading snapshot {exchange} {date}")
        envelope = self.provider.fetch_snapshot(exchange, date)
        return date, decode_snapshot(envelope, exchange, date)

    def list_exchanges(self) -> dict[str, Any]:
        return response_builder.build_exchanges()

    def list_sectors(self, exchange: str, year=None, month=None, day=None) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        mismatches = market_query.sector_count_mismatches(records)
        if mismatches:
            logger.warning(f"{exchange} {date}: aggregate item counts disagree with securities: {mismatches}")
        return response_builder.build_sectors(exchange, date, market_query.list_sectors(records))

    def list_tickers(
        self,
        exchange: str,
        year=None,
        month=None,
        day=None,
        sector: str | None = None,
        english_names: bool = True,
    ) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        groups = market_query.list_tickers(records, sector=sector, english_names=english_names)
        return response_builder.build_tickers(exchange, date, groups)

    def search_companies(
        self,
        exchange: str,
        query: str,
        year=None,
        month=None,
        day=None,
        limit: int = const.DEFAULT_LIMIT,
    ) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        matches = market_query.search_securities(records, query, limit=limit)
        logger.info(f"search_companies: '{query}' on {exchange} {date} -> {len(matches)} matches")
        return response_builder.build_search(exchange, date, query, matches)

    def get_market_overview(self, exchange: str, year=None, month=None, day=None) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        total, sectors = market_query.market_overview(records)
        return response_builder.build_market_overview(exchange, date, total, sectors)

    def get_sectors_overview(
        self,
        exchange: str,
        year=None,
        month=None,
        day=None,
        sector: str | None = None,
    ) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        _, sectors = market_query.market_overview(records, sector=sector)
        return response_builder.build_sectors_overview(exchange, date, sectors)

    def get_stock_data(self, exchange: str, ticker: str, year=None, month=None, day=None) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        security = market_query.find_security(records, ticker, exchange, date)
        return response_builder.build_stock(exchange, date, security)

    def rank_stocks(
        self,
        exchange: str,
        sort_by: str,
        year=None,
        month=None,
        day=None,
        order: str = const.DEFAULT_SORT_ORDER,
        limit: int = const.DEFAULT_LIMIT,
        sector: str | None = None,
        ticker: str | None = None,
    ) -> dict[str, Any]:
        date, records = self.load_snapshot(exchange, year, month, day)
        stocks = market_query.rank_securities(
            records, sort_by, order=order, limit=limit, sector=sector, ticker=ticker
        )
        logger.info(f"rank_stocks: {exchange} {date} by {sort_by} {order} -> {len(stocks)} stocks")
        return response_builder.build_ranking(exchange, date, sort_by, order, limit, stocks)

    def get_company_profile(self, exchange: str, ticker: str) -> dict[str, Any]:
        self._check_exchange(exchange, const.US_EXCHANGES)
        profile = self.provider.fetch_company_profile(exchange, ticker)
        return response_builder.build_profile(exchange, profile)
