"""
Market Query Engine

Filter, group, sort, rank and search operations over a decoded snapshot.
All functions are pure: they never mutate the records they are given and
perform no I/O.

Sector and ticker comparisons are exact and case-sensitive. Only the free-text
search path lowercases.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from collections.abc import Iterable, Sequence

import constants as const
from errors import TickerNotFound
from match_scorer import calculate_match_score
from market_record import MarketRecord, SectorAggregate, Security


logger = logging.getLogger(__name__)


def classified_securities(records: Iterable[MarketRecord]) -> list[Security]:
    """Security rows that carry a sector; unclassified rows are noise for sector-scoped queries"""
    return [r for r in records if isinstance(r, Security) and r.sector]


def sector_aggregates(records: Iterable[MarketRecord]) -> list[SectorAggregate]:
    return [r for r in records if isinstance(r, SectorAggregate)]


def list_sectors(records: Sequence[MarketRecord]) -> list[dict]:
    """
    Distinct sectors with the number of securities in each, in first-seen order.
    """
    counts: dict[str, int] = {}
    for security in classified_securities(records):
        counts[security.sector] = counts.get(security.sector, 0) + 1

    return [{"name": name, "itemsPerSector": count} for name, count in counts.items()]


def list_tickers(
    records: Sequence[MarketRecord],
    sector: str | None = None,
    english_names: bool = True,
) -> dict[str, list[dict]]:
    """
    Tickers and display names grouped by sector.

    Args:
        records: Decoded snapshot
        sector: Restrict to one sector (exact match)
        english_names: Use English names; otherwise prefer the original short name

    Returns:
        {sector: [{"ticker": ..., "name": ...}, ...]} with each group sorted by ticker
    """
    groups: dict[str, list[dict]] = {}
    for security in classified_securities(records):
        if sector and security.sector != sector:
            continue

        name = security.display_name(english_names)
        if not security.ticker or not name:
            continue

        groups.setdefault(security.sector, []).append({"ticker": security.ticker, "name": name})

    for companies in groups.values():
        companies.sort(key=lambda c: c["ticker"])

    return groups


def rank_securities(
    records: Sequence[MarketRecord],
    sort_by: str,
    order: str = const.DEFAULT_SORT_ORDER,
    limit: int = const.DEFAULT_LIMIT,
    sector: str | None = None,
    ticker: str | None = None,
) -> list[Security]:
    """
    Rank classified securities by a numeric field.

    Ties keep snapshot order in both directions. Missing values rank as zero.

    Args:
        records: Decoded snapshot
        sort_by: One of const.SORT_FIELDS
        order: 'asc' or 'desc'
        limit: Number of results (1-500)
        sector: Restrict to one sector (exact match)
        ticker: Restrict to one ticker (exact match)

    Raises:
        ValueError: On an unknown sort field/order or an out-of-range limit
    """
    if sort_by not in const.SORT_FIELDS:
        raise ValueError(f"Invalid sort field '{sort_by}'. Choose from: {', '.join(const.SORT_FIELDS)}")
    if order not in const.SORT_ORDERS:
        raise ValueError(f"Invalid sort order '{order}'. Choose from: {', '.join(const.SORT_ORDERS)}")
    if not 1 <= limit <= const.MAX_RANK_LIMIT:
        raise ValueError(f"Limit must be between 1 and {const.MAX_RANK_LIMIT}")

    candidates = [
        s for s in classified_securities(records)
        if (not sector or s.sector == sector) and (not ticker or s.ticker == ticker)
    ]

    ranked = sorted(candidates, key=lambda s: s.metric(sort_by), reverse=(order == "desc"))
    return ranked[:limit]


def market_overview(
    records: Sequence[MarketRecord],
    sector: str | None = None,
) -> tuple[SectorAggregate | None, list[SectorAggregate]]:
    """
    Split aggregate rows into the whole-market total and per-sector totals.

    Args:
        records: Decoded snapshot
        sector: Keep only the aggregate whose display name matches exactly

    Returns:
        (market total or None, sector aggregates in snapshot order)
    """
    total: SectorAggregate | None = None
    sectors: list[SectorAggregate] = []

    for aggregate in sector_aggregates(records):
        if aggregate.is_market_total:
            total = aggregate
        elif not sector or aggregate.name == sector:
            sectors.append(aggregate)

    return total, sectors


def find_security(records: Sequence[MarketRecord], ticker: str, exchange: str, date: str) -> Security:
    """
    Exact, case-sensitive ticker lookup.

    Raises:
        TickerNotFound: If no security row carries the ticker
    """
    for record in records:
        if isinstance(record, Security) and record.ticker == ticker:
            return record

    raise TickerNotFound(ticker, exchange, date)


def search_securities(
    records: Sequence[MarketRecord],
    query: str,
    limit: int = const.DEFAULT_LIMIT,
) -> list[tuple[Security, int]]:
    """
    Fuzzy search over tickers and English names.

    Returns:
        (security, score) pairs, best score first, ties in snapshot order

    Raises:
        ValueError: If limit is outside 1-50
    """
    if not 1 <= limit <= const.MAX_SEARCH_LIMIT:
        raise ValueError(f"Limit must be between 1 and {const.MAX_SEARCH_LIMIT}")

    search_term = query.lower()
    scored = []
    for security in classified_securities(records):
        score = calculate_match_score(security.ticker, security.name_eng, search_term)
        if score > 0:
            scored.append((security, score))

    scored.sort(key=lambda pair: pair[1], reverse=True)
    logger.debug(f"Search '{query}': {len(scored)} matches")
    return scored[:limit]


def sector_count_mismatches(records: Sequence[MarketRecord]) -> dict[str, tuple[int, int]]:
    """
    Cross-check declared aggregate item counts against the security rows.

    Returns:
        {sector: (declared, derived)} for every sector aggregate whose declared
        count differs from the number of securities carrying that sector
    """
    derived = {s["name"]: s["itemsPerSector"] for s in list_sectors(records)}
    mismatches = {}
    for aggregate in sector_aggregates(records):
        if aggregate.is_market_total:
            continue
        actual = derived.get(aggregate.sector, 0)
        if aggregate.items_per_sector != actual:
            mismatches[aggregate.sector] = (aggregate.items_per_sector, actual)

    return mismatches
