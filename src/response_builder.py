"""
Response Assembler

Wraps query engine output with the static provider info, chart links and
exchange metadata. No business logic lives here; every document is plain
dicts and lists so it serializes straight to JSON.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from typing import Any

import constants as const
from market_record import SectorAggregate, Security


def create_charts(exchange: str, date: str | None = None) -> dict[str, str]:
    """Links to the interactive finmap.org charts for an exchange (and date)"""
    treemap = f"{const.BASE_URL}/?chartType=treemap&dataType=marketcap&exchange={exchange}"
    if date:
        treemap += f"&date={date}"
    return {
        "histogram": f"{const.BASE_URL}/?chartType=histogram&dataType=marketcap&exchange={exchange}",
        "treemap": treemap,
    }


def format_error(error: BaseException | str) -> str:
    return f"ERROR: {error}"


def _header(exchange: str, date: str, charts: bool = False) -> dict[str, Any]:
    document: dict[str, Any] = {"info": const.INFO}
    if charts:
        document["charts"] = create_charts(exchange, date)
    document["date"] = date
    document["exchange"] = exchange.upper()
    document["currency"] = const.EXCHANGE_INFO[exchange]["currency"]
    return document


def build_exchanges() -> dict[str, Any]:
    exchanges = [{"id": exchange_id, **info} for exchange_id, info in const.EXCHANGE_INFO.items()]
    return {"info": const.INFO, "exchanges": exchanges}


def build_sectors(exchange: str, date: str, sectors: list[dict]) -> dict[str, Any]:
    return {**_header(exchange, date), "sectors": sectors}


def build_tickers(exchange: str, date: str, groups: dict[str, list[dict]]) -> dict[str, Any]:
    return {**_header(exchange, date), "sectors": groups}


def build_search(exchange: str, date: str, query: str, matches: list[tuple[Security, int]]) -> dict[str, Any]:
    return {
        **_header(exchange, date),
        "query": query,
        "matches": [
            {"ticker": s.ticker, "name": s.name_eng, "sector": s.sector, "score": score}
            for s, score in matches
        ],
    }


def build_market_overview(
    exchange: str,
    date: str,
    total: SectorAggregate | None,
    sectors: list[SectorAggregate],
) -> dict[str, Any]:
    return {
        **_header(exchange, date, charts=True),
        "marketTotal": total.to_dict() if total else {},
        "sectors": [s.to_dict() for s in sectors],
    }


def build_sectors_overview(exchange: str, date: str, sectors: list[SectorAggregate]) -> dict[str, Any]:
    return {**_header(exchange, date, charts=True), "sectors": [s.to_dict() for s in sectors]}


def build_stock(exchange: str, date: str, security: Security) -> dict[str, Any]:
    fields = security.to_dict()
    return {
        "info": const.INFO,
        "charts": create_charts(exchange, date),
        "date": date,
        "exchange": fields.pop("exchange"),
        "country": fields.pop("country"),
        "currency": const.EXCHANGE_INFO[exchange]["currency"],
        **fields,
    }


def build_ranking(
    exchange: str,
    date: str,
    sort_by: str,
    order: str,
    limit: int,
    stocks: list[Security],
) -> dict[str, Any]:
    return {
        **_header(exchange, date, charts=True),
        "sortBy": sort_by,
        "order": order,
        "limit": limit,
        "count": len(stocks),
        "stocks": [s.to_ranking_dict() for s in stocks],
    }


def build_profile(exchange: str, profile: dict[str, Any]) -> dict[str, Any]:
    return {"info": const.INFO, "charts": create_charts(exchange), **profile}
