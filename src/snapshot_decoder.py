"""
Snapshot Decoder

Turns the raw snapshot envelope ({"securities": {"data": [[...], ...]}}) into
Security / SectorAggregate records. Positional indexes stop here.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from typing import Any

import constants as const
from errors import SnapshotNotFound
from market_record import MarketRecord, SectorAggregate, Security


logger = logging.getLogger(__name__)


# Column offsets of a snapshot row
EXCHANGE = 0
COUNTRY = 1
TYPE = 2
SECTOR = 3
INDUSTRY = 4
CURRENCY_ID = 5
TICKER = 6
NAME_ENG = 7
NAME_ENG_SHORT = 8
NAME_ORIGINAL = 9
NAME_ORIGINAL_SHORT = 10
PRICE_OPEN = 11
PRICE_LAST_SALE = 12
PRICE_CHANGE_PCT = 13
VOLUME = 14
VALUE = 15
NUM_TRADES = 16
MARKET_CAP = 17
LISTED_FROM = 18
LISTED_TILL = 19
WIKI_PAGE_ID_ENG = 20
WIKI_PAGE_ID_ORIGINAL = 21
ITEMS_PER_SECTOR = 22

ROW_WIDTH = 23


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug(f"Non-numeric market value {value!r} treated as 0")
        return 0


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def decode_row(row: list[Any]) -> MarketRecord:
    """
    Decode one positional row.

    Rows shorter than the documented width are padded with None, so optional
    trailing columns never cause a failure.
    """
    if len(row) < ROW_WIDTH:
        row = list(row) + [None] * (ROW_WIDTH - len(row))

    common = {
        "exchange": _text(row[EXCHANGE]),
        "country": _text(row[COUNTRY]),
        "sector": _text(row[SECTOR]),
        "industry": row[INDUSTRY],
        "currency": row[CURRENCY_ID],
        "price_open": _number(row[PRICE_OPEN]),
        "price_last_sale": _number(row[PRICE_LAST_SALE]),
        "price_change_pct": _number(row[PRICE_CHANGE_PCT]),
        "volume": _number(row[VOLUME]),
        "value": _number(row[VALUE]),
        "num_trades": _number(row[NUM_TRADES]),
        "market_cap": _number(row[MARKET_CAP]),
    }

    if row[TYPE] == const.SECTOR_ROW_TYPE:
        return SectorAggregate(
            **common,
            name=_text(row[TICKER]),
            items_per_sector=int(_number(row[ITEMS_PER_SECTOR])),
        )

    return Security(
        **common,
        ticker=_text(row[TICKER]),
        name_eng=row[NAME_ENG],
        name_eng_short=row[NAME_ENG_SHORT],
        name_original=row[NAME_ORIGINAL],
        name_original_short=row[NAME_ORIGINAL_SHORT],
        listed_from=row[LISTED_FROM],
        listed_till=row[LISTED_TILL],
        wiki_page_id_eng=row[WIKI_PAGE_ID_ENG],
        wiki_page_id_original=row[WIKI_PAGE_ID_ORIGINAL],
    )


def decode_snapshot(envelope: dict[str, Any] | None, exchange: str, date: str) -> list[MarketRecord]:
    """
    Decode a snapshot envelope into records, preserving source order.

    Args:
        envelope: Parsed snapshot JSON
        exchange: Exchange code the snapshot was fetched for
        date: Snapshot date (YYYY-MM-DD)

    Returns:
        List of Security and SectorAggregate records

    Raises:
        SnapshotNotFound: If the envelope or its data table is missing
    """
    securities = envelope.get("securities") if isinstance(envelope, dict) else None
    data = securities.get("data") if isinstance(securities, dict) else None
    if not isinstance(data, list):
        logger.warning(f"Snapshot envelope for {exchange} {date} has no securities.data table")
        raise SnapshotNotFound(exchange, date)

    records = [decode_row(row) for row in data]
    logger.debug(f"Decoded {len(records)} rows for {exchange} {date}")
    return records
