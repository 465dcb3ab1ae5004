"""
Finmap error taxonomy

Every failure a query can produce. The tool boundary converts these into a
single "ERROR: ..." text payload; the messages are written for the caller so
they can re-issue a corrected query.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import constants as const


class FinmapError(Exception):
    """Base exception for query errors."""


class InvalidDate(FinmapError):
    """Composed year/month/day is not a real calendar date."""


class NonTradingDay(FinmapError):
    """Resolved date falls on a weekend."""

    def __init__(self, date: str):
        super().__init__(
            f"{date} is not a trading day. Data is only available for work days (Monday to Friday)"
        )
        self.date = date


class SnapshotNotFound(FinmapError):
    """No snapshot exists for the (exchange, date) pair."""

    def __init__(self, exchange: str, date: str | None = None):
        available_since = const.EXCHANGE_INFO.get(exchange, {}).get("availableSince", "unknown")
        super().__init__(
            f"Not found, try another date. The date must be on or after {available_since} for {exchange}"
        )
        self.exchange = exchange
        self.date = date
        self.available_since = available_since


class TickerNotFound(FinmapError):
    """Requested ticker is absent from an otherwise valid snapshot."""

    def __init__(self, ticker: str, exchange: str, date: str):
        super().__init__(f"Ticker {ticker} not found on {exchange} for date {date}")
        self.ticker = ticker
        self.exchange = exchange
        self.date = date


class ProfileNotFound(FinmapError):
    """Company profile lookup miss."""

    def __init__(self, ticker: str, exchange: str):
        super().__init__(f"Security {ticker} not found on {exchange}")
        self.ticker = ticker
        self.exchange = exchange


class SnapshotRetrievalError(FinmapError):
    """Retrieval failed for a reason other than not-found (timeout, HTTP error, bad body)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
