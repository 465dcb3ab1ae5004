"""
Snapshot Provider Abstract Base Class

Defines the retrieval contract for exchange snapshots and company profiles.
Implementations differ only in where the documents live (the public data
repositories over HTTP, or a local mirror on disk).

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from abc import ABC, abstractmethod
from typing import Any

import constants as const
from trading_date import snapshot_path


class SnapshotProvider(ABC):
    """Abstract base class for snapshot providers."""

    @staticmethod
    def snapshot_key(exchange: str, date: str) -> str:
        """
        Relative location of a snapshot document.

        Args:
            exchange: Exchange code (e.g., 'nasdaq', 'moex')
            date: Snapshot date in YYYY-MM-DD format

        Returns:
            'data-{country}/refs/heads/main/marketdata/YYYY/MM/DD/{exchange}.json'
        """
        country = const.EXCHANGE_TO_COUNTRY[exchange]
        return f"data-{country}/refs/heads/main/marketdata/{snapshot_path(date)}/{exchange}.json"

    @staticmethod
    def profile_key(exchange: str, ticker: str) -> str:
        """
        Relative location of a US company profile document.

        Returns:
            'data-us/refs/heads/main/securities/{exchange}/{FIRST_LETTER}/{ticker}.json'
        """
        first_letter = ticker[:1].upper()
        return f"data-us/refs/heads/main/securities/{exchange}/{first_letter}/{ticker}.json"

    @abstractmethod
    def fetch_snapshot(self, exchange: str, date: str) -> dict[str, Any]:
        """
        Get the raw snapshot envelope for an exchange and date.

        Args:
            exchange: Exchange code from const.STOCK_EXCHANGES
            date: Snapshot date in YYYY-MM-DD format

        Returns:
            Parsed envelope: {'securities': {'data': [[...23 fields...], ...]}}

        Raises:
            SnapshotNotFound: If no snapshot exists for the pair
            SnapshotRetrievalError: If retrieval fails for any other reason
        """

    @abstractmethod
    def fetch_company_profile(self, exchange: str, ticker: str) -> dict[str, Any]:
        """
        Get the company profile document for a US-listed ticker.

        Args:
            exchange: One of const.US_EXCHANGES
            ticker: Ticker symbol (case-sensitive)

        Returns:
            Profile document as a dictionary

        Raises:
            ProfileNotFound: If no profile exists
            SnapshotRetrievalError: If retrieval fails for any other reason
        """
