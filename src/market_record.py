"""
Snapshot record types

A snapshot row is either a tradable Security or a SectorAggregate (a sector's
or the whole market's rolled-up totals). Both come from the same positional
row layout; the decoder picks the variant once and nothing downstream
re-inspects the raw row.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MarketRecord:
    """Fields shared by both row variants"""
    exchange: str
    country: str
    sector: str  # "" means unclassified / whole market
    industry: str | None
    currency: str | None
    price_open: float
    price_last_sale: float
    price_change_pct: float
    volume: float
    value: float
    num_trades: float
    market_cap: float

    def metric(self, field: str) -> float:
        """Numeric value by its public (camelCase) name, missing values count as zero"""
        attr = METRIC_ATTRIBUTES[field]
        return getattr(self, attr) or 0


@dataclass(frozen=True)
class Security(MarketRecord):
    """One tradable instrument in a snapshot"""
    ticker: str = ""
    name_eng: str | None = None
    name_eng_short: str | None = None
    name_original: str | None = None
    name_original_short: str | None = None
    listed_from: str | None = None
    listed_till: str | None = None
    wiki_page_id_eng: Any = None
    wiki_page_id_original: Any = None

    def display_name(self, english_names: bool = True) -> str | None:
        if english_names:
            return self.name_eng
        return self.name_original_short or self.name_eng

    def to_dict(self) -> dict[str, Any]:
        return {
            "exchange": self.exchange,
            "country": self.country,
            "sector": self.sector,
            "industry": self.industry,
            "ticker": self.ticker,
            "nameEng": self.name_eng,
            "nameOriginal": self.name_original,
            "priceOpen": self.price_open,
            "priceLastSale": self.price_last_sale,
            "priceChangePct": self.price_change_pct,
            "volume": self.volume,
            "value": self.value,
            "numTrades": self.num_trades,
            "marketCap": self.market_cap,
            "listedFrom": self.listed_from,
            "listedTill": self.listed_till,
        }

    def to_ranking_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "name": self.name_eng,
            "sector": self.sector,
            "priceLastSale": self.price_last_sale,
            "priceChangePct": self.price_change_pct,
            "marketCap": self.market_cap,
            "volume": self.volume,
            "value": self.value,
            "numTrades": self.num_trades,
        }


@dataclass(frozen=True)
class SectorAggregate(MarketRecord):
    """Totals for one sector, or for the whole market when sector is empty"""
    name: str = ""
    items_per_sector: int = 0

    @property
    def is_market_total(self) -> bool:
        return self.sector == ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "marketCap": self.market_cap,
            "marketCapChangePct": self.price_change_pct,
            "volume": self.volume,
            "value": self.value,
            "numTrades": self.num_trades,
            "itemsPerSector": self.items_per_sector,
        }


# Public sort field name -> record attribute
METRIC_ATTRIBUTES = {
    "priceChangePct": "price_change_pct",
    "marketCap": "market_cap",
    "value": "value",
    "volume": "volume",
    "numTrades": "num_trades",
}
