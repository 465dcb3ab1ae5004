#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import os
import pathlib

from dotenv import load_dotenv


PROJECT_ROOT = pathlib.Path(__file__).parent.parent.absolute()

# Logging
LOG_FILE = "finmap.log"
API_LOG_FILE = "finmap-api.log"
CLI_LOG_FILE = "finmap-cli.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

# App Version
VERSION = "1.1.0"
SERVER_NAME = "finmap-mcp"

# ENVIRONMENT
load_dotenv()
BASE_URL = "https://finmap.org"
DATA_BASE_URL = os.getenv("FINMAP_DATA_BASE_URL", "https://raw.githubusercontent.com/finmap-org")
SNAPSHOT_PROVIDER = os.getenv("FINMAP_SNAPSHOT_PROVIDER", "github")
LOCAL_DATA_DIR = os.getenv("FINMAP_LOCAL_DATA_DIR", str(PROJECT_ROOT / "data"))
REQUEST_TIMEOUT = float(os.getenv("FINMAP_REQUEST_TIMEOUT", "30"))
API_HOST = os.getenv("FINMAP_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("FINMAP_API_PORT", "8000"))

# PROVIDER INFO (attached to every response)
INFO = {
    "provider": "finmap.org",
    "description": "Discover interactive stock charts and curated news at finmap.org",
    "github": "https://github.com/finmap-org",
    "donate": {
        "patreon": "https://patreon.com/finmap",
        "boosty": "https://boosty.to/finmap",
    },
    "issues": "https://github.com/finmap-org/mcp-server/issues",
    "feedback": "contact@finmap.org",
}

# EXCHANGES
STOCK_EXCHANGES = ("amex", "nasdaq", "nyse", "us-all", "lse", "moex", "bist")
US_EXCHANGES = ("amex", "nasdaq", "nyse")

EXCHANGE_TO_COUNTRY = {
    "amex": "us",
    "nasdaq": "us",
    "nyse": "us",
    "us-all": "us",
    "lse": "uk",
    "moex": "russia",
    "bist": "turkey",
}

EXCHANGE_INFO = {
    "amex": {
        "name": "American Stock Exchange",
        "country": "United States",
        "currency": "USD",
        "availableSince": "2024-12-09",
        "updateFrequency": "Hourly (weekdays)",
    },
    "nasdaq": {
        "name": "NASDAQ Stock Market",
        "country": "United States",
        "currency": "USD",
        "availableSince": "2024-12-09",
        "updateFrequency": "Hourly (weekdays)",
    },
    "nyse": {
        "name": "New York Stock Exchange",
        "country": "United States",
        "currency": "USD",
        "availableSince": "2024-12-09",
        "updateFrequency": "Hourly (weekdays)",
    },
    "us-all": {
        "name": "US Combined (AMEX + NASDAQ + NYSE)",
        "country": "United States",
        "currency": "USD",
        "availableSince": "2024-12-09",
        "updateFrequency": "Hourly (weekdays)",
    },
    "lse": {
        "name": "London Stock Exchange",
        "country": "United Kingdom",
        "currency": "GBP",
        "availableSince": "2025-02-07",
        "updateFrequency": "Hourly (weekdays)",
    },
    "moex": {
        "name": "Moscow Exchange",
        "country": "Russia",
        "currency": "RUB",
        "availableSince": "2011-12-19",
        "updateFrequency": "Every 15 minutes (weekdays)",
    },
    "bist": {
        "name": "Borsa Istanbul",
        "country": "Turkey",
        "currency": "TRY",
        "availableSince": "2015-11-30",
        "updateFrequency": "Every two months",
    },
}

# QUERY PARAMETERS
SORT_FIELDS = ("priceChangePct", "marketCap", "value", "volume", "numTrades")
SORT_ORDERS = ("asc", "desc")
DEFAULT_SORT_ORDER = "desc"

MIN_YEAR = 2012
DEFAULT_LIMIT = 10
MAX_SEARCH_LIMIT = 50
MAX_RANK_LIMIT = 500

# Row type literal marking a sector-aggregate row in a snapshot
SECTOR_ROW_TYPE = "sector"
