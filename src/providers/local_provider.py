"""
Local Snapshot Provider

Reads snapshots and profiles from a directory that mirrors the layout of the
data repositories. Handy for offline use and for tests.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
from pathlib import Path
from typing import Any

import constants as const
from errors import ProfileNotFound, SnapshotNotFound, SnapshotRetrievalError
from providers.snapshot_provider import SnapshotProvider


logger = logging.getLogger(__name__)


class LocalProvider(SnapshotProvider):
    """Snapshot provider backed by a local directory tree."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root or const.LOCAL_DATA_DIR)
        logger.info(f"Initialized local snapshot provider at {self.root}")

    def _read_json(self, relative: str) -> dict[str, Any] | None:
        path = self.root / relative
        if not path.is_file():
            logger.info(f"Not found: {path}")
            return None

        try:
            with open(path, encoding="utf-8") as f:
                result: dict[str, Any] = json.load(f)
            return result
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read {path}: {e}")
            raise SnapshotRetrievalError(f"Could not read {relative}: {e}")

    def fetch_snapshot(self, exchange: str, date: str) -> dict[str, Any]:
        envelope = self._read_json(self.snapshot_key(exchange, date))
        if envelope is None:
            raise SnapshotNotFound(exchange, date)
        return envelope

    def fetch_company_profile(self, exchange: str, ticker: str) -> dict[str, Any]:
        profile = self._read_json(self.profile_key(exchange, ticker))
        if profile is None:
            raise ProfileNotFound(ticker, exchange)
        return profile
