"""
GitHub Snapshot Provider

Implementation of SnapshotProvider reading the finmap-org data repositories
over HTTP (raw.githubusercontent.com by default).

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from typing import Any

import requests

import constants as const
from errors import ProfileNotFound, SnapshotNotFound, SnapshotRetrievalError
from providers.snapshot_provider import SnapshotProvider


logger = logging.getLogger(__name__)


class GitHubProvider(SnapshotProvider):
    """Snapshot provider using the public finmap-org data repositories."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        """
        Initialize GitHub provider.

        Args:
            base_url: Repository root (defaults to const.DATA_BASE_URL)
            timeout: Request timeout in seconds (defaults to const.REQUEST_TIMEOUT)
        """
        self.base_url = (base_url or const.DATA_BASE_URL).rstrip("/")
        self.timeout = timeout or const.REQUEST_TIMEOUT
        logger.info(f"Initialized GitHub snapshot provider at {self.base_url}")

    def _get_json(self, path: str) -> dict[str, Any] | None:
        """
        GET a JSON document.

        Returns:
            Parsed document, or None on HTTP 404

        Raises:
            SnapshotRetrievalError: On timeout, other HTTP errors or an undecodable body
        """
        url = f"{self.base_url}/{path}"
        logger.debug(f"GET {url}")

        try:
            response = requests.get(url, timeout=self.timeout)
            if response.status_code == 404:
                logger.info(f"Not found: {url}")
                return None
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result

        except requests.exceptions.Timeout:
            logger.error(f"Timeout fetching {url}")
            raise SnapshotRetrievalError(f"Timeout fetching {path}")
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            raise SnapshotRetrievalError(f"HTTP error fetching {path}: {e}", status_code=response.status_code)
        except requests.exceptions.JSONDecodeError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise SnapshotRetrievalError(f"Invalid JSON in {path}")
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for {url}: {e}", exc_info=True)
            raise SnapshotRetrievalError(f"Request failed for {path}: {e}")

    def fetch_snapshot(self, exchange: str, date: str) -> dict[str, Any]:
        envelope = self._get_json(self.snapshot_key(exchange, date))
        if envelope is None:
            raise SnapshotNotFound(exchange, date)
        return envelope

    def fetch_company_profile(self, exchange: str, ticker: str) -> dict[str, Any]:
        profile = self._get_json(self.profile_key(exchange, ticker))
        if profile is None:
            raise ProfileNotFound(ticker, exchange)
        return profile
