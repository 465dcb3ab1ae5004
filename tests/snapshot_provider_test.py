#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os
# Add src and tests to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import tempfile
import unittest
from unittest.mock import Mock, patch

import requests

from errors import ProfileNotFound, SnapshotNotFound, SnapshotRetrievalError
from providers.github_provider import GitHubProvider
from providers.local_provider import LocalProvider
from providers.provider_factory import ProviderFactory
from providers.snapshot_provider import SnapshotProvider
from test_data_factory import TRADING_DAY, SnapshotDataFactory, envelope, scenario_rows


def mock_response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


class TestSnapshotProvider(unittest.TestCase):
    """Test abstract base class and key layout."""

    def test_cannot_instantiate_abstract_class(self):
        with self.assertRaises(TypeError):
            SnapshotProvider()

    def test_snapshot_key_routes_by_country(self):
        self.assertEqual(
            SnapshotProvider.snapshot_key("us-all", TRADING_DAY),
            "data-us/refs/heads/main/marketdata/2025/01/10/us-all.json",
        )
        self.assertEqual(
            SnapshotProvider.snapshot_key("lse", TRADING_DAY),
            "data-uk/refs/heads/main/marketdata/2025/01/10/lse.json",
        )
        self.assertEqual(
            SnapshotProvider.snapshot_key("moex", TRADING_DAY),
            "data-russia/refs/heads/main/marketdata/2025/01/10/moex.json",
        )
        self.assertEqual(
            SnapshotProvider.snapshot_key("bist", TRADING_DAY),
            "data-turkey/refs/heads/main/marketdata/2025/01/10/bist.json",
        )

    def test_profile_key_uses_uppercase_first_letter(self):
        self.assertEqual(
            SnapshotProvider.profile_key("nasdaq", "aapl"),
            "data-us/refs/heads/main/securities/nasdaq/A/aapl.json",
        )


class TestGitHubProvider(unittest.TestCase):

    def setUp(self):
        self.provider = GitHubProvider(base_url="https://example.test/finmap-org/", timeout=5)

    @patch("providers.github_provider.requests.get")
    def test_fetch_snapshot(self, mock_get):
        mock_get.return_value = mock_response(payload=envelope(scenario_rows()))

        result = self.provider.fetch_snapshot("nasdaq", TRADING_DAY)

        self.assertEqual(len(result["securities"]["data"]), 4)
        mock_get.assert_called_once_with(
            "https://example.test/finmap-org/data-us/refs/heads/main/marketdata/2025/01/10/nasdaq.json",
            timeout=5,
        )

    @patch("providers.github_provider.requests.get")
    def test_snapshot_not_found_mentions_available_since(self, mock_get):
        mock_get.return_value = mock_response(status_code=404)

        with self.assertRaises(SnapshotNotFound) as cm:
            self.provider.fetch_snapshot("lse", "2020-01-10")

        self.assertIn("2025-02-07", str(cm.exception))
        self.assertIn("lse", str(cm.exception))

    @patch("providers.github_provider.requests.get")
    def test_server_error(self, mock_get):
        mock_get.return_value = mock_response(status_code=500)

        with self.assertRaises(SnapshotRetrievalError) as cm:
            self.provider.fetch_snapshot("nasdaq", TRADING_DAY)
        self.assertEqual(cm.exception.status_code, 500)

    @patch("providers.github_provider.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()

        with self.assertRaises(SnapshotRetrievalError):
            self.provider.fetch_snapshot("nasdaq", TRADING_DAY)

    @patch("providers.github_provider.requests.get")
    def test_invalid_json(self, mock_get):
        response = mock_response()
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        mock_get.return_value = response

        with self.assertRaises(SnapshotRetrievalError) as cm:
            self.provider.fetch_snapshot("nasdaq", TRADING_DAY)
        self.assertIn("Invalid JSON", str(cm.exception))

    @patch("providers.github_provider.requests.get")
    def test_invalid_url_is_not_reported_as_json_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.InvalidURL("Invalid URL: No host supplied")

        with self.assertRaises(SnapshotRetrievalError) as cm:
            self.provider.fetch_snapshot("nasdaq", TRADING_DAY)
        self.assertIn("Request failed", str(cm.exception))
        self.assertNotIn("Invalid JSON", str(cm.exception))

    @patch("providers.github_provider.requests.get")
    def test_fetch_company_profile(self, mock_get):
        mock_get.return_value = mock_response(payload={"symbol": "AAPL", "industry": "Consumer Electronics"})

        result = self.provider.fetch_company_profile("nasdaq", "AAPL")

        self.assertEqual(result["industry"], "Consumer Electronics")
        self.assertTrue(mock_get.call_args[0][0].endswith("/securities/nasdaq/A/AAPL.json"))

    @patch("providers.github_provider.requests.get")
    def test_profile_not_found(self, mock_get):
        mock_get.return_value = mock_response(status_code=404)

        with self.assertRaises(ProfileNotFound) as cm:
            self.provider.fetch_company_profile("nyse", "NOPE")
        self.assertEqual(str(cm.exception), "Security NOPE not found on nyse")


class TestLocalProvider(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.factory = SnapshotDataFactory(self.tmpdir.name)
        self.provider = LocalProvider(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_fetch_snapshot(self):
        self.factory.write_snapshot("moex", TRADING_DAY, scenario_rows())
        result = self.provider.fetch_snapshot("moex", TRADING_DAY)
        self.assertEqual(result, envelope(scenario_rows()))

    def test_snapshot_not_found(self):
        with self.assertRaises(SnapshotNotFound):
            self.provider.fetch_snapshot("moex", TRADING_DAY)

    def test_corrupt_file(self):
        path = self.factory.write_snapshot("moex", TRADING_DAY, [])
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(SnapshotRetrievalError):
            self.provider.fetch_snapshot("moex", TRADING_DAY)

    def test_profile(self):
        self.factory.write_profile("amex", "XYZ", {"symbol": "XYZ"})
        self.assertEqual(self.provider.fetch_company_profile("amex", "XYZ"), {"symbol": "XYZ"})
        with self.assertRaises(ProfileNotFound):
            self.provider.fetch_company_profile("amex", "ABC")


class TestProviderFactory(unittest.TestCase):

    def setUp(self):
        ProviderFactory.reset()

    def tearDown(self):
        ProviderFactory.reset()

    def test_get_provider_caches_instance(self):
        provider1 = ProviderFactory.get_provider("github")
        provider2 = ProviderFactory.get_provider("GitHub")
        self.assertIs(provider1, provider2)
        self.assertIsInstance(provider1, GitHubProvider)

    def test_local_provider(self):
        self.assertIsInstance(ProviderFactory.get_provider("local"), LocalProvider)

    def test_unknown_provider(self):
        with self.assertRaises(ValueError):
            ProviderFactory.get_provider("ftp")


if __name__ == '__main__':
    unittest.main()
