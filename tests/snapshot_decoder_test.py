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

import dataclasses
import unittest

from errors import SnapshotNotFound
from market_record import SectorAggregate, Security
from snapshot_decoder import ROW_WIDTH, decode_row, decode_snapshot
from test_data_factory import TRADING_DAY, envelope, scenario_rows, sector_row, security_row


class TestDecodeRow(unittest.TestCase):

    def test_security_fields(self):
        row = security_row("AAA", sector="Tech", market_cap=400000, name="Alpha Aa Inc",
                           price_change_pct=1.5, volume=10, value=100, num_trades=3)
        self.assertEqual(len(row), ROW_WIDTH)

        record = decode_row(row)

        self.assertIsInstance(record, Security)
        self.assertEqual(record.exchange, "nasdaq")
        self.assertEqual(record.country, "us")
        self.assertEqual(record.sector, "Tech")
        self.assertEqual(record.industry, "Software")
        self.assertEqual(record.currency, "USD")
        self.assertEqual(record.ticker, "AAA")
        self.assertEqual(record.name_eng, "Alpha Aa Inc")
        self.assertEqual(record.price_open, 9.5)
        self.assertEqual(record.price_last_sale, 10.0)
        self.assertEqual(record.price_change_pct, 1.5)
        self.assertEqual(record.volume, 10)
        self.assertEqual(record.value, 100)
        self.assertEqual(record.num_trades, 3)
        self.assertEqual(record.market_cap, 400000)
        self.assertEqual(record.listed_from, "2001-01-01")
        self.assertIsNone(record.listed_till)
        self.assertEqual(record.wiki_page_id_eng, 123)

    def test_sector_aggregate_fields(self):
        record = decode_row(sector_row("Tech", market_cap=600000, items=2, price_change_pct=-0.4))

        self.assertIsInstance(record, SectorAggregate)
        self.assertEqual(record.name, "Tech")
        self.assertEqual(record.sector, "Tech")
        self.assertEqual(record.market_cap, 600000)
        self.assertEqual(record.price_change_pct, -0.4)
        self.assertEqual(record.items_per_sector, 2)
        self.assertFalse(record.is_market_total)

    def test_market_total(self):
        record = decode_row(sector_row("", market_cap=1000000))
        self.assertIsInstance(record, SectorAggregate)
        self.assertTrue(record.is_market_total)

    def test_classification_only_by_type_literal(self):
        row = security_row("SECT")
        row[2] = "Sector"  # not the exact literal
        self.assertIsInstance(decode_row(row), Security)

    def test_short_row_padded(self):
        record = decode_row(["lse", "uk", "stock", "Banks", None, "GBP", "BARC"])

        self.assertIsInstance(record, Security)
        self.assertEqual(record.ticker, "BARC")
        self.assertIsNone(record.name_eng)
        self.assertEqual(record.market_cap, 0)
        self.assertEqual(record.num_trades, 0)

    def test_missing_numeric_values_are_zero(self):
        row = security_row("AAA")
        row[17] = None
        row[13] = ""
        record = decode_row(row)
        self.assertEqual(record.market_cap, 0)
        self.assertEqual(record.price_change_pct, 0)

    def test_numeric_strings_parsed(self):
        row = security_row("AAA")
        row[17] = "1234.5"
        self.assertEqual(decode_row(row).market_cap, 1234.5)

    def test_records_are_immutable(self):
        record = decode_row(security_row("AAA"))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            record.ticker = "BBB"

    def test_input_row_not_mutated(self):
        row = ["lse", "uk", "stock", "Banks"]
        decode_row(row)
        self.assertEqual(len(row), 4)


class TestDecodeSnapshot(unittest.TestCase):

    def test_preserves_source_order(self):
        records = decode_snapshot(envelope(scenario_rows()), "nasdaq", TRADING_DAY)

        self.assertEqual(
            [type(r) for r in records],
            [SectorAggregate, SectorAggregate, Security, Security],
        )
        self.assertEqual([r.ticker for r in records[2:]], ["AAA", "BBB"])

    def test_empty_table(self):
        self.assertEqual(decode_snapshot(envelope([]), "nasdaq", TRADING_DAY), [])

    def test_missing_envelope(self):
        for bad in (None, {}, {"securities": {}}, {"securities": {"data": None}}, []):
            with self.assertRaises(SnapshotNotFound) as cm:
                decode_snapshot(bad, "nasdaq", TRADING_DAY)
            self.assertIn("2024-12-09", str(cm.exception))


if __name__ == '__main__':
    unittest.main()
