"""
Tests for the Click command line interface.

Commands run through CliRunner against a LocalProvider-backed service.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import pytest
import sys
import os

# Add src and tests to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__)))

from click.testing import CliRunner

from finmap_cli import cli
from finmap_service import FinmapService
from providers.local_provider import LocalProvider
from test_data_factory import TRADING_DAY, SnapshotDataFactory, scenario_rows, sector_row, security_row


DATE_ARGS = ["--year", "2025", "--month", "1", "--day", "10"]


class TestMarketCommands:

    def setup_method(self):
        self.runner = CliRunner()

    @pytest.fixture(autouse=True)
    def snapshot(self, tmp_path):
        self.data = SnapshotDataFactory(tmp_path)
        self.data.write_snapshot("nasdaq", TRADING_DAY, scenario_rows())
        self.service = FinmapService(LocalProvider(tmp_path))

    def invoke(self, *args):
        return self.runner.invoke(cli, list(args), obj={"service": self.service})

    def test_help(self):
        result = self.invoke("market", "--help")
        assert result.exit_code == 0
        for command in ("exchanges", "sectors", "tickers", "search", "overview", "performance", "stock", "rank", "profile", "check"):
            assert command in result.output

    def test_exchanges(self):
        result = self.invoke("market", "exchanges")
        assert result.exit_code == 0
        assert "Borsa Istanbul" in result.output

    def test_sectors(self):
        result = self.invoke("market", "sectors", "-e", "nasdaq", *DATE_ARGS)
        assert result.exit_code == 0
        assert "Tech" in result.output

    def test_tickers(self):
        result = self.invoke("market", "tickers", "-e", "nasdaq", *DATE_ARGS)
        assert result.exit_code == 0
        assert result.output.index("AAA") < result.output.index("BBB")

    def test_search(self):
        result = self.invoke("market", "search", "-e", "nasdaq", "-q", "bbb", *DATE_ARGS)
        assert result.exit_code == 0
        assert "BBB Inc" in result.output

    def test_overview(self):
        result = self.invoke("market", "overview", "-e", "nasdaq", *DATE_ARGS)
        assert result.exit_code == 0
        assert "1.00M USD" in result.output

    def test_stock(self):
        result = self.invoke("market", "stock", "-e", "nasdaq", "-t", "AAA", *DATE_ARGS)
        assert result.exit_code == 0
        assert "TICKER: AAA" in result.output

    def test_stock_not_found(self):
        result = self.invoke("market", "stock", "-e", "nasdaq", "-t", "CCC", *DATE_ARGS)
        assert result.exit_code == 1
        assert "Ticker CCC not found on nasdaq" in result.output

    def test_rank(self):
        result = self.invoke("market", "rank", "-e", "nasdaq", "--sort-by", "marketCap", "--order", "asc", *DATE_ARGS)
        assert result.exit_code == 0
        assert result.output.index("BBB") < result.output.index("AAA")

    def test_rank_rejects_unknown_field(self):
        result = self.invoke("market", "rank", "-e", "nasdaq", "--sort-by", "price", *DATE_ARGS)
        assert result.exit_code == 2

    def test_weekend(self):
        result = self.invoke("market", "sectors", "-e", "nasdaq", "--year", "2025", "--month", "1", "--day", "11")
        assert result.exit_code == 1
        assert "not a trading day" in result.output

    def test_check_consistent(self):
        result = self.invoke("market", "check", "-e", "nasdaq", *DATE_ARGS)
        assert result.exit_code == 0
        assert "consistent" in result.output

    def test_check_mismatch(self):
        self.data.write_snapshot("nasdaq", TRADING_DAY, [
            sector_row("Tech", items=5),
            security_row("AAA", sector="Tech"),
        ])
        result = self.invoke("market", "check", "-e", "nasdaq", *DATE_ARGS)
        assert result.exit_code == 2
        assert "mismatches" in result.output

    def test_profile(self):
        self.data.write_profile("nasdaq", "AAA", {"symbol": "AAA", "industry": "Software"})
        result = self.invoke("market", "profile", "-e", "nasdaq", "-t", "AAA")
        assert result.exit_code == 0
        assert "industry: Software" in result.output
