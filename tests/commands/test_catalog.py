"""Tests for catalog CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from tillctl.cli import cli


@pytest.mark.usefixtures("_isolated_till")
class TestCatalogCommands:
    def test_list(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "catalog", "list"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["count"] == 50

    def test_list_category(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "catalog", "list", "--category", "Socks"])
        assert json.loads(result.output)["data"]["count"] == 10

    def test_first_run_writes_stock_file(self, cli_runner: CliRunner, till_root: Path) -> None:
        cli_runner.invoke(cli, ["catalog", "list"])
        assert (till_root / "stock.csv").is_file()

    def test_show(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "catalog", "show", "SC-WS-M"])
        data = json.loads(result.output)["data"]
        assert data["unit_price"] == "27.00"
        assert data["stock"] == 20

    def test_show_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["catalog", "show", "NOPE"])
        assert result.exit_code == 1
        assert "ERROR" in result.output

    def test_low_stock_quiet_lists_skus(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "catalog", "low-stock"])
        assert result.exit_code == 0
        skus = result.output.split()
        assert "GL-WG-XL" in skus  # 3 Winter Gloves in XL
        assert "SC-WS-M" not in skus

    def test_units_sold(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["sell", "SO-TS-M:4"])
        result = cli_runner.invoke(cli, ["--json", "catalog", "units-sold"])
        data = json.loads(result.output)["data"]
        assert data["items"][0]["sku"] == "SO-TS-M"
        assert data["total_units"] == 4

    def test_bad_stock_file_warns(self, cli_runner: CliRunner, till_root: Path) -> None:
        (till_root / "stock.csv").write_text(
            "SKU,Category,ProductName,Size,Price,Stock\nSC-WS-M,Scarves,Wool Scarf,M,27.00,x\n",
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["--json", "catalog", "show", "SC-WS-M"])
        payload = json.loads(result.output)
        assert payload["data"]["stock"] == 20
        assert any("Skipped stock row" in w for w in payload["warnings"])
