"""Tests for the quote and sell commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from tillctl.cli import cli


@pytest.mark.usefixtures("_isolated_till")
class TestQuote:
    def test_quote(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "quote", "SC-WS-M:3", "--discount", "10"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["op"] == "quote"
        assert data["data"]["final_total"] == "72.90"

    def test_quote_commits_nothing(self, cli_runner: CliRunner, till_root: Path) -> None:
        cli_runner.invoke(cli, ["quote", "SC-WS-M:3"])
        assert not (till_root / "sales_history.txt").exists()

    def test_unknown_sku(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["quote", "XX-YY-Z:1"])
        assert result.exit_code == 1
        assert "No product with SKU XX-YY-Z" in result.output


@pytest.mark.usefixtures("_isolated_till")
class TestSell:
    def test_sell_commits_and_saves_stock(self, cli_runner: CliRunner, till_root: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "sell", "SC-WS-M:3", "--discount", "10", "--coupon", "WINTER10"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["id"].endswith("-0001")
        assert data["final_total"] == "72.90"
        assert data["coupon_code"] == "WINTER10"
        # seed catalog starts SC-WS-M at 20
        assert "SC-WS-M,Scarves,Wool Scarf,M,27.00,17" in (till_root / "stock.csv").read_text(
            encoding="utf-8"
        )
        assert "TOTAL PAID: $72.90" in (till_root / "sales_history.txt").read_text(
            encoding="utf-8"
        )

    def test_sequence_continues_across_invocations(self, cli_runner: CliRunner) -> None:
        first = cli_runner.invoke(cli, ["-q", "sell", "SC-WS-M:1"])
        second = cli_runner.invoke(cli, ["-q", "sell", "SC-WS-M:1"])
        assert first.output.strip().endswith("-0001")
        assert second.output.strip().endswith("-0002")

    def test_stock_persists_across_invocations(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["sell", "SC-WS-M:5"])
        result = cli_runner.invoke(cli, ["--json", "catalog", "show", "SC-WS-M"])
        assert json.loads(result.output)["data"]["stock"] == 15

    def test_actor_recorded(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "--actor", "Sam", "sell", "SC-WS-M:1"])
        assert json.loads(result.output)["data"]["actor"] == "Sam"

    def test_insufficient_stock_rejected(self, cli_runner: CliRunner, till_root: Path) -> None:
        # seed has 4 Cable Knit Sweaters in XL: two lines of 3 overdraw jointly
        result = cli_runner.invoke(cli, ["--json", "sell", "SW-CK-XL:3", "SW-CK-XL:3"])
        assert result.exit_code == 1
        error = json.loads(result.output)["error"]
        assert error["code"] == "INSUFFICIENT_STOCK"
        assert error["detail"]["shortfalls"][0] == {
            "sku": "SW-CK-XL",
            "requested": 6,
            "available": 4,
            "shortfall": 2,
        }
        assert not (till_root / "sales_history.txt").exists()

    def test_invalid_discount(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["sell", "SC-WS-M:1", "--discount", "120"])
        assert result.exit_code == 1
        assert "between 0 and 100" in result.output

    def test_human_receipt(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["sell", "SC-WS-M:3", "--discount", "10"])
        assert result.exit_code == 0
        assert "Wool Scarf" in result.output
        assert "$72.90" in result.output
