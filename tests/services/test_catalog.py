"""Tests for CatalogService: browsing and the stock file."""

from __future__ import annotations

from pathlib import Path

from tillctl.infrastructure.till import Till
from tillctl.services.catalog import CatalogService


class TestBrowse:
    def test_list_products(self, till: Till) -> None:
        result = CatalogService(till).list_products()
        assert result.ok
        assert result.data["count"] == 4
        first = result.data["items"][0]
        assert first["sku"] == "SC-WS-M"
        assert first["unit_price"] == "27.00"
        assert first["status"] == "good"

    def test_list_by_category(self, till: Till) -> None:
        result = CatalogService(till).list_products(category="scarves")
        assert [i["sku"] for i in result.data["items"]] == ["SC-WS-M"]

    def test_get_product(self, till: Till) -> None:
        result = CatalogService(till).get_product("BE-CB-Kids")
        assert result.ok
        assert result.data["status"] == "critical"

    def test_get_missing_is_not_found(self, till: Till) -> None:
        result = CatalogService(till).get_product("XX-YY-Z")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_low_stock_default_threshold(self, till: Till) -> None:
        result = CatalogService(till).low_stock()
        assert result.data["threshold"] == 5
        assert [i["sku"] for i in result.data["items"]] == ["BE-CB-Kids"]

    def test_low_stock_custom(self, till: Till) -> None:
        result = CatalogService(till).low_stock(threshold=10)
        assert result.data["count"] == 2

    def test_low_stock_invalid_threshold(self, till: Till) -> None:
        result = CatalogService(till).low_stock(threshold=0)
        assert not result.ok

    def test_units_sold(self, till: Till) -> None:
        till.catalog.get("SC-WS-M").deduct(3)
        result = CatalogService(till).units_sold()
        assert result.data["items"] == [
            {"sku": "SC-WS-M", "display_name": "Wool Scarf (M)", "units_sold": 3, "stock": 15}
        ]
        assert result.data["total_units"] == 3


class TestStockFile:
    def test_missing_file_created(self, till: Till) -> None:
        result = CatalogService(till).load_stock()
        assert result.ok
        assert result.data["created"] is True
        assert till.stock_path.is_file()

    def test_load_applies_levels(self, till: Till) -> None:
        till.stock_path.write_text(
            "SKU,Category,ProductName,Size,Price,Stock\n"
            "SC-WS-M,Scarves,Wool Scarf,M,27.00,11\n"
            "ZZ-ZZ-Z,Nope,Nothing,Z,1.00,3\n"
            "BE-CB-Kids,Beanies,Classic Beanie,Kids,18.00,oops\n",
            encoding="utf-8",
        )
        result = CatalogService(till).load_stock()
        assert result.ok
        assert result.data["updated"] == 1
        assert result.data["skipped"] == 2
        assert len(result.warnings) == 2
        assert till.catalog.get("SC-WS-M").current_stock == 11
        assert till.catalog.get("BE-CB-Kids").current_stock == 2

    def test_bad_header_keeps_defaults(self, till: Till) -> None:
        till.stock_path.write_text("garbage\n", encoding="utf-8")
        result = CatalogService(till).load_stock()
        assert result.ok
        assert result.warnings
        assert till.catalog.get("SC-WS-M").current_stock == 18

    def test_save_stock(self, till: Till) -> None:
        till.catalog.get("SC-WS-M").deduct(3)
        result = CatalogService(till).save_stock()
        assert result.ok
        assert "SC-WS-M,Scarves,Wool Scarf,M,27.00,15" in till.stock_path.read_text(
            encoding="utf-8"
        )

    def test_save_failure_reported(self, till: Till, till_root: Path) -> None:
        till.stock_path.mkdir()
        (till.stock_path / "keep").write_text("x", encoding="utf-8")
        result = CatalogService(till).save_stock()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "PERSISTENCE_FAILED"
