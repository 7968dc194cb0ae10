"""Tests for the pure reporting queries."""

from datetime import UTC, date, datetime
from decimal import Decimal

from tillctl.domain.cart import Cart
from tillctl.domain.catalog import Catalog
from tillctl.domain.reporting import (
    find_transaction,
    summarize,
    transactions_between,
    transactions_on,
    units_sold,
)
from tillctl.domain.transaction import Transaction


def _sale(catalog: Catalog, seq: int, when: datetime, sku: str, qty: int) -> Transaction:
    cart = Cart()
    cart.add_line(catalog.get(sku), qty)
    return Transaction.freeze(
        transaction_id=f"TXN-{when:%Y%m%d}-{seq:04d}",
        timestamp=when,
        lines=cart,
        summary=cart.price(0),
    )


def _history(catalog: Catalog) -> list[Transaction]:
    return [
        _sale(catalog, 1, datetime(2026, 10, 15, 9, 0, tzinfo=UTC), "SC-WS-M", 1),
        _sale(catalog, 2, datetime(2026, 10, 16, 10, 0, tzinfo=UTC), "SC-WS-M", 3),
        _sale(catalog, 3, datetime(2026, 10, 16, 11, 0, tzinfo=UTC), "BE-CB-Kids", 2),
    ]


class TestLookups:
    def test_find_case_insensitive(self, scenario_catalog: Catalog) -> None:
        history = _history(scenario_catalog)
        found = find_transaction(history, "txn-20261016-0002")
        assert found is not None
        assert found.id == "TXN-20261016-0002"

    def test_find_missing(self, scenario_catalog: Catalog) -> None:
        assert find_transaction(_history(scenario_catalog), "TXN-20261016-9999") is None

    def test_on_date_in_commit_order(self, scenario_catalog: Catalog) -> None:
        found = transactions_on(_history(scenario_catalog), date(2026, 10, 16))
        assert [t.id for t in found] == ["TXN-20261016-0002", "TXN-20261016-0003"]

    def test_between_inclusive(self, scenario_catalog: Catalog) -> None:
        history = _history(scenario_catalog)
        found = transactions_between(history, Decimal("27.00"), Decimal("36.00"))
        assert [t.id for t in found] == ["TXN-20261015-0001", "TXN-20261016-0003"]


class TestAggregates:
    def test_summarize(self, scenario_catalog: Catalog) -> None:
        summary = summarize(_history(scenario_catalog))
        assert summary.total_revenue == Decimal("144.00")
        assert summary.total_items_sold == 6
        assert summary.transaction_count == 3

    def test_summarize_empty(self) -> None:
        summary = summarize([])
        assert summary.to_dict() == {
            "total_revenue": "0",
            "total_items_sold": 0,
            "transaction_count": 0,
        }

    def test_units_sold(self, scenario_catalog: Catalog) -> None:
        scenario_catalog.get("GL-FG-XS").deduct(3)
        scenario_catalog.get("SC-WS-M").deduct(1)
        assert [p.sku for p in units_sold(scenario_catalog)] == ["SC-WS-M", "GL-FG-XS"]
