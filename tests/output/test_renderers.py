"""Tests for operation-specific Rich renderers."""

from tillctl.output.renderers import render_quiet, render_result
from tillctl.services.result import ErrorCode, ServiceResult

_RECEIPT = {
    "id": "TXN-20261016-0001",
    "timestamp": "2026-10-16T14:03:22+00:00",
    "actor": "Walk-in",
    "coupon_code": "WINTER10",
    "lines": [
        {
            "sku": "SC-WS-M",
            "display_name": "Wool Scarf (M)",
            "unit_price": "27.00",
            "quantity": 3,
            "line_total": "81.00",
        }
    ],
    "subtotal": "81.00",
    "discount_rate": "10",
    "discount_amount": "8.10",
    "final_total": "72.90",
    "item_count": 3,
    "persisted": True,
}


class TestReceipt:
    def test_checkout_receipt(self) -> None:
        output = render_result(ServiceResult(ok=True, op="checkout", data=_RECEIPT))
        assert "TXN-20261016-0001" in output
        assert "Wool Scarf (M)" in output
        assert "Coupon: WINTER10" in output
        assert "-$8.10" in output
        assert "(10.0%)" in output
        assert "$72.90" in output

    def test_unpersisted_note(self) -> None:
        data = {**_RECEIPT, "persisted": False}
        output = render_result(ServiceResult(ok=True, op="checkout", data=data))
        assert "not yet written" in output

    def test_quiet_prints_id(self) -> None:
        result = ServiceResult(ok=True, op="checkout", data=_RECEIPT)
        assert render_quiet(result) == "TXN-20261016-0001"


class TestErrors:
    def test_shortfall_table(self) -> None:
        result = ServiceResult.failure(
            "checkout",
            ErrorCode.INSUFFICIENT_STOCK,
            "Insufficient stock for BE-CB-Kids",
            detail={
                "shortfalls": [
                    {"sku": "BE-CB-Kids", "requested": 3, "available": 2, "shortfall": 1}
                ]
            },
        )
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "BE-CB-Kids" in output
        assert "Requested" in output

    def test_detail_only_when_verbose(self) -> None:
        result = ServiceResult.failure(
            "get_product", ErrorCode.NOT_FOUND, "No product with SKU X", detail={"sku": "X"}
        )
        assert "detail" not in render_result(result)
        assert "sku: X" in render_result(result, verbose=True)


class TestCatalogRenderers:
    def test_product_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_products",
            data={
                "items": [
                    {
                        "sku": "SC-WS-M",
                        "category": "Scarves",
                        "name": "Wool Scarf",
                        "size": "M",
                        "unit_price": "27.00",
                        "stock": 18,
                        "status": "good",
                    }
                ],
                "count": 1,
            },
        )
        output = render_result(result)
        assert "SC-WS-M" in output
        assert "$27.00" in output
        assert "1 products" in output

    def test_summary(self) -> None:
        result = ServiceResult(
            ok=True,
            op="sales_summary",
            data={"total_revenue": "155.9", "total_items_sold": 7, "transaction_count": 3},
        )
        output = render_result(result)
        assert "revenue: $155.90" in output
        assert "transactions: 3" in output

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="save_stock", data={"path": "/x/stock.csv", "count": 50})
        output = render_result(result)
        assert output.splitlines()[0].startswith("OK")
        assert "count: 50" in output
