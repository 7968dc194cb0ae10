"""CartService: build and inspect the in-progress sale.

The cart lives on the till. Adding a line checks stock softly (the
authoritative check runs again at checkout); quoting prices the cart with
an optional discount without touching stock or history.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tillctl.domain.errors import NotFoundError, ValidationError
from tillctl.domain.lifecycle import StockShortfall
from tillctl.services._helpers import parse_cart_item
from tillctl.services.base import BaseService
from tillctl.services.result import ErrorCode, ServiceResult
from tillctl.services.telemetry import traced

if TYPE_CHECKING:
    from collections.abc import Iterable
    from decimal import Decimal


class CartService(BaseService):
    """Handles cart line management and quotes."""

    def _cart_payload(self) -> dict[str, Any]:
        cart = self._till.cart
        return {
            "lines": [line.to_dict() for line in cart],
            "line_count": len(cart),
            "item_count": cart.item_count,
        }

    @traced
    def add_item(self, sku: str, quantity: int = 1) -> ServiceResult:
        """Add *quantity* units of *sku* as a new cart line."""
        op = "add_to_cart"
        product = self._till.catalog.find_by_sku(sku.strip())
        if product is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No product with SKU {sku}", detail={"sku": sku}
            )
        if quantity <= 0:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_QUANTITY,
                f"Quantity must be positive, got {quantity}",
                detail={"sku": product.sku, "quantity": quantity},
            )
        try:
            line = self._till.cart.add_line(product, quantity)
        except ValidationError as exc:
            shortfall = StockShortfall(
                sku=product.sku, requested=quantity, available=product.current_stock
            )
            return ServiceResult.failure(
                op,
                ErrorCode.INSUFFICIENT_STOCK,
                exc.message,
                detail={"shortfalls": [shortfall.to_dict()]},
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"line": line.to_dict(), **self._cart_payload()},
        )

    @traced
    def add_items(self, specs: Iterable[str]) -> ServiceResult:
        """Add every ``SKU:QTY`` spec in order, stopping at the first failure.

        Lines added before the failure stay in the cart.
        """
        added = 0
        for spec in specs:
            try:
                sku, quantity = parse_cart_item(spec)
            except ValidationError as exc:
                return ServiceResult.failure(
                    "add_to_cart", ErrorCode.INVALID_QUANTITY, exc.message, detail=exc.detail
                )
            result = self.add_item(sku, quantity)
            if not result.ok:
                return result
            added += 1
        return ServiceResult(
            ok=True,
            op="add_to_cart",
            data={"added": added, **self._cart_payload()},
        )

    @traced
    def remove_item(self, index: int) -> ServiceResult:
        """Remove the cart line at 1-based position *index*."""
        try:
            line = self._till.cart.remove_line(index - 1)
        except NotFoundError as exc:
            return ServiceResult.failure(
                "remove_from_cart", ErrorCode.NOT_FOUND, exc.message, detail=exc.detail
            )
        return ServiceResult(
            ok=True,
            op="remove_from_cart",
            data={"removed": line.to_dict(), **self._cart_payload()},
        )

    @traced
    def clear(self) -> ServiceResult:
        removed = len(self._till.cart)
        self._till.cart.clear()
        return ServiceResult(ok=True, op="clear_cart", data={"removed": removed})

    @traced
    def quote(self, discount_rate: Decimal | int | float | str = 0) -> ServiceResult:
        """Price the cart as it stands. Nothing is committed."""
        cart = self._till.cart
        if cart.is_empty:
            return ServiceResult.failure("quote", ErrorCode.EMPTY_CART, "Cart is empty")
        try:
            summary = cart.price(discount_rate)
        except ValidationError as exc:
            return ServiceResult.failure(
                "quote", ErrorCode.INVALID_DISCOUNT, exc.message, detail=exc.detail
            )
        return ServiceResult(
            ok=True,
            op="quote",
            data={**self._cart_payload(), **summary.to_dict()},
        )
