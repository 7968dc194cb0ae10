"""Cart: ordered lines for the sale currently being rung up.

Lines hold a live reference to catalog products so prices and stock shown
while building the cart reflect the catalog. The stock check in
:meth:`Cart.add_line` is advisory; the authoritative check happens again at
checkout against live stock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from tillctl.domain.errors import NotFoundError, ValidationError
from tillctl.domain.pricing import PriceSummary, price_cart

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tillctl.domain.catalog import Product


@dataclass
class CartLine:
    """One product plus the requested quantity."""

    product: Product
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return self.product.unit_price

    @property
    def subtotal(self) -> Decimal:
        return self.product.unit_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.product.sku,
            "display_name": self.product.display_name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "subtotal": str(self.subtotal),
        }


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)

    def add_line(self, product: Product, quantity: int) -> CartLine:
        """Append a line for *quantity* units of *product*.

        Raises:
            ValidationError: If *quantity* is not positive or exceeds the
                product's current stock.
        """
        if quantity <= 0:
            raise ValidationError(
                f"Quantity must be positive, got {quantity}",
                detail={"sku": product.sku, "quantity": quantity},
            )
        if quantity > product.current_stock:
            raise ValidationError(
                f"Only {product.current_stock} in stock for {product.sku}",
                detail={
                    "sku": product.sku,
                    "requested": quantity,
                    "available": product.current_stock,
                },
            )
        line = CartLine(product=product, quantity=quantity)
        self.lines.append(line)
        return line

    def remove_line(self, index: int) -> CartLine:
        """Remove and return the line at *index* (0-based)."""
        if not 0 <= index < len(self.lines):
            raise NotFoundError(
                f"No cart line at position {index}",
                detail={"index": index, "line_count": len(self.lines)},
            )
        return self.lines.pop(index)

    def clear(self) -> None:
        self.lines.clear()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def requested_by_sku(self) -> dict[str, int]:
        """Total requested quantity per SKU, in first-seen order."""
        totals: dict[str, int] = {}
        for line in self.lines:
            totals[line.product.sku] = totals.get(line.product.sku, 0) + line.quantity
        return totals

    def price(self, discount_rate: Decimal | int | float | str = 0) -> PriceSummary:
        return price_cart(self.lines, discount_rate)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self.lines))
