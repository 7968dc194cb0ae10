"""Product catalog: SKUs with price and per-size stock.

INVARIANT: ``current_stock >= 0`` after every mutation.
INVARIANT: SKU identifiers are unique and stable for the catalog lifetime.

Products are mutable only through :meth:`Product.deduct` (checkout) and
:meth:`Product.set_stock` (stock-file load). ``initial_stock`` is fixed at
construction and never changes, so ``units_sold`` always reflects sales
since the catalog was built.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from tillctl.domain.errors import NotFoundError, ValidationError
from tillctl.domain.pricing import CENT
from tillctl.domain.types import CRITICAL_STOCK_THRESHOLD, StockStatus, classify_stock


class Product(BaseModel):
    """A single sellable product-size combination (SKU)."""

    model_config = {"validate_assignment": True}

    sku: str = Field(min_length=1, frozen=True)
    category: str
    name: str
    size: str
    unit_price: Decimal = Field(ge=0, decimal_places=2)
    current_stock: int = Field(ge=0)
    initial_stock: int = Field(ge=0, frozen=True)

    def __init__(self, **data: Any) -> None:
        data.setdefault("initial_stock", data.get("current_stock"))
        super().__init__(**data)

    @field_validator("unit_price")
    @classmethod
    def _quantize_price(cls, value: Decimal) -> Decimal:
        return value.quantize(CENT)

    @property
    def display_name(self) -> str:
        """Name with size, e.g. ``Wool Scarf (M)``."""
        return f"{self.name} ({self.size})"

    @property
    def units_sold(self) -> int:
        return self.initial_stock - self.current_stock

    @property
    def is_available(self) -> bool:
        return self.current_stock > 0

    @property
    def stock_status(self) -> StockStatus:
        return classify_stock(self.current_stock)

    def deduct(self, quantity: int) -> None:
        """Remove *quantity* units from stock.

        Raises:
            ValidationError: If *quantity* is not positive or exceeds the
                current stock. Stock is left untouched in that case.
        """
        if quantity <= 0:
            raise ValidationError(
                f"Quantity must be positive, got {quantity}",
                detail={"sku": self.sku, "quantity": quantity},
            )
        if quantity > self.current_stock:
            raise ValidationError(
                f"Only {self.current_stock} in stock for {self.sku}",
                detail={"sku": self.sku, "requested": quantity, "available": self.current_stock},
            )
        self.current_stock -= quantity

    def set_stock(self, level: int) -> None:
        """Overwrite the current stock level (used when loading saved stock)."""
        if level < 0:
            raise ValidationError(
                f"Stock level cannot be negative, got {level}",
                detail={"sku": self.sku, "stock": level},
            )
        self.current_stock = level

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for service payloads."""
        return {
            "sku": self.sku,
            "category": self.category,
            "name": self.name,
            "size": self.size,
            "display_name": self.display_name,
            "unit_price": str(self.unit_price),
            "stock": self.current_stock,
            "initial_stock": self.initial_stock,
            "units_sold": self.units_sold,
            "status": str(self.stock_status),
        }


class Catalog:
    """Keyed collection of products in insertion order.

    ``lock`` guards stock check-then-deduct sequences; callers that need
    a consistent view across several products hold it for the duration.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products: dict[str, Product] = {}
        self.lock = threading.RLock()
        for product in products:
            self.add(product)

    def add(self, product: Product) -> None:
        """Register *product*. Duplicate SKUs are rejected."""
        if product.sku in self._products:
            raise ValidationError(
                f"Duplicate SKU: {product.sku}",
                detail={"sku": product.sku},
            )
        self._products[product.sku] = product

    def find_by_sku(self, sku: str) -> Product | None:
        """Return the product for *sku*, or None if the catalog has none."""
        return self._products.get(sku)

    def get(self, sku: str) -> Product:
        """Return the product for *sku*.

        Raises:
            NotFoundError: If no product has that SKU.
        """
        product = self._products.get(sku)
        if product is None:
            raise NotFoundError(f"No product with SKU {sku}", detail={"sku": sku})
        return product

    def list(self) -> list[Product]:
        return list(self._products.values())

    def low_stock(self, threshold: int = CRITICAL_STOCK_THRESHOLD) -> list[Product]:
        """Products that are running low but not sold out (``0 < stock < threshold``)."""
        return [p for p in self._products.values() if 0 < p.current_stock < threshold]

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(list(self._products.values()))

    def __contains__(self, sku: object) -> bool:
        return sku in self._products
