"""Default catalog for a fresh till.

Five categories, two product types each, five size variants per type:
50 SKUs. Each size step up costs $2 more than the one before it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple

from tillctl.domain.catalog import Catalog, Product
from tillctl.domain.ids import generate_sku

SIZE_PRICE_STEP = Decimal("2.00")


class ProductLine(NamedTuple):
    category: str
    name: str
    sizes: tuple[str, ...]
    base_price: Decimal
    stock: tuple[int, ...]


_ADULT = ("S", "M", "L", "XL", "XXL")
_HATS = ("Kids", "Teen", "Adult-S", "Adult-M", "Adult-L")
_FITTED = ("XS", "S", "M", "L", "XL")

DEFAULT_PRODUCT_LINES: tuple[ProductLine, ...] = (
    ProductLine("Scarves", "Wool Scarf", _ADULT, Decimal("25.00"), (15, 20, 18, 12, 8)),
    ProductLine("Scarves", "Cashmere Scarf", _ADULT, Decimal("55.00"), (8, 12, 10, 6, 4)),
    ProductLine("Beanies", "Classic Beanie", _HATS, Decimal("18.00"), (12, 15, 20, 18, 10)),
    ProductLine("Beanies", "Pom-Pom Beanie", _HATS, Decimal("22.00"), (10, 12, 8, 6, 4)),
    ProductLine("Gloves", "Fingerless Gloves", _FITTED, Decimal("20.00"), (8, 12, 15, 10, 5)),
    ProductLine("Gloves", "Winter Gloves", _FITTED, Decimal("28.00"), (6, 10, 12, 8, 3)),
    ProductLine("Socks", "Thermal Socks", _ADULT, Decimal("12.00"), (20, 25, 22, 15, 10)),
    ProductLine("Socks", "Cozy Boot Socks", _ADULT, Decimal("15.00"), (15, 18, 16, 12, 7)),
    ProductLine("Sweaters", "Cable Knit Sweater", _FITTED, Decimal("65.00"), (5, 8, 10, 7, 4)),
    ProductLine("Sweaters", "Turtleneck Sweater", _FITTED, Decimal("58.00"), (6, 9, 11, 8, 5)),
)


def expand_product_line(line: ProductLine) -> list[Product]:
    """One product per size, with progressive pricing."""
    return [
        Product(
            sku=generate_sku(line.category, line.name, size),
            category=line.category,
            name=line.name,
            size=size,
            unit_price=line.base_price + SIZE_PRICE_STEP * index,
            current_stock=stock,
        )
        for index, (size, stock) in enumerate(zip(line.sizes, line.stock, strict=True))
    ]


def build_default_catalog() -> Catalog:
    """Build a fresh catalog from :data:`DEFAULT_PRODUCT_LINES`."""
    catalog = Catalog()
    for line in DEFAULT_PRODUCT_LINES:
        for product in expand_product_line(line):
            catalog.add(product)
    return catalog
