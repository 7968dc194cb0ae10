"""CatalogService: product lookup, stock reports, and the stock file.

Read operations never fail on a missing SKU; they return ``ok=False`` with
``NOT_FOUND`` so the caller can prompt again. Loading the stock file
degrades to the in-memory catalog with a warning when the file is
unusable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tillctl.domain import reporting
from tillctl.domain.errors import PersistenceError, ValidationError
from tillctl.domain.types import classify_stock
from tillctl.infrastructure.filesystem import read_stock_file, write_stock_file
from tillctl.services.base import BaseService
from tillctl.services.result import ErrorCode, ServiceResult
from tillctl.services.telemetry import traced

if TYPE_CHECKING:
    from tillctl.domain.catalog import Product

logger = logging.getLogger(__name__)


class CatalogService(BaseService):
    """Handles catalog browsing and stock persistence."""

    def _product_payload(self, product: Product) -> dict[str, Any]:
        stock_cfg = self._till.settings.stock
        payload = product.to_dict()
        payload["status"] = str(
            classify_stock(
                product.current_stock,
                critical=stock_cfg.critical_threshold,
                low=stock_cfg.low_threshold,
            )
        )
        return payload

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    @traced
    def list_products(self, *, category: str | None = None) -> ServiceResult:
        """All products in catalog order, optionally filtered by category."""
        products = self._till.catalog.list()
        if category:
            wanted = category.casefold()
            products = [p for p in products if p.category.casefold() == wanted]
        items = [self._product_payload(p) for p in products]
        return ServiceResult(
            ok=True,
            op="list_products",
            data={"items": items, "count": len(items)},
        )

    @traced
    def get_product(self, sku: str) -> ServiceResult:
        product = self._till.catalog.find_by_sku(sku.strip())
        if product is None:
            return ServiceResult.failure(
                "get_product",
                ErrorCode.NOT_FOUND,
                f"No product with SKU {sku}",
                detail={"sku": sku},
            )
        return ServiceResult(ok=True, op="get_product", data=self._product_payload(product))

    @traced
    def low_stock(self, *, threshold: int | None = None) -> ServiceResult:
        """Products with ``0 < stock < threshold`` (default: critical threshold)."""
        limit = threshold if threshold is not None else self._till.settings.stock.critical_threshold
        if limit < 1:
            return ServiceResult.failure(
                "low_stock",
                ErrorCode.INVALID_INPUT,
                f"Threshold must be at least 1, got {limit}",
                detail={"threshold": limit},
            )
        items = [self._product_payload(p) for p in self._till.catalog.low_stock(limit)]
        return ServiceResult(
            ok=True,
            op="low_stock",
            data={"threshold": limit, "items": items, "count": len(items)},
        )

    @traced
    def units_sold(self) -> ServiceResult:
        """Units sold per product since the catalog was seeded."""
        products = reporting.units_sold(self._till.catalog)
        items = [
            {
                "sku": p.sku,
                "display_name": p.display_name,
                "units_sold": p.units_sold,
                "stock": p.current_stock,
            }
            for p in products
        ]
        return ServiceResult(
            ok=True,
            op="units_sold",
            data={
                "items": items,
                "count": len(items),
                "total_units": sum(p.units_sold for p in products),
            },
        )

    # ------------------------------------------------------------------
    # Stock file
    # ------------------------------------------------------------------

    @traced
    def load_stock(self) -> ServiceResult:
        """Apply saved stock levels to the catalog.

        A missing stock file is created from the current catalog. Unknown
        SKUs and malformed rows are skipped with a warning each. If the
        file cannot be used at all, the catalog keeps its defaults.
        """
        path = self._till.stock_path
        warnings: list[str] = []

        if not path.exists():
            try:
                written = write_stock_file(path, self._till.catalog.list())
            except PersistenceError as exc:
                logger.warning("Cannot create stock file: %s", exc)
                warnings.append(f"Using default stock; {exc.message}")
                return ServiceResult(
                    ok=True,
                    op="load_stock",
                    data={"path": str(path), "created": False, "updated": 0, "skipped": 0},
                    warnings=warnings,
                )
            logger.info("Created stock file %s with %d products", path, written)
            return ServiceResult(
                ok=True,
                op="load_stock",
                data={"path": str(path), "created": True, "updated": 0, "skipped": 0},
            )

        try:
            stock_file = read_stock_file(path)
        except PersistenceError as exc:
            logger.warning("Stock file unusable, keeping defaults: %s", exc)
            warnings.append(f"Using default stock; {exc.message}")
            return ServiceResult(
                ok=True,
                op="load_stock",
                data={"path": str(path), "created": False, "updated": 0, "skipped": 0},
                warnings=warnings,
            )

        warnings.extend(f"Skipped stock row, {reason}" for reason in stock_file.skipped)
        updated = 0
        with self._till.catalog.lock:
            for row in stock_file.rows:
                product = self._till.catalog.find_by_sku(row.sku)
                if product is None:
                    warnings.append(f"Skipped stock row for unknown SKU {row.sku}")
                    continue
                try:
                    product.set_stock(row.stock)
                except ValidationError as exc:
                    warnings.append(f"Skipped stock row for {row.sku}, {exc.message}")
                    continue
                updated += 1

        skipped = len(stock_file.rows) - updated + len(stock_file.skipped)
        logger.debug("Loaded stock from %s: %d updated, %d skipped", path, updated, skipped)
        return ServiceResult(
            ok=True,
            op="load_stock",
            data={"path": str(path), "created": False, "updated": updated, "skipped": skipped},
            warnings=warnings,
        )

    @traced
    def save_stock(self) -> ServiceResult:
        """Rewrite the stock file from the live catalog."""
        path = self._till.stock_path
        with self._till.catalog.lock:
            try:
                written = write_stock_file(path, self._till.catalog.list())
            except PersistenceError as exc:
                logger.warning("Stock save failed: %s", exc)
                return ServiceResult.failure(
                    "save_stock",
                    ErrorCode.PERSISTENCE_FAILED,
                    exc.message,
                    detail=exc.detail,
                )
        return ServiceResult(ok=True, op="save_stock", data={"path": str(path), "count": written})
