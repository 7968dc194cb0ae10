"""Command group: browse products and stock levels."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tillctl.commands._base import TillGroup
from tillctl.services.catalog import CatalogService

if TYPE_CHECKING:
    from tillctl.commands._context import AppContext

_CATALOG_EXAMPLES = """\
  tillctl catalog list
  tillctl catalog list --category Scarves
  tillctl catalog show SC-WS-M
  tillctl catalog low-stock --threshold 8
  tillctl catalog units-sold
  tillctl -q catalog low-stock"""


@click.group(cls=TillGroup, examples=_CATALOG_EXAMPLES)
@click.pass_obj
def catalog(app: AppContext) -> None:
    """Browse products, prices, and stock."""


@catalog.command(
    "list",
    examples="""\
  tillctl catalog list
  tillctl catalog list --category Beanies
  tillctl -v catalog list
  tillctl --json catalog list""",
)
@click.option("--category", default=None, help="Only show this category.")
@click.pass_obj
def list_cmd(app: AppContext, category: str | None) -> None:
    """List every product with price and stock."""
    app.emit(CatalogService(app.till).list_products(category=category))


@catalog.command(
    examples="""\
  tillctl catalog show SC-WS-M
  tillctl --json catalog show BE-CB-Kids"""
)
@click.argument("sku")
@click.pass_obj
def show(app: AppContext, sku: str) -> None:
    """Show one product by SKU."""
    app.emit(CatalogService(app.till).get_product(sku))


@catalog.command(
    "low-stock",
    examples="""\
  tillctl catalog low-stock
  tillctl catalog low-stock --threshold 10""",
)
@click.option(
    "--threshold",
    type=int,
    default=None,
    help="List products with fewer than this many left (default: critical threshold).",
)
@click.pass_obj
def low_stock(app: AppContext, threshold: int | None) -> None:
    """List products that are running low but not sold out."""
    app.emit(CatalogService(app.till).low_stock(threshold=threshold))


@catalog.command(
    "units-sold",
    examples="""\
  tillctl catalog units-sold
  tillctl --json catalog units-sold""",
)
@click.pass_obj
def units_sold(app: AppContext) -> None:
    """Units sold per product since the catalog was seeded."""
    app.emit(CatalogService(app.till).units_sold())
