"""Commands: quote and sell a cart given as ``SKU:QTY`` items."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tillctl.commands._base import TillCommand
from tillctl.services.cart import CartService
from tillctl.services.catalog import CatalogService
from tillctl.services.checkout import CheckoutService

if TYPE_CHECKING:
    from tillctl.commands._context import AppContext
    from tillctl.services.result import ServiceResult

_QUOTE_EXAMPLES = """\
  tillctl quote SC-WS-M:3
  tillctl quote SC-WS-M:3 BE-CB-Kids:1 --discount 10
  tillctl --json quote SO-TS-L:2"""

_SELL_EXAMPLES = """\
  tillctl sell SC-WS-M:3
  tillctl sell SC-WS-M:3 --discount 10 --coupon WINTER10
  tillctl --actor Sam sell BE-PB-Teen:2 GL-WG-M:1
  tillctl -q sell SO-TS-L:2"""


def _fill_cart(app: AppContext, items: tuple[str, ...]) -> None:
    """Load *items* into the till's cart, exiting on the first bad item."""
    result = CartService(app.till).add_items(items)
    if not result.ok:
        app.emit(result)


@click.command("quote", cls=TillCommand, examples=_QUOTE_EXAMPLES)
@click.argument("items", nargs=-1, required=True)
@click.option("--discount", default="0", help="Discount percentage, 0-100.")
@click.pass_obj
def quote(app: AppContext, items: tuple[str, ...], discount: str) -> None:
    """Price a cart without selling it."""
    _fill_cart(app, items)
    app.emit(CartService(app.till).quote(discount))


@click.command("sell", cls=TillCommand, examples=_SELL_EXAMPLES)
@click.argument("items", nargs=-1, required=True)
@click.option("--discount", default="0", help="Discount percentage, 0-100.")
@click.option("--coupon", default="", help="Coupon code to record on the sale.")
@click.pass_obj
def sell(app: AppContext, items: tuple[str, ...], discount: str, coupon: str) -> None:
    """Check out a cart: deduct stock and record the sale."""
    _fill_cart(app, items)
    result = CheckoutService(app.till).checkout(discount_rate=discount, coupon_code=coupon)
    if result.ok:
        result = _settle(app, result)
    app.emit(result)


def _settle(app: AppContext, result: ServiceResult) -> ServiceResult:
    """Finish a committed sale before the process exits.

    Unwritten history targets get one more flush. The stock file is saved
    only when the sale is in the journal, so saved stock never runs ahead
    of the sales a restart can see.
    """
    data = dict(result.data)
    warnings = list(result.warnings)
    if not data.get("persisted", True):
        retry = CheckoutService(app.till).flush_history()
        if retry.ok:
            data["persisted"] = True
            warnings.append("Sale written to sales history on retry")
        data["durable"] = app.till.store.is_durable(data["id"])

    if data.get("durable", True):
        saved = CatalogService(app.till).save_stock()
        if not saved.ok and saved.error is not None:
            warnings.append(f"Stock file not saved: {saved.error.message}")
    else:
        warnings.append("Stock file not saved: the sale is not in the sales journal")
    return result.model_copy(update={"data": data, "warnings": warnings})
