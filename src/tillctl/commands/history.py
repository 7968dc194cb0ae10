"""Command group: look up past sales and totals."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tillctl.commands._base import TillGroup
from tillctl.services.checkout import CheckoutService
from tillctl.services.reporting import ReportingService

if TYPE_CHECKING:
    from tillctl.commands._context import AppContext

_HISTORY_EXAMPLES = """\
  tillctl history list --limit 5
  tillctl history show TXN-20261016-0001
  tillctl history date 2026-10-16
  tillctl history range --min 20 --max 100
  tillctl history summary"""


@click.group(cls=TillGroup, examples=_HISTORY_EXAMPLES)
@click.pass_obj
def history(app: AppContext) -> None:
    """Search and summarise committed sales."""


@history.command(
    "list",
    examples="""\
  tillctl history list
  tillctl history list --limit 10
  tillctl -q history list""",
)
@click.option("--limit", type=int, default=None, help="Show only the most recent N sales.")
@click.pass_obj
def list_cmd(app: AppContext, limit: int | None) -> None:
    """List sales, most recent first."""
    app.emit(ReportingService(app.till).list_transactions(limit=limit))


@history.command(
    examples="""\
  tillctl history show TXN-20261016-0001
  tillctl history show txn-20261016-0001"""
)
@click.argument("transaction_id")
@click.pass_obj
def show(app: AppContext, transaction_id: str) -> None:
    """Show one sale by transaction ID (case-insensitive)."""
    app.emit(ReportingService(app.till).find_by_id(transaction_id))


@history.command(
    examples="""\
  tillctl history date 2026-10-16
  tillctl history date 16/10/2026"""
)
@click.argument("day")
@click.pass_obj
def date(app: AppContext, day: str) -> None:
    """List sales made on one calendar day."""
    app.emit(ReportingService(app.till).find_by_date(day))


@history.command(
    "range",
    examples="""\
  tillctl history range --min 20 --max 100
  tillctl history range --min 72.90 --max 72.90""",
)
@click.option("--min", "minimum", required=True, help="Lowest final total, inclusive.")
@click.option("--max", "maximum", required=True, help="Highest final total, inclusive.")
@click.pass_obj
def range_cmd(app: AppContext, minimum: str, maximum: str) -> None:
    """List sales whose final total falls in a range."""
    app.emit(ReportingService(app.till).find_by_amount_range(minimum, maximum))


@history.command(
    examples="""\
  tillctl history summary
  tillctl --json history summary"""
)
@click.pass_obj
def summary(app: AppContext) -> None:
    """Total revenue, items sold, and number of sales."""
    app.emit(ReportingService(app.till).sales_summary())


@history.command(
    examples="""\
  tillctl history flush"""
)
@click.pass_obj
def flush(app: AppContext) -> None:
    """Write sales that are in the journal but missing from the sales history."""
    app.emit(CheckoutService(app.till).flush_history())
