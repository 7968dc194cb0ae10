"""Read-only sales queries over transaction history and the catalog.

Every aggregate is recomputed from the history it is given. There are no
separately maintained running totals that could drift from the records.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from tillctl.domain.pricing import ZERO

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date

    from tillctl.domain.catalog import Catalog, Product
    from tillctl.domain.transaction import Transaction


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: Decimal
    total_items_sold: int
    transaction_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "total_revenue": str(self.total_revenue),
            "total_items_sold": self.total_items_sold,
            "transaction_count": self.transaction_count,
        }


def find_transaction(history: Iterable[Transaction], transaction_id: str) -> Transaction | None:
    """Case-insensitive exact match on transaction ID."""
    wanted = transaction_id.strip().casefold()
    for txn in history:
        if txn.id.casefold() == wanted:
            return txn
    return None


def transactions_on(history: Iterable[Transaction], day: date) -> list[Transaction]:
    """Transactions whose timestamp falls on *day*, in commit order."""
    return [txn for txn in history if txn.timestamp.date() == day]


def transactions_between(
    history: Iterable[Transaction],
    minimum: Decimal,
    maximum: Decimal,
) -> list[Transaction]:
    """Transactions with ``minimum <= final_total <= maximum``, in commit order."""
    return [txn for txn in history if minimum <= txn.final_total <= maximum]


def summarize(history: Sequence[Transaction]) -> SalesSummary:
    """Revenue, items sold, and transaction count in one pass."""
    revenue = ZERO
    items = 0
    for txn in history:
        revenue += txn.final_total
        items += txn.item_count
    return SalesSummary(total_revenue=revenue, total_items_sold=items, transaction_count=len(history))


def units_sold(catalog: Catalog) -> list[Product]:
    """Products with at least one unit sold, in catalog order."""
    return [p for p in catalog.list() if p.units_sold > 0]
