"""Transaction records: frozen snapshots of committed sales.

A Transaction owns copies of its line data. Nothing in it refers to live
catalog products, so later stock or price changes never alter history.

INVARIANT: Transactions are immutable once constructed.
INVARIANT: ``final_total == subtotal - discount_amount``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, Field, computed_field, model_validator

from tillctl.domain.ids import ID_PATTERNS
from tillctl.domain.pricing import HUNDRED, compute_subtotal, round_currency
from tillctl.domain.types import ANONYMOUS_ACTOR, NO_COUPON

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tillctl.domain.cart import CartLine
    from tillctl.domain.pricing import PriceSummary


class TransactionLine(BaseModel):
    """Frozen copy of one cart line at checkout time."""

    model_config = {"frozen": True}

    sku: str
    category: str
    name: str
    size: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.size})"

    @classmethod
    def from_cart_line(cls, line: CartLine) -> TransactionLine:
        product = line.product
        return cls(
            sku=product.sku,
            category=product.category,
            name=product.name,
            size=product.size,
            unit_price=product.unit_price,
            quantity=line.quantity,
        )


class Transaction(BaseModel):
    """A committed sale."""

    model_config = {"frozen": True}

    id: str = Field(pattern=ID_PATTERNS["transaction"].pattern)
    timestamp: datetime
    lines: tuple[TransactionLine, ...] = Field(min_length=1)
    subtotal: Decimal
    discount_rate: Decimal = Field(ge=0, le=100)
    discount_amount: Decimal
    final_total: Decimal
    item_count: int
    actor: str = ANONYMOUS_ACTOR
    coupon_code: str = NO_COUPON

    @model_validator(mode="after")
    def _check_totals(self) -> Self:
        if self.subtotal != compute_subtotal(self.lines):
            msg = f"subtotal {self.subtotal} does not match line totals"
            raise ValueError(msg)
        if self.discount_amount != round_currency(self.subtotal * self.discount_rate / HUNDRED):
            msg = f"discount_amount {self.discount_amount} does not match rate {self.discount_rate}"
            raise ValueError(msg)
        if self.final_total != self.subtotal - self.discount_amount:
            msg = "final_total must equal subtotal - discount_amount"
            raise ValueError(msg)
        if self.item_count != sum(line.quantity for line in self.lines):
            msg = "item_count must equal the sum of line quantities"
            raise ValueError(msg)
        return self

    @classmethod
    def freeze(
        cls,
        *,
        transaction_id: str,
        timestamp: datetime,
        lines: Iterable[CartLine],
        summary: PriceSummary,
        actor: str = ANONYMOUS_ACTOR,
        coupon_code: str = NO_COUPON,
    ) -> Transaction:
        """Build a transaction from live cart lines and their price summary."""
        return cls(
            id=transaction_id,
            timestamp=timestamp,
            lines=tuple(TransactionLine.from_cart_line(line) for line in lines),
            subtotal=summary.subtotal,
            discount_rate=summary.discount_rate,
            discount_amount=summary.discount_amount,
            final_total=summary.final_total,
            item_count=summary.item_count,
            actor=actor.strip() or ANONYMOUS_ACTOR,
            coupon_code=coupon_code.strip(),
        )

    @property
    def summary_line(self) -> str:
        """One-line summary, e.g. ``TXN-20261016-0001 | 16/10/2026 14:03 | $72.90``."""
        return f"{self.id} | {self.timestamp:%d/%m/%Y %H:%M} | ${self.final_total:.2f}"

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for service payloads (amounts as strings)."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "actor": self.actor,
            "coupon_code": self.coupon_code,
            "lines": [
                {
                    "sku": line.sku,
                    "display_name": line.display_name,
                    "unit_price": str(line.unit_price),
                    "quantity": line.quantity,
                    "line_total": str(line.line_total),
                }
                for line in self.lines
            ],
            "subtotal": str(self.subtotal),
            "discount_rate": str(self.discount_rate),
            "discount_amount": str(self.discount_amount),
            "final_total": str(self.final_total),
            "item_count": self.item_count,
        }
