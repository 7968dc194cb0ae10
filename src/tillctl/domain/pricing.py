"""Pricing engine: subtotal, discount, and final total arithmetic.

All amounts are ``Decimal`` currency values. Rounding happens exactly once,
when the discount amount is computed (half-up to cents). Subtotals are never
rounded, so reports that re-derive totals from line data reproduce the same
figures.

INVARIANT: ``final_total == subtotal - discount_amount``
INVARIANT: ``discount_amount == round(subtotal * rate / 100, 2)``
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Protocol

from tillctl.domain.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


class PricedLine(Protocol):
    """Anything with a unit price and a quantity (cart lines, snapshots)."""

    @property
    def unit_price(self) -> Decimal: ...

    @property
    def quantity(self) -> int: ...


@dataclass(frozen=True)
class DiscountBreakdown:
    discount_amount: Decimal
    final_total: Decimal


@dataclass(frozen=True)
class PriceSummary:
    """Running totals for a cart, recomputed on every cart change."""

    subtotal: Decimal
    discount_rate: Decimal
    discount_amount: Decimal
    final_total: Decimal
    item_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "subtotal": str(self.subtotal),
            "discount_rate": str(self.discount_rate),
            "discount_amount": str(self.discount_amount),
            "final_total": str(self.final_total),
            "item_count": self.item_count,
        }


def to_decimal(value: Decimal | int | float | str, *, field: str = "amount") -> Decimal:
    """Coerce *value* to a finite ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.

    Raises:
        ValidationError: If *value* is not a finite number.
    """
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(
            f"{field} must be a number, got {value!r}", detail={field: str(value)}
        ) from None
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}", detail={field: str(value)})
    return result


def line_total(line: PricedLine) -> Decimal:
    return line.unit_price * line.quantity


def compute_subtotal(lines: Iterable[PricedLine]) -> Decimal:
    """Sum of ``unit_price * quantity`` over *lines*, unrounded."""
    return sum((line_total(line) for line in lines), ZERO)


def validate_discount_rate(percentage: Decimal | int | float | str) -> Decimal:
    """Return *percentage* as a ``Decimal`` in [0, 100].

    Raises:
        ValidationError: If the value is not a number or is out of range.
    """
    rate = to_decimal(percentage, field="discount_rate")
    if rate < ZERO or rate > HUNDRED:
        raise ValidationError(
            f"Discount percentage must be between 0 and 100, got {rate}",
            detail={"discount_rate": str(rate)},
        )
    return rate


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def apply_discount(
    subtotal: Decimal, percentage: Decimal | int | float | str
) -> DiscountBreakdown:
    """Apply a percentage discount to *subtotal*."""
    rate = validate_discount_rate(percentage)
    discount_amount = round_currency(subtotal * rate / HUNDRED)
    return DiscountBreakdown(discount_amount=discount_amount, final_total=subtotal - discount_amount)


def price_lines(
    lines: Iterable[PricedLine], percentage: Decimal | int | float | str = 0
) -> PriceSummary:
    """Compute the full price summary for a sequence of lines."""
    materialized = list(lines)
    rate = validate_discount_rate(percentage)
    subtotal = compute_subtotal(materialized)
    breakdown = apply_discount(subtotal, rate)
    return PriceSummary(
        subtotal=subtotal,
        discount_rate=rate,
        discount_amount=breakdown.discount_amount,
        final_total=breakdown.final_total,
        item_count=sum(line.quantity for line in materialized),
    )


def price_cart(
    cart: Iterable[PricedLine], percentage: Decimal | int | float | str = 0
) -> PriceSummary:
    """Price summary for a cart (any iterable of priced lines)."""
    return price_lines(cart, percentage)
