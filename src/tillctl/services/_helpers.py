"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import date, datetime

from tillctl.domain.errors import ValidationError


def parse_cart_item(spec: str) -> tuple[str, int]:
    """Split ``'SKU:QTY'`` into ``(sku, quantity)``.

    A bare SKU means one unit. The quantity sign is not checked here;
    the cart rejects non-positive quantities itself.

    Examples:
        >>> parse_cart_item("SC-WS-M:3")
        ('SC-WS-M', 3)
        >>> parse_cart_item("BE-CB-Kids")
        ('BE-CB-Kids', 1)
    """
    sku, sep, raw_qty = spec.strip().rpartition(":")
    if not sep:
        return raw_qty, 1
    try:
        quantity = int(raw_qty)
    except ValueError:
        raise ValidationError(
            f"Quantity in {spec!r} is not a whole number",
            detail={"item": spec},
        ) from None
    if not sku:
        raise ValidationError(f"Missing SKU in {spec!r}", detail={"item": spec})
    return sku, quantity


def parse_day(value: str | date) -> date:
    """Accept ``YYYY-MM-DD`` or ``DD/MM/YYYY`` (the receipt format)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(
        f"Unrecognised date {value!r}; use YYYY-MM-DD",
        detail={"date": value},
    )
