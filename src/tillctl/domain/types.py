"""Classification enums and shared constants for the till domain."""

from __future__ import annotations

from enum import StrEnum

ANONYMOUS_ACTOR = "Walk-in"
NO_COUPON = ""

CRITICAL_STOCK_THRESHOLD = 5
LOW_STOCK_THRESHOLD = 10


class StockStatus(StrEnum):
    """Stock level band used for colour-coding catalog listings."""

    OUT_OF_STOCK = "out_of_stock"
    CRITICAL = "critical"
    LOW = "low"
    GOOD = "good"


def classify_stock(
    level: int,
    *,
    critical: int = CRITICAL_STOCK_THRESHOLD,
    low: int = LOW_STOCK_THRESHOLD,
) -> StockStatus:
    """Return the status band for a stock *level*."""
    if level <= 0:
        return StockStatus.OUT_OF_STOCK
    if level < critical:
        return StockStatus.CRITICAL
    if level < low:
        return StockStatus.LOW
    return StockStatus.GOOD
