"""Checkout lifecycle: states, transitions, and stock validation.

A checkout attempt moves ``building -> validating -> committed`` or
``building -> validating -> rejected``. Both end states are terminal for the
attempt; a rejected cart stays on the till for correction and a fresh
attempt starts from ``building`` again.

INVARIANT: An attempt commits at most once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tillctl.domain.cart import Cart
    from tillctl.domain.catalog import Catalog


class CheckoutState(StrEnum):
    BUILDING = "building"
    VALIDATING = "validating"
    COMMITTED = "committed"
    REJECTED = "rejected"


CHECKOUT_TRANSITIONS: dict[str, list[str]] = {
    "building": ["validating"],
    "validating": ["committed", "rejected"],
    "committed": [],
    "rejected": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


@dataclass
class CheckoutAttempt:
    """Tracks the state of a single checkout attempt."""

    state: CheckoutState = CheckoutState.BUILDING
    history: list[CheckoutState] = field(default_factory=lambda: [CheckoutState.BUILDING])

    def advance(self, target: CheckoutState) -> None:
        """Move to *target*.

        Raises:
            RuntimeError: If the transition is not allowed (e.g. committing
                an attempt twice).
        """
        if not is_valid_transition(self.state, target, CHECKOUT_TRANSITIONS):
            msg = f"Illegal checkout transition: {self.state} -> {target}"
            raise RuntimeError(msg)
        self.state = target
        self.history.append(target)

    @property
    def is_terminal(self) -> bool:
        return not CHECKOUT_TRANSITIONS[self.state]


@dataclass(frozen=True)
class StockShortfall:
    """A SKU whose requested quantity exceeds live stock."""

    sku: str
    requested: int
    available: int

    @property
    def shortfall(self) -> int:
        return self.requested - self.available

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "requested": self.requested,
            "available": self.available,
            "shortfall": self.shortfall,
        }


def find_shortfalls(cart: Cart, catalog: Catalog) -> list[StockShortfall]:
    """Compare the cart against *live* catalog stock.

    Quantities are aggregated per SKU first, so two lines for the same
    product cannot each pass on their own and jointly overdraw stock.
    A SKU that has disappeared from the catalog counts as zero available.
    """
    shortfalls: list[StockShortfall] = []
    for sku, requested in cart.requested_by_sku().items():
        product = catalog.find_by_sku(sku)
        available = product.current_stock if product is not None else 0
        if requested > available:
            shortfalls.append(StockShortfall(sku=sku, requested=requested, available=available))
    return shortfalls
