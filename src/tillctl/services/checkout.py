"""CheckoutService: turn the cart into a committed transaction.

A checkout attempt walks ``building -> validating -> committed | rejected``.
Validation and commit run as one critical section on the catalog lock, so
no other caller can change stock between the check and the deduction.

INVARIANT: A rejected checkout changes nothing (stock, history, counter).
INVARIANT: A committed checkout appends exactly one transaction.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from tillctl.domain.errors import PersistenceError, ValidationError
from tillctl.domain.ids import format_transaction_id
from tillctl.domain.lifecycle import CheckoutAttempt, CheckoutState, find_shortfalls
from tillctl.domain.pricing import validate_discount_rate
from tillctl.domain.transaction import Transaction
from tillctl.domain.types import NO_COUPON
from tillctl.services.base import BaseService
from tillctl.services.result import ErrorCode, ServiceResult
from tillctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class CheckoutService(BaseService):
    """Validates the cart against live stock and commits the sale."""

    @traced
    def checkout(
        self,
        *,
        discount_rate: Decimal | int | float | str = 0,
        actor: str | None = None,
        coupon_code: str = NO_COUPON,
    ) -> ServiceResult:
        """Commit the till's cart as one transaction.

        Args:
            discount_rate: Percentage in [0, 100].
            actor: Employee or customer name; defaults to the till's actor.
            coupon_code: Recorded on the transaction; not validated.

        On success the cart is cleared and ``data`` carries the receipt.
        If the durable history append fails, the sale still stands:
        ``data["persisted"]`` is False and a warning explains why.
        ``data["durable"]`` tells whether the sale reached the journal and
        so survives a restart. If the sales history refuses the ID, nothing
        changes and the result is ``HISTORY_UNAVAILABLE``.
        """
        op = "checkout"
        till = self._till
        cart = till.cart

        if cart.is_empty:
            return ServiceResult.failure(op, ErrorCode.EMPTY_CART, "Cart is empty")
        try:
            rate = validate_discount_rate(discount_rate)
        except ValidationError as exc:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_DISCOUNT, exc.message, detail=exc.detail
            )

        attempt = CheckoutAttempt()
        attempt.advance(CheckoutState.VALIDATING)
        warnings: list[str] = []
        persisted = True

        with till.catalog.lock:
            with trace_span("validate_stock"):
                shortfalls = find_shortfalls(cart, till.catalog)
            if shortfalls:
                attempt.advance(CheckoutState.REJECTED)
                logger.info(
                    "Checkout rejected: %s",
                    ", ".join(f"{s.sku} {s.requested}>{s.available}" for s in shortfalls),
                )
                return ServiceResult.failure(
                    op,
                    ErrorCode.INSUFFICIENT_STOCK,
                    f"Insufficient stock for {', '.join(s.sku for s in shortfalls)}",
                    detail={
                        "state": str(attempt.state),
                        "shortfalls": [s.to_dict() for s in shortfalls],
                    },
                )

            moment = till.now()
            summary = cart.price(rate)
            transaction = Transaction.freeze(
                transaction_id=format_transaction_id(moment, till.store.next_sequence),
                timestamp=moment,
                lines=cart,
                summary=summary,
                actor=actor if actor and actor.strip() else till.actor,
                coupon_code=coupon_code,
            )

            # Stock moves only once the store has accepted the transaction.
            with trace_span("append_history"):
                try:
                    till.store.append(transaction)
                except ValidationError as exc:
                    attempt.advance(CheckoutState.REJECTED)
                    logger.warning("Checkout rejected by sales history: %s", exc.message)
                    return ServiceResult.failure(
                        op,
                        ErrorCode.HISTORY_UNAVAILABLE,
                        exc.message,
                        detail={**exc.detail, "state": str(attempt.state)},
                    )
                except PersistenceError as exc:
                    persisted = False
                    warnings.append(f"Sale not yet written to sales history: {exc.message}")

            for line in cart:
                line.product.deduct(line.quantity)
            attempt.advance(CheckoutState.COMMITTED)

        cart.clear()
        logger.info(
            "Committed %s: %d items, total %s",
            transaction.id,
            transaction.item_count,
            transaction.final_total,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **transaction.to_dict(),
                "state": str(attempt.state),
                "persisted": persisted,
                "durable": till.store.is_durable(transaction.id),
                "summary": transaction.summary_line,
            },
            warnings=warnings,
        )

    @traced
    def flush_history(self) -> ServiceResult:
        """Retry durable writes that have not reached every history target.

        Includes journal sales found missing from the text history when the
        till was opened.
        """
        try:
            flushed = self._till.store.flush_pending()
        except PersistenceError as exc:
            return ServiceResult.failure(
                "flush_history", ErrorCode.PERSISTENCE_FAILED, exc.message, detail=exc.detail
            )
        return ServiceResult(ok=True, op="flush_history", data={"flushed": flushed})
