"""ReportingService: read-only queries over committed sales.

Lookups that find nothing are not errors for listings (empty ``items``),
but a single-ID lookup that misses returns ``ok=False`` with ``NOT_FOUND``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tillctl.domain import reporting
from tillctl.domain.errors import ValidationError
from tillctl.domain.pricing import to_decimal
from tillctl.services._helpers import parse_day
from tillctl.services.base import BaseService
from tillctl.services.result import ErrorCode, ServiceResult
from tillctl.services.telemetry import traced

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date
    from decimal import Decimal

    from tillctl.domain.transaction import Transaction


def _row(txn: Transaction) -> dict[str, Any]:
    return {
        "id": txn.id,
        "timestamp": txn.timestamp.isoformat(),
        "when": f"{txn.timestamp:%d/%m/%Y %H:%M}",
        "actor": txn.actor,
        "item_count": txn.item_count,
        "final_total": str(txn.final_total),
        "summary": txn.summary_line,
    }


class ReportingService(BaseService):
    """Transaction lookups and sales aggregates."""

    def _listing(self, op: str, found: Iterable[Transaction], **extra: Any) -> ServiceResult:
        items = [_row(txn) for txn in found]
        return ServiceResult(
            ok=True,
            op=op,
            data={**extra, "items": items, "count": len(items)},
        )

    @traced
    def find_by_id(self, transaction_id: str) -> ServiceResult:
        txn = reporting.find_transaction(self._till.store.transactions, transaction_id)
        if txn is None:
            return ServiceResult.failure(
                "find_transaction",
                ErrorCode.NOT_FOUND,
                f"No transaction with ID {transaction_id}",
                detail={"id": transaction_id},
            )
        return ServiceResult(ok=True, op="find_transaction", data=txn.to_dict())

    @traced
    def find_by_date(self, day: str | date) -> ServiceResult:
        try:
            wanted = parse_day(day)
        except ValidationError as exc:
            return ServiceResult.failure(
                "find_by_date", ErrorCode.INVALID_INPUT, exc.message, detail=exc.detail
            )
        found = reporting.transactions_on(self._till.store.transactions, wanted)
        return self._listing("find_by_date", found, date=wanted.isoformat())

    @traced
    def find_by_amount_range(
        self,
        minimum: Decimal | int | float | str,
        maximum: Decimal | int | float | str,
    ) -> ServiceResult:
        """Transactions whose final total lies in ``[minimum, maximum]``."""
        op = "find_by_amount_range"
        try:
            low = to_decimal(minimum, field="minimum")
            high = to_decimal(maximum, field="maximum")
        except ValidationError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, exc.message, detail=exc.detail)
        if low > high:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_RANGE,
                f"Minimum {low} is greater than maximum {high}",
                detail={"minimum": str(low), "maximum": str(high)},
            )
        found = reporting.transactions_between(self._till.store.transactions, low, high)
        return self._listing(op, found, minimum=str(low), maximum=str(high))

    @traced
    def sales_summary(self) -> ServiceResult:
        """Revenue, items sold, and transaction count over all history."""
        summary = reporting.summarize(self._till.store.transactions)
        return ServiceResult(
            ok=True,
            op="sales_summary",
            data=summary.to_dict(),
        )

    @traced
    def list_transactions(self, *, limit: int | None = None) -> ServiceResult:
        """Most recent transactions first."""
        history = list(reversed(self._till.store.transactions))
        if limit is not None:
            history = history[:limit]
        return self._listing("list_transactions", history)
