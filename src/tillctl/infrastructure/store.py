"""TransactionStore: append-only history plus the sequence counter.

The store holds every committed transaction for the process lifetime and
the next transaction sequence number. :meth:`TransactionStore.append` is the
only mutator. It publishes the new history in one step (readers see either
the old tuple or the new one, never a half-written list), bumps the counter,
and then performs exactly one durable append through a :class:`HistoryWriter`.

Durable appends are retried on ``OSError``. Each writer target is tracked
separately, so a target that already succeeded is never written twice when
another one is retried. The first target is the record of truth: once it
holds a transaction, the sale survives a restart even if later targets are
still pending.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from tillctl.domain.errors import PersistenceError, ValidationError
from tillctl.domain.ids import parse_transaction_sequence
from tillctl.infrastructure.filesystem import append_journal, append_text, render_history_block

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from tillctl.domain.transaction import Transaction

logger = logging.getLogger(__name__)

JOURNAL_TARGET = "journal"
HISTORY_TARGET = "history"


class HistoryWriter(Protocol):
    """Persistence port for committed transactions.

    ``targets[0]`` is the record of truth that history is restored from.
    """

    targets: tuple[str, ...]

    def write(self, target: str, transaction: Transaction) -> None:
        """Durably append *transaction* to *target*. Raise ``OSError`` on failure."""
        ...


class FileHistoryWriter:
    """Writes the JSON journal line, then the human-readable history block."""

    targets: tuple[str, ...] = (JOURNAL_TARGET, HISTORY_TARGET)

    def __init__(self, history_path: Path, journal_path: Path) -> None:
        self.history_path = history_path
        self.journal_path = journal_path

    def write(self, target: str, transaction: Transaction) -> None:
        if target == JOURNAL_TARGET:
            append_journal(self.journal_path, transaction)
        elif target == HISTORY_TARGET:
            append_text(self.history_path, render_history_block(transaction))
        else:
            msg = f"Unknown history target: {target!r}"
            raise ValueError(msg)


@dataclass
class PendingAppend:
    """A committed transaction whose durable append has not fully succeeded."""

    transaction: Transaction
    remaining: list[str]
    attempts: int = 0
    last_error: str = ""
    done: list[str] = field(default_factory=list)


class TransactionStore:
    """In-memory transaction history with a durable append port.

    Args:
        writer: Persistence port. ``None`` keeps history in memory only.
        retries: Attempts per durable append before giving up.
        retry_delay: Seconds to wait between attempts.
        sleep: Injected for tests.
    """

    def __init__(
        self,
        writer: HistoryWriter | None = None,
        *,
        retries: int = 3,
        retry_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._writer = writer
        self._retries = max(1, retries)
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._lock = threading.Lock()
        self._history: tuple[Transaction, ...] = ()
        self._ids: set[str] = set()
        self._next_sequence = 1
        self._pending: list[PendingAppend] = []
        self._closed_reason: str | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._history

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    @property
    def pending(self) -> tuple[Transaction, ...]:
        """Transactions committed in memory but not yet durably written."""
        return tuple(job.transaction for job in self._pending)

    @property
    def closed_reason(self) -> str | None:
        """Why the store refuses new appends, or None while it accepts them."""
        return self._closed_reason

    def is_durable(self, transaction_id: str) -> bool:
        """True once *transaction_id* is in the record of truth.

        Without a writer nothing is ever durable.
        """
        if self._writer is None or transaction_id not in self._ids:
            return False
        primary = self._writer.targets[0]
        for job in self._pending:
            if job.transaction.id == transaction_id:
                return primary in job.done
        return True

    def __len__(self) -> int:
        return len(self._history)

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def append(self, transaction: Transaction) -> None:
        """Commit *transaction* to history and write it durably once.

        Raises:
            ValidationError: If the store is closed or the ID has already
                been used. Nothing is changed in that case.
            PersistenceError: If the durable append still fails after all
                retries. The in-memory commit has already happened and the
                record is kept in :attr:`pending` for :meth:`flush_pending`.
        """
        with self._lock:
            if self._closed_reason is not None:
                raise ValidationError(
                    f"Sales history is closed: {self._closed_reason}",
                    detail={"id": transaction.id, "reason": self._closed_reason},
                )
            if transaction.id in self._ids:
                raise ValidationError(
                    f"Duplicate transaction ID: {transaction.id}",
                    detail={"id": transaction.id},
                )
            self._history = (*self._history, transaction)
            self._ids.add(transaction.id)
            sequence = parse_transaction_sequence(transaction.id) or 0
            self._next_sequence = max(self._next_sequence, sequence) + 1

            writer = self._writer
            if writer is None:
                return
            job = PendingAppend(transaction=transaction, remaining=list(writer.targets))
            if not self._drain(writer, job):
                self._pending.append(job)
                raise PersistenceError(
                    f"Could not persist {transaction.id} after {job.attempts} attempts: "
                    f"{job.last_error}",
                    detail={
                        "id": transaction.id,
                        "attempts": job.attempts,
                        "remaining": list(job.remaining),
                    },
                )

    def flush_pending(self) -> int:
        """Retry durable writes for pending transactions.

        Returns:
            Number of transactions that were fully persisted by this call.

        Raises:
            PersistenceError: If any transaction is still pending afterwards.
        """
        with self._lock:
            writer = self._writer
            if writer is None or not self._pending:
                return 0
            still_pending: list[PendingAppend] = []
            flushed = 0
            for job in self._pending:
                if self._drain(writer, job):
                    flushed += 1
                else:
                    still_pending.append(job)
            self._pending = still_pending
            if still_pending:
                raise PersistenceError(
                    f"{len(still_pending)} transaction(s) still pending",
                    detail={"pending": [job.transaction.id for job in still_pending]},
                )
            return flushed

    def restore(
        self,
        transactions: Iterable[Transaction],
        *,
        reserved_ids: Iterable[str] = (),
        pending: Iterable[PendingAppend] = (),
    ) -> None:
        """Re-initialise history from previously persisted transactions.

        Args:
            transactions: History read back from the record of truth.
            reserved_ids: IDs already handed out elsewhere (e.g. written to
                a secondary target only). They are never reissued.
            pending: Restored transactions still missing from some target.

        The next sequence is set past the history length and past the
        highest sequence among both restored and reserved IDs.
        """
        restored = tuple(transactions)
        reserved = set(reserved_ids)
        known = {txn.id for txn in restored} | reserved
        highest = max((parse_transaction_sequence(i) or 0 for i in known), default=0)
        with self._lock:
            self._history = restored
            self._ids = known
            self._next_sequence = max(len(restored), highest) + 1
            self._pending = list(pending)
        logger.debug(
            "Restored %d transactions (%d pending), next sequence %d",
            len(restored),
            len(self._pending),
            self._next_sequence,
        )

    def close(self, reason: str) -> None:
        """Refuse further appends; used when used IDs cannot be determined."""
        with self._lock:
            self._closed_reason = reason
        logger.warning("Sales history closed: %s", reason)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _drain(self, writer: HistoryWriter, job: PendingAppend) -> bool:
        """Write every remaining target of *job*, retrying on ``OSError``.

        Each attempt tries all remaining targets, so a failing target never
        keeps the others from recording the ID.
        """
        for attempt in range(1, self._retries + 1):
            job.attempts += 1
            for target in list(job.remaining):
                try:
                    writer.write(target, job.transaction)
                except OSError as exc:
                    job.last_error = str(exc)
                    logger.warning(
                        "History append failed for %s (%s, attempt %d/%d): %s",
                        job.transaction.id,
                        target,
                        attempt,
                        self._retries,
                        exc,
                    )
                    continue
                job.remaining.remove(target)
                job.done.append(target)
            if not job.remaining:
                return True
            if attempt < self._retries and self._retry_delay > 0:
                self._sleep(self._retry_delay)
        return False
