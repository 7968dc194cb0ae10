"""Till: the single object injected into every service.

The Till owns everything one point of sale needs for a session: the live
catalog, the in-progress cart, the transaction store, the current actor,
and the clock. Services never reach for module-level state.

On construction the store is re-initialised from the JSON journal, so a
new process continues the sequence where the previous one stopped. The
sequence also stays ahead of every ID in the text history, so an ID is
never handed out twice even when the journal is damaged.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from tillctl.domain.cart import Cart
from tillctl.domain.errors import PersistenceError
from tillctl.domain.seed import build_default_catalog
from tillctl.infrastructure.filesystem import JournalFile, read_history_ids, read_journal
from tillctl.infrastructure.store import (
    HISTORY_TARGET,
    FileHistoryWriter,
    HistoryWriter,
    PendingAppend,
    TransactionStore,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tillctl.config.settings import TillSettings
    from tillctl.domain.catalog import Catalog

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


class Till:
    """Owned state for one till.

    Args:
        settings: Resolved settings (paths, retries, default actor).
        catalog: Starting catalog. Defaults to the built-in seed catalog.
        clock: Returns the current timezone-aware time. Injected for tests.
        writer: Durable history port. Defaults to the text history plus
            the JSON journal under the till root.
    """

    def __init__(
        self,
        settings: TillSettings,
        *,
        catalog: Catalog | None = None,
        clock: Callable[[], datetime] | None = None,
        writer: HistoryWriter | None = None,
    ) -> None:
        self.settings = settings
        self.catalog = catalog if catalog is not None else build_default_catalog()
        self.cart = Cart()
        self.actor = settings.effective_actor
        self.clock = clock or local_now
        self.warnings: list[str] = []

        if writer is None:
            writer = FileHistoryWriter(self.history_path, self.journal_path)
        self._writer_targets = writer.targets
        self.store = TransactionStore(
            writer,
            retries=settings.history.append_retries,
            retry_delay=settings.history.retry_delay_seconds,
        )
        self._restore_history()

    @property
    def root(self) -> Path:
        return self.settings.till_root

    @property
    def stock_path(self) -> Path:
        return self.settings.stock_path

    @property
    def history_path(self) -> Path:
        return self.settings.history_path

    @property
    def journal_path(self) -> Path:
        return self.settings.journal_path

    def now(self) -> datetime:
        moment = self.clock()
        if moment.tzinfo is None:
            moment = moment.astimezone()
        return moment

    def _restore_history(self) -> None:
        """Rebuild the store from the journal and the sales-history IDs.

        Unreadable journal lines are skipped with a warning. IDs found only
        in the text history stay reserved so they are never reissued, and
        journal sales missing from the text history become pending. If
        neither file can tell which IDs are taken, the store is closed.
        """
        journal_ok = True
        try:
            journal = read_journal(self.journal_path)
        except PersistenceError as exc:
            logger.warning("Journal unreadable, history starts empty: %s", exc)
            self.warnings.append(f"Sales journal could not be loaded: {exc.message}")
            journal = JournalFile()
            journal_ok = False
        for reason in journal.skipped:
            logger.warning("Skipped journal entry, %s", reason)
            self.warnings.append(f"Skipped sales journal entry, {reason}")

        history_ids: list[str] | None
        try:
            history_ids = read_history_ids(self.history_path)
        except PersistenceError as exc:
            logger.warning("Sales history unreadable: %s", exc)
            self.warnings.append(f"Sales history could not be read: {exc.message}")
            history_ids = None

        if not journal_ok and (history_ids is None or not self.history_path.is_file()):
            self.store.close("neither the journal nor the sales history can be read")
            self.warnings.append("Sales are disabled until the sales journal is readable")
            return

        pending: list[PendingAppend] = []
        if history_ids is not None and HISTORY_TARGET in self._writer_targets:
            written = set(history_ids)
            pending = [
                PendingAppend(
                    transaction=txn,
                    remaining=[HISTORY_TARGET],
                    done=[t for t in self._writer_targets if t != HISTORY_TARGET],
                )
                for txn in journal.transactions
                if txn.id not in written
            ]
            if pending:
                self.warnings.append(
                    f"{len(pending)} sale(s) missing from the sales history; "
                    "run 'tillctl history flush'"
                )
        self.store.restore(
            journal.transactions,
            reserved_ids=history_ids or (),
            pending=pending,
        )
