"""Flat-file formats for till data.

Three files live under the till root:

- ``stock.csv``: catalog snapshot, header
  ``SKU,Category,ProductName,Size,Price,Stock``. Rewritten whole.
- ``.tillctl/journal.jsonl``: one JSON transaction per line, append-only.
  This is the record of truth that re-initialises the in-memory history
  on start-up.
- ``sales_history.txt``: human-readable receipt blocks, append-only.
  Only the ``Transaction ID:`` headers are ever read back, to keep the
  sequence ahead of every ID already handed out.

Pure formatting helpers return strings; the writers do the I/O.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from tillctl.domain.errors import PersistenceError
from tillctl.domain.transaction import Transaction

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from tillctl.domain.catalog import Product

STOCK_HEADER: tuple[str, ...] = ("SKU", "Category", "ProductName", "Size", "Price", "Stock")

BLOCK_RULE = "=" * 40
SECTION_RULE = "-" * 40
HISTORY_ID_LABEL = "Transaction ID: "


# ---------------------------------------------------------------------------
# Stock file
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StockRow:
    sku: str
    stock: int


@dataclass
class StockFile:
    """Parsed stock file: usable rows plus human-readable skip reasons."""

    rows: list[StockRow] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def write_stock_file(path: Path, products: Iterable[Product]) -> int:
    """Write the full catalog to *path*, returning the number of rows.

    Writes to a sibling temp file first and renames it into place, so a
    failed write never leaves a truncated stock file behind.

    Raises:
        PersistenceError: On any I/O failure.
    """
    tmp_path = path.with_name(f"{path.name}.tmp")
    count = 0
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh, lineterminator="\n")
            writer.writerow(STOCK_HEADER)
            for product in products:
                writer.writerow(
                    [
                        product.sku,
                        product.category,
                        product.name,
                        product.size,
                        f"{product.unit_price:.2f}",
                        product.current_stock,
                    ]
                )
                count += 1
        tmp_path.replace(path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise PersistenceError(
            f"Cannot write stock file {path}: {exc}", detail={"path": str(path)}
        ) from exc
    return count


def read_stock_file(path: Path) -> StockFile:
    """Parse a stock file into ``(sku, stock)`` rows.

    Rows that are short, have a non-integer or negative stock count, or are
    blank are skipped and reported; they never fail the whole load.

    Raises:
        PersistenceError: If the file cannot be read or its header is wrong.
    """
    result = StockFile()
    try:
        with path.open(encoding="utf-8", newline="") as fh:
            reader = csv.reader(fh)
            header = next(reader, None)
            if header is None or tuple(h.strip() for h in header) != STOCK_HEADER:
                raise PersistenceError(
                    f"Unrecognised stock file header in {path}",
                    detail={"path": str(path), "header": header or []},
                )
            for line_number, row in enumerate(reader, start=2):
                if not any(cell.strip() for cell in row):
                    continue
                if len(row) < len(STOCK_HEADER):
                    result.skipped.append(f"line {line_number}: expected 6 fields, got {len(row)}")
                    continue
                raw_stock = row[5].strip()
                try:
                    stock = int(raw_stock)
                except ValueError:
                    result.skipped.append(f"line {line_number}: stock {raw_stock!r} is not an integer")
                    continue
                if stock < 0:
                    result.skipped.append(f"line {line_number}: negative stock {stock}")
                    continue
                result.rows.append(StockRow(sku=row[0].strip(), stock=stock))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise PersistenceError(
            f"Cannot read stock file {path}: {exc}", detail={"path": str(path)}
        ) from exc
    return result


# ---------------------------------------------------------------------------
# Sales history (human-readable)
# ---------------------------------------------------------------------------


def render_history_block(txn: Transaction) -> str:
    """Render one transaction as a sales-history block (trailing blank line)."""
    lines = [
        BLOCK_RULE,
        f"{HISTORY_ID_LABEL}{txn.id}",
        f"Date/Time: {txn.timestamp:%d/%m/%Y %H:%M:%S}",
        f"Employee/Customer: {txn.actor}",
    ]
    if txn.coupon_code:
        lines.append(f"Coupon: {txn.coupon_code}")
    lines += [BLOCK_RULE, "Items Purchased:"]
    for line in txn.lines:
        lines.append(
            f"  • {line.name} ({line.size}) × {line.quantity} "
            f"@ ${line.unit_price:.2f} = ${line.line_total:.2f}"
        )
    lines += [
        SECTION_RULE,
        f"Subtotal: ${txn.subtotal:.2f}",
        f"Discount: -${txn.discount_amount:.2f} ({txn.discount_rate:.1f}%)",
        f"TOTAL PAID: ${txn.final_total:.2f}",
        f"Total Items: {txn.item_count}",
        "",
    ]
    return "\n".join(lines) + "\n"


def append_text(path: Path, text: str) -> None:
    """Append *text* to *path*, creating parent directories as needed.

    ``OSError`` propagates so the caller can decide whether to retry.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(text)


# ---------------------------------------------------------------------------
# Journal (machine-readable)
# ---------------------------------------------------------------------------


def append_journal(path: Path, txn: Transaction) -> None:
    """Append *txn* as one JSON line.

    If the previous write was torn (no trailing newline), the new record
    starts on a fresh line so it is never glued onto the broken one.
    """
    prefix = ""
    if path.is_file() and path.stat().st_size > 0:
        with path.open("rb") as fh:
            fh.seek(-1, 2)
            if fh.read(1) != b"\n":
                prefix = "\n"
    append_text(path, prefix + txn.model_dump_json() + "\n")


@dataclass
class JournalFile:
    """Parsed journal: valid transactions plus human-readable skip reasons."""

    transactions: list[Transaction] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def read_journal(path: Path) -> JournalFile:
    """Load every valid transaction from the journal, in commit order.

    A missing journal is an empty history. Lines that are not a valid
    transaction (a torn trailing write, a hand edit) or that repeat an
    earlier ID are skipped and reported; the rest of the journal still loads.

    Raises:
        PersistenceError: If the file itself cannot be read.
    """
    result = JournalFile()
    if not path.is_file():
        return result
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PersistenceError(
            f"Cannot read journal {path}: {exc}", detail={"path": str(path)}
        ) from exc
    seen: set[str] = set()
    for line_number, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            txn = Transaction.model_validate_json(line)
        except PydanticValidationError as exc:
            result.skipped.append(
                f"line {line_number}: not a valid transaction ({exc.error_count()} errors)"
            )
            continue
        if txn.id in seen:
            result.skipped.append(f"line {line_number}: repeats {txn.id}")
            continue
        seen.add(txn.id)
        result.transactions.append(txn)
    return result


def read_history_ids(path: Path) -> list[str]:
    """Transaction IDs recorded in the sales-history text, in file order.

    Only the ``Transaction ID:`` header of each block is read. A missing
    file has no IDs.

    Raises:
        PersistenceError: If the file cannot be read.
    """
    if not path.is_file():
        return []
    ids: list[str] = []
    try:
        with path.open(encoding="utf-8") as fh:
            for line in fh:
                if line.startswith(HISTORY_ID_LABEL):
                    ids.append(line[len(HISTORY_ID_LABEL) :].strip())
    except (OSError, UnicodeDecodeError) as exc:
        raise PersistenceError(
            f"Cannot read sales history {path}: {exc}", detail={"path": str(path)}
        ) from exc
    return ids
