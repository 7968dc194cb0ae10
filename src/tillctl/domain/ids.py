"""ID patterns, validation, and generation contracts.

Two ID strategies:
- SKU codes: derived from category, product name and size (``SC-WS-M``).
- Transaction IDs: ``TXN-<YYYYMMDD>-<sequence>``, sequence minimum 4 digits,
  grows naturally past 9999.

INVARIANT: IDs are permanent. Once assigned, an ID never changes.
"""

from __future__ import annotations

import re
from datetime import datetime

TRANSACTION_PREFIX = "TXN-"

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "sku": re.compile(r"^[A-Z]{1,2}-[A-Z]{1,2}-[A-Za-z0-9-]+$"),
    "transaction": re.compile(r"^TXN-\d{8}-\d{4,}$"),
}


def generate_sku(category: str, name: str, size: str) -> str:
    """Build a SKU code from catalog attributes.

    The category contributes its first two letters, the product name the
    initials of its first two words (or its first two letters when it is a
    single word), and the size is appended verbatim.

    Examples:
        >>> generate_sku("Scarves", "Wool Scarf", "M")
        'SC-WS-M'
        >>> generate_sku("Socks", "Thermal", "XL")
        'SO-TH-XL'
    """
    category_code = category.strip()[:2].upper()
    words = name.split()
    if len(words) > 1:
        product_code = f"{words[0][0]}{words[1][0]}".upper()
    else:
        product_code = name.strip()[:2].upper()
    return f"{category_code}-{product_code}-{size.strip()}"


def format_transaction_id(moment: datetime, sequence: int) -> str:
    """Format a transaction ID from a checkout timestamp and sequence number.

    The date segment is taken from *moment* so a single captured timestamp
    drives both the ID and the stored transaction time.

    Raises:
        ValueError: If *sequence* is not a positive integer.
    """
    if sequence < 1:
        msg = f"Transaction sequence must be positive, got {sequence}"
        raise ValueError(msg)
    return f"{TRANSACTION_PREFIX}{moment:%Y%m%d}-{sequence:04d}"


def parse_transaction_sequence(transaction_id: str) -> int | None:
    """Return the sequence number of a transaction ID, or None if malformed."""
    if not validate_id(transaction_id.upper(), "transaction"):
        return None
    return int(transaction_id.rsplit("-", 1)[1])


def validate_id(value: str, kind: str) -> bool:
    """Check whether *value* matches the expected pattern for *kind*."""
    pattern = ID_PATTERNS.get(kind)
    if pattern is None:
        return False
    return pattern.match(value) is not None
