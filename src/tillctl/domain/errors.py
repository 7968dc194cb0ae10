"""Error taxonomy for the till core.

Every condition here is recoverable: the process stays usable after any
single failed operation. Services translate these into ``ServiceResult``
errors; only infrastructure and domain code raise them.
"""

from __future__ import annotations

from typing import Any


class TillError(Exception):
    """Base class for all till errors.

    Attributes:
        message: Human-readable description.
        detail: Structured context for display or JSON output.
    """

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail or {}


class ValidationError(TillError):
    """Bad quantity, bad discount percentage, or insufficient stock."""


class NotFoundError(TillError):
    """Unknown SKU, transaction ID, or cart line."""


class PersistenceError(TillError):
    """I/O failure while loading or saving till files."""
