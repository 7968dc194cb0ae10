"""Rich Console factory and theme for tillctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TILL_THEME = Theme(
    {
        "till.ok": "bold green",
        "till.error": "bold red",
        "till.warning": "bold yellow",
        "till.op": "bold cyan",
        "till.key": "dim",
        "till.id": "bold blue",
        "till.sku": "cyan",
        "till.path": "dim",
        "till.money": "bold",
        "till.total": "bold green",
        "till.discount": "magenta",
        "till.stock.good": "green",
        "till.stock.low": "yellow",
        "till.stock.critical": "bold red",
        "till.stock.out_of_stock": "dim red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "good": "till.stock.good",
    "low": "till.stock.low",
    "critical": "till.stock.critical",
    "out_of_stock": "till.stock.out_of_stock",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TILL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a stock status band."""
    return _STATUS_STYLES.get(status, "")
