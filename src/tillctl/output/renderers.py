"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tillctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from tillctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "id" in result.data:
        return str(result.data["id"])

    # For table/list results, return IDs only
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract a transaction ID or SKU from a dict item."""
    if isinstance(item, dict):
        for key in ("id", "sku"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _money(value: Any) -> str:
    try:
        return f"${Decimal(str(value)):.2f}"
    except InvalidOperation:
        return str(value)


def _percent(value: Any) -> str:
    try:
        return f"{Decimal(str(value)):.1f}%"
    except InvalidOperation:
        return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="till.ok")
    op = Text(f"  {result.op}", style="till.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="till.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="till.id")
    elif key == "sku":
        v = Text(str(value), style="till.sku")
    elif key == "path":
        v = Text(str(value), style="till.path")
    else:
        v = Text(str(value))
    console.print(k + v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    if span_data.get("annotations"):
        extras = ", ".join(f"{ak}={av}" for ak, av in span_data["annotations"].items())
        line += f"  ({extras})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _lines_table(lines: list[dict[str, Any]]) -> Table:
    """Build a Rich Table for cart lines or transaction lines."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("SKU", style="till.sku", no_wrap=True)
    table.add_column("Item")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Total", justify="right", style="till.money")
    for index, line in enumerate(lines, start=1):
        table.add_row(
            str(index),
            str(line.get("sku", "")),
            str(line.get("display_name", "")),
            str(line.get("quantity", "")),
            _money(line.get("unit_price", "")),
            _money(line.get("line_total", line.get("subtotal", ""))),
        )
    return table


def _totals(console: Console, data: dict[str, Any]) -> None:
    console.print(f"  Subtotal:   {_money(data.get('subtotal', 0))}")
    console.print(
        f"  Discount:  [till.discount]-{_money(data.get('discount_amount', 0))}[/till.discount]"
        f" ({_percent(data.get('discount_rate', 0))})"
    )
    console.print(f"  [till.total]TOTAL:      {_money(data.get('final_total', 0))}[/till.total]")
    console.print(f"  Items:      {data.get('item_count', 0)}")


def _product_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("SKU", style="till.sku", no_wrap=True)
    table.add_column("Category")
    table.add_column("Product")
    table.add_column("Size")
    table.add_column("Price", justify="right")
    table.add_column("Stock", justify="right")
    if verbose:
        table.add_column("Sold", justify="right", style="dim")

    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("sku", "")),
            str(item.get("category", "")),
            str(item.get("name", "")),
            str(item.get("size", "")),
            _money(item.get("unit_price", "")),
            Text(str(item.get("stock", "")), style=style_for_status(status)),
        ]
        if verbose:
            row.append(str(item.get("units_sold", "")))
        table.add_row(*row)
    return table


def _transaction_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="till.id", no_wrap=True)
    table.add_column("Date/Time")
    table.add_column("Customer")
    table.add_column("Items", justify="right")
    table.add_column("Total", justify="right", style="till.money")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("when", "")),
            str(item.get("actor", "")),
            str(item.get("item_count", "")),
            _money(item.get("final_total", "")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="till.error")
    op = Text(f"  {result.op}", style="till.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if err is None:
        return

    shortfalls = err.detail.get("shortfalls")
    if shortfalls:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("SKU", style="till.sku", no_wrap=True)
        table.add_column("Requested", justify="right")
        table.add_column("Available", justify="right")
        table.add_column("Short", justify="right", style="till.error")
        for s in shortfalls:
            table.add_row(
                str(s["sku"]), str(s["requested"]), str(s["available"]), str(s["shortfall"])
            )
        console.print(table)
    elif verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Sale renderers ────────────────────────────────────────────────────


def _render_receipt(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a committed transaction as a receipt panel."""
    d = result.data
    header = [f"Date/Time: {d.get('timestamp', '')}", f"Customer: {d.get('actor', '')}"]
    if d.get("coupon_code"):
        header.append(f"Coupon: {d['coupon_code']}")
    console.print(Panel("\n".join(header), title=str(d.get("id", "?")), border_style="dim", expand=False))
    console.print(_lines_table(d.get("lines", [])))
    _totals(console, d)
    if d.get("persisted") is False:
        console.print("  [till.warning]not yet written to sales history[/till.warning]")
    if verbose:
        _render_meta(console, result)


def _render_quote(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a priced cart that has not been committed."""
    d = result.data
    console.print(Text("QUOTE", style="till.op"), Text("  not committed", style="dim"))
    console.print(_lines_table(d.get("lines", [])))
    _totals(console, d)
    if verbose:
        _render_meta(console, result)


# ── Catalog renderers ─────────────────────────────────────────────────


def _render_product_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if "threshold" in result.data:
        console.print(f"Products with fewer than {result.data['threshold']} in stock")
    console.print(_product_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} products")


def _render_product(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    status = str(d.get("status", ""))
    lines = [
        f"category: {d.get('category', '')}",
        f"price: {_money(d.get('unit_price', ''))}",
        f"stock: [{style_for_status(status) or 'default'}]{d.get('stock', '')}[/] ({status})",
        f"sold: {d.get('units_sold', 0)}",
    ]
    title = f"{d.get('sku', '?')} — {d.get('display_name', '')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))


def _render_units_sold(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("SKU", style="till.sku", no_wrap=True)
    table.add_column("Item")
    table.add_column("Sold", justify="right", style="till.money")
    table.add_column("Left", justify="right")
    for item in items:
        table.add_row(
            str(item["sku"]), str(item["display_name"]), str(item["units_sold"]), str(item["stock"])
        )
    console.print(table)
    console.print(f"\n{result.data.get('total_units', 0)} units sold")


# ── History renderers ─────────────────────────────────────────────────


def _render_transaction_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No matching transactions")
        return
    console.print(_transaction_table(items))
    console.print(f"\n{result.data.get('count', len(items))} transactions")


def _render_summary(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "transactions", d.get("transaction_count", 0))
    _field(console, "items sold", d.get("total_items_sold", 0))
    _field(console, "revenue", _money(d.get("total_revenue", 0)))
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Sales
    "checkout": _render_receipt,
    "quote": _render_quote,
    # Catalog
    "list_products": _render_product_table,
    "low_stock": _render_product_table,
    "get_product": _render_product,
    "units_sold": _render_units_sold,
    # History
    "find_transaction": _render_receipt,
    "find_by_date": _render_transaction_table,
    "find_by_amount_range": _render_transaction_table,
    "list_transactions": _render_transaction_table,
    "sales_summary": _render_summary,
}
