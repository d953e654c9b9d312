"""Markdown table formatters for supplier RFM results.

Formats the RFM summary cards and the purchase order grid as markdown
suitable for Claude Desktop and other markdown renderers.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from supplier_rfm.foundation.purchase_orders import DEFAULT_FIELDS, PurchaseOrderFields

if TYPE_CHECKING:
    from supplier_rfm.foundation.rfm import SupplierRFMSummary

#: Rows per page in the purchase order grid.
DEFAULT_PAGE_SIZE = 10


def _format_money(value: Decimal | float) -> str:
    return f"${value:,.2f}"


def _format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def _escape_cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("|", "\\|").replace("\n", " ")


def format_rfm_summary_table(summary: SupplierRFMSummary | None) -> str:
    """Format a supplier RFM summary as markdown tables.

    Parameters
    ----------
    summary:
        RFM summary for the selected supplier, or None

    Returns
    -------
    str:
        Markdown with the recency, frequency and monetary cards followed by
        the order history. A short notice when ``summary`` is None.

    Examples
    --------
    >>> from datetime import datetime
    >>> from decimal import Decimal
    >>> from supplier_rfm.foundation.rfm import MonetarySummary, SupplierRFMSummary
    >>> summary = SupplierRFMSummary(
    ...     supplier_name="ACME CORP",
    ...     recency_days=10,
    ...     frequency_per_month=Decimal("1.00"),
    ...     frequency_per_month_raw=1.0,
    ...     monetary=MonetarySummary(Decimal("100"), Decimal("100.00")),
    ...     order_count=1,
    ...     first_order_date=datetime(2024, 3, 1),
    ...     last_order_date=datetime(2024, 3, 1),
    ... )
    >>> format_rfm_summary_table(summary).splitlines()[0]
    '## RFM Analysis for ACME CORP'
    >>> format_rfm_summary_table(None)
    '_No RFM summary available. Select a supplier with orders._\\n'
    """
    if summary is None:
        return "_No RFM summary available. Select a supplier with orders._\n"

    return f"""## RFM Analysis for {summary.supplier_name}

| Metric | Value | Description |
|--------|-------|-------------|
| Recency | {summary.recency_days:,} days | Days since last purchase order |
| Frequency | {summary.frequency_per_month} orders | Average orders per month |
| Monetary | {_format_money(summary.monetary.total)} | Average order value: {_format_money(summary.monetary.average)} |

### Order History

| First Order | Last Order | Total Orders |
|-------------|------------|--------------|
| {_format_date(summary.first_order_date)} | {_format_date(summary.last_order_date)} | {summary.order_count:,} |
"""


def format_purchase_order_table(
    rows: Sequence[Mapping[str, Any]],
    page_size: int = DEFAULT_PAGE_SIZE,
    page: int = 0,
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> str:
    """Format one page of purchase order display rows as a markdown table.

    Parameters
    ----------
    rows:
        Display rows as returned by ``SupplierRFMDashboard.rows()``
    page_size:
        Rows per page (default: 10)
    page:
        Zero-based page number
    fields:
        Column names used in ``rows``

    Returns
    -------
    str:
        Markdown table followed by a "Showing x-y of n" line
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive: {page_size}")
    if page < 0:
        raise ValueError(f"page cannot be negative: {page}")

    table = "| ID | Supplier Name | PO Date | PO Number | PO Amount | Item Description |\n"
    table += "|----|---------------|---------|-----------|-----------|------------------|\n"

    start = page * page_size
    page_rows = list(rows[start : start + page_size])
    for row in page_rows:
        po_date = row.get(fields.po_date)
        amount = row.get(fields.po_amount)
        table += (
            f"| {row.get('id', '')} "
            f"| {_escape_cell(row.get(fields.supplier_name))} "
            f"| {_format_date(po_date) if isinstance(po_date, datetime) else _escape_cell(po_date)} "
            f"| {_escape_cell(row.get(fields.po_number))} "
            f"| {_format_money(amount) if amount is not None else ''} "
            f"| {_escape_cell(row.get(fields.item_description))} |\n"
        )

    if page_rows:
        table += f"\nShowing {start + 1}-{start + len(page_rows)} of {len(rows):,}\n"
    else:
        table += f"\nShowing 0 of {len(rows):,}\n"
    return table
