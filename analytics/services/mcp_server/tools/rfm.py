"""Supplier RFM MCP Tools"""

from datetime import datetime

import structlog
from fastmcp import Context
from pydantic import BaseModel, Field

from analytics.services.mcp_server.instance import mcp
from analytics.services.mcp_server.state import get_dashboard
from supplier_rfm.foundation.rfm import SupplierRFMSummary, calculate_supplier_rfm
from supplier_rfm.mcp.formatters import (
    DEFAULT_PAGE_SIZE,
    format_purchase_order_table,
    format_rfm_summary_table,
)

logger = structlog.get_logger(__name__)


class CalculateSupplierRFMRequest(BaseModel):
    """Request to calculate a supplier's RFM summary."""

    supplier: str | None = Field(
        default=None,
        description="Supplier to summarise (defaults to the selected supplier)",
    )
    as_of: datetime | None = Field(
        default=None, description="Reference instant for recency (defaults to now)"
    )


class SupplierRFMResponse(BaseModel):
    """Supplier RFM summary response."""

    supplier: str
    available: bool = Field(description="False when no summary could be computed")
    summary: dict | None = None
    markdown: str


class PurchaseOrderRowsRequest(BaseModel):
    """Request for a page of purchase order rows."""

    page: int = Field(default=0, ge=0, description="Zero-based page number")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=500)
    supplier: str | None = Field(
        default=None, description="Only return rows for this supplier"
    )


class PurchaseOrderRowsResponse(BaseModel):
    """A page of purchase order display rows."""

    total_rows: int
    rows: list[dict]
    markdown: str


def build_rfm_response(
    supplier: str, summary: SupplierRFMSummary | None
) -> SupplierRFMResponse:
    """Wrap a summary (or its absence) in a response model."""
    return SupplierRFMResponse(
        supplier=supplier,
        available=summary is not None,
        summary=summary.as_dict() if summary is not None else None,
        markdown=format_rfm_summary_table(summary),
    )


async def _calculate_supplier_rfm_impl(
    request: CalculateSupplierRFMRequest, ctx: Context
) -> SupplierRFMResponse:
    """Implementation of supplier RFM calculation."""
    dashboard = get_dashboard()
    supplier = request.supplier or dashboard.selected_supplier

    if request.supplier is None and request.as_of is None:
        # Nothing overridden: the dashboard already holds the current summary
        summary = dashboard.summary
    else:
        now = request.as_of or dashboard.clock()
        summary = calculate_supplier_rfm(dashboard.records, supplier, now)

    logger.info(
        "supplier_rfm_calculated",
        supplier=supplier,
        available=summary is not None,
        order_count=summary.order_count if summary is not None else 0,
    )
    await ctx.info(
        f"RFM summary for {supplier}: "
        f"{'available' if summary is not None else 'not available'}"
    )
    return build_rfm_response(supplier, summary)


async def _get_purchase_order_rows_impl(
    request: PurchaseOrderRowsRequest, ctx: Context
) -> PurchaseOrderRowsResponse:
    """Implementation of purchase order row paging."""
    dashboard = get_dashboard()
    rows = dashboard.rows()
    if request.supplier:
        supplier_col = dashboard.fields.supplier_name
        rows = [row for row in rows if row[supplier_col] == request.supplier]

    start = request.page * request.page_size
    page_rows = rows[start : start + request.page_size]
    serialised = []
    for row in page_rows:
        item = dict(row)
        for key, value in item.items():
            if isinstance(value, datetime):
                item[key] = value.isoformat()
            elif key == dashboard.fields.po_amount:
                item[key] = float(value)
        serialised.append(item)

    await ctx.info(f"Returning {len(page_rows)} of {len(rows)} purchase order rows")
    return PurchaseOrderRowsResponse(
        total_rows=len(rows),
        rows=serialised,
        markdown=format_purchase_order_table(
            rows, page_size=request.page_size, page=request.page
        ),
    )


@mcp.tool()
async def calculate_supplier_rfm_summary(
    request: CalculateSupplierRFMRequest, ctx: Context
) -> SupplierRFMResponse:
    """
    Calculate RFM (Recency, Frequency, Monetary) metrics for a supplier.

    - Recency: days since the last purchase order
    - Frequency: orders per month between the first and last order
    - Monetary: total spend and average order value

    Without arguments, returns the summary for the selected supplier as of
    now. No summary is available for 'all', for unknown suppliers, or
    before a dataset is loaded.

    Args:
        request: Optional supplier and reference instant overrides

    Returns:
        RFM summary and its markdown rendering
    """
    return await _calculate_supplier_rfm_impl(request, ctx)


@mcp.tool()
async def get_purchase_order_rows(
    request: PurchaseOrderRowsRequest, ctx: Context
) -> PurchaseOrderRowsResponse:
    """Return one page of the loaded purchase orders.

    Each row carries a stable synthetic 'id' (its position in the dataset).

    Args:
        request: Page selection and optional supplier filter

    Returns:
        Rows for the page plus a markdown table
    """
    return await _get_purchase_order_rows_impl(request, ctx)
