"""Supplier listing and selection tools for MCP server."""

import structlog
from fastmcp import Context
from pydantic import BaseModel, Field

from analytics.services.mcp_server.instance import mcp
from analytics.services.mcp_server.state import get_dashboard
from analytics.services.mcp_server.tools.rfm import SupplierRFMResponse, build_rfm_response

logger = structlog.get_logger(__name__)


class ListSuppliersResponse(BaseModel):
    """Suppliers available for selection."""

    suppliers: list[str] = Field(
        description="Supplier names, sorted, with the 'all' sentinel first"
    )
    selected_supplier: str
    loading: bool


class SelectSupplierRequest(BaseModel):
    """Request to change the selected supplier."""

    supplier: str = Field(
        description="Exact supplier name, or 'all' to clear the selection"
    )


async def _list_suppliers_impl(ctx: Context) -> ListSuppliersResponse:
    """Implementation of supplier listing."""
    dashboard = get_dashboard()
    suppliers = dashboard.suppliers
    await ctx.info(f"{len(suppliers) - 1} suppliers available")
    return ListSuppliersResponse(
        suppliers=suppliers,
        selected_supplier=dashboard.selected_supplier,
        loading=dashboard.loading,
    )


async def _select_supplier_impl(
    request: SelectSupplierRequest, ctx: Context
) -> SupplierRFMResponse:
    """Implementation of supplier selection."""
    dashboard = get_dashboard()
    summary = dashboard.select_supplier(request.supplier)
    logger.info(
        "supplier_selected",
        supplier=dashboard.selected_supplier,
        summary_available=summary is not None,
    )
    await ctx.info(f"Selected supplier: {dashboard.selected_supplier}")
    return build_rfm_response(dashboard.selected_supplier, summary)


@mcp.tool()
async def list_suppliers(ctx: Context) -> ListSuppliersResponse:
    """List the suppliers in the loaded purchase order dataset.

    Returns:
        Sorted supplier names behind an 'all' entry, plus the current selection
    """
    return await _list_suppliers_impl(ctx)


@mcp.tool()
async def select_supplier(
    request: SelectSupplierRequest, ctx: Context
) -> SupplierRFMResponse:
    """Select a supplier and return its RFM summary.

    Selecting 'all' clears the selection; no summary is available then.

    Args:
        request: Supplier to select

    Returns:
        RFM summary for the newly selected supplier
    """
    return await _select_supplier_impl(request, ctx)
