"""Purchase order loading tool for MCP server."""

import asyncio
import os
from pathlib import Path

import structlog
from fastmcp import Context
from pydantic import BaseModel, Field

from analytics.services.mcp_server.instance import mcp
from analytics.services.mcp_server.state import get_dashboard
from supplier_rfm.sources import DEFAULT_SOURCE, is_remote, read_purchase_order_rows

logger = structlog.get_logger(__name__)


def default_source() -> str:
    """Return the purchase order source used when a request names none."""
    return os.getenv("SUPPLIER_RFM_SOURCE", DEFAULT_SOURCE)


def allowed_base_dir() -> Path:
    """Directory local purchase order files must reside in."""
    return Path(os.environ.get("MCP_DATA_DIR", os.getcwd())).resolve()


def resolve_source(source: str) -> str:
    """Validate a requested source and return it in loadable form.

    URLs pass through. Local paths are resolved against the allowed base
    directory and rejected if they point outside it.

    Raises:
        ValueError: If a local path is outside the allowed directory
    """
    if is_remote(source):
        return source

    base_dir = allowed_base_dir()
    path = Path(source)
    if not path.is_absolute():
        path = base_dir / path
    resolved = path.resolve()
    try:
        resolved.relative_to(base_dir)
    except ValueError as e:
        raise ValueError(
            f"Path {resolved} is outside allowed directory {base_dir}. "
            f"Only files within the allowed directory can be loaded."
        ) from e
    return str(resolved)


class LoadPurchaseOrdersRequest(BaseModel):
    """Request to load a purchase order dataset."""

    source: str | None = Field(
        default=None,
        description="CSV/JSON file path (relative to the data directory) or http(s) URL. "
        "Defaults to SUPPLIER_RFM_SOURCE or the Miami-Dade 2024 purchase orders.",
    )


class LoadPurchaseOrdersResponse(BaseModel):
    """Outcome of a purchase order load."""

    loaded: bool = Field(description="Whether this load's rows became the dataset")
    source: str
    generation: int = Field(description="Load generation number")
    total_rows: int = 0
    valid_rows: int = 0
    rejected_rows: int = 0
    rejections: dict[str, int] = Field(default_factory=dict)
    supplier_count: int = 0
    error: str | None = None
    message: str


async def _load_purchase_orders_impl(
    request: LoadPurchaseOrdersRequest, ctx: Context
) -> LoadPurchaseOrdersResponse:
    """Implementation of purchase order loading logic."""
    source = resolve_source(request.source or default_source())
    await ctx.info(f"Loading purchase orders from {source}")

    dashboard = get_dashboard()

    async def fetch():
        return await asyncio.to_thread(read_purchase_order_rows, source)

    loaded = await dashboard.load(fetch)
    generation = dashboard.generation

    if not loaded:
        if dashboard.load_error is not None:
            message = f"Failed to load purchase orders: {dashboard.load_error}"
        else:
            message = "Load superseded by a newer load; result discarded"
        logger.warning(
            "purchase_orders_not_loaded",
            source=source,
            error=dashboard.load_error,
        )
        await ctx.info(message)
        return LoadPurchaseOrdersResponse(
            loaded=False,
            source=source,
            generation=generation,
            error=dashboard.load_error,
            message=message,
        )

    report = dashboard.validation_report
    # Supplier list includes the "all" sentinel
    supplier_count = len(dashboard.suppliers) - 1
    logger.info(
        "purchase_orders_loaded",
        source=source,
        generation=generation,
        total_rows=report.total_rows,
        valid_rows=report.valid_rows,
        supplier_count=supplier_count,
    )
    message = (
        f"Loaded {report.valid_rows} of {report.total_rows} purchase orders "
        f"from {supplier_count} suppliers"
    )
    await ctx.info(message)

    return LoadPurchaseOrdersResponse(
        loaded=True,
        source=source,
        generation=generation,
        total_rows=report.total_rows,
        valid_rows=report.valid_rows,
        rejected_rows=report.rejected_rows,
        rejections=dict(report.rejections),
        supplier_count=supplier_count,
        message=message,
    )


@mcp.tool()
async def load_purchase_orders(
    request: LoadPurchaseOrdersRequest, ctx: Context
) -> LoadPurchaseOrdersResponse:
    """Load a purchase order dataset, replacing the current one.

    Rows missing a supplier, date or amount, or whose date or amount cannot
    be parsed, are dropped. The response reports how many rows were kept
    and why the others were rejected. The supplier list is rebuilt and the
    RFM summary for the selected supplier is recomputed.

    Args:
        request: Source of the purchase order export

    Returns:
        Load outcome with validation counters
    """
    return await _load_purchase_orders_impl(request, ctx)
