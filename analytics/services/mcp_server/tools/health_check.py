"""Health Check MCP Tool

Reports server uptime and the state of the shared dashboard:
1. MCP server status
2. Dashboard availability
3. Purchase order dataset readiness (loading, loaded, last load error)
"""

import time
from datetime import datetime

import structlog
from fastmcp import Context
from pydantic import BaseModel, Field

from analytics.services.mcp_server.instance import mcp
from analytics.services.mcp_server.state import get_dashboard_holder

logger = structlog.get_logger(__name__)


class HealthCheckResponse(BaseModel):
    """Health check response with system status."""

    status: str = Field(
        description="Overall health status: 'healthy', 'degraded', or 'unhealthy'"
    )
    timestamp: str = Field(description="ISO timestamp of health check")
    checks: dict[str, str] = Field(description="Individual component health checks")
    uptime_seconds: float | None = Field(
        default=None, description="Server uptime in seconds (if available)"
    )
    dataset_status: dict[str, bool | int | str | None] = Field(
        description="Purchase order dataset state"
    )


# Track server start time
_SERVER_START_TIME = time.time()


async def _health_check_impl(ctx: Context) -> HealthCheckResponse:
    """Implementation of the health check."""
    logger.info("health_check_starting")

    checks: dict[str, str] = {"mcp_server": "healthy"}
    status = "healthy"

    holder = get_dashboard_holder()
    dashboard = holder.get()
    checks["dashboard"] = "healthy"

    dataset_status: dict[str, bool | int | str | None] = {
        "loading": dashboard.loading,
        "loaded": holder.has_data(),
        "record_count": len(dashboard.records),
        "supplier_count": len(dashboard.suppliers) - 1,
        "selected_supplier": dashboard.selected_supplier,
        "load_error": dashboard.load_error,
    }

    # Dataset state is informational; only a failed load degrades health
    if dashboard.load_error is not None:
        checks["dataset"] = f"last load failed: {dashboard.load_error}"
        status = "degraded"
    elif dashboard.loading:
        checks["dataset"] = "loading"
    elif dataset_status["loaded"]:
        checks["dataset"] = f"available ({dataset_status['record_count']} records)"
    else:
        checks["dataset"] = "no data loaded (use load_purchase_orders)"

    uptime_seconds = time.time() - _SERVER_START_TIME

    logger.info(
        "health_check_complete",
        status=status,
        checks=checks,
        uptime_seconds=uptime_seconds,
    )
    await ctx.info(f"Health: {status}")

    return HealthCheckResponse(
        status=status,
        timestamp=datetime.now().isoformat(),
        checks=checks,
        uptime_seconds=uptime_seconds,
        dataset_status=dataset_status,
    )


@mcp.tool()
async def health_check(ctx: Context) -> HealthCheckResponse:
    """
    Check health of the MCP server and the purchase order dataset.

    Returns:
        HealthCheckResponse with overall status and component checks
    """
    return await _health_check_impl(ctx)
