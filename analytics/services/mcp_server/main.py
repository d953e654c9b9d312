"""
Supplier RFM Analytics MCP Server

This module provides the main MCP server exposing purchase order loading,
supplier selection and supplier RFM summaries as MCP tools.

Environment:
- SUPPLIER_RFM_SOURCE: default purchase order CSV/JSON path or URL
- LOG_LEVEL: structlog filtering level (default: INFO)
- MCP_DATA_DIR: base directory local source files must reside in
  (default: current working directory)
"""

import logging
import os
import sys
from contextlib import asynccontextmanager

import structlog

VERSION = "1.0.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure structlog to write to stderr, not stdout (to avoid interfering with MCP JSON protocol)
logging.basicConfig(
    format="%(message)s",
    stream=sys.stderr,
    level=getattr(logging, LOG_LEVEL, logging.INFO),
)

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, LOG_LEVEL, logging.INFO)
    ),
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def app_lifespan(app):
    """Log server startup and shutdown.

    The dataset is not loaded eagerly; clients call load_purchase_orders.
    """
    from analytics.services.mcp_server.tools.data_loader import default_source

    logger.info(
        "mcp_server_starting",
        version=VERSION,
        default_source=default_source(),
        log_level=LOG_LEVEL,
    )

    yield

    # Shutdown
    logger.info("mcp_server_stopping")


# Import MCP server instance (must be imported before tools to avoid circular imports)
from analytics.services.mcp_server.instance import mcp  # noqa: E402

# Configure lifespan
mcp.lifespan = app_lifespan


# These imports MUST happen before mcp.run() is called
# Each module registers its tools using the @mcp.tool() decorator
from analytics.services.mcp_server.tools import (  # noqa: E402, F401
    data_loader,
    health_check,
    rfm,
    suppliers,
)

logger.info(
    "mcp_server_initialized",
    tools=[
        "load_purchase_orders",
        "list_suppliers",
        "select_supplier",
        "calculate_supplier_rfm_summary",
        "get_purchase_order_rows",
        "health_check",
    ],
)


if __name__ == "__main__":
    mcp.run()
