"""Markdown formatting for supplier RFM results.

Converts RFM summaries and purchase order rows into presentation-ready
markdown for the MCP server and the command line.
"""

from supplier_rfm.mcp.formatters.markdown_tables import (
    DEFAULT_PAGE_SIZE,
    format_purchase_order_table,
    format_rfm_summary_table,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "format_purchase_order_table",
    "format_rfm_summary_table",
]
