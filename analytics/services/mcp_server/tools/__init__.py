"""MCP Tools for Supplier RFM Analytics.

This module exports all MCP tools for purchase order loading, supplier
selection and RFM summaries.
"""

from .data_loader import load_purchase_orders
from .health_check import health_check
from .rfm import calculate_supplier_rfm_summary, get_purchase_order_rows
from .suppliers import list_suppliers, select_supplier

__all__ = [
    "load_purchase_orders",
    "list_suppliers",
    "select_supplier",
    "calculate_supplier_rfm_summary",
    "get_purchase_order_rows",
    "health_check",
]
