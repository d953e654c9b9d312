"""Foundational building blocks for supplier purchase order analysis.

This package exposes the purchase order validator, which turns loosely
typed source rows into typed records, and the RFM
(Recency-Frequency-Monetary) summary calculated from those records.
"""

from .purchase_orders import (
    ALL_SUPPLIERS,
    DEFAULT_FIELDS,
    PurchaseOrderFields,
    PurchaseOrderRecord,
    ValidationReport,
    list_suppliers,
    validate_purchase_orders,
    validate_purchase_orders_with_report,
)
from .rfm import MonetarySummary, SupplierRFMSummary, calculate_supplier_rfm

__all__ = [
    "ALL_SUPPLIERS",
    "DEFAULT_FIELDS",
    "PurchaseOrderFields",
    "PurchaseOrderRecord",
    "ValidationReport",
    "list_suppliers",
    "validate_purchase_orders",
    "validate_purchase_orders_with_report",
    "MonetarySummary",
    "SupplierRFMSummary",
    "calculate_supplier_rfm",
]
