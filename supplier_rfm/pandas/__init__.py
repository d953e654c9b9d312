"""Pandas DataFrame adapters for supplier RFM components."""

from .purchase_orders import (
    purchase_orders_to_dataframe,
    validate_purchase_orders_df,
)
from .rfm import (
    calculate_supplier_rfm_df,
    rfm_summary_to_dataframe,
)

__all__ = [
    # Purchase order adapters
    "purchase_orders_to_dataframe",
    "validate_purchase_orders_df",
    # RFM adapters
    "rfm_summary_to_dataframe",
    "calculate_supplier_rfm_df",
]
