"""Pandas DataFrame adapters for supplier RFM summaries."""

from datetime import date, datetime
from typing import Optional, Union

import pandas as pd  # type: ignore

from supplier_rfm.foundation.purchase_orders import (
    DEFAULT_FIELDS,
    PurchaseOrderFields,
)
from supplier_rfm.foundation.rfm import SupplierRFMSummary, calculate_supplier_rfm
from ._utils import decimal_to_float
from .purchase_orders import validate_purchase_orders_df

RFM_COLUMNS = [
    "supplier_name",
    "recency_days",
    "frequency_per_month",
    "monetary_total",
    "monetary_average",
    "order_count",
    "first_order_date",
    "last_order_date",
]


def rfm_summary_to_dataframe(summary: Optional[SupplierRFMSummary]) -> pd.DataFrame:
    """Convert an RFM summary to a single-row DataFrame.

    Args:
        summary: Summary to convert, or None

    Returns:
        DataFrame with columns: supplier_name, recency_days,
        frequency_per_month, monetary_total, monetary_average, order_count,
        first_order_date, last_order_date. Empty (with the same columns)
        when summary is None.
    """
    if summary is None:
        return pd.DataFrame(columns=RFM_COLUMNS)

    row = {
        "supplier_name": summary.supplier_name,
        "recency_days": summary.recency_days,
        "frequency_per_month": decimal_to_float(summary.frequency_per_month),
        "monetary_total": decimal_to_float(summary.monetary.total),
        "monetary_average": decimal_to_float(summary.monetary.average),
        "order_count": summary.order_count,
        "first_order_date": summary.first_order_date,
        "last_order_date": summary.last_order_date,
    }
    return pd.DataFrame([row], columns=RFM_COLUMNS)


def calculate_supplier_rfm_df(
    raw_df: pd.DataFrame,
    selected_supplier: str,
    now: Union[datetime, date],
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> pd.DataFrame:
    """Calculate a supplier's RFM summary straight from a raw DataFrame.

    Convenience function that combines validation and calculation.

    Args:
        raw_df: Raw purchase order DataFrame
        selected_supplier: Supplier to summarise
        now: Reference instant for recency
        fields: Column name mappings for flexibility

    Returns:
        Single-row DataFrame with the RFM summary, or an empty DataFrame
        when the supplier has no valid orders

    Example:
        >>> raw_df = pd.read_csv('purchase_orders.csv')
        >>> calculate_supplier_rfm_df(raw_df, 'ACME CORP', datetime(2024, 12, 31))
    """
    records = validate_purchase_orders_df(raw_df, fields)
    summary = calculate_supplier_rfm(records, selected_supplier, now)
    return rfm_summary_to_dataframe(summary)
