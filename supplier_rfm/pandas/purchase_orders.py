"""Pandas DataFrame adapters for purchase order records."""

from typing import List, Sequence

import pandas as pd  # type: ignore

from supplier_rfm.foundation.purchase_orders import (
    DEFAULT_FIELDS,
    PurchaseOrderFields,
    PurchaseOrderRecord,
    validate_purchase_orders,
)
from ._utils import decimal_to_float


def purchase_orders_to_dataframe(
    records: Sequence[PurchaseOrderRecord],
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> pd.DataFrame:
    """Convert validated purchase orders to a display DataFrame.

    Each row carries a synthetic ``id`` equal to the record's position in
    ``records``, so ids stay stable for as long as the dataset is loaded.

    Args:
        records: Validated purchase orders, in dataset order
        fields: Column names to use for the record attributes

    Returns:
        DataFrame with columns: id, supplier name, PO date, PO number,
        PO amount (float), item description

    Example:
        >>> records = validate_purchase_orders(rows)
        >>> grid = purchase_orders_to_dataframe(records)
        >>> grid.head(10)
    """
    columns = [
        "id",
        fields.supplier_name,
        fields.po_date,
        fields.po_number,
        fields.po_amount,
        fields.item_description,
    ]
    if not records:
        return pd.DataFrame(columns=columns)

    rows = [
        {
            "id": idx,
            fields.supplier_name: record.supplier_name,
            fields.po_date: record.po_date,
            fields.po_number: record.po_number,
            fields.po_amount: decimal_to_float(record.po_amount),
            fields.item_description: record.item_description,
        }
        for idx, record in enumerate(records)
    ]
    return pd.DataFrame(rows, columns=columns)


def validate_purchase_orders_df(
    raw_df: pd.DataFrame,
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> List[PurchaseOrderRecord]:
    """Validate the rows of a raw purchase order DataFrame.

    Args:
        raw_df: DataFrame as read from the source file (any dtypes)
        fields: Column names to read

    Returns:
        Validated records in row order. Rows with missing or unparseable
        supplier, date or amount are dropped.

    Raises:
        ValueError: If DataFrame is missing the supplier, date or amount column

    Example:
        >>> raw_df = pd.read_csv('purchase_orders.csv')
        >>> records = validate_purchase_orders_df(raw_df)
    """
    required_cols = [fields.supplier_name, fields.po_date, fields.po_amount]
    missing_cols = set(required_cols) - set(raw_df.columns)
    if missing_cols:
        raise ValueError(f"DataFrame missing required columns: {missing_cols}")

    if raw_df.empty:
        return []

    return validate_purchase_orders(raw_df.to_dict("records"), fields)
