"""Readers that turn a purchase order export into raw rows.

The readers do no validation beyond checking the overall file shape: every
row is returned as a plain mapping with whatever types the parser inferred,
and :func:`supplier_rfm.foundation.validate_purchase_orders` decides what
to keep.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlparse

import pandas as pd

from supplier_rfm.foundation.purchase_orders import DEFAULT_FIELDS, PurchaseOrderFields

logger = logging.getLogger(__name__)

#: Public Miami-Dade County purchase orders for 2024.
DEFAULT_SOURCE = (
    "https://raw.githubusercontent.com/Perez786/DataMining_FinalProject/"
    "main/MiamiDade_PurchaseOrders_2024.csv"
)

MAX_INPUT_BYTES = 25 * 1024 * 1024  # 25 MiB cap to avoid accidental OOM


def is_remote(source: str | Path) -> bool:
    """Return True when ``source`` is an http(s) URL."""

    return urlparse(str(source)).scheme in {"http", "https"}


def _check_local_file(path: Path, max_bytes: int) -> Path:
    resolved = path.resolve()
    if not resolved.is_file():
        raise FileNotFoundError(f"Purchase order file not found: {resolved}")
    size = resolved.stat().st_size
    if size > max_bytes:
        raise ValueError(
            f"Input file {resolved} is {size} bytes; exceeds limit of {max_bytes} bytes"
        )
    return resolved


def _frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    # Blank cells become None so they read as missing, like NaN does.
    frame = frame.astype(object).where(frame.notna(), None)
    return frame.to_dict("records")


def _read_json_rows(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, list):
        raise ValueError("Expected a list of purchase order rows in the input file")
    return payload


def _is_json(source: str | Path) -> bool:
    if is_remote(source):
        return PurePosixPath(urlparse(str(source)).path).suffix.lower() == ".json"
    return Path(source).suffix.lower() == ".json"


def _read_csv_rows(source: str | Path, fields: PurchaseOrderFields) -> list[dict[str, Any]]:
    # Passthrough text columns keep their exact text (e.g. "00123", "12345")
    text_columns = [fields.supplier_name, fields.po_number, fields.item_description]
    frame = pd.read_csv(
        source,
        dtype={column: str for column in text_columns},
    )
    return _frame_to_rows(frame)


def read_purchase_order_rows(
    source: str | Path = DEFAULT_SOURCE,
    *,
    max_bytes: int = MAX_INPUT_BYTES,
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> list[dict[str, Any]]:
    """Read every row of a purchase order export.

    Parameters
    ----------
    source:
        Local path or http(s) URL. Sources whose path ends in ``.json`` must
        hold a list of row objects; anything else is read as CSV with a
        header row, letting pandas infer numeric columns.
    max_bytes:
        Size limit for local files.
    fields:
        Column names; the supplier, PO number and description columns of a
        CSV are read as text.

    Returns
    -------
    list[dict[str, Any]]
        Rows in file order.

    Raises
    ------
    FileNotFoundError
        If a local source does not exist.
    ValueError
        If a local file exceeds ``max_bytes`` or a JSON file is not a list.
    """

    if is_remote(source):
        logger.info("Downloading purchase orders from %s", source)
        if _is_json(source):
            rows = _frame_to_rows(pd.read_json(str(source), orient="records"))
        else:
            rows = _read_csv_rows(str(source), fields)
    else:
        path = _check_local_file(Path(source), max_bytes)
        logger.info("Reading purchase orders from %s", path)
        if _is_json(path):
            rows = _read_json_rows(path)
        else:
            rows = _read_csv_rows(path, fields)

    logger.info("Read %d raw purchase order rows", len(rows))
    return rows
