"""Purchase order ingestion and validation.

Raw purchase order rows arrive from an upstream row producer (a CSV reader
with type inference, a JSON export, ...) as loosely typed mappings. This
module is the single place where those rows are converted into typed
:class:`PurchaseOrderRecord` instances. Rows that cannot be converted are
dropped rather than reported as errors: an incomplete row is a filtering
outcome, not a failure of the load.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

import pandas as pd

logger = logging.getLogger(__name__)

#: Sentinel supplier value meaning "no supplier filter".
ALL_SUPPLIERS = "all"


@dataclass(frozen=True)
class PurchaseOrderFields:
    """Column names used to read a raw purchase order row.

    The defaults match the Miami-Dade County purchase order export the
    dashboard was built around.
    """

    supplier_name: str = "SUPPLIER_NAME"
    po_date: str = "PO_DATE"
    po_amount: str = "PO_AMOUNT"
    po_number: str = "PO_NUMBER"
    item_description: str = "ITEM_DESCRIPTION"


DEFAULT_FIELDS = PurchaseOrderFields()


@dataclass(frozen=True)
class PurchaseOrderRecord:
    """A purchase order row that passed structural and type checks.

    Attributes
    ----------
    supplier_name:
        Supplier the order was placed with. Never empty.
    po_date:
        Order date. Timezone-aware source values are stored as naive UTC.
    po_amount:
        Order amount as a finite decimal.
    po_number:
        Purchase order / document number, passed through for display only.
    item_description:
        Free-text description, passed through for display only.
    """

    supplier_name: str
    po_date: datetime
    po_amount: Decimal
    po_number: str | None = None
    item_description: str | None = None


@dataclass
class ValidationReport:
    """Counters describing one validation run."""

    total_rows: int = 0
    valid_rows: int = 0
    rejections: Counter = field(default_factory=Counter)

    @property
    def rejected_rows(self) -> int:
        return self.total_rows - self.valid_rows

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "rejected_rows": self.rejected_rows,
            "rejections": dict(self.rejections),
        }


def is_missing(value: Any) -> bool:
    """Return True for None, NaN/NaT and blank strings."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # pd.isna on list-like values returns an array; those are not scalars
        # we can parse anyway, so treat them as present and let parsing fail.
        return False


def parse_po_date(value: Any) -> datetime | None:
    """Parse an order date, returning None when it is not a valid date."""

    if isinstance(value, bool):
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    try:
        parsed = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(parsed, pd.Timestamp) or pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    return parsed.to_pydatetime()


def parse_po_amount(value: Any) -> Decimal | None:
    """Parse an order amount into a finite Decimal.

    Strings may carry surrounding whitespace, a leading ``$`` and comma
    thousands separators: ``"$1,234.50"`` parses to ``Decimal("1234.50")``.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        negative = text.startswith("-")
        if negative:
            text = text[1:].lstrip()
        text = text.removeprefix("$").replace(",", "").strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
        if negative:
            amount = -amount
    else:
        # numpy scalars and other numeric types
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        amount = Decimal(str(number))

    if not amount.is_finite():
        return None
    return amount


def _as_text(value: Any) -> str:
    # Numeric columns with blank cells are inferred as float: 12345.0 -> "12345"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _optional_text(value: Any) -> str | None:
    if is_missing(value):
        return None
    return _as_text(value)


def _validate_row(
    row: Any, fields: PurchaseOrderFields
) -> tuple[PurchaseOrderRecord | None, str | None]:
    if not isinstance(row, Mapping):
        return None, "not_a_mapping"

    supplier = row.get(fields.supplier_name)
    raw_date = row.get(fields.po_date)
    raw_amount = row.get(fields.po_amount)
    if is_missing(supplier) or is_missing(raw_date) or is_missing(raw_amount):
        return None, "missing_fields"

    po_date = parse_po_date(raw_date)
    if po_date is None:
        return None, "invalid_date"

    po_amount = parse_po_amount(raw_amount)
    if po_amount is None:
        return None, "invalid_amount"

    record = PurchaseOrderRecord(
        supplier_name=_as_text(supplier),
        po_date=po_date,
        po_amount=po_amount,
        po_number=_optional_text(row.get(fields.po_number)),
        item_description=_optional_text(row.get(fields.item_description)),
    )
    return record, None


def validate_purchase_orders_with_report(
    raw_records: Iterable[Any],
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> tuple[list[PurchaseOrderRecord], ValidationReport]:
    """Validate raw rows and return the clean records plus run counters.

    Parameters
    ----------
    raw_records:
        Rows as produced by the upstream reader, in source order.
    fields:
        Column names to read from each row.

    Returns
    -------
    tuple[list[PurchaseOrderRecord], ValidationReport]
        Valid records in their original relative order, and a report with
        the number of rows seen, kept, and rejected per reason.
    """

    records: list[PurchaseOrderRecord] = []
    report = ValidationReport()
    for idx, row in enumerate(raw_records):
        report.total_rows += 1
        record, reason = _validate_row(row, fields)
        if record is None:
            report.rejections[reason] += 1
            logger.debug("Skipping purchase order row %d: %s", idx, reason)
            continue
        records.append(record)

    report.valid_rows = len(records)
    logger.info(
        "Validated %d of %d purchase order rows", report.valid_rows, report.total_rows
    )
    return records, report


def validate_purchase_orders(
    raw_records: Iterable[Any],
    fields: PurchaseOrderFields = DEFAULT_FIELDS,
) -> list[PurchaseOrderRecord]:
    """Return the rows of ``raw_records`` that form valid purchase orders.

    A row is kept when its supplier, date and amount are present, the date
    parses to a calendar date and the amount parses to a finite number.
    Everything else is silently omitted. Output order follows input order.

    Examples
    --------
    >>> rows = [
    ...     {"SUPPLIER_NAME": "Acme", "PO_DATE": "2024-03-01", "PO_AMOUNT": "100"},
    ...     {"SUPPLIER_NAME": "", "PO_DATE": "2024-03-02", "PO_AMOUNT": 5},
    ... ]
    >>> [r.supplier_name for r in validate_purchase_orders(rows)]
    ['Acme']
    """

    records, _ = validate_purchase_orders_with_report(raw_records, fields)
    return records


def list_suppliers(records: Iterable[PurchaseOrderRecord]) -> list[str]:
    """Return distinct supplier names, sorted, behind the ``"all"`` sentinel.

    A supplier literally named ``"all"`` collapses into the sentinel.
    """

    names = {record.supplier_name for record in records}
    names.discard(ALL_SUPPLIERS)
    return [ALL_SUPPLIERS, *sorted(names)]


def to_naive_utc(value: datetime | date) -> datetime:
    """Normalise a date or datetime for comparison with record dates."""

    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
