"""RFM (Recency-Frequency-Monetary) summary for a single supplier.

The summary describes how a buyer has interacted with one supplier:
- Recency: How many days since the last purchase order?
- Frequency: How many orders per month, over the supplier's active span?
- Monetary: How much was spent in total and per order?

The calculation is a pure function of the validated records, the selected
supplier and the reference instant, so callers can re-run it whenever any
of those inputs change.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from supplier_rfm.foundation.purchase_orders import (
    ALL_SUPPLIERS,
    PurchaseOrderRecord,
    to_naive_utc,
)

logger = logging.getLogger(__name__)

#: Average month length used to express an order span in months.
DAYS_PER_MONTH = 30.44

SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class MonetarySummary:
    """Spend with a supplier.

    Attributes
    ----------
    total:
        Sum of all order amounts
    average:
        Average order value (total / order count), rounded to cents
    """

    total: Decimal
    average: Decimal


@dataclass(frozen=True)
class SupplierRFMSummary:
    """RFM metrics for a single supplier.

    Attributes
    ----------
    supplier_name:
        Supplier the metrics were computed for
    recency_days:
        Days between the reference instant and the last order, rounded to
        the nearest day. Negative when the last order is in the future.
    frequency_per_month:
        Orders per month over the span between first and last order,
        rounded to 2 decimal places
    frequency_per_month_raw:
        Unrounded orders-per-month value
    monetary:
        Total and average order value
    order_count:
        Number of orders placed with the supplier
    first_order_date:
        Date of the earliest order
    last_order_date:
        Date of the most recent order
    """

    supplier_name: str
    recency_days: int
    frequency_per_month: Decimal
    frequency_per_month_raw: float
    monetary: MonetarySummary
    order_count: int
    first_order_date: datetime
    last_order_date: datetime

    def __post_init__(self) -> None:
        """Validate summary invariants."""
        if self.order_count < 1:
            raise ValueError(
                f"Order count must be positive: {self.order_count} (supplier={self.supplier_name})"
            )
        if self.frequency_per_month < 0:
            raise ValueError(
                f"Frequency cannot be negative: {self.frequency_per_month} (supplier={self.supplier_name})"
            )
        if self.first_order_date > self.last_order_date:
            raise ValueError(
                f"First order ({self.first_order_date}) is after last order "
                f"({self.last_order_date}) (supplier={self.supplier_name})"
            )

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation of the summary."""

        return {
            "supplier_name": self.supplier_name,
            "recency_days": self.recency_days,
            "frequency_per_month": float(self.frequency_per_month),
            "monetary": {
                "total": float(self.monetary.total),
                "average": float(self.monetary.average),
            },
            "order_count": self.order_count,
            "first_order_date": self.first_order_date.isoformat(),
            "last_order_date": self.last_order_date.isoformat(),
        }


def _round_half_up(value: float, places: str) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _summarise(
    orders: Sequence[PurchaseOrderRecord], supplier: str, now: datetime
) -> SupplierRFMSummary:
    order_dates = [order.po_date for order in orders]
    last_order_date = max(order_dates)
    first_order_date = min(order_dates)

    # Recency: days from last order to now, halves round towards +inf (-1.5 -> -1)
    recency_seconds = (now - last_order_date).total_seconds()
    recency_days = math.floor(recency_seconds / SECONDS_PER_DAY + 0.5)

    # Frequency: orders per 30.44-day month; a zero span divides by 1
    span_days = (last_order_date - first_order_date).total_seconds() / SECONDS_PER_DAY
    span_months = span_days / DAYS_PER_MONTH
    order_count = len(orders)
    frequency_raw = order_count / (span_months or 1)

    total_spend = sum((order.po_amount for order in orders), Decimal("0"))
    average = (total_spend / order_count).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )

    return SupplierRFMSummary(
        supplier_name=supplier,
        recency_days=recency_days,
        frequency_per_month=_round_half_up(frequency_raw, "0.01"),
        frequency_per_month_raw=frequency_raw,
        monetary=MonetarySummary(total=total_spend, average=average),
        order_count=order_count,
        first_order_date=first_order_date,
        last_order_date=last_order_date,
    )


def calculate_supplier_rfm(
    records: Sequence[PurchaseOrderRecord],
    selected_supplier: str | None,
    now: datetime | date,
) -> SupplierRFMSummary | None:
    """Calculate the RFM summary for one supplier.

    **Null results**: ``None`` is returned when no supplier is selected
    (empty value or the ``"all"`` sentinel), when ``records`` is empty, or
    when no record matches ``selected_supplier`` exactly.

    **Fail-safe**: the summary is a derived display value. Any unexpected
    error during the calculation is logged and turned into ``None`` instead
    of a partial summary.

    **Timezone Assumptions**: record dates are naive UTC (see
    :func:`supplier_rfm.foundation.purchase_orders.parse_po_date`). An aware
    ``now`` is converted to naive UTC; a naive ``now`` is used as is.

    Parameters
    ----------
    records:
        Validated purchase order records.
    selected_supplier:
        Supplier name to summarise.
    now:
        Reference instant for recency.

    Returns
    -------
    SupplierRFMSummary | None

    Examples
    --------
    >>> from datetime import datetime
    >>> from decimal import Decimal
    >>> records = [
    ...     PurchaseOrderRecord("X", datetime(2024, 3, 1), Decimal("100")),
    ... ]
    >>> summary = calculate_supplier_rfm(records, "X", datetime(2024, 3, 11))
    >>> summary.recency_days
    10
    >>> summary.frequency_per_month
    Decimal('1.00')
    >>> calculate_supplier_rfm(records, "all", datetime(2024, 3, 11)) is None
    True
    """
    if not selected_supplier or selected_supplier == ALL_SUPPLIERS or not records:
        return None

    try:
        orders = [
            record for record in records if record.supplier_name == selected_supplier
        ]
        if not orders:
            return None
        return _summarise(orders, selected_supplier, to_naive_utc(now))
    except Exception:
        logger.exception(
            "Error calculating RFM metrics for supplier %r", selected_supplier
        )
        return None
