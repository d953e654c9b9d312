"""Tests for supplier RFM (Recency-Frequency-Monetary) calculation."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from supplier_rfm.foundation.purchase_orders import PurchaseOrderRecord
from supplier_rfm.foundation.rfm import (
    MonetarySummary,
    SupplierRFMSummary,
    calculate_supplier_rfm,
)


def order(supplier, po_date, amount):
    return PurchaseOrderRecord(
        supplier_name=supplier, po_date=po_date, po_amount=Decimal(str(amount))
    )


@pytest.fixture
def records():
    return [
        order("X", datetime(2024, 3, 1), 100),
        order("Y", datetime(2024, 1, 1), 200),
        order("Y", datetime(2024, 3, 1), 300),
        order("Z", datetime(2024, 2, 1), 50),
        order("Z", datetime(2024, 2, 1), 70),
        order("Z", datetime(2024, 2, 1), 30),
    ]


class TestSupplierRFMSummary:
    """Test SupplierRFMSummary validation."""

    def _summary(self, **overrides):
        values = dict(
            supplier_name="X",
            recency_days=10,
            frequency_per_month=Decimal("1.00"),
            frequency_per_month_raw=1.0,
            monetary=MonetarySummary(Decimal("100"), Decimal("100.00")),
            order_count=1,
            first_order_date=datetime(2024, 3, 1),
            last_order_date=datetime(2024, 3, 1),
        )
        values.update(overrides)
        return SupplierRFMSummary(**values)

    def test_valid_summary(self):
        """Valid summaries are created successfully."""
        summary = self._summary()
        assert summary.order_count == 1

    def test_zero_orders_raises_error(self):
        with pytest.raises(ValueError, match="Order count must be positive"):
            self._summary(order_count=0)

    def test_negative_frequency_raises_error(self):
        with pytest.raises(ValueError, match="Frequency cannot be negative"):
            self._summary(frequency_per_month=Decimal("-1.00"))

    def test_first_after_last_raises_error(self):
        with pytest.raises(ValueError, match="First order .* is after last order"):
            self._summary(first_order_date=datetime(2024, 4, 1))

    def test_negative_recency_is_allowed(self):
        """Orders dated after 'now' give negative recency."""
        assert self._summary(recency_days=-3).recency_days == -3

    def test_as_dict(self):
        """Summary serialises to JSON-friendly values."""
        assert self._summary().as_dict() == {
            "supplier_name": "X",
            "recency_days": 10,
            "frequency_per_month": 1.0,
            "monetary": {"total": 100.0, "average": 100.0},
            "order_count": 1,
            "first_order_date": "2024-03-01T00:00:00",
            "last_order_date": "2024-03-01T00:00:00",
        }


class TestCalculateSupplierRFM:
    """Test calculate_supplier_rfm function."""

    def test_single_order_supplier(self, records):
        """One order: span floors to one month."""
        summary = calculate_supplier_rfm(records, "X", datetime(2024, 3, 11))

        assert summary.supplier_name == "X"
        assert summary.recency_days == 10
        assert summary.order_count == 1
        assert summary.frequency_per_month == Decimal("1.00")
        assert summary.monetary.total == Decimal("100")
        assert summary.monetary.average == Decimal("100")
        assert summary.first_order_date == datetime(2024, 3, 1)
        assert summary.last_order_date == datetime(2024, 3, 1)

    def test_multi_order_supplier(self, records):
        """Two orders 60 days apart: 2 / 1.97 months = 1.01 per month."""
        summary = calculate_supplier_rfm(records, "Y", datetime(2024, 3, 11))

        assert summary.order_count == 2
        assert summary.frequency_per_month == Decimal("1.01")
        assert summary.frequency_per_month_raw == pytest.approx(2 / (60 / 30.44))
        assert summary.monetary.total == Decimal("500")
        assert summary.monetary.average == Decimal("250")
        assert summary.first_order_date == datetime(2024, 1, 1)
        assert summary.last_order_date == datetime(2024, 3, 1)
        assert summary.recency_days == 10

    def test_leap_year_span(self):
        """2024-01-01 to 2024-03-02 spans 61 days in a leap year."""
        data = [
            order("Y", datetime(2024, 1, 1), 200),
            order("Y", datetime(2024, 3, 2), 300),
        ]
        summary = calculate_supplier_rfm(data, "Y", datetime(2024, 3, 12))

        assert summary.frequency_per_month == Decimal("1.00")
        assert summary.last_order_date == datetime(2024, 3, 2)

    def test_same_day_orders_floor_span_to_one(self, records):
        """All orders on one day: frequency equals the order count."""
        summary = calculate_supplier_rfm(records, "Z", datetime(2024, 2, 1))

        assert summary.order_count == 3
        assert summary.frequency_per_month == Decimal("3.00")
        assert summary.recency_days == 0
        assert summary.monetary.total == Decimal("150")
        assert summary.monetary.average == Decimal("50.00")

    def test_average_rounds_to_cents(self):
        """Average order value is rounded half up to cents."""
        data = [order("A", datetime(2024, 1, d), 10) for d in (1, 2, 3)]
        data.append(order("A", datetime(2024, 1, 4), Decimal("0.01")))

        summary = calculate_supplier_rfm(data, "A", datetime(2024, 1, 5))

        assert summary.monetary.total == Decimal("30.01")
        assert summary.monetary.average == Decimal("7.50")

    def test_recency_rounds_to_nearest_day(self, records):
        """Partial days round half up."""
        now = datetime(2024, 3, 11, 12, 0)
        assert calculate_supplier_rfm(records, "X", now).recency_days == 11

        now = datetime(2024, 3, 11, 11, 59)
        assert calculate_supplier_rfm(records, "X", now).recency_days == 10

    def test_future_order_gives_negative_recency(self, records):
        """Last order after 'now' is passed through as negative recency."""
        summary = calculate_supplier_rfm(records, "X", datetime(2024, 2, 25))

        assert summary.recency_days == -5

    def test_negative_half_day_rounds_towards_later(self, records):
        """-1.5 days rounds to -1, as 10.5 rounds to 11."""
        summary = calculate_supplier_rfm(records, "X", datetime(2024, 2, 28, 12, 0))

        assert summary.recency_days == -1

    def test_now_as_date_or_aware_datetime(self, records):
        """'now' may be a date or an aware datetime."""
        assert calculate_supplier_rfm(records, "X", date(2024, 3, 11)).recency_days == 10
        aware = datetime(2024, 3, 11, tzinfo=timezone.utc)
        assert calculate_supplier_rfm(records, "X", aware).recency_days == 10

    def test_exact_supplier_match(self, records):
        """Supplier names must match exactly."""
        assert calculate_supplier_rfm(records, "x", datetime(2024, 3, 11)) is None
        assert calculate_supplier_rfm(records, "X ", datetime(2024, 3, 11)) is None

    @pytest.mark.parametrize("supplier", ["all", "", None, "nonexistent-supplier"])
    def test_null_cases(self, records, supplier):
        """No summary for the sentinel, no selection, or unknown suppliers."""
        assert calculate_supplier_rfm(records, supplier, datetime(2024, 3, 11)) is None

    def test_empty_dataset(self):
        """No summary without records."""
        assert calculate_supplier_rfm([], "X", datetime(2024, 3, 11)) is None

    def test_idempotent(self, records):
        """Same inputs, same output."""
        now = datetime(2024, 3, 11)
        first = calculate_supplier_rfm(records, "Y", now)
        second = calculate_supplier_rfm(records, "Y", now)

        assert first == second

    def test_does_not_mutate_records(self, records):
        """The record sequence is left untouched."""
        before = list(records)
        calculate_supplier_rfm(records, "Y", datetime(2024, 3, 11))

        assert records == before

    def test_internal_error_returns_none(self, caplog):
        """Malformed records degrade to no summary instead of raising."""
        bad = [
            PurchaseOrderRecord("X", datetime(2024, 3, 1), Decimal("1")),
            PurchaseOrderRecord("X", "2024-03-02", Decimal("1")),  # type: ignore[arg-type]
        ]

        with caplog.at_level("ERROR"):
            summary = calculate_supplier_rfm(bad, "X", datetime(2024, 3, 11))

        assert summary is None
        assert "Error calculating RFM metrics" in caplog.text

    def test_many_orders_over_a_year(self):
        """Frequency over a long span."""
        start = datetime(2023, 1, 1)
        data = [order("B", start + timedelta(days=7 * i), 100) for i in range(53)]

        summary = calculate_supplier_rfm(data, "B", datetime(2024, 1, 1))

        span_months = (7 * 52) / 30.44
        assert summary.order_count == 53
        assert summary.frequency_per_month == Decimal(str(round(53 / span_months, 2)))
        assert summary.monetary.total == Decimal("5300")
