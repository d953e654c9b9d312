"""Tests for purchase order validation utilities."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from supplier_rfm.foundation import (
    ALL_SUPPLIERS,
    PurchaseOrderFields,
    PurchaseOrderRecord,
    list_suppliers,
    validate_purchase_orders,
    validate_purchase_orders_with_report,
)
from supplier_rfm.foundation.purchase_orders import (
    is_missing,
    parse_po_amount,
    parse_po_date,
    to_naive_utc,
)


def make_row(supplier="ACME CORP", po_date="2024-03-01", amount=100, **extra):
    row = {
        "SUPPLIER_NAME": supplier,
        "PO_DATE": po_date,
        "PO_AMOUNT": amount,
        "PO_NUMBER": "PO-1",
        "ITEM_DESCRIPTION": "Office chairs",
    }
    row.update(extra)
    return row


class TestValidatePurchaseOrders:
    """Test validate_purchase_orders filtering rules."""

    def test_valid_row_is_converted(self):
        """A complete row becomes a typed record."""
        records = validate_purchase_orders([make_row(amount="250.75")])

        assert records == [
            PurchaseOrderRecord(
                supplier_name="ACME CORP",
                po_date=datetime(2024, 3, 1),
                po_amount=Decimal("250.75"),
                po_number="PO-1",
                item_description="Office chairs",
            )
        ]

    @pytest.mark.parametrize("field", ["SUPPLIER_NAME", "PO_DATE", "PO_AMOUNT"])
    @pytest.mark.parametrize("value", [None, "", "   ", float("nan")])
    def test_missing_required_field_excludes_row(self, field, value):
        """Rows missing supplier, date or amount are dropped."""
        row = make_row()
        row[field] = value

        assert validate_purchase_orders([row]) == []

    @pytest.mark.parametrize("field", ["SUPPLIER_NAME", "PO_DATE", "PO_AMOUNT"])
    def test_absent_key_excludes_row(self, field):
        """Rows without the key at all are dropped."""
        row = make_row()
        del row[field]

        assert validate_purchase_orders([row]) == []

    def test_unparseable_date_excludes_row(self):
        """Dates that do not parse are rejected."""
        assert validate_purchase_orders([make_row(po_date="not a date")]) == []

    def test_unparseable_amount_excludes_row(self):
        """Amounts that do not parse are rejected."""
        assert validate_purchase_orders([make_row(amount="abc")]) == []

    def test_zero_amount_is_kept(self):
        """Zero is a present amount, not a missing one."""
        records = validate_purchase_orders([make_row(amount=0)])

        assert len(records) == 1
        assert records[0].po_amount == Decimal("0")

    def test_order_is_preserved(self):
        """Valid rows keep their relative order, each exactly once."""
        rows = [
            make_row(supplier="B", po_date="2024-01-02"),
            make_row(supplier=""),
            make_row(supplier="A", po_date="2024-01-01"),
            make_row(supplier="C", amount="n/a"),
            make_row(supplier="B", po_date="2024-01-03"),
        ]

        records = validate_purchase_orders(rows)

        assert [(r.supplier_name, r.po_date.day) for r in records] == [
            ("B", 2),
            ("A", 1),
            ("B", 3),
        ]

    def test_non_mapping_rows_are_skipped(self):
        """Rows that are not mappings are dropped instead of raising."""
        records = validate_purchase_orders([None, ["ACME"], make_row()])

        assert len(records) == 1

    def test_optional_fields_pass_through(self):
        """Missing description and PO number become None."""
        row = make_row()
        row["ITEM_DESCRIPTION"] = float("nan")
        del row["PO_NUMBER"]

        record = validate_purchase_orders([row])[0]

        assert record.item_description is None
        assert record.po_number is None

    def test_numeric_supplier_and_po_number_become_strings(self):
        """Type-inferred numeric values are converted to text."""
        record = validate_purchase_orders([make_row(supplier=12345, PO_NUMBER=987)])[0]

        assert record.supplier_name == "12345"
        assert record.po_number == "987"

    def test_integral_float_text_fields_drop_the_decimal_point(self):
        """Numbers read from a float column keep their integer spelling."""
        record = validate_purchase_orders(
            [make_row(supplier=4021.0, PO_NUMBER=12345.0, ITEM_DESCRIPTION=2.5)]
        )[0]

        assert record.supplier_name == "4021"
        assert record.po_number == "12345"
        assert record.item_description == "2.5"

    def test_custom_field_names(self):
        """Column names can be remapped."""
        fields = PurchaseOrderFields(
            supplier_name="vendor", po_date="ordered", po_amount="total"
        )
        rows = [{"vendor": "X", "ordered": "2024-05-01", "total": "12.5"}]

        records = validate_purchase_orders(rows, fields)

        assert records[0].supplier_name == "X"
        assert records[0].po_amount == Decimal("12.5")

    def test_empty_input_returns_empty_list(self):
        """No rows in, no records out."""
        assert validate_purchase_orders([]) == []


class TestValidationReport:
    """Test validate_purchase_orders_with_report counters."""

    def test_counts_by_reason(self):
        """Each rejected row is counted once under its reason."""
        rows = [
            make_row(),
            make_row(supplier=None),
            make_row(po_date="31/31/2024"),
            make_row(amount="twelve"),
            "not a row",
        ]

        records, report = validate_purchase_orders_with_report(rows)

        assert len(records) == 1
        assert report.total_rows == 5
        assert report.valid_rows == 1
        assert report.rejected_rows == 4
        assert report.rejections == {
            "missing_fields": 1,
            "invalid_date": 1,
            "invalid_amount": 1,
            "not_a_mapping": 1,
        }

    def test_as_dict(self):
        """Report serialises to plain types."""
        _, report = validate_purchase_orders_with_report([make_row(amount="")])

        assert report.as_dict() == {
            "total_rows": 1,
            "valid_rows": 0,
            "rejected_rows": 1,
            "rejections": {"missing_fields": 1},
        }


class TestParsePOAmount:
    """Test amount parsing tolerance."""

    def test_thousands_separator_is_accepted(self):
        """Locale-formatted amounts parse to their numeric value."""
        assert parse_po_amount("1,234.50") == Decimal("1234.50")

    def test_currency_symbol_and_whitespace(self):
        """A leading dollar sign and padding are ignored."""
        assert parse_po_amount("  $12,000 ") == Decimal("12000")
        assert parse_po_amount("-$1,000.25") == Decimal("-1000.25")

    def test_locale_formatted_row_is_kept(self):
        """A row with a locale-formatted amount validates."""
        records = validate_purchase_orders([make_row(amount="1,234.50")])

        assert records[0].po_amount == Decimal("1234.50")

    @pytest.mark.parametrize("value", [12, 12.5, Decimal("12.50")])
    def test_numeric_types(self, value):
        """Numbers inferred by the reader are accepted as is."""
        assert parse_po_amount(value) == Decimal(str(value))

    @pytest.mark.parametrize(
        "value",
        ["abc", "12abc", "$", "NaN", "inf", float("inf"), True, object()],
    )
    def test_rejected_values(self, value):
        """Non-numeric and non-finite values do not parse."""
        assert parse_po_amount(value) is None


class TestParsePODate:
    """Test date parsing."""

    def test_iso_string(self):
        assert parse_po_date("2024-03-01") == datetime(2024, 3, 1)

    def test_us_style_string(self):
        assert parse_po_date("03/01/2024") == datetime(2024, 3, 1)

    def test_date_and_datetime_objects(self):
        assert parse_po_date(date(2024, 3, 1)) == datetime(2024, 3, 1)
        assert parse_po_date(datetime(2024, 3, 1, 12, 30)) == datetime(
            2024, 3, 1, 12, 30
        )

    def test_aware_value_becomes_naive_utc(self):
        """Timezone-aware timestamps are converted to naive UTC."""
        assert parse_po_date("2024-03-01T05:00:00+05:00") == datetime(2024, 3, 1)

    @pytest.mark.parametrize("value", ["not a date", "2024-13-45", True])
    def test_invalid(self, value):
        assert parse_po_date(value) is None


class TestHelpers:
    """Test missing-value and timezone helpers."""

    @pytest.mark.parametrize("value", [None, "", "  ", float("nan")])
    def test_is_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, "0", "x", Decimal("0")])
    def test_is_not_missing(self, value):
        assert not is_missing(value)

    def test_to_naive_utc(self):
        assert to_naive_utc(date(2024, 3, 11)) == datetime(2024, 3, 11)
        assert to_naive_utc(
            datetime(2024, 3, 11, 12, tzinfo=timezone.utc)
        ) == datetime(2024, 3, 11, 12)


class TestListSuppliers:
    """Test list_suppliers."""

    def test_unique_sorted_with_sentinel_first(self):
        """Each supplier appears once, sorted, after 'all'."""
        records = validate_purchase_orders(
            [
                make_row(supplier="Zeta"),
                make_row(supplier="Alpha"),
                make_row(supplier="Zeta"),
                make_row(supplier="Mu"),
            ]
        )

        assert list_suppliers(records) == [ALL_SUPPLIERS, "Alpha", "Mu", "Zeta"]

    def test_empty_records(self):
        """Only the sentinel remains when there are no records."""
        assert list_suppliers([]) == ["all"]

    def test_supplier_named_all_is_not_duplicated(self):
        """A literal 'all' supplier collapses into the sentinel."""
        records = validate_purchase_orders([make_row(supplier="all")])

        assert list_suppliers(records) == ["all"]
