"""Command line entry points for the supplier RFM toolkit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime

from supplier_rfm.dashboard import SupplierRFMDashboard
from supplier_rfm.foundation import ALL_SUPPLIERS
from supplier_rfm.mcp.formatters import (
    DEFAULT_PAGE_SIZE,
    format_purchase_order_table,
    format_rfm_summary_table,
)
from supplier_rfm.sources import DEFAULT_SOURCE, read_purchase_order_rows

logger = logging.getLogger(__name__)


def _parse_as_of(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"--as-of must be an ISO date or datetime, got {value!r}"
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarise purchase orders per supplier with RFM metrics"
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=DEFAULT_SOURCE,
        help="Path or URL of the purchase order CSV/JSON export "
        "(defaults to the Miami-Dade 2024 purchase orders).",
    )
    parser.add_argument(
        "--supplier",
        default=ALL_SUPPLIERS,
        help="Supplier to summarise (exact name). Defaults to all suppliers, "
        "which shows no RFM summary.",
    )
    parser.add_argument(
        "--as-of",
        type=_parse_as_of,
        help="Reference date for recency (ISO format: YYYY-MM-DD). Defaults to now.",
    )
    parser.add_argument(
        "--list-suppliers",
        action="store_true",
        help="Print the supplier list instead of a summary.",
    )
    parser.add_argument(
        "--format",
        choices=["json", "markdown"],
        default="markdown",
        help="Output format (default: markdown)",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        help=f"Purchase order rows to show in markdown output (default: {DEFAULT_PAGE_SIZE}, 0 to hide)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def supplier_rfm_cli(argv: list[str] | None = None) -> int:
    """Load a purchase order export and report supplier RFM metrics.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, 1 when the source could not be loaded)
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    as_of = args.as_of
    dashboard = SupplierRFMDashboard(
        clock=(lambda: as_of) if as_of is not None else datetime.now
    )

    generation = dashboard.begin_load()
    try:
        rows = read_purchase_order_rows(args.source)
    except (OSError, ValueError) as exc:
        dashboard.fail_load(generation, exc)
        logger.error("Could not load purchase orders from %s", args.source)
        return 1
    dashboard.complete_load(generation, rows)

    report = dashboard.validation_report
    logger.info(
        "Loaded %d valid purchase orders (%d rejected)",
        report.valid_rows,
        report.rejected_rows,
    )

    if args.list_suppliers:
        suppliers = dashboard.suppliers
        if args.format == "json":
            json.dump(suppliers, fp=sys.stdout, indent=2)
            print()
        else:
            for supplier in suppliers:
                print(supplier)
        return 0

    summary = dashboard.select_supplier(args.supplier)
    if args.supplier != ALL_SUPPLIERS and summary is None:
        logger.warning("No purchase orders found for supplier %r", args.supplier)

    if args.format == "json":
        payload = {
            "source": str(args.source),
            "validation": report.as_dict(),
            "supplier": dashboard.selected_supplier,
            "summary": summary.as_dict() if summary is not None else None,
        }
        json.dump(payload, fp=sys.stdout, indent=2, sort_keys=True)
        print()
        return 0

    print(format_rfm_summary_table(summary))
    if args.rows > 0:
        rows = dashboard.rows()
        if summary is not None:
            rows = [
                row
                for row in rows
                if row[dashboard.fields.supplier_name] == summary.supplier_name
            ]
        print(format_purchase_order_table(rows, page_size=args.rows))
    return 0


def main() -> None:
    raise SystemExit(supplier_rfm_cli())


if __name__ == "__main__":  # pragma: no cover
    main()
