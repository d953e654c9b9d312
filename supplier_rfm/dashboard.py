"""State owner for the supplier RFM dashboard.

:class:`SupplierRFMDashboard` holds the inputs of the pure core functions
(the loaded dataset and the selected supplier) and recomputes the derived
state whenever one of them changes:

- a completed load re-validates the raw rows, rebuilds the supplier list and
  recomputes the summary for the current selection;
- a selection change recomputes the summary.

Loading is the only asynchronous step. Loads are ordered by a generation
counter: when a newer load has started, the result of an older one is
discarded (last write wins). In-flight loads are not cancelled.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable

from supplier_rfm.foundation.purchase_orders import (
    ALL_SUPPLIERS,
    DEFAULT_FIELDS,
    PurchaseOrderFields,
    PurchaseOrderRecord,
    ValidationReport,
    list_suppliers,
    validate_purchase_orders_with_report,
)
from supplier_rfm.foundation.rfm import SupplierRFMSummary, calculate_supplier_rfm

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
RowFetcher = Callable[[], Awaitable[Iterable[Any]]]


class SupplierRFMDashboard:
    """Own the dataset and selection, and keep derived state current."""

    def __init__(
        self,
        clock: Clock = datetime.now,
        fields: PurchaseOrderFields = DEFAULT_FIELDS,
    ) -> None:
        self.clock = clock
        self.fields = fields
        self._records: tuple[PurchaseOrderRecord, ...] = ()
        self._suppliers: list[str] = [ALL_SUPPLIERS]
        self._selected_supplier = ALL_SUPPLIERS
        self._summary: SupplierRFMSummary | None = None
        self._report: ValidationReport | None = None
        self._generation = 0
        self.loading = False
        self.load_error: str | None = None

    @property
    def records(self) -> tuple[PurchaseOrderRecord, ...]:
        return self._records

    @property
    def suppliers(self) -> list[str]:
        return list(self._suppliers)

    @property
    def selected_supplier(self) -> str:
        return self._selected_supplier

    @property
    def summary(self) -> SupplierRFMSummary | None:
        return self._summary

    @property
    def validation_report(self) -> ValidationReport | None:
        return self._report

    @property
    def generation(self) -> int:
        return self._generation

    def begin_load(self) -> int:
        """Mark a new load as in flight and return its generation."""

        self._generation += 1
        self.loading = True
        self.load_error = None
        logger.debug("Starting purchase order load %d", self._generation)
        return self._generation

    def complete_load(self, generation: int, raw_rows: Iterable[Any]) -> bool:
        """Replace the dataset with the rows of load ``generation``.

        Returns False, leaving state untouched, when a newer load has
        started since ``generation`` began.
        """

        if generation != self._generation:
            logger.info(
                "Discarding stale purchase order load %d (current is %d)",
                generation,
                self._generation,
            )
            return False

        records, report = validate_purchase_orders_with_report(raw_rows, self.fields)
        self._records = tuple(records)
        self._report = report
        self.loading = False
        self._on_dataset_changed()
        return True

    def fail_load(self, generation: int, error: BaseException | str) -> bool:
        """Record that load ``generation`` failed; the dataset is left as is."""

        if generation != self._generation:
            return False
        self.loading = False
        self.load_error = str(error)
        logger.error("Error loading purchase orders: %s", error)
        return True

    async def load(self, fetch: RowFetcher) -> bool:
        """Run ``fetch`` and load its rows.

        Failures of ``fetch``, including a result that cannot be iterated,
        are recorded in :attr:`load_error` rather than raised. Returns True
        when this call's rows became the dataset.
        """

        generation = self.begin_load()
        try:
            raw_rows = list(await fetch())
        except Exception as exc:
            self.fail_load(generation, exc)
            return False
        return self.complete_load(generation, raw_rows)

    def select_supplier(self, supplier: str | None) -> SupplierRFMSummary | None:
        """Change the selected supplier and return the new summary."""

        self._selected_supplier = supplier or ALL_SUPPLIERS
        self._recompute_summary()
        return self._summary

    def rows(self) -> list[dict[str, Any]]:
        """Return the dataset as display rows with a synthetic ``id``."""

        fields = self.fields
        return [
            {
                "id": idx,
                fields.supplier_name: record.supplier_name,
                fields.po_date: record.po_date,
                fields.po_number: record.po_number,
                fields.po_amount: record.po_amount,
                fields.item_description: record.item_description,
            }
            for idx, record in enumerate(self._records)
        ]

    def _on_dataset_changed(self) -> None:
        self._suppliers = list_suppliers(self._records)
        self._recompute_summary()

    def _recompute_summary(self) -> None:
        self._summary = calculate_supplier_rfm(
            self._records, self._selected_supplier, self.clock()
        )

