"""Shared state management for MCP server.

FastMCP's Context is per-request, so the dashboard (loaded purchase orders,
selected supplier, current RFM summary) lives in a module-level holder that
persists across tool calls.
"""

import threading

from supplier_rfm.dashboard import SupplierRFMDashboard


class DashboardHolder:
    """Holds the single dashboard shared by all tools.

    Tools run on one event loop, so the dashboard itself is not locked; the
    lock only guards creating and replacing it.
    """

    def __init__(self):
        self._dashboard: SupplierRFMDashboard | None = None
        self._lock = threading.RLock()

    def get(self) -> SupplierRFMDashboard:
        """Return the dashboard, creating an empty one on first use."""
        with self._lock:
            if self._dashboard is None:
                self._dashboard = SupplierRFMDashboard()
            return self._dashboard

    def has_data(self) -> bool:
        """Check whether a dataset has been loaded."""
        with self._lock:
            return self._dashboard is not None and bool(self._dashboard.records)

    def reset(self, dashboard: SupplierRFMDashboard | None = None) -> None:
        """Replace the dashboard (None discards all loaded state)."""
        with self._lock:
            self._dashboard = dashboard


# Global dashboard holder instance
_dashboard_holder = DashboardHolder()


def get_dashboard_holder() -> DashboardHolder:
    """Get the global dashboard holder."""
    return _dashboard_holder


def get_dashboard() -> SupplierRFMDashboard:
    """Get the shared dashboard instance."""
    return _dashboard_holder.get()
