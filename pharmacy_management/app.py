# pharmacy_management/app.py
from __future__ import annotations

import sqlite3
import sys
from datetime import date
from typing import Optional

from PySide6.QtCore import QCoreApplication, QObject, Signal

from .constants import APP_NAME
from .database import get_connection
from .modules.auth.controller import AuthFlowController
from .modules.customer.controller import CustomerController
from .modules.dashboard.model import DashboardModel
from .modules.inventory.controller import InventoryController
from .modules.reporting.model import ReportsModel
from .modules.sales.controller import SalesController
from .utils.loggers import get_logger

_log = get_logger(__name__)


class PharmacyApp(QObject):
    """
    Owns the connection and every feature controller.

    Views call intents on the controllers (inventory.add_medicine,
    customers.add_customer, sales.record_sale, auth.submit_phone, ...) and
    listen to `data_changed`, which fires after the dashboard and reports
    have been recomputed.
    """

    data_changed = Signal()

    def __init__(
        self,
        conn: Optional[sqlite3.Connection] = None,
        parent: Optional[QObject] = None,
        *,
        today: Optional[date] = None,
    ) -> None:
        super().__init__(parent)
        self.conn = conn if conn is not None else get_connection()
        # Fixed evaluation date for alerts/KPIs; None means "the real today"
        self.today = today

        self.auth = AuthFlowController(self.conn, self)
        self.inventory = InventoryController(self.conn, self)
        self.customers = CustomerController(self.conn, self)
        self.sales = SalesController(self.conn, self)
        self.dashboard = DashboardModel(self.conn)
        self.reports = ReportsModel(self.conn)

        self._wire()
        self.refresh_views()

    def _wire(self) -> None:
        self.inventory.changed.connect(self._on_data_changed)
        self.customers.changed.connect(self._on_data_changed)
        # A sale moves stock, so the medicine table must be re-read too
        self.sales.changed.connect(self.inventory.refresh)
        self.sales.changed.connect(self._on_data_changed)

    @property
    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated

    def refresh_views(self) -> None:
        self.dashboard.refresh(self.today)
        self.reports.refresh(self.today)

    def _on_data_changed(self) -> None:
        self.refresh_views()
        self.data_changed.emit()

    def close(self) -> None:
        self.conn.close()


def main() -> int:
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    state = PharmacyApp()
    d = state.dashboard
    _log.info(
        "%s ready: %d medicines (%d low stock, %d expiring), %d customers, revenue %.2f",
        APP_NAME,
        d.kpi_total_medicines,
        d.low_stock_count,
        d.expiring_count,
        d.kpi_total_customers,
        d.kpi_total_revenue,
    )
    state.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
