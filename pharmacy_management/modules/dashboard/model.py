# pharmacy_management/modules/dashboard/model.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ...constants import EXPIRY_LOOKAHEAD_DAYS, RECENT_SALES_LIMIT
from ...database.repositories.dashboard_repo import DashboardRepo
from ...utils.helpers import to_date


def normalize_row(r: Any) -> Dict[str, Any]:
    """sqlite3.Row → dict or passthrough dict; shallow copy for safety."""
    if hasattr(r, "keys"):
        return {k: r[k] for k in r.keys()}
    return dict(r)


def expiry_cutoff(today: date, days: int = EXPIRY_LOOKAHEAD_DAYS) -> str:
    """Last expiry date (inclusive) that still counts as 'expiring soon'."""
    return (today + timedelta(days=days)).isoformat()


# --------------------------- Dashboard Model ---------------------------

@dataclass
class DashboardModel:
    """
    Pulls data from DashboardRepo and exposes plain attributes for the view.

    Usage:
        model = DashboardModel(conn)
        model.refresh()                       # evaluated against date.today()
        model.refresh(today=date(2024, 1, 15))
        print(model.kpi_today_revenue, model.low_stock_count, ...)
    """

    conn: sqlite3.Connection
    repo: DashboardRepo = field(init=False)

    # evaluation date used by the last refresh
    as_of: str = field(init=False, default="")

    # ---- KPI numbers ----
    kpi_total_medicines: int = 0
    kpi_total_customers: int = 0
    kpi_today_revenue: float = 0.0
    kpi_today_sales: int = 0
    kpi_total_revenue: float = 0.0
    low_stock_count: int = 0
    expiring_count: int = 0

    # ---- Lists (dict rows) ----
    low_stock_rows: List[Dict[str, Any]] = field(default_factory=list)
    expiring_rows: List[Dict[str, Any]] = field(default_factory=list)
    recent_sales: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.conn.row_factory = sqlite3.Row
        self.repo = DashboardRepo(self.conn)

    # --------------------------- Public API ---------------------------

    def refresh(
        self,
        today: Optional[date | str] = None,
        *,
        expiring_days: int = EXPIRY_LOOKAHEAD_DAYS,
        recent_limit: int = RECENT_SALES_LIMIT,
    ) -> None:
        """
        Recompute every KPI and list from the live tables.

        Args:
          today: evaluation date (date or ISO text); defaults to date.today()
          expiring_days: lookahead window for the expiry alert
          recent_limit: N rows for the recent-sales list
        """
        d = to_date(today) or date.today()
        self.as_of = d.isoformat()

        # ---------- Batch 1: counts ----------
        self.kpi_total_medicines = self.repo.medicines_count()
        self.kpi_total_customers = self.repo.customers_count()

        # ---------- Batch 2: revenue ----------
        self.kpi_today_revenue = self.repo.revenue(self.as_of)
        self.kpi_today_sales = self.repo.sales_count(self.as_of)
        self.kpi_total_revenue = self.repo.revenue()

        # ---------- Batch 3: stock alerts ----------
        self.low_stock_rows = [normalize_row(r) for r in self.repo.low_stock_rows()]
        self.low_stock_count = len(self.low_stock_rows)

        self.expiring_rows = [
            normalize_row(r) for r in self.repo.expiring_rows(expiry_cutoff(d, expiring_days))
        ]
        self.expiring_count = len(self.expiring_rows)

        # ---------- Batch 4: recent activity ----------
        self.recent_sales = [normalize_row(r) for r in self.repo.recent_sales(recent_limit)]
