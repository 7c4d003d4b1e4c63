# pharmacy_management/modules/reporting/model.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ..dashboard.model import expiry_cutoff, normalize_row
from ...constants import DAILY_SALES_DAYS, EXPIRY_LOOKAHEAD_DAYS, TOP_SELLERS_LIMIT
from ...database.repositories.dashboard_repo import DashboardRepo
from ...utils.helpers import fmt_rupees, to_date


def zero_filled_days(
    rows: List[Dict[str, Any]], today: date, days: int = DAILY_SALES_DAYS
) -> List[Dict[str, Any]]:
    """
    One entry per day ending at `today` (oldest first). Days without sales
    get sales=0 / revenue=0.0.
    """
    by_day = {r["date"]: r for r in rows}
    out: List[Dict[str, Any]] = []
    for i in range(days - 1, -1, -1):
        d = (today - timedelta(days=i)).isoformat()
        r = by_day.get(d)
        out.append({
            "date": d,
            "sales": int(r["sales"]) if r else 0,
            "revenue": float(r["revenue"]) if r else 0.0,
        })
    return out


# ------------------------------ Reports Model ------------------------------

@dataclass
class ReportsModel:
    """
    Sales and stock analytics for the Reports screen.

    Usage:
        model = ReportsModel(conn)
        model.refresh(today=date(2024, 1, 15))
        model.daily_sales      # 7 rows, oldest first
        model.top_sellers      # up to 5 rows, by quantity sold
    """

    conn: sqlite3.Connection
    repo: DashboardRepo = field(init=False)

    as_of: str = field(init=False, default="")

    total_revenue: float = 0.0
    total_sales: int = 0
    average_sale: float = 0.0
    low_stock_count: int = 0
    expiring_count: int = 0
    expired_count: int = 0

    daily_sales: List[Dict[str, Any]] = field(default_factory=list)
    top_sellers: List[Dict[str, Any]] = field(default_factory=list)
    payment_methods: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.conn.row_factory = sqlite3.Row
        self.repo = DashboardRepo(self.conn)

    def refresh(
        self,
        today: Optional[date | str] = None,
        *,
        days: int = DAILY_SALES_DAYS,
        top_limit: int = TOP_SELLERS_LIMIT,
        expiring_days: int = EXPIRY_LOOKAHEAD_DAYS,
    ) -> None:
        d = to_date(today) or date.today()
        self.as_of = d.isoformat()

        self.total_revenue = self.repo.revenue()
        self.total_sales = self.repo.sales_count()
        self.average_sale = (self.total_revenue / self.total_sales) if self.total_sales else 0.0

        self.low_stock_count = self.repo.low_stock_count()
        self.expiring_count = len(self.repo.expiring_rows(expiry_cutoff(d, expiring_days)))
        self.expired_count = len(self.repo.expired_rows(self.as_of))

        start = (d - timedelta(days=days - 1)).isoformat()
        rows = [normalize_row(r) for r in self.repo.daily_totals(start, self.as_of)]
        self.daily_sales = zero_filled_days(rows, d, days)

        self.top_sellers = [normalize_row(r) for r in self.repo.top_sellers(top_limit)]
        self.payment_methods = [normalize_row(r) for r in self.repo.payment_method_breakdown()]


# ------------------------------ Table models --------------------------------

class _DictRowsTableModel(QAbstractTableModel):
    HEADERS: tuple = ()

    def __init__(self, rows: Optional[List[dict]] = None, parent=None) -> None:
        super().__init__(parent)
        self._rows: List[dict] = rows or []

    def set_rows(self, rows: List[dict]) -> None:
        self.beginResetModel()
        self._rows = rows or []
        self.endResetModel()

    def rowCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self.HEADERS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):  # type: ignore[override]
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self.HEADERS[section]
        return str(section + 1)

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        c = index.column()
        if role == Qt.DisplayRole:
            return self._display(row, c)
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c != 0 else (Qt.AlignLeft | Qt.AlignVCenter)
        return None

    def _display(self, row: dict, c: int):
        raise NotImplementedError


class TopSellersTableModel(_DictRowsTableModel):
    HEADERS = ("Medicine", "Quantity Sold", "Revenue")

    def _display(self, row: dict, c: int):
        if c == 0:
            return row.get("name", "")
        if c == 1:
            return str(row.get("quantity") or 0)
        return fmt_rupees(row.get("revenue") or 0.0)


class DailySalesTableModel(_DictRowsTableModel):
    HEADERS = ("Date", "Sales", "Revenue")

    def _display(self, row: dict, c: int):
        if c == 0:
            return row.get("date", "")
        if c == 1:
            return str(row.get("sales") or 0)
        return fmt_rupees(row.get("revenue") or 0.0)
