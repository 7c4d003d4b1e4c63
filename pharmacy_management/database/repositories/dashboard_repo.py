# pharmacy_management/database/repositories/dashboard_repo.py
from __future__ import annotations

import sqlite3
from typing import Any, List, Optional, Tuple


def _to_float(x: Optional[Any]) -> float:
    try:
        return float(x or 0.0)
    except (TypeError, ValueError):
        return 0.0


class DashboardRepo:
    """
    Thin query layer for the Dashboard and Reports screens.

    All methods are read-only. Each method returns a scalar or a list of rows.

    Date handling:
    - Dates are stored as ISO 'YYYY-MM-DD' text and compared directly, so the
      expiry and sales-date indexes stay usable.
    - NO use of SQLite clock (DATE('now')) inside filters; the caller passes
      the evaluation date, which keeps every aggregation reproducible.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ------------------------------- Counts ---------------------------------

    def medicines_count(self) -> int:
        return int(self._scalar("SELECT COUNT(*) AS v FROM medicines") or 0)

    def customers_count(self) -> int:
        return int(self._scalar("SELECT COUNT(*) AS v FROM customers") or 0)

    def low_stock_count(self) -> int:
        return int(self._scalar("SELECT COUNT(*) AS v FROM medicines WHERE stock <= min_stock") or 0)

    # ------------------------------- Stock ----------------------------------

    def low_stock_rows(self) -> List[sqlite3.Row]:
        """Medicines at or below their minimum, scarcest first."""
        sql = """
            SELECT medicine_id, name, category, stock, min_stock, expiry_date
            FROM medicines
            WHERE stock <= min_stock
            ORDER BY stock ASC, medicine_id
        """
        return self._rows(sql)

    def expiring_rows(self, until: str) -> List[sqlite3.Row]:
        """
        Medicines whose expiry_date is on or before `until`.
        Already-expired stock is included.
        """
        sql = """
            SELECT medicine_id, name, category, stock, expiry_date, batch_number
            FROM medicines
            WHERE expiry_date <= ?
            ORDER BY expiry_date ASC, medicine_id
        """
        return self._rows(sql, (until,))

    def expired_rows(self, today: str) -> List[sqlite3.Row]:
        sql = """
            SELECT medicine_id, name, category, stock, expiry_date, batch_number
            FROM medicines
            WHERE expiry_date < ?
            ORDER BY expiry_date ASC, medicine_id
        """
        return self._rows(sql, (today,))

    # ------------------------------- Sales ----------------------------------

    def revenue(self, on_date: Optional[str] = None) -> float:
        """Sum of final_total, for all time or for one day."""
        if on_date is None:
            sql = "SELECT COALESCE(SUM(CAST(final_total AS REAL)), 0.0) AS v FROM sales"
            return _to_float(self._scalar(sql))
        sql = """
            SELECT COALESCE(SUM(CAST(final_total AS REAL)), 0.0) AS v
            FROM sales
            WHERE date = ?
        """
        return _to_float(self._scalar(sql, (on_date,)))

    def sales_count(self, on_date: Optional[str] = None) -> int:
        if on_date is None:
            return int(self._scalar("SELECT COUNT(*) AS v FROM sales") or 0)
        return int(self._scalar("SELECT COUNT(*) AS v FROM sales WHERE date = ?", (on_date,)) or 0)

    def daily_totals(self, date_from: str, date_to: str) -> List[sqlite3.Row]:
        """
        Per-day (date, sales, revenue) for days that HAVE sales in the window.
        Zero-filling is the caller's job.
        """
        sql = """
            SELECT date,
                   COUNT(*) AS sales,
                   COALESCE(SUM(CAST(final_total AS REAL)), 0.0) AS revenue
            FROM sales
            WHERE date >= ? AND date <= ?
            GROUP BY date
            ORDER BY date
        """
        return self._rows(sql, (date_from, date_to))

    def top_sellers(self, limit_n: int = 5) -> List[sqlite3.Row]:
        """
        Quantity sold per medicine, highest first. Lines whose medicine has
        since been deleted are skipped; the current name is reported.
        """
        sql = """
            SELECT m.medicine_id,
                   m.name,
                   SUM(si.quantity) AS quantity,
                   COALESCE(SUM(CAST(si.total AS REAL)), 0.0) AS revenue
            FROM sale_items si
            JOIN medicines m ON m.medicine_id = si.medicine_id
            GROUP BY m.medicine_id, m.name
            ORDER BY quantity DESC, m.medicine_id
            LIMIT ?
        """
        return self._rows(sql, (int(limit_n),))

    def recent_sales(self, limit_n: int = 5) -> List[sqlite3.Row]:
        sql = """
            SELECT s.sale_id,
                   COALESCE(s.customer_name, 'Walk-in Customer') AS customer_name,
                   (SELECT COUNT(*) FROM sale_items si WHERE si.sale_id = s.sale_id) AS items,
                   CAST(s.final_total AS REAL) AS final_total,
                   s.payment_method,
                   s.date,
                   s.time
            FROM sales s
            ORDER BY s.date DESC, s.time DESC, s.sale_id DESC
            LIMIT ?
        """
        return self._rows(sql, (int(limit_n),))

    def payment_method_breakdown(self) -> List[sqlite3.Row]:
        sql = """
            SELECT payment_method,
                   COUNT(*) AS sales,
                   COALESCE(SUM(CAST(final_total AS REAL)), 0.0) AS revenue
            FROM sales
            GROUP BY payment_method
            ORDER BY revenue DESC, payment_method
        """
        return self._rows(sql)

    # ------------------------------- Helpers --------------------------------

    def _scalar(self, sql: str, params: Tuple[Any, ...] | List[Any] | None = None) -> Any:
        """First column of the first row, or None."""
        row = self.conn.execute(sql, params or []).fetchone()
        return None if row is None else row[0]

    def _rows(self, sql: str, params: Tuple[Any, ...] | List[Any] | None = None) -> List[sqlite3.Row]:
        cur = self.conn.execute(sql, params or [])
        return cur.fetchall()
