from __future__ import annotations
from dataclasses import dataclass
import sqlite3

from ._tx import immediate_tx
from ...utils.helpers import today_str
from ...utils.loggers import get_logger

_log = get_logger(__name__)


# Domain-level error the controller can surface directly (e.g., toast/snackbar)
class DomainError(Exception):
    pass


@dataclass
class Customer:
    customer_id: int | None
    name: str
    phone: str
    email: str | None
    address: str | None
    total_purchases: float = 0.0
    last_visit: str | None = None


_COLUMNS = (
    "customer_id, name, phone, email, address, "
    "CAST(total_purchases AS REAL) AS total_purchases, last_visit"
)


class CustomersRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _normalize_text(s: str | None) -> str | None:
        if s is None:
            return None
        s = s.strip()
        return s or None

    @staticmethod
    def _ensure_non_empty(value: str | None, field_label: str) -> None:
        if value is None or value.strip() == "":
            raise DomainError(f"{field_label} cannot be empty.")

    # ---- Queries ----------------------------------------------------------

    def list_customers(self) -> list[Customer]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers ORDER BY customer_id"
        ).fetchall()
        return [Customer(**r) for r in rows]

    def search(self, term: str) -> list[Customer]:
        """
        Matches name or email (case-insensitive) or phone (substring).
        Blank term returns every customer.
        """
        t = (term or "").strip()
        if not t:
            return self.list_customers()
        pattern = f"%{t.lower()}%"
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers "
            "WHERE LOWER(name) LIKE ? "
            "   OR phone LIKE ? "
            "   OR LOWER(COALESCE(email, '')) LIKE ? "
            "ORDER BY customer_id",
            (pattern, f"%{t}%", pattern),
        ).fetchall()
        return [Customer(**r) for r in rows]

    def get(self, customer_id: int) -> Customer | None:
        r = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers WHERE customer_id=?",
            (customer_id,),
        ).fetchone()
        return Customer(**r) if r else None

    def purchase_stats(self) -> dict:
        """
        {"count", "total_purchases", "average_purchase"} over stored running sums.
        Average is 0.0 when there are no customers.
        """
        r = self.conn.execute(
            "SELECT COUNT(*) AS n, COALESCE(SUM(CAST(total_purchases AS REAL)), 0.0) AS s FROM customers"
        ).fetchone()
        n = int(r["n"] or 0)
        s = float(r["s"] or 0.0)
        return {
            "count": n,
            "total_purchases": s,
            "average_purchase": (s / n) if n else 0.0,
        }

    # ---- Mutations --------------------------------------------------------

    def create(
        self,
        name: str,
        phone: str,
        email: str | None = None,
        address: str | None = None,
        total_purchases: float = 0.0,
        last_visit: str | None = None,
    ) -> int:
        """
        Insert a new customer. Soft validation mirrors form checks.
        """
        self._ensure_non_empty(name, "Name")
        self._ensure_non_empty(phone, "Phone")
        if float(total_purchases) < 0:
            raise DomainError("Total purchases cannot be negative.")

        with immediate_tx(self.conn, "customer_create"):
            cur = self.conn.execute(
                "INSERT INTO customers(name, phone, email, address, total_purchases, last_visit) "
                "VALUES (?,?,?,?,?,?)",
                (
                    self._normalize_text(name),
                    self._normalize_text(phone),
                    self._normalize_text(email),
                    self._normalize_text(address),
                    float(total_purchases),
                    last_visit or today_str(),
                ),
            )
            new_id = int(cur.lastrowid)
        _log.info("customer added: #%s %s", new_id, name.strip())
        return new_id
