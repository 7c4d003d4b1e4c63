from __future__ import annotations
from dataclasses import dataclass, field
import math
import sqlite3
from typing import Iterable

from ._tx import immediate_tx
from .medicines_repo import (
    DomainError,
    InsufficientStockError,
    MedicineNotFoundError,
)
from ...constants import PAYMENT_METHODS
from ...utils.loggers import get_logger

_log = get_logger(__name__)

# Money comparisons are done to the paisa
_EPS = 0.005


class SaleValidationError(DomainError):
    """Header/line arithmetic or enum values don't hold."""
    pass


@dataclass
class SaleItem:
    medicine_id: int
    medicine_name: str
    quantity: int
    price: float
    total: float


@dataclass
class Sale:
    sale_id: str | None
    customer_id: int | None
    customer_name: str | None
    items: list[SaleItem] = field(default_factory=list)
    total: float = 0.0
    discount: float = 0.0
    final_total: float = 0.0
    payment_method: str = "cash"
    date: str = ""
    time: str = ""

    @property
    def is_walk_in(self) -> bool:
        return self.customer_id is None


def new_sale_id(conn: sqlite3.Connection, date_str: str) -> str:
    """
    Sale IDs use prefix SO + yyyymmdd + -NNNN, numbered per day.
    """
    d = date_str.replace("-", "")
    prefix = f"SO{d}-"
    row = conn.execute(
        "SELECT MAX(sale_id) AS m FROM sales WHERE sale_id LIKE ?",
        (prefix + "%",),
    ).fetchone()
    last = int(row["m"].split("-")[-1]) if row and row["m"] else 0
    return f"{prefix}{last+1:04d}"


class SalesRepo:
    """
    Sales repository.

    Key behavior:
      - A sale is a header row plus ordered sale_items lines; both are written
        together and never edited afterwards.
      - create_sale() is the only place stock moves: every line is checked
        against the live medicines row before anything is written, and the
        decrement happens in the same transaction as the insert.
    """

    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def _header_rows(self, where: str = "", params: Iterable = ()) -> list[sqlite3.Row]:
        sql = f"""
        SELECT s.sale_id,
               s.customer_id,
               s.customer_name,
               CAST(s.total AS REAL)       AS total,
               CAST(s.discount AS REAL)    AS discount,
               CAST(s.final_total AS REAL) AS final_total,
               s.payment_method,
               s.date,
               s.time
        FROM sales s
        {where}
        ORDER BY DATE(s.date) DESC, s.time DESC, s.sale_id DESC
        """
        return self.conn.execute(sql, tuple(params)).fetchall()

    def list_items(self, sid: str) -> list[SaleItem]:
        rows = self.conn.execute(
            """
            SELECT medicine_id, medicine_name, quantity,
                   CAST(price AS REAL) AS price,
                   CAST(total AS REAL) AS total
            FROM sale_items
            WHERE sale_id = ?
            ORDER BY item_id
            """,
            (sid,),
        ).fetchall()
        return [SaleItem(**r) for r in rows]

    def _to_sale(self, r: sqlite3.Row) -> Sale:
        return Sale(**dict(r), items=self.list_items(r["sale_id"]))

    def list_sales(self) -> list[Sale]:
        """Newest first (date, then time)."""
        return [self._to_sale(r) for r in self._header_rows()]

    def get_sale(self, sid: str) -> Sale | None:
        rows = self._header_rows("WHERE s.sale_id = ?", (sid,))
        return self._to_sale(rows[0]) if rows else None

    # ---------------------------------------------------------------------
    # VALIDATION
    # ---------------------------------------------------------------------
    @staticmethod
    def _validate(sale: Sale) -> None:
        if not sale.items:
            raise SaleValidationError("Please add at least one item to the sale.")
        if sale.payment_method not in PAYMENT_METHODS:
            raise SaleValidationError(
                f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}."
            )
        if not sale.date or not sale.time:
            raise SaleValidationError("Sale date and time are required.")

        amounts = [sale.total, sale.discount, sale.final_total]
        amounts += [v for it in sale.items for v in (it.price, it.total)]
        if not all(math.isfinite(float(v)) for v in amounts):
            raise SaleValidationError("Sale amounts must be finite numbers.")

        running = 0.0
        for it in sale.items:
            if int(it.quantity) <= 0:
                raise SaleValidationError(f"Quantity for {it.medicine_name} must be positive.")
            if float(it.price) < 0:
                raise SaleValidationError(f"Price for {it.medicine_name} cannot be negative.")
            if abs(float(it.price) * int(it.quantity) - float(it.total)) > _EPS:
                raise SaleValidationError(
                    f"Line total for {it.medicine_name} does not equal price × quantity."
                )
            running += float(it.total)

        if abs(running - float(sale.total)) > _EPS:
            raise SaleValidationError("Sale total does not equal the sum of its lines.")
        if float(sale.discount) < 0:
            raise SaleValidationError("Discount cannot be negative.")
        if float(sale.discount) - float(sale.total) > _EPS:
            raise SaleValidationError("Discount cannot exceed the sale total.")
        if abs(float(sale.total) - float(sale.discount) - float(sale.final_total)) > _EPS:
            raise SaleValidationError("Final total must equal total minus discount.")

    def _check_stock(self, sale: Sale) -> dict[int, int]:
        """
        Sum requested quantities per medicine and check each against the live
        row. Raises before anything is written.
        """
        wanted: dict[int, int] = {}
        for it in sale.items:
            wanted[int(it.medicine_id)] = wanted.get(int(it.medicine_id), 0) + int(it.quantity)

        for mid, qty in wanted.items():
            row = self.conn.execute(
                "SELECT name, stock FROM medicines WHERE medicine_id = ?", (mid,)
            ).fetchone()
            if row is None:
                raise MedicineNotFoundError(mid)
            if int(row["stock"]) < qty:
                raise InsufficientStockError(mid, row["name"], int(row["stock"]), qty)
        return wanted

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def _insert_header(self, s: Sale) -> None:
        self.conn.execute(
            """
            INSERT INTO sales (
                sale_id, customer_id, customer_name,
                total, discount, final_total,
                payment_method, date, time
            )
            VALUES (?,?,?,?,?,?,?,?,?)
            """,
            (
                s.sale_id,
                s.customer_id,
                s.customer_name,
                float(s.total),
                float(s.discount),
                float(s.final_total),
                s.payment_method,
                s.date,
                s.time,
            ),
        )

    def _insert_item(self, sid: str, it: SaleItem) -> int:
        cur = self.conn.execute(
            """
            INSERT INTO sale_items (
                sale_id, medicine_id, medicine_name, quantity, price, total
            ) VALUES (?,?,?,?,?,?)
            """,
            (sid, it.medicine_id, it.medicine_name, int(it.quantity), float(it.price), float(it.total)),
        )
        return int(cur.lastrowid)

    def _decrement_stock(self, mid: int, qty: int) -> None:
        cur = self.conn.execute(
            "UPDATE medicines SET stock = stock - ? WHERE medicine_id = ? AND stock >= ?",
            (qty, mid, qty),
        )
        if cur.rowcount != 1:
            # Row vanished or stock moved under us since _check_stock
            row = self.conn.execute(
                "SELECT name, stock FROM medicines WHERE medicine_id = ?", (mid,)
            ).fetchone()
            if row is None:
                raise MedicineNotFoundError(mid)
            raise InsufficientStockError(mid, row["name"], int(row["stock"]), qty)

    def create_sale(self, sale: Sale) -> str:
        """
        Persist a sale and decrement stock for every line, atomically.

        Validates arithmetic and payment method, then (inside one transaction)
        checks every referenced medicine exists with enough stock, inserts the
        header + lines and decrements stock. Any failure rolls everything back.
        Assigns sale.sale_id when it's empty. Returns the sale id.
        """
        self._validate(sale)

        with immediate_tx(self.conn, "sale_create"):
            wanted = self._check_stock(sale)
            if not sale.sale_id:
                sale.sale_id = new_sale_id(self.conn, sale.date)
            self._insert_header(sale)
            for it in sale.items:
                self._insert_item(sale.sale_id, it)
            for mid, qty in wanted.items():
                self._decrement_stock(mid, qty)
                _log.info("stock decremented: medicine #%s by %s (sale %s)", mid, qty, sale.sale_id)

        _log.info(
            "sale recorded: %s customer=%s final_total=%.2f method=%s",
            sale.sale_id,
            sale.customer_name or "walk-in",
            float(sale.final_total),
            sale.payment_method,
        )
        return sale.sale_id
