# pharmacy_management/database/repositories/medicines_repo.py
from __future__ import annotations

from dataclasses import dataclass
import math
import sqlite3
from typing import Any, Mapping

from ._tx import immediate_tx
from ...utils.loggers import get_logger

_log = get_logger(__name__)


class DomainError(Exception):
    """Domain-level error the controller/UI can surface (toast/snackbar)."""
    pass


class MedicineNotFoundError(DomainError):
    def __init__(self, medicine_id: int):
        super().__init__(f"Medicine #{medicine_id} does not exist.")
        self.medicine_id = medicine_id


class InsufficientStockError(DomainError):
    def __init__(self, medicine_id: int, name: str, available: int, requested: int):
        super().__init__(
            f"Not enough stock for {name}: {available} available, {requested} requested."
        )
        self.medicine_id = medicine_id
        self.available = available
        self.requested = requested


@dataclass
class Medicine:
    medicine_id: int | None
    name: str
    category: str
    manufacturer: str
    price: float
    stock: int
    min_stock: int
    expiry_date: str
    batch_number: str
    description: str | None = None
    dosage: str | None = None
    prescription: bool = False

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0


_COLUMNS = (
    "medicine_id, name, category, manufacturer, "
    "CAST(price AS REAL) AS price, stock, min_stock, expiry_date, batch_number, "
    "description, dosage, prescription"
)

# Columns an edit may touch (medicine_id is immutable)
EDITABLE_FIELDS = (
    "name",
    "category",
    "manufacturer",
    "price",
    "stock",
    "min_stock",
    "expiry_date",
    "batch_number",
    "description",
    "dosage",
    "prescription",
)


def _row_to_medicine(r: sqlite3.Row) -> Medicine:
    d = dict(r)
    d["prescription"] = bool(d.get("prescription"))
    return Medicine(**d)


class MedicinesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- Internal helpers ----------------------------

    @staticmethod
    def _normalize_text(s: str | None) -> str | None:
        if s is None:
            return None
        s = str(s).strip()
        return s or None

    @staticmethod
    def _check_values(values: Mapping[str, Any]) -> None:
        """Soft guards mirroring the schema CHECKs, with readable messages."""
        for key in ("name", "category", "manufacturer", "expiry_date", "batch_number"):
            if key in values and not str(values[key] or "").strip():
                raise DomainError(f"{key.replace('_', ' ').capitalize()} cannot be empty.")
        if "price" in values and not math.isfinite(float(values["price"])):
            raise DomainError("Price must be a finite number.")
        if "price" in values and float(values["price"]) < 0:
            raise DomainError("Price cannot be negative.")
        if "stock" in values and int(values["stock"]) < 0:
            raise DomainError("Stock cannot be negative.")
        if "min_stock" in values and int(values["min_stock"]) < 0:
            raise DomainError("Minimum stock cannot be negative.")

    # ---------------------------- Queries ----------------------------

    def list_medicines(self) -> list[Medicine]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM medicines ORDER BY medicine_id"
        ).fetchall()
        return [_row_to_medicine(r) for r in rows]

    def get(self, medicine_id: int) -> Medicine | None:
        r = self.conn.execute(
            f"SELECT {_COLUMNS} FROM medicines WHERE medicine_id=?",
            (medicine_id,),
        ).fetchone()
        return _row_to_medicine(r) if r else None

    def require(self, medicine_id: int) -> Medicine:
        """Like get(), but a missing row is an error rather than None."""
        med = self.get(medicine_id)
        if med is None:
            raise MedicineNotFoundError(medicine_id)
        return med

    def search(self, term: str = "", category: str | None = None) -> list[Medicine]:
        """
        Case-insensitive match on name OR manufacturer, optionally restricted
        to an exact category. Empty term matches everything.
        """
        where = ["(LOWER(name) LIKE ? OR LOWER(manufacturer) LIKE ?)"]
        pattern = f"%{(term or '').strip().lower()}%"
        params: list = [pattern, pattern]
        if category:
            where.append("category = ?")
            params.append(category)
        sql = f"SELECT {_COLUMNS} FROM medicines WHERE " + " AND ".join(where) + " ORDER BY medicine_id"
        return [_row_to_medicine(r) for r in self.conn.execute(sql, params).fetchall()]

    def in_stock(self, term: str = "") -> list[Medicine]:
        """Medicines that can be put on a sale: stock > 0 and name contains `term`."""
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM medicines "
            "WHERE stock > 0 AND LOWER(name) LIKE ? "
            "ORDER BY name COLLATE NOCASE",
            (f"%{(term or '').strip().lower()}%",),
        ).fetchall()
        return [_row_to_medicine(r) for r in rows]

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        rows = self.conn.execute(
            "SELECT category FROM medicines GROUP BY category ORDER BY MIN(medicine_id)"
        ).fetchall()
        return [r["category"] for r in rows]

    # ---------------------------- Mutations ----------------------------

    def create(
        self,
        name: str,
        category: str,
        manufacturer: str,
        price: float,
        stock: int,
        min_stock: int,
        expiry_date: str,
        batch_number: str,
        description: str | None = None,
        dosage: str | None = None,
        prescription: bool = False,
    ) -> int:
        values = {
            "name": name,
            "category": category,
            "manufacturer": manufacturer,
            "price": price,
            "stock": stock,
            "min_stock": min_stock,
            "expiry_date": expiry_date,
            "batch_number": batch_number,
        }
        self._check_values(values)
        with immediate_tx(self.conn, "medicine_create"):
            cur = self.conn.execute(
                """
                INSERT INTO medicines(name, category, manufacturer, price, stock, min_stock,
                                      expiry_date, batch_number, description, dosage, prescription)
                VALUES (?,?,?,?,?,?,?,?,?,?,?)
                """,
                (
                    name.strip(),
                    category.strip(),
                    manufacturer.strip(),
                    float(price),
                    int(stock),
                    int(min_stock),
                    str(expiry_date),
                    batch_number.strip(),
                    self._normalize_text(description),
                    self._normalize_text(dosage),
                    1 if prescription else 0,
                ),
            )
            new_id = int(cur.lastrowid)
        _log.info("medicine added: #%s %s (stock=%s)", new_id, name, stock)
        return new_id

    def update(self, medicine_id: int, changes: Mapping[str, Any]) -> Medicine:
        """
        Partial update: only keys present in `changes` are written.
        Returns the updated row.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise DomainError(f"Unknown medicine field(s): {', '.join(sorted(unknown))}")
        self._check_values(changes)
        if not changes:
            return self.require(medicine_id)

        cols = [k for k in EDITABLE_FIELDS if k in changes]
        params: list = []
        for k in cols:
            v = changes[k]
            if k == "prescription":
                v = 1 if v else 0
            elif k in ("description", "dosage"):
                v = self._normalize_text(v)
            params.append(v)
        params.append(medicine_id)

        with immediate_tx(self.conn, "medicine_update"):
            cur = self.conn.execute(
                "UPDATE medicines SET " + ", ".join(f"{k}=?" for k in cols) + " WHERE medicine_id=?",
                params,
            )
            if cur.rowcount == 0:
                raise MedicineNotFoundError(medicine_id)
        _log.info("medicine updated: #%s fields=%s", medicine_id, ",".join(cols))
        return self.require(medicine_id)

    def delete(self, medicine_id: int) -> None:
        with immediate_tx(self.conn, "medicine_delete"):
            cur = self.conn.execute("DELETE FROM medicines WHERE medicine_id=?", (medicine_id,))
            if cur.rowcount == 0:
                raise MedicineNotFoundError(medicine_id)
        _log.info("medicine deleted: #%s", medicine_id)
