# pharmacy_management/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Qt runs headless (offscreen platform)
# - Every test gets its OWN in-memory store, seeded with the demo data,
#   so nothing leaks between tests
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON
# - TODAY pins the evaluation date the seeded sales were written against
# ---------------------------------------------------------------------

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import sqlite3
from datetime import date, datetime

import pytest

from pharmacy_management.database import get_connection

# The seeded "today": one sale on this date, one the day before
TODAY = date(2024, 1, 15)
NOW = datetime(2024, 1, 15, 16, 45)


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


# ---------- Per-test stores ----------
@pytest.fixture()
def conn():
    """Fresh seeded in-memory store."""
    con = get_connection(seed=True)
    try:
        yield con
    finally:
        con.close()


@pytest.fixture()
def empty_conn():
    """Schema only; no medicines, customers or sales."""
    con = get_connection(seed=False)
    try:
        yield con
    finally:
        con.close()


# ---------- Handy lookups ----------
@pytest.fixture()
def ids(conn: sqlite3.Connection) -> dict:
    """Seeded IDs by name, so tests don't hard-code autoincrement values."""
    def med(name: str) -> int:
        return int(conn.execute("SELECT medicine_id FROM medicines WHERE name=?", (name,)).fetchone()[0])

    def cust(name: str) -> int:
        return int(conn.execute("SELECT customer_id FROM customers WHERE name=?", (name,)).fetchone()[0])

    return {
        "paracetamol": med("Paracetamol 500mg"),
        "amoxicillin": med("Amoxicillin 250mg"),
        "cetirizine": med("Cetirizine 10mg"),
        "vitamin_d3": med("Vitamin D3 60000 IU"),
        "insulin": med("Insulin Glargine"),
        "rajesh": cust("Rajesh Kumar"),
        "priya": cust("Priya Sharma"),
        "amit": cust("Amit Patel"),
    }


def stock_of(conn: sqlite3.Connection, medicine_id: int) -> int:
    return int(conn.execute("SELECT stock FROM medicines WHERE medicine_id=?", (medicine_id,)).fetchone()[0])
