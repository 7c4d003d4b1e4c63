# database/__init__.py
from __future__ import annotations

import sqlite3

from ..config import DB_PATH, SEED_MOCK_DATA
from . import schema as schema_module
from .seeders.mock_data import seed as seed_mock_data


def get_connection(*, seed: bool | None = None) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection to a fresh in-memory store with:
      - foreign_keys ON
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Schema is applied on the connection itself; the mock collections are
    seeded unless `seed=False` (or PHARMACY_SEED_MOCK_DATA=0).
    """
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")

    schema_module.init_schema(conn)

    do_seed = SEED_MOCK_DATA if seed is None else seed
    if do_seed:
        seed_mock_data(conn)

    conn.commit()
    return conn


__all__ = [
    "get_connection",
]
