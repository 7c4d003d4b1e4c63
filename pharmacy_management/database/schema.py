import sqlite3

from ..constants import SCHEMA_VERSION, TABLE_SCHEMA_VERSION

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== CORE TABLES ======================== */

/* -------- medicines -------- */
CREATE TABLE IF NOT EXISTS medicines (
    medicine_id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name          TEXT    NOT NULL,
    category      TEXT    NOT NULL,
    manufacturer  TEXT    NOT NULL,
    price         NUMERIC NOT NULL CHECK (CAST(price AS REAL) >= 0),
    stock         INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
    min_stock     INTEGER NOT NULL DEFAULT 0 CHECK (min_stock >= 0),
    expiry_date   DATE    NOT NULL,
    batch_number  TEXT    NOT NULL,
    description   TEXT,
    dosage        TEXT,
    prescription  INTEGER NOT NULL DEFAULT 0 CHECK (prescription IN (0,1))
);
CREATE INDEX IF NOT EXISTS idx_medicines_name   ON medicines(name);
CREATE INDEX IF NOT EXISTS idx_medicines_expiry ON medicines(expiry_date);

/* -------- customers -------- */
CREATE TABLE IF NOT EXISTS customers (
    customer_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    name            TEXT    NOT NULL,
    phone           TEXT    NOT NULL,
    email           TEXT,
    address         TEXT,
    total_purchases NUMERIC NOT NULL DEFAULT 0 CHECK (CAST(total_purchases AS REAL) >= 0),
    last_visit      DATE    NOT NULL DEFAULT CURRENT_DATE
);

/* -------- sales -------- */
CREATE TABLE IF NOT EXISTS sales (
    sale_id        TEXT PRIMARY KEY,
    customer_id    INTEGER,                 /* NULL = walk-in */
    customer_name  TEXT,
    total          NUMERIC NOT NULL CHECK (CAST(total AS REAL) >= 0),
    discount       NUMERIC NOT NULL DEFAULT 0 CHECK (CAST(discount AS REAL) >= 0),
    final_total    NUMERIC NOT NULL,
    payment_method TEXT    NOT NULL CHECK (payment_method IN ('cash','card','upi')),
    date           DATE    NOT NULL,
    time           TEXT    NOT NULL,
    FOREIGN KEY (customer_id) REFERENCES customers(customer_id)
);
CREATE INDEX IF NOT EXISTS idx_sales_date ON sales(date);

/* medicine_id is intentionally not a FK: sale lines keep the denormalised
   name so history survives a medicine being deleted. */
CREATE TABLE IF NOT EXISTS sale_items (
    item_id       INTEGER PRIMARY KEY AUTOINCREMENT,
    sale_id       TEXT    NOT NULL,
    medicine_id   INTEGER NOT NULL,
    medicine_name TEXT    NOT NULL,
    quantity      INTEGER NOT NULL CHECK (quantity > 0),
    price         NUMERIC NOT NULL CHECK (CAST(price AS REAL) >= 0),
    total         NUMERIC NOT NULL CHECK (CAST(total AS REAL) >= 0),
    FOREIGN KEY (sale_id) REFERENCES sales(sale_id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_sale_items_sale     ON sale_items(sale_id);
CREATE INDEX IF NOT EXISTS idx_sale_items_medicine ON sale_items(medicine_id);

/* ======================== ONBOARDING ======================== */

CREATE TABLE IF NOT EXISTS accounts (
    account_id           INTEGER PRIMARY KEY AUTOINCREMENT,
    phone                TEXT    NOT NULL UNIQUE,
    name                 TEXT    NOT NULL,
    age                  INTEGER NOT NULL CHECK (age BETWEEN 18 AND 100),
    email                TEXT    NOT NULL,
    shop_name            TEXT    NOT NULL,
    shop_license_number  TEXT    NOT NULL,
    shop_owner_name      TEXT    NOT NULL,
    address              TEXT    NOT NULL,
    city                 TEXT    NOT NULL,
    state                TEXT    NOT NULL,
    pincode              TEXT    NOT NULL,
    pharmacist_name      TEXT,
    license_number       TEXT,
    issued_year          INTEGER,
    expiration_date      DATE,
    issued_organization  TEXT,
    created_at           TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS auth_events (
    event_id   INTEGER PRIMARY KEY AUTOINCREMENT,
    phone      TEXT,
    event      TEXT    NOT NULL,
    success    INTEGER NOT NULL CHECK (success IN (0,1)),
    detail     TEXT,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """
    Apply the (idempotent) schema on an open connection and stamp its version.
    The store is in-memory, so the schema must be applied on the same
    connection that the app keeps using.
    """
    conn.executescript(SQL)
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION}("
        "id INTEGER PRIMARY KEY CHECK (id=1), version TEXT NOT NULL)"
    )
    conn.execute(
        f"INSERT INTO {TABLE_SCHEMA_VERSION}(id, version) VALUES (1, ?) "
        "ON CONFLICT(id) DO UPDATE SET version=excluded.version",
        (SCHEMA_VERSION,),
    )
    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> str | None:
    row = conn.execute(f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id=1").fetchone()
    return row[0] if row else None
