# database/repositories/_tx.py
from __future__ import annotations

import sqlite3
from contextlib import contextmanager


@contextmanager
def immediate_tx(conn: sqlite3.Connection, name: str = "repo_tx"):
    """
    Start an IMMEDIATE transaction, commit on success, rollback on error.

    If the caller already holds an open transaction (tests wrap each case in
    BEGIN ... ROLLBACK), a SAVEPOINT is used instead so the outer transaction
    stays in charge of the final commit/rollback.
    """
    if conn.in_transaction:
        conn.execute(f"SAVEPOINT {name}")
        try:
            yield
        except Exception:
            conn.execute(f"ROLLBACK TO SAVEPOINT {name}")
            conn.execute(f"RELEASE SAVEPOINT {name}")
            raise
        conn.execute(f"RELEASE SAVEPOINT {name}")
        return

    cur = conn.cursor()
    try:
        cur.execute("BEGIN IMMEDIATE")
        yield
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
