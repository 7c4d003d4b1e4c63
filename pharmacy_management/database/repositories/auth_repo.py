# pharmacy_management/database/repositories/auth_repo.py
from __future__ import annotations

import sqlite3
from typing import Any, Mapping, Optional

from ._tx import immediate_tx

# Columns written by the registration step, in table order
_REGISTRATION_COLUMNS = (
    "name",
    "age",
    "email",
    "shop_name",
    "shop_license_number",
    "shop_owner_name",
    "address",
    "city",
    "state",
    "pincode",
)

_PHARMACIST_COLUMNS = (
    "pharmacist_name",
    "license_number",
    "issued_year",
    "expiration_date",
    "issued_organization",
)


class AuthRepo:
    """
    Thin data-access layer for the phone/OTP onboarding flow.

      accounts(phone UNIQUE, registration fields..., pharmacist licence fields...)
      auth_events(phone, event, success, detail, created_at)

    Notes:
      - This repo does NOT check OTP codes; the flow controller decides what
        counts as a successful verification and only then logs it as such.
      - Accounts are keyed by the normalized 10-digit mobile number; saving
        again for the same phone overwrites the earlier registration.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ------------------------------- reads -------------------------------

    def get_account(self, phone: str) -> Optional[dict]:
        row = self.conn.execute(
            "SELECT * FROM accounts WHERE phone = ?",
            ((phone or "").strip(),),
        ).fetchone()
        return dict(row) if row else None

    def list_auth_events(self, phone: Optional[str] = None) -> list[dict]:
        """Oldest first. Filter by phone when given."""
        if phone is None:
            rows = self.conn.execute(
                "SELECT event_id, phone, event, success, detail, created_at "
                "FROM auth_events ORDER BY event_id"
            ).fetchall()
        else:
            rows = self.conn.execute(
                "SELECT event_id, phone, event, success, detail, created_at "
                "FROM auth_events WHERE phone = ? ORDER BY event_id",
                (phone,),
            ).fetchall()
        return [dict(r) for r in rows]

    # ------------------------------ writes -------------------------------

    def save_registration(self, phone: str, data: Mapping[str, Any]) -> int:
        """
        Upsert the registration part of an account. Returns account_id.
        """
        values = [data.get(c) for c in _REGISTRATION_COLUMNS]
        cols = ", ".join(_REGISTRATION_COLUMNS)
        marks = ",".join("?" for _ in _REGISTRATION_COLUMNS)
        updates = ", ".join(f"{c}=excluded.{c}" for c in _REGISTRATION_COLUMNS)
        with immediate_tx(self.conn, "account_save"):
            self.conn.execute(
                f"INSERT INTO accounts(phone, {cols}) VALUES (?,{marks}) "
                f"ON CONFLICT(phone) DO UPDATE SET {updates}",
                [phone, *values],
            )
            row = self.conn.execute(
                "SELECT account_id FROM accounts WHERE phone = ?", (phone,)
            ).fetchone()
        return int(row["account_id"])

    def save_pharmacist(self, phone: str, data: Mapping[str, Any]) -> None:
        """
        Attach pharmacist licence details to an existing account.
        Raises LookupError if the phone has no registration yet.
        """
        sets = ", ".join(f"{c}=?" for c in _PHARMACIST_COLUMNS)
        with immediate_tx(self.conn, "pharmacist_save"):
            cur = self.conn.execute(
                f"UPDATE accounts SET {sets} WHERE phone = ?",
                [*(data.get(c) for c in _PHARMACIST_COLUMNS), phone],
            )
            if cur.rowcount == 0:
                raise LookupError(f"No registered account for {phone}.")

    def insert_auth_event(
        self,
        phone: Optional[str],
        event: str,
        success: bool,
        detail: Optional[str] = None,
    ) -> None:
        """Append one row to the auth trail (phone may be unknown yet)."""
        self.conn.execute(
            "INSERT INTO auth_events(phone, event, success, detail) VALUES (?,?,?,?)",
            (phone or None, event, 1 if success else 0, detail),
        )
        self.conn.commit()
