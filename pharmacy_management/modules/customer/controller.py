from __future__ import annotations

import sqlite3
from typing import Any, Mapping, Optional

from ..base_module import BaseModule
from .form import clean_customer_payload
from .model import CustomersTableModel
from ...database.repositories.customers_repo import Customer, CustomersRepo, DomainError


class CustomerController(BaseModule):
    """
    Customers controller.

    Key behavior:
      - Customers are create-only; there is no edit or delete intent.
      - search() matches name, phone or email and narrows the table model.
      - stats() reports the stored running purchase totals.
    """

    def __init__(self, conn: sqlite3.Connection, parent=None):
        super().__init__(parent)
        self.conn = conn
        self.repo = CustomersRepo(conn)
        self.model = CustomersTableModel()
        self._term = ""
        self.refresh()

    def refresh(self) -> None:
        self.model.replace(self.repo.search(self._term))

    def search(self, term: str = "") -> list[Customer]:
        self._term = term or ""
        rows = self.repo.search(self._term)
        self.model.replace(rows)
        return rows

    def get(self, customer_id: int) -> Optional[Customer]:
        return self.repo.get(customer_id)

    def stats(self) -> dict:
        return self.repo.purchase_stats()

    def add_customer(self, raw: Mapping[str, Any]) -> Optional[int]:
        payload, errors = clean_customer_payload(raw)
        if errors:
            self._reject_fields(errors)
            return None
        try:
            cid = self.repo.create(**payload)
        except DomainError as e:
            self._reject(str(e))
            return None
        self._ok()
        self.refresh()
        self.changed.emit()
        return cid
