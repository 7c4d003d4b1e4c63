# pharmacy_management/modules/inventory/controller.py
from __future__ import annotations

import sqlite3
from typing import Any, Mapping, Optional

from ..base_module import BaseModule
from ...constants import MEDICINE_CATEGORIES
from .form import clean_medicine_payload
from .model import MedicinesTableModel
from ...database.repositories.medicines_repo import (
    DomainError,
    Medicine,
    MedicinesRepo,
)


class InventoryController(BaseModule):
    """
    Medicine catalogue intents: add, edit, delete, search.

    Every successful mutation reloads the table model and emits `changed`.
    Rejected intents emit `error(str)` and leave the store untouched.
    """

    def __init__(self, conn: sqlite3.Connection, parent=None):
        super().__init__(parent)
        self.conn = conn
        self.repo = MedicinesRepo(conn)
        self.model = MedicinesTableModel()
        self._term = ""
        self._category: Optional[str] = None
        self.refresh()

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def refresh(self) -> None:
        self.model.replace(self.repo.search(self._term, self._category))

    def search(self, term: str = "", category: Optional[str] = None) -> list[Medicine]:
        """Filter the table by name/manufacturer and (optionally) category."""
        self._term = term or ""
        self._category = category or None
        rows = self.repo.search(self._term, self._category)
        self.model.replace(rows)
        return rows

    def categories(self) -> list[str]:
        return self.repo.categories()

    def category_choices(self) -> list[str]:
        """Form dropdown: the standard categories, then any custom ones in use."""
        extra = [c for c in self.repo.categories() if c not in MEDICINE_CATEGORIES]
        return [*MEDICINE_CATEGORIES, *extra]

    def get(self, medicine_id: int) -> Optional[Medicine]:
        return self.repo.get(medicine_id)

    # ------------------------------------------------------------------ #
    # Intents
    # ------------------------------------------------------------------ #

    def add_medicine(self, raw: Mapping[str, Any]) -> Optional[int]:
        payload, errors = clean_medicine_payload(raw)
        if errors:
            self._reject_fields(errors)
            return None
        try:
            mid = self.repo.create(**payload)
        except (DomainError, sqlite3.IntegrityError) as e:
            self._reject(str(e))
            return None
        self._ok()
        self._after_write()
        return mid

    def update_medicine(self, medicine_id: int, raw: Mapping[str, Any]) -> Optional[Medicine]:
        """Partial edit: only the fields present in `raw` change."""
        payload, errors = clean_medicine_payload(raw, partial=True)
        if errors:
            self._reject_fields(errors)
            return None
        try:
            med = self.repo.update(medicine_id, payload)
        except (DomainError, sqlite3.IntegrityError) as e:
            self._reject(str(e))
            return None
        self._ok()
        self._after_write()
        return med

    def delete_medicine(self, medicine_id: int) -> bool:
        try:
            self.repo.delete(medicine_id)
        except DomainError as e:
            self._reject(str(e))
            return False
        self._ok()
        self._after_write()
        return True

    # ------------------------------------------------------------------ #

    def _after_write(self) -> None:
        self.refresh()
        self.changed.emit()
