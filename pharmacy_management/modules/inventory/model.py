# pharmacy_management/modules/inventory/model.py
from __future__ import annotations

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...database.repositories.medicines_repo import Medicine
from ...utils.helpers import fmt_rupees

IN_STOCK = "In Stock"
LOW_STOCK = "Low Stock"
OUT_OF_STOCK = "Out of Stock"


def stock_status(med: Medicine) -> str:
    if med.is_out_of_stock:
        return OUT_OF_STOCK
    if med.is_low_stock:
        return LOW_STOCK
    return IN_STOCK


class MedicinesTableModel(QAbstractTableModel):
    HEADERS = [
        "ID", "Name", "Category", "Manufacturer", "Price",
        "Stock", "Min Stock", "Expiry", "Batch", "Rx", "Status",
    ]
    # Numeric columns are right-aligned
    _NUMERIC = {0, 4, 5, 6}

    def __init__(self, rows: list[Medicine] | None = None):
        super().__init__()
        self._rows: list[Medicine] = list(rows or [])

    # Qt model basics
    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        m = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                m.medicine_id,
                m.name,
                m.category,
                m.manufacturer,
                fmt_rupees(m.price),
                m.stock,
                m.min_stock,
                m.expiry_date,
                m.batch_number,
                "Yes" if m.prescription else "",
                stock_status(m),
            ][c]
        if role == Qt.TextAlignmentRole:
            if c in self._NUMERIC:
                return int(Qt.AlignRight | Qt.AlignVCenter)
            return int(Qt.AlignLeft | Qt.AlignVCenter)
        if role == Qt.ToolTipRole and c == 1 and m.description:
            return m.description
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Medicine:
        return self._rows[row]

    def replace(self, rows: list[Medicine]):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
