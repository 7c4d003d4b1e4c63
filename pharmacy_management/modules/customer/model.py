from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...database.repositories.customers_repo import Customer
from ...utils.helpers import fmt_phone, fmt_rupees


class CustomersTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Name", "Phone", "Email", "Address", "Total Purchases", "Last Visit"]

    def __init__(self, rows: list[Customer] | None = None):
        super().__init__()
        self._rows: list[Customer] = list(rows or [])

    # --- Qt model basics ----------------------------------------------------

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        c = self._rows[index.row()]
        col = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                c.customer_id,
                c.name,
                fmt_phone(c.phone),
                c.email or "",
                c.address or "",
                fmt_rupees(c.total_purchases),
                c.last_visit or "",
            ][col]
        if role == Qt.TextAlignmentRole and col in (0, 5):
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    # --- Helpers ------------------------------------------------------------

    def at(self, row: int) -> Customer:
        return self._rows[row]

    def replace(self, rows: list[Customer]):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
