from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...database.repositories.sales_repo import Sale, SaleItem
from ...utils.helpers import fmt_rupees

WALK_IN = "Walk-in Customer"


class SalesTableModel(QAbstractTableModel):
    HEADERS = ["Sale ID", "Date", "Time", "Customer", "Items", "Total", "Discount", "Final Total", "Payment"]

    def __init__(self, rows: list[Sale] | None = None):
        super().__init__()
        self._rows: list[Sale] = list(rows or [])

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        s = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                s.sale_id,
                s.date,
                s.time,
                s.customer_name or WALK_IN,
                len(s.items),
                fmt_rupees(s.total),
                fmt_rupees(s.discount),
                fmt_rupees(s.final_total),
                s.payment_method.upper(),
            ][c]
        if role == Qt.TextAlignmentRole and c in (4, 5, 6, 7):
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Sale:
        return self._rows[row]

    def replace(self, rows: list[Sale]):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()


class SaleItemsModel(QAbstractTableModel):
    """Lines of one sale, or of the cart being composed."""

    HEADERS = ["#", "Medicine", "Qty", "Price", "Line Total"]

    def __init__(self, rows: list[SaleItem] | None = None):
        super().__init__()
        self._rows: list[SaleItem] = list(rows or [])

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        it = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                index.row() + 1,
                it.medicine_name,
                it.quantity,
                fmt_rupees(it.price),
                fmt_rupees(it.total),
            ][c]
        if role == Qt.TextAlignmentRole and c != 1:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> SaleItem:
        return self._rows[row]

    def replace(self, rows: list[SaleItem]):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
