from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Signal

from ..base_module import BaseModule
from .cart import SaleCart
from .model import SaleItemsModel, SalesTableModel
from .receipt import render_receipt_html, write_receipt_pdf
from ...database.repositories.customers_repo import CustomersRepo
from ...database.repositories.medicines_repo import DomainError, MedicinesRepo
from ...database.repositories.sales_repo import Sale, SalesRepo


class SalesController(BaseModule):
    """
    Sales history + checkout.

      - new_cart() hands out a cart bound to the live medicine catalogue.
      - record_sale() freezes the cart into a Sale and stores it; stock is
        decremented in the same transaction (see SalesRepo.create_sale).
      - On success the cart is emptied, `sale_recorded(sale_id)` then
        `changed` are emitted.
    """

    sale_recorded = Signal(str)

    def __init__(self, conn: sqlite3.Connection, parent=None):
        super().__init__(parent)
        self.conn = conn
        self.repo = SalesRepo(conn)
        self.medicines = MedicinesRepo(conn)
        self.customers = CustomersRepo(conn)
        self.model = SalesTableModel()
        self.items_model = SaleItemsModel()
        self.refresh()

    def refresh(self) -> None:
        self.model.replace(self.repo.list_sales())

    def new_cart(self) -> SaleCart:
        return SaleCart(self.medicines)

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        return self.repo.get_sale(sale_id)

    def show_items(self, sale_id: str) -> None:
        """Point the items model at one stored sale."""
        self.items_model.replace(self.repo.list_items(sale_id))

    def receipt_html(self, sale_id: str) -> Optional[str]:
        sale = self.repo.get_sale(sale_id)
        if sale is None:
            self._reject(f"Sale {sale_id} does not exist.")
            return None
        return render_receipt_html(sale)

    def export_receipt_pdf(self, sale_id: str, path: str | Path) -> Optional[Path]:
        sale = self.repo.get_sale(sale_id)
        if sale is None:
            self._reject(f"Sale {sale_id} does not exist.")
            return None
        return write_receipt_pdf(sale, path)

    def record_sale(
        self,
        cart: SaleCart,
        customer_id: Optional[int] = None,
        discount=0.0,
        payment_method: str = "cash",
        now: Optional[datetime] = None,
    ) -> Optional[str]:
        customer = None
        if customer_id is not None:
            customer = self.customers.get(int(customer_id))
            if customer is None:
                self._reject(f"Customer #{customer_id} does not exist.")
                return None
        try:
            sale = cart.build_sale(customer, discount, payment_method, now=now)
            sid = self.repo.create_sale(sale)
        except DomainError as e:
            self._reject(str(e))
            return None

        self._ok()
        cart.clear()
        self.refresh()
        self.items_model.replace(sale.items)
        self.sale_recorded.emit(sid)
        self.changed.emit()
        return sid
