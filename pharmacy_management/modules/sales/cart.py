# pharmacy_management/modules/sales/cart.py
"""
Point-of-sale cart.

Lines are keyed by medicine and kept in the order they were first added.
Quantities never exceed the stock the medicine had when it was picked; the
authoritative stock check happens again in SalesRepo.create_sale().
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...constants import PAYMENT_METHODS
from ...database.repositories.customers_repo import Customer
from ...database.repositories.medicines_repo import DomainError, Medicine, MedicinesRepo
from ...database.repositories.sales_repo import Sale, SaleItem
from ...utils.validators import try_parse_float


class CartError(DomainError):
    pass


@dataclass
class CartLine:
    medicine: Medicine
    quantity: int

    @property
    def price(self) -> float:
        return float(self.medicine.price)

    @property
    def total(self) -> float:
        return round(self.price * self.quantity, 2)

    def as_item(self) -> SaleItem:
        return SaleItem(
            medicine_id=int(self.medicine.medicine_id),
            medicine_name=self.medicine.name,
            quantity=self.quantity,
            price=self.price,
            total=self.total,
        )


class SaleCart:
    def __init__(self, medicines: Optional[MedicinesRepo] = None):
        self._medicines = medicines
        self._lines: dict[int, CartLine] = {}

    # ---- picking ----------------------------------------------------------

    def search_medicines(self, term: str = "") -> list[Medicine]:
        """Sellable medicines (stock > 0) whose name contains `term`."""
        if self._medicines is None:
            raise CartError("Cart has no medicine catalogue attached.")
        return self._medicines.in_stock(term)

    def add(self, medicine: Medicine) -> bool:
        """
        Add one unit. Returns False when nothing changed (out of stock, or the
        line already holds every unit in stock).
        """
        mid = int(medicine.medicine_id)
        line = self._lines.get(mid)
        if line is None:
            if medicine.stock <= 0:
                return False
            self._lines[mid] = CartLine(medicine, 1)
            return True
        if line.quantity < line.medicine.stock:
            line.quantity += 1
            return True
        return False

    def set_quantity(self, medicine_id: int, qty: int) -> bool:
        """
        qty <= 0 removes the line; qty above stock is ignored.
        Returns True if the cart changed.
        """
        line = self._lines.get(int(medicine_id))
        if line is None:
            return False
        if qty <= 0:
            del self._lines[int(medicine_id)]
            return True
        if qty > line.medicine.stock:
            return False
        line.quantity = int(qty)
        return True

    def remove(self, medicine_id: int) -> bool:
        return self._lines.pop(int(medicine_id), None) is not None

    def clear(self) -> None:
        self._lines.clear()

    # ---- totals -----------------------------------------------------------

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def quantity_of(self, medicine_id: int) -> int:
        line = self._lines.get(int(medicine_id))
        return line.quantity if line else 0

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def subtotal(self) -> float:
        return round(sum(l.total for l in self._lines.values()), 2)

    def final_total(self, discount: float = 0.0) -> float:
        return round(self.subtotal - float(discount or 0.0), 2)

    def items(self) -> list[SaleItem]:
        return [l.as_item() for l in self._lines.values()]

    # ---- checkout ---------------------------------------------------------

    def _clean_discount(self, discount) -> float:
        if discount in (None, ""):
            return 0.0
        ok, val = try_parse_float(discount)
        if not ok:
            raise CartError("Discount must be a number.")
        if val < 0:
            raise CartError("Discount cannot be negative.")
        if val > self.subtotal:
            raise CartError("Discount cannot exceed the subtotal.")
        return round(val, 2)

    def build_sale(
        self,
        customer: Optional[Customer],
        discount=0.0,
        payment_method: str = "cash",
        now: Optional[datetime] = None,
    ) -> Sale:
        """
        Freeze the cart into a Sale stamped with `now` (defaults to the
        current time). The sale_id is assigned when the sale is stored.
        """
        if self.is_empty():
            raise CartError("Please add at least one item to the sale.")
        if payment_method not in PAYMENT_METHODS:
            raise CartError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}.")
        disc = self._clean_discount(discount)
        stamp = now or datetime.now()
        total = self.subtotal
        return Sale(
            sale_id=None,
            customer_id=customer.customer_id if customer else None,
            customer_name=customer.name if customer else None,
            items=self.items(),
            total=total,
            discount=disc,
            final_total=round(total - disc, 2),
            payment_method=payment_method,
            date=stamp.date().isoformat(),
            time=stamp.strftime("%H:%M"),
        )
