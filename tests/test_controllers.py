# tests/test_controllers.py
"""
Suite H: feature controllers, their table models and the app state owner.

Intents either succeed (model refreshed, `changed` emitted) or are rejected
(`error(str)` emitted, store untouched).
"""
from __future__ import annotations

import pytest
from PySide6.QtCore import Qt

from conftest import NOW, TODAY, stock_of
from pharmacy_management.app import PharmacyApp
from pharmacy_management.constants import MEDICINE_CATEGORIES
from pharmacy_management.modules.inventory.controller import InventoryController
from pharmacy_management.modules.inventory.form import clean_medicine_payload
from pharmacy_management.modules.inventory.model import MedicinesTableModel
from pharmacy_management.modules.sales.controller import SalesController
from pharmacy_management.modules.sales.model import SaleItemsModel, SalesTableModel

ASPIRIN = {
    "name": "Aspirin 75mg",
    "category": "Heart",
    "manufacturer": "Bayer",
    "price": "12.5",
    "stock": "40",
    "min_stock": "10",
    "expiry_date": "2026-06-30",
    "batch_number": "ASP006",
    "prescription": "yes",
}


# ---------------- medicine form ----------------

def test_clean_medicine_payload_coerces_text():
    payload, errors = clean_medicine_payload(ASPIRIN)
    assert errors == {}
    assert payload["price"] == 12.5
    assert payload["stock"] == 40
    assert payload["prescription"] is True
    assert payload["description"] is None


def test_clean_medicine_payload_errors():
    payload, errors = clean_medicine_payload({**ASPIRIN, "name": "", "stock": "-1", "price": "x", "expiry_date": "soon"})
    assert payload is None
    assert errors == {
        "name": "Medicine name is required",
        "price": "Price must be a number",
        "stock": "Stock cannot be negative",
        "expiry_date": "Expiry date is required (YYYY-MM-DD)",
    }


@pytest.mark.parametrize("price", ["inf", "nan", "-inf"])
def test_clean_medicine_payload_rejects_non_finite_price(price):
    payload, errors = clean_medicine_payload({**ASPIRIN, "price": price})
    assert payload is None
    assert errors == {"price": "Price must be a number"}


def test_partial_payload_checks_only_given_keys():
    payload, errors = clean_medicine_payload({"stock": "7"}, partial=True)
    assert errors == {}
    assert payload == {"stock": 7}


# ---------------- inventory ----------------

def test_add_medicine(qtbot, conn):
    ctl = InventoryController(conn)
    with qtbot.waitSignal(ctl.changed, timeout=1000):
        mid = ctl.add_medicine(ASPIRIN)
    assert mid is not None
    assert ctl.model.rowCount() == 6
    assert ctl.get(mid).batch_number == "ASP006"


def test_add_invalid_medicine(qtbot, conn):
    ctl = InventoryController(conn)
    with qtbot.assertNotEmitted(ctl.changed):
        with qtbot.waitSignal(ctl.error, timeout=1000):
            assert ctl.add_medicine({**ASPIRIN, "min_stock": "lots"}) is None
    assert ctl.last_field_errors == {"min_stock": "Minimum stock must be a whole number"}
    assert ctl.model.rowCount() == 5


def test_update_and_delete_medicine(qtbot, conn, ids):
    ctl = InventoryController(conn)
    with qtbot.waitSignal(ctl.changed, timeout=1000):
        med = ctl.update_medicine(ids["cetirizine"], {"stock": "50"})
    assert med.stock == 50
    with qtbot.waitSignal(ctl.changed, timeout=1000):
        assert ctl.delete_medicine(ids["cetirizine"])
    assert ctl.model.rowCount() == 4


def test_delete_missing_medicine(qtbot, conn):
    ctl = InventoryController(conn)
    with qtbot.waitSignal(ctl.error, timeout=1000) as blocker:
        assert not ctl.delete_medicine(9999)
    assert blocker.args == ["Medicine #9999 does not exist."]


def test_search_keeps_filter_across_refresh(conn):
    ctl = InventoryController(conn)
    ctl.search("", "Antibiotics")
    assert ctl.model.rowCount() == 1
    ctl.add_medicine({**ASPIRIN, "category": "Antibiotics", "name": "Azithromycin 500mg"})
    assert ctl.model.rowCount() == 2


def test_category_choices(conn):
    ctl = InventoryController(conn)
    ctl.add_medicine({**ASPIRIN, "category": "Ayurvedic"})
    choices = ctl.category_choices()
    assert choices[: len(MEDICINE_CATEGORIES)] == list(MEDICINE_CATEGORIES)
    assert choices[-1] == "Ayurvedic"


def test_medicines_table_model(app, conn, ids):
    ctl = InventoryController(conn)
    model: MedicinesTableModel = ctl.model
    status_col = MedicinesTableModel.HEADERS.index("Status")
    row = [model.at(r).medicine_id for r in range(model.rowCount())].index(ids["cetirizine"])
    assert model.data(model.index(row, status_col)) == "Low Stock"
    assert model.data(model.index(row, 4)) == "₹45.00"
    assert model.headerData(status_col, Qt.Horizontal) == "Status"
    assert model.data(model.index(row, 5), Qt.TextAlignmentRole) == int(Qt.AlignRight | Qt.AlignVCenter)


# ---------------- sales ----------------

def test_record_sale(qtbot, conn, ids):
    ctl = SalesController(conn)
    cart = ctl.new_cart()
    para = ctl.medicines.get(ids["paracetamol"])
    cart.add(para)
    cart.add(para)
    cart.add(ctl.medicines.get(ids["cetirizine"]))

    with qtbot.waitSignals([ctl.sale_recorded, ctl.changed], timeout=1000):
        sid = ctl.record_sale(cart, ids["rajesh"], 5, "cash", now=NOW)

    assert sid == "SO20240115-0002"
    assert cart.is_empty()
    assert stock_of(conn, ids["paracetamol"]) == 148
    assert stock_of(conn, ids["cetirizine"]) == 11
    assert ctl.model.rowCount() == 3
    assert ctl.model.at(0).sale_id == sid
    assert ctl.items_model.rowCount() == 2


def test_record_sale_rejects_empty_cart(qtbot, conn):
    ctl = SalesController(conn)
    with qtbot.assertNotEmitted(ctl.sale_recorded):
        with qtbot.waitSignal(ctl.error, timeout=1000) as blocker:
            assert ctl.record_sale(ctl.new_cart()) is None
    assert blocker.args == ["Please add at least one item to the sale."]


@pytest.mark.parametrize("discount", ["nan", "inf", "-inf"])
def test_record_sale_rejects_non_finite_discount(qtbot, conn, ids, discount):
    ctl = SalesController(conn)
    cart = ctl.new_cart()
    cart.add(ctl.medicines.get(ids["paracetamol"]))
    with qtbot.assertNotEmitted(ctl.sale_recorded):
        with qtbot.waitSignal(ctl.error, timeout=1000) as blocker:
            assert ctl.record_sale(cart, None, discount, "cash", now=NOW) is None
    assert blocker.args == ["Discount must be a number."]
    assert stock_of(conn, ids["paracetamol"]) == 150
    assert ctl.model.rowCount() == 2


def test_record_sale_unknown_customer(conn, ids):
    ctl = SalesController(conn)
    cart = ctl.new_cart()
    cart.add(ctl.medicines.get(ids["paracetamol"]))
    assert ctl.record_sale(cart, 9999) is None
    assert ctl.last_error_message == "Customer #9999 does not exist."
    assert not cart.is_empty()


def test_stale_cart_hits_stock_check(conn, ids):
    ctl = SalesController(conn)
    cart = ctl.new_cart()
    insulin = ctl.medicines.get(ids["insulin"])
    for _ in range(8):
        cart.add(insulin)
    # someone else sold some insulin meanwhile
    ctl.medicines.update(ids["insulin"], {"stock": 3})
    assert ctl.record_sale(cart, None, 0, "card", now=NOW) is None
    assert "Not enough stock for Insulin Glargine" in ctl.last_error_message
    assert stock_of(conn, ids["insulin"]) == 3
    assert len(cart) == 1


def test_show_items_and_table_models(app, conn):
    ctl = SalesController(conn)
    model: SalesTableModel = ctl.model
    assert model.data(model.index(0, 0)) == "SO20240115-0001"
    assert model.data(model.index(0, 7)) == "₹91.00"
    assert model.data(model.index(1, 8)) == "UPI"
    ctl.show_items("SO20240115-0001")
    items: SaleItemsModel = ctl.items_model
    assert items.rowCount() == 2
    assert items.data(items.index(0, 1)) == "Paracetamol 500mg"
    assert items.data(items.index(0, 4)) == "₹51.00"


# ---------------- app ----------------

def test_app_refreshes_after_sale(qtbot, conn, ids):
    state = PharmacyApp(conn, today=TODAY)
    assert state.dashboard.kpi_today_revenue == pytest.approx(91.0)
    assert not state.is_authenticated

    cart = state.sales.new_cart()
    cart.add(state.sales.medicines.get(ids["vitamin_d3"]))
    with qtbot.waitSignal(state.data_changed, timeout=1000):
        state.sales.record_sale(cart, None, 0, "upi", now=NOW)

    assert state.dashboard.kpi_today_revenue == pytest.approx(211.0)
    assert state.reports.total_sales == 3
    row = [state.inventory.model.at(r) for r in range(state.inventory.model.rowCount())]
    assert {m.name: m.stock for m in row}["Vitamin D3 60000 IU"] == 199


def test_app_refreshes_after_inventory_change(qtbot, conn, ids):
    state = PharmacyApp(conn, today=TODAY)
    assert state.dashboard.low_stock_count == 2
    with qtbot.waitSignal(state.data_changed, timeout=1000):
        state.inventory.update_medicine(ids["cetirizine"], {"stock": "100"})
    assert state.dashboard.low_stock_count == 1
