# tests/test_medicines_repo.py
"""
Suite B: medicine catalogue.

- list/get/require/search/categories read the live table
- create/update/delete validate and log; missing rows raise MedicineNotFoundError
"""
from __future__ import annotations

import pytest

from pharmacy_management.database.repositories import (
    MedicineNotFoundError,
    MedicinesDomainError,
    MedicinesRepo,
)


def _new(repo: MedicinesRepo, **over) -> int:
    data = dict(
        name="Aspirin 75mg",
        category="Heart",
        manufacturer="Bayer",
        price=12.0,
        stock=40,
        min_stock=10,
        expiry_date="2026-06-30",
        batch_number="ASP006",
    )
    data.update(over)
    return repo.create(**data)


def test_list_and_get(conn, ids):
    repo = MedicinesRepo(conn)
    meds = repo.list_medicines()
    assert [m.name for m in meds][:2] == ["Paracetamol 500mg", "Amoxicillin 250mg"]
    amox = repo.get(ids["amoxicillin"])
    assert amox.prescription is True
    assert amox.price == pytest.approx(85.0)
    assert repo.get(9999) is None


def test_require_missing_raises(conn):
    with pytest.raises(MedicineNotFoundError) as ei:
        MedicinesRepo(conn).require(9999)
    assert ei.value.medicine_id == 9999


def test_low_stock_flags(conn, ids):
    repo = MedicinesRepo(conn)
    cet = repo.get(ids["cetirizine"])
    assert cet.stock == 12 and cet.min_stock == 20
    assert cet.is_low_stock
    assert not repo.get(ids["paracetamol"]).is_low_stock


@pytest.mark.parametrize("stock,low", [(10, True), (11, False), (9, True)])
def test_low_stock_boundary(conn, stock, low):
    repo = MedicinesRepo(conn)
    med = repo.get(_new(repo, stock=stock, min_stock=10))
    assert med.is_low_stock is low
    assert not med.is_out_of_stock


def test_out_of_stock(conn, ids):
    repo = MedicinesRepo(conn)
    med = repo.update(ids["insulin"], {"stock": 0})
    assert med.is_out_of_stock
    assert med.is_low_stock


def test_search_by_name_or_manufacturer(conn):
    repo = MedicinesRepo(conn)
    assert [m.name for m in repo.search("para")] == ["Paracetamol 500mg"]
    assert [m.name for m in repo.search("SANOFI")] == ["Insulin Glargine"]
    assert len(repo.search("")) == 5


def test_search_with_category(conn):
    repo = MedicinesRepo(conn)
    assert [m.name for m in repo.search("", "Vitamins")] == ["Vitamin D3 60000 IU"]
    assert repo.search("para", "Vitamins") == []


def test_in_stock_skips_empty_shelves(conn, ids):
    repo = MedicinesRepo(conn)
    repo.update(ids["insulin"], {"stock": 0})
    names = [m.name for m in repo.in_stock("")]
    assert "Insulin Glargine" not in names
    assert len(names) == 4


def test_categories_in_first_seen_order(conn):
    assert MedicinesRepo(conn).categories() == [
        "Pain Relief", "Antibiotics", "Antihistamine", "Vitamins", "Diabetes",
    ]


def test_create_then_get(conn):
    repo = MedicinesRepo(conn)
    mid = _new(repo, description="  ", dosage="1 tablet daily")
    m = repo.get(mid)
    assert m.name == "Aspirin 75mg"
    assert m.description is None
    assert m.dosage == "1 tablet daily"
    assert m.prescription is False


def test_update_trims_optional_text(conn, ids):
    repo = MedicinesRepo(conn)
    m = repo.update(ids["paracetamol"], {"description": "  Fever and pain  ", "dosage": "   "})
    assert m.description == "Fever and pain"
    assert m.dosage is None


@pytest.mark.parametrize("over", [
    {"name": "  "},
    {"price": -1},
    {"price": float("nan")},
    {"stock": -5},
    {"min_stock": -1},
])
def test_create_rejects_bad_values(conn, over):
    with pytest.raises(MedicinesDomainError):
        _new(MedicinesRepo(conn), **over)


def test_partial_update_only_touches_given_fields(conn, ids):
    repo = MedicinesRepo(conn)
    before = repo.get(ids["paracetamol"])
    after = repo.update(ids["paracetamol"], {"stock": 99, "prescription": True})
    assert after.stock == 99
    assert after.prescription is True
    assert after.name == before.name
    assert after.price == before.price


def test_update_unknown_field_rejected(conn, ids):
    with pytest.raises(MedicinesDomainError):
        MedicinesRepo(conn).update(ids["paracetamol"], {"medicine_id": 7})


def test_update_and_delete_missing(conn):
    repo = MedicinesRepo(conn)
    with pytest.raises(MedicineNotFoundError):
        repo.update(9999, {"stock": 1})
    with pytest.raises(MedicineNotFoundError):
        repo.delete(9999)


def test_delete_keeps_sale_history(conn, ids):
    repo = MedicinesRepo(conn)
    repo.delete(ids["cetirizine"])
    assert repo.get(ids["cetirizine"]) is None
    names = [r[0] for r in conn.execute(
        "SELECT medicine_name FROM sale_items WHERE sale_id='SO20240115-0001' ORDER BY item_id"
    )]
    assert names == ["Paracetamol 500mg", "Cetirizine 10mg"]
