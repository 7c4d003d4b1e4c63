# tests/test_receipt.py
"""
Suite I: sale receipts rendered from the HTML template.
"""
from __future__ import annotations

import pytest

from pharmacy_management.modules.sales.controller import SalesController
from pharmacy_management.modules.sales.receipt import render_receipt_html


def test_receipt_lists_lines_and_totals(conn):
    sale = SalesController(conn).get_sale("SO20240115-0001")
    html = render_receipt_html(sale, shop_name="Desai Medicals")
    assert "Desai Medicals" in html
    assert "Receipt SO20240115-0001" in html
    assert "Rajesh Kumar" in html
    assert "Paracetamol 500mg" in html
    assert "₹51.00" in html
    assert "-₹5.00" in html
    assert "₹91.00" in html
    assert "CASH" in html


def test_receipt_for_walk_in_without_discount(conn):
    ctl = SalesController(conn)
    sale = ctl.get_sale("SO20240114-0001")
    sale.customer_id = None
    sale.customer_name = None
    html = render_receipt_html(sale)
    assert "Walk-in Customer" in html
    assert "Discount" not in html
    assert "MediStore" in html


def test_receipt_escapes_names(conn):
    sale = SalesController(conn).get_sale("SO20240114-0001")
    sale.customer_name = "<b>Priya</b>"
    assert "&lt;b&gt;Priya&lt;/b&gt;" in render_receipt_html(sale)


def test_receipt_for_unknown_sale(qtbot, conn):
    ctl = SalesController(conn)
    with qtbot.waitSignal(ctl.error, timeout=1000):
        assert ctl.receipt_html("SO19990101-0001") is None


def test_pdf_export_for_unknown_sale(qtbot, conn, tmp_path):
    ctl = SalesController(conn)
    with qtbot.waitSignal(ctl.error, timeout=1000) as blocker:
        assert ctl.export_receipt_pdf("SO19990101-0001", tmp_path / "r.pdf") is None
    assert blocker.args == ["Sale SO19990101-0001 does not exist."]
    assert not (tmp_path / "r.pdf").exists()


def test_pdf_export_writes_file(conn, tmp_path):
    try:
        import weasyprint  # noqa: F401
    except (ImportError, OSError) as e:
        pytest.skip(f"weasyprint unavailable: {e}")
    out = SalesController(conn).export_receipt_pdf("SO20240115-0001", tmp_path / "receipt.pdf")
    assert out == tmp_path / "receipt.pdf"
    assert out.read_bytes().startswith(b"%PDF")
