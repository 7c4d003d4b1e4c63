# pharmacy_management/modules/sales/receipt.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Template

from ...constants import APP_NAME
from ...database.repositories.sales_repo import Sale
from ...utils.helpers import fmt_rupees
from ...utils.loggers import get_logger
from .model import WALK_IN

_log = get_logger(__name__)

RECEIPT_TEMPLATE = Path(__file__).resolve().parents[2] / "resources" / "templates" / "sale_receipt.html"

RECEIPT_PDF_CSS = "@page { size: 80mm auto; margin: 4mm; }"


def _load_template() -> Template:
    try:
        content = RECEIPT_TEMPLATE.read_text(encoding="utf-8")
    except OSError as e:
        _log.error("receipt template not readable at %s: %s", RECEIPT_TEMPLATE, e)
        raise FileNotFoundError(f"Receipt template not found at: {RECEIPT_TEMPLATE}") from e
    return Template(content, autoescape=True)


def render_receipt_html(sale: Sale, shop_name: Optional[str] = None) -> str:
    """HTML receipt for a stored sale (also the source for the PDF)."""
    return _load_template().render(
        sale=sale,
        shop_name=shop_name or APP_NAME,
        customer_name=sale.customer_name or WALK_IN,
        money=fmt_rupees,
    )


def write_receipt_pdf(sale: Sale, path: str | Path, shop_name: Optional[str] = None) -> Path:
    """
    Render the receipt to a PDF at `path`. WeasyPrint is imported here so the
    rest of the app runs without its native libraries.
    """
    from weasyprint import CSS, HTML

    out = Path(path)
    HTML(string=render_receipt_html(sale, shop_name)).write_pdf(
        str(out), stylesheets=[CSS(string=RECEIPT_PDF_CSS)]
    )
    _log.info("receipt written: %s -> %s", sale.sale_id, out)
    return out
