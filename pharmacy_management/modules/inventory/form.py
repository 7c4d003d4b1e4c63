# pharmacy_management/modules/inventory/form.py
"""
Medicine add/edit form validation.

The view collects raw text (everything arrives as strings from line edits)
and hands it to clean_medicine_payload(); a non-empty error dict blocks the
write and is shown inline next to each field.
"""
from __future__ import annotations

from typing import Any, Mapping

from ...utils.validators import (
    non_empty,
    try_parse_float,
    try_parse_int,
    try_parse_iso_date,
)

_REQUIRED_TEXT = {
    "name": "Medicine name is required",
    "category": "Category is required",
    "manufacturer": "Manufacturer is required",
    "batch_number": "Batch number is required",
}


def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)


def clean_medicine_payload(
    raw: Mapping[str, Any], *, partial: bool = False
) -> tuple[dict | None, dict[str, str]]:
    """
    Validate and coerce a medicine form.

    Returns (payload, errors). payload is None whenever errors is non-empty.
    With partial=True only the keys present in `raw` are checked (edit form
    sending just the changed fields).
    """
    errors: dict[str, str] = {}
    out: dict[str, Any] = {}

    def wanted(key: str) -> bool:
        return (not partial) or key in raw

    for key, msg in _REQUIRED_TEXT.items():
        if not wanted(key):
            continue
        if not non_empty(raw.get(key)):
            errors[key] = msg
        else:
            out[key] = str(raw[key]).strip()

    if wanted("price"):
        ok, val = try_parse_float(raw.get("price"))
        if not ok:
            errors["price"] = "Price must be a number"
        elif val < 0:
            errors["price"] = "Price cannot be negative"
        else:
            out["price"] = round(val, 2)

    for key, label in (("stock", "Stock"), ("min_stock", "Minimum stock")):
        if not wanted(key):
            continue
        ok, val = try_parse_int(raw.get(key))
        if not ok:
            errors[key] = f"{label} must be a whole number"
        elif val < 0:
            errors[key] = f"{label} cannot be negative"
        else:
            out[key] = val

    if wanted("expiry_date"):
        ok, d = try_parse_iso_date(raw.get("expiry_date"))
        if not ok:
            errors["expiry_date"] = "Expiry date is required (YYYY-MM-DD)"
        else:
            out["expiry_date"] = d.isoformat()

    for key in ("description", "dosage"):
        if wanted(key):
            text = str(raw.get(key) or "").strip()
            out[key] = text or None

    if wanted("prescription"):
        out["prescription"] = _as_bool(raw.get("prescription", False))

    if errors:
        return None, errors
    return out, {}
