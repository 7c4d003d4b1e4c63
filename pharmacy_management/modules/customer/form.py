from __future__ import annotations

import re
from typing import Any, Mapping

from ...utils.validators import is_valid_customer_phone, is_valid_email, non_empty


def _collapse_spaces(line: str) -> str:
    # Collapse runs of whitespace inside a line to a single space
    return re.sub(r"\s+", " ", line).strip()


def _norm_multiline(text: str | None) -> str:
    """
    Normalize multi-line text:
      - strip each line
      - collapse runs of spaces on each line
      - remove leading/trailing blank lines
    """
    if not text:
        return ""
    lines = [_collapse_spaces(l) for l in str(text).splitlines()]
    while lines and lines[0] == "":
        lines.pop(0)
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines).strip()


def clean_customer_payload(raw: Mapping[str, Any]) -> tuple[dict | None, dict[str, str]]:
    """
    Customer create form.

    Required: name, phone. Email is optional but must look like an address
    when given. Returns (payload, errors); payload is None on any error.
    """
    errors: dict[str, str] = {}

    name = _collapse_spaces(str(raw.get("name") or ""))
    phone = _collapse_spaces(str(raw.get("phone") or ""))
    email = str(raw.get("email") or "").strip()
    address = _norm_multiline(raw.get("address"))

    if not non_empty(name):
        errors["name"] = "Customer name is required"
    if not non_empty(phone):
        errors["phone"] = "Phone number is required"
    elif not is_valid_customer_phone(phone):
        errors["phone"] = "Please enter a valid 10-digit mobile number"
    if email and not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"

    if errors:
        return None, errors
    return {
        "name": name,
        "phone": phone,
        "email": email or None,
        "address": address or None,
    }, {}
