# utils/validators.py
import math
import re
from datetime import date

_MOBILE_RX = re.compile(r"^[6-9]\d{9}$")
_EMAIL_RX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PINCODE_RX = re.compile(r"^\d{6}$")


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed (or gave nan/inf) and value is None.
    """
    try:
        val = float(x)
    except Exception:
        return False, None
    if not math.isfinite(val):
        return False, None
    return True, val


def try_parse_int(x):
    """
    Best-effort parse to int. Accepts ints and integral strings ("18", " 42 ").
    Floats with a fractional part are rejected.

    Returns:
        (ok: bool, value: int|None)
    """
    if isinstance(x, bool):
        return False, None
    if isinstance(x, int):
        return True, x
    if isinstance(x, float):
        return (True, int(x)) if x.is_integer() else (False, None)
    try:
        return True, int(str(x).strip())
    except Exception:
        return False, None


# ---- Contact details ----

def digits_only(text: str, max_digits: int | None = None) -> str:
    """Strip every non-digit; optionally keep only the first `max_digits`."""
    digits = re.sub(r"\D", "", text or "")
    return digits if max_digits is None else digits[:max_digits]


def normalize_mobile(text: str, max_digits: int = 10) -> str:
    return digits_only(text, max_digits)


def is_valid_mobile(text: str) -> bool:
    """Indian mobile number: 10 digits, first digit 6-9."""
    return bool(_MOBILE_RX.match(text or ""))


def is_valid_customer_phone(text: str) -> bool:
    """
    Customer phones are stored as typed (e.g. '+91 9876543210').
    Valid when the digits, minus an optional 91 country code, form a mobile number.
    """
    digits = re.sub(r"\D", "", text or "")
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    return is_valid_mobile(digits)


def is_valid_email(text: str) -> bool:
    return bool(_EMAIL_RX.match((text or "").strip()))


def is_valid_pincode(text: str) -> bool:
    return bool(_PINCODE_RX.match((text or "").strip()))


# ---- Dates ----

def try_parse_iso_date(x):
    """
    Parse 'YYYY-MM-DD' (or pass a date through).

    Returns:
        (ok: bool, value: date|None)
    """
    if isinstance(x, date):
        return True, x
    try:
        return True, date.fromisoformat(str(x).strip())
    except Exception:
        return False, None
