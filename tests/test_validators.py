# tests/test_validators.py
from datetime import date

import pytest

from pharmacy_management.utils.helpers import fmt_money, fmt_phone, fmt_rupees, to_date
from pharmacy_management.utils.validators import (
    is_valid_customer_phone,
    is_valid_email,
    is_valid_mobile,
    is_valid_pincode,
    non_empty,
    normalize_mobile,
    try_parse_float,
    try_parse_int,
    try_parse_iso_date,
)


@pytest.mark.parametrize("text,ok", [
    ("9876543210", True),
    ("6000000000", True),
    ("5876543210", False),   # must start with 6-9
    ("987654321", False),    # 9 digits
    ("98765432101", False),  # 11 digits
    ("", False),
])
def test_is_valid_mobile(text, ok):
    assert is_valid_mobile(text) is ok


def test_normalize_mobile_strips_and_truncates():
    assert normalize_mobile("+91 98765-43210") == "9198765432"
    assert normalize_mobile("98765 43210 99") == "9876543210"
    assert normalize_mobile(None) == ""


def test_customer_phone_accepts_country_code():
    assert is_valid_customer_phone("+91 9876543210")
    assert is_valid_customer_phone("9876543210")
    assert not is_valid_customer_phone("+44 7911123456")


@pytest.mark.parametrize("text,ok", [
    ("a@b.co", True),
    ("rajesh.kumar@email.com", True),
    ("no-at-sign.com", False),
    ("two@@signs.com", False),
    ("space @x.com", False),
    ("x@nodot", False),
])
def test_is_valid_email(text, ok):
    assert is_valid_email(text) is ok


def test_is_valid_pincode():
    assert is_valid_pincode("110001")
    assert not is_valid_pincode("11001")
    assert not is_valid_pincode("11000a")


def test_numeric_helpers():
    assert non_empty("  x ")
    assert not non_empty("   ")
    assert try_parse_float("0.5") == (True, 0.5)
    assert try_parse_float("abc") == (False, None)
    assert try_parse_int(" 12 ") == (True, 12)
    assert try_parse_int("1.5") == (False, None)
    assert try_parse_int(True) == (False, None)
    assert try_parse_int(3.0) == (True, 3)


def test_dates():
    assert try_parse_iso_date("2025-12-15") == (True, date(2025, 12, 15))
    assert try_parse_iso_date("15/12/2025") == (False, None)
    assert to_date("2024-01-15") == date(2024, 1, 15)
    assert to_date(None) is None


def test_money_and_phone_formatting():
    assert fmt_money(1234.5) == "1,234.50"
    assert fmt_money("oops", sentinel="N/A") == "N/A"
    with pytest.raises(ValueError):
        fmt_money("oops", strict=True)
    assert fmt_rupees(91) == "₹91.00"
    assert fmt_phone("9876543210") == "+91 98765 43210"
    assert fmt_phone("+91 9876543210") == "+91 9876543210"
