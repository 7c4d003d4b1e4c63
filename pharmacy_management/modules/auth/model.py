# pharmacy_management/modules/auth/model.py
"""
Onboarding data and its validation rules.

Each validate_* function returns a {field: message} dict; empty means valid.
Field names match the attribute names of the dataclasses below so a view can
put each message next to its input.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ...constants import LICENSE_MIN_ISSUED_YEAR, MAX_AGE, MIN_AGE
from ...utils.validators import (
    is_valid_email,
    is_valid_pincode,
    non_empty,
    try_parse_int,
    try_parse_iso_date,
)


class AuthStep(str, Enum):
    LOGIN = "login"
    OTP = "otp"
    REGISTRATION = "registration"
    PHARMACIST_INFO = "pharmacist_info"
    AUTHENTICATED = "authenticated"


# Registration wizard pages
PERSONAL, SHOP, ADDRESS = 1, 2, 3
REGISTRATION_STEPS = 3


@dataclass
class RegistrationData:
    # page 1: personal
    name: str = ""
    age: str = ""
    email: str = ""
    # page 2: shop
    shop_name: str = ""
    shop_license_number: str = ""
    shop_owner_name: str = ""
    # page 3: address
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""

    def as_record(self) -> dict:
        """Trimmed values ready for AuthRepo.save_registration()."""
        d = {k: (str(v).strip() if v is not None else "") for k, v in asdict(self).items()}
        _, d["age"] = try_parse_int(d["age"])
        return d


@dataclass
class PharmacistData:
    pharmacist_name: str = ""
    license_number: str = ""
    issued_year: str = ""
    expiration_date: str = ""
    issued_organization: str = ""

    def as_record(self) -> dict:
        d = {k: (str(v).strip() if v is not None else "") for k, v in asdict(self).items()}
        _, d["issued_year"] = try_parse_int(d["issued_year"])
        return d


def validate_registration_step(page: int, data: RegistrationData) -> dict[str, str]:
    errors: dict[str, str] = {}

    if page == PERSONAL:
        if not non_empty(data.name):
            errors["name"] = "Name is required"
        ok, age = try_parse_int(data.age)
        if not ok or age < MIN_AGE or age > MAX_AGE:
            errors["age"] = f"Please enter a valid age ({MIN_AGE}-{MAX_AGE})"
        if not non_empty(data.email):
            errors["email"] = "Email is required"
        elif not is_valid_email(data.email):
            errors["email"] = "Please enter a valid email address"

    elif page == SHOP:
        if not non_empty(data.shop_name):
            errors["shop_name"] = "Shop name is required"
        if not non_empty(data.shop_license_number):
            errors["shop_license_number"] = "License number is required"
        if not non_empty(data.shop_owner_name):
            errors["shop_owner_name"] = "Shop owner name is required"

    elif page == ADDRESS:
        if not non_empty(data.address):
            errors["address"] = "Address is required"
        if not non_empty(data.city):
            errors["city"] = "City is required"
        if not non_empty(data.state):
            errors["state"] = "State is required"
        if not is_valid_pincode(data.pincode):
            errors["pincode"] = "Please enter a valid 6-digit pincode"

    else:
        raise ValueError(f"Unknown registration page: {page}")

    return errors


def validate_pharmacist(data: PharmacistData, today: Optional[date] = None) -> dict[str, str]:
    today = today or date.today()
    errors: dict[str, str] = {}

    if not non_empty(data.pharmacist_name):
        errors["pharmacist_name"] = "Pharmacist name is required"
    if not non_empty(data.license_number):
        errors["license_number"] = "License number is required"

    if not non_empty(data.issued_year):
        errors["issued_year"] = "Issued year is required"
    else:
        ok, year = try_parse_int(data.issued_year)
        if not ok or year < LICENSE_MIN_ISSUED_YEAR or year > today.year:
            errors["issued_year"] = (
                f"Year must be between {LICENSE_MIN_ISSUED_YEAR} and {today.year}"
            )

    if not non_empty(data.expiration_date):
        errors["expiration_date"] = "Expiration date is required"
    else:
        ok, exp = try_parse_iso_date(data.expiration_date)
        if not ok:
            errors["expiration_date"] = "Expiration date must be YYYY-MM-DD"
        elif exp <= today:
            errors["expiration_date"] = "License must not be expired"

    if not non_empty(data.issued_organization):
        errors["issued_organization"] = "Issuing organization is required"

    return errors
