# pharmacy_management/modules/auth/controller.py
from __future__ import annotations

import math
import sqlite3
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from PySide6.QtCore import QObject, Signal

from .model import (
    ADDRESS,
    PERSONAL,
    REGISTRATION_STEPS,
    AuthStep,
    PharmacistData,
    RegistrationData,
    validate_pharmacist,
    validate_registration_step,
)
from ...config import OTP_CODE
from ...constants import OTP_LENGTH, OTP_RESEND_SECONDS
from ...database.repositories.auth_repo import AuthRepo
from ...utils.loggers import get_logger
from ...utils.validators import digits_only, is_valid_mobile, normalize_mobile

_log = get_logger(__name__)


class AuthFlowController(QObject):
    """
    Phone → OTP → registration (3 pages) → pharmacist licence → authenticated.

    Public attrs (set after each intent):
      - step: AuthStep
      - phone: normalized 10-digit mobile number ("" until submitted)
      - otp_input: digits entered on the OTP page (cleared on a wrong code)
      - registration_page: 1..3
      - field_errors: {field: message} from the last rejected form
      - last_error_code / last_error_message: None after a successful intent

    Every transition and every failure is appended to auth_events.
    """

    step_changed = Signal(str)
    error = Signal(str)
    authenticated = Signal(dict)

    def __init__(self, conn: sqlite3.Connection, parent=None, *, otp_code: str = OTP_CODE) -> None:
        super().__init__(parent)
        self.conn = conn
        self.repo = AuthRepo(conn)
        self._otp_code = otp_code

        self.step = AuthStep.LOGIN
        self.phone = ""
        self.otp_input = ""
        self.otp_sent_at: Optional[datetime] = None
        self.registration = RegistrationData()
        self.registration_page = PERSONAL
        self.pharmacist = PharmacistData()
        self.account: Optional[dict] = None

        self.field_errors: dict[str, str] = {}
        self.last_error_code: Optional[str] = None
        self.last_error_message: Optional[str] = None

    # ----------------------------- Login -----------------------------

    def submit_phone(self, phone: str, now: Optional[datetime] = None) -> bool:
        if not self._require(AuthStep.LOGIN):
            return False
        self._reset_last_error()
        self.phone = normalize_mobile(phone)
        if not is_valid_mobile(self.phone):
            self._fail("invalid_phone", "Please enter a valid 10-digit mobile number", event="phone_submitted")
            return False
        self._start_cooldown(now)
        self.repo.insert_auth_event(self.phone, "otp_sent", True)
        self._go(AuthStep.OTP)
        return True

    # ------------------------------ OTP ------------------------------

    def verify_otp(self, code: Optional[str] = None) -> bool:
        """
        Check `code` (or the current otp_input). A wrong code clears the input
        so the user starts over.
        """
        if not self._require(AuthStep.OTP):
            return False
        self._reset_last_error()
        if code is not None:
            self.otp_input = digits_only(code, OTP_LENGTH)
        if len(self.otp_input) != OTP_LENGTH:
            self._fail("incomplete_otp", f"Please enter complete {OTP_LENGTH}-digit OTP", event="otp_verified")
            return False
        if self.otp_input != self._otp_code:
            self.otp_input = ""
            self._fail("invalid_otp", "Invalid OTP. Please try again.", event="otp_verified")
            return False
        self.otp_input = ""
        self.repo.insert_auth_event(self.phone, "otp_verified", True)
        self._go(AuthStep.REGISTRATION)
        return True

    def seconds_until_resend(self, now: Optional[datetime] = None) -> int:
        if self.otp_sent_at is None:
            return 0
        elapsed = ((now or datetime.now()) - self.otp_sent_at).total_seconds()
        return max(0, math.ceil(OTP_RESEND_SECONDS - elapsed))

    def resend_otp(self, now: Optional[datetime] = None) -> bool:
        if not self._require(AuthStep.OTP):
            return False
        self._reset_last_error()
        wait = self.seconds_until_resend(now)
        if wait > 0:
            self._fail("resend_cooldown", f"Resend OTP in {wait}s", event="otp_resent")
            return False
        self.otp_input = ""
        self._start_cooldown(now)
        self.repo.insert_auth_event(self.phone, "otp_resent", True)
        _log.info("otp resent to %s", self.phone)
        return True

    def back_to_login(self) -> bool:
        """Leave the OTP page for a different number."""
        if not self._require(AuthStep.OTP):
            return False
        self._reset_last_error()
        self.repo.insert_auth_event(self.phone, "back_to_login", True)
        self.phone = ""
        self.otp_input = ""
        self.otp_sent_at = None
        self._go(AuthStep.LOGIN)
        return True

    # -------------------------- Registration -------------------------

    def update_registration(self, **fields) -> None:
        """Store what the user typed so far (unknown keys raise TypeError)."""
        self.registration = replace(self.registration, **fields)

    def registration_next(self) -> bool:
        if not self._require(AuthStep.REGISTRATION):
            return False
        self._reset_last_error()
        errors = validate_registration_step(self.registration_page, self.registration)
        if errors:
            self._fail_fields(errors, event="registration_page")
            return False
        if self.registration_page < REGISTRATION_STEPS:
            self.registration_page += 1
        return True

    def registration_previous(self) -> bool:
        if not self._require(AuthStep.REGISTRATION):
            return False
        self._reset_last_error()
        if self.registration_page > PERSONAL:
            self.registration_page -= 1
        return True

    def submit_registration(self) -> bool:
        """
        Validate every page (jumping back to the first one that fails), store
        the registration and move on to the pharmacist licence step.
        """
        if not self._require(AuthStep.REGISTRATION):
            return False
        self._reset_last_error()
        for page in range(PERSONAL, ADDRESS + 1):
            errors = validate_registration_step(page, self.registration)
            if errors:
                self.registration_page = page
                self._fail_fields(errors, event="registration_saved")
                return False
        self.repo.save_registration(self.phone, self.registration.as_record())
        self.repo.insert_auth_event(self.phone, "registration_saved", True)
        self._go(AuthStep.PHARMACIST_INFO)
        return True

    # --------------------------- Pharmacist --------------------------

    def update_pharmacist(self, **fields) -> None:
        self.pharmacist = replace(self.pharmacist, **fields)

    def submit_pharmacist(self, today: Optional[date] = None) -> bool:
        if not self._require(AuthStep.PHARMACIST_INFO):
            return False
        self._reset_last_error()
        errors = validate_pharmacist(self.pharmacist, today)
        if errors:
            self._fail_fields(errors, event="pharmacist_saved")
            return False
        self.repo.save_pharmacist(self.phone, self.pharmacist.as_record())
        self.repo.insert_auth_event(self.phone, "pharmacist_saved", True)
        self.account = self.repo.get_account(self.phone)
        self._go(AuthStep.AUTHENTICATED)
        self.authenticated.emit(dict(self.account or {}))
        return True

    @property
    def is_authenticated(self) -> bool:
        return self.step is AuthStep.AUTHENTICATED

    # ----------------------------- Internals -----------------------------

    def _start_cooldown(self, now: Optional[datetime]) -> None:
        self.otp_sent_at = now or datetime.now()

    def _go(self, step: AuthStep) -> None:
        prev = self.step
        self.step = step
        self.field_errors = {}
        _log.info("auth step %s -> %s (phone=%s)", prev.value, step.value, self.phone or "-")
        self.step_changed.emit(step.value)

    def _require(self, step: AuthStep) -> bool:
        if self.step is step:
            return True
        self._fail("wrong_step", f"Action not available during the {self.step.value} step.")
        return False

    def _reset_last_error(self) -> None:
        self.last_error_code = None
        self.last_error_message = None
        self.field_errors = {}

    def _fail(self, code: str, message: str, event: Optional[str] = None) -> None:
        self.last_error_code = code
        self.last_error_message = message
        _log.warning("auth %s: %s", code, message)
        if event:
            self.repo.insert_auth_event(self.phone, event, False, code)
        self.error.emit(message)

    def _fail_fields(self, errors: dict[str, str], event: str) -> None:
        self.field_errors = dict(errors)
        self._fail("invalid_fields", next(iter(errors.values())), event=event)
