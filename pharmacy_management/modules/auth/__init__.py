# pharmacy_management/modules/auth/__init__.py
"""
Phone/OTP onboarding package.

- AuthFlowController: drives login -> otp -> registration -> pharmacist -> done.
- AuthStep, RegistrationData, PharmacistData: the flow state it exposes.
"""

from .controller import AuthFlowController
from .model import AuthStep, PharmacistData, RegistrationData

__all__ = [
    "AuthFlowController",
    "AuthStep",
    "PharmacistData",
    "RegistrationData",
]
