"""
Pharmacy management core.

In-memory store (SQLite ``:memory:``), repositories, and non-visual Qt
controllers/table models for inventory, customers, sales, reports and the
phone/OTP onboarding flow.
"""

__version__ = "0.1.0"
