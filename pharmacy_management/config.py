import os

from .constants import DB_URI, DEMO_OTP

# Runtime overrides; everything else lives in constants.py
LOG_LEVEL = os.environ.get("PHARMACY_LOG_LEVEL", "INFO").upper()
OTP_CODE = os.environ.get("PHARMACY_DEMO_OTP", DEMO_OTP)
SEED_MOCK_DATA = os.environ.get("PHARMACY_SEED_MOCK_DATA", "1") != "0"

DB_PATH = DB_URI
