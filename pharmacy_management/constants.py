# pharmacy_management/constants.py
APP_NAME = "MediStore"

# Store lives for the process lifetime only.
DB_URI = ":memory:"
TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1"

CURRENCY_SYMBOL = "₹"

# Inventory alerts
EXPIRY_LOOKAHEAD_DAYS = 30

# Dashboard / reports
TOP_SELLERS_LIMIT = 5
RECENT_SALES_LIMIT = 5
DAILY_SALES_DAYS = 7

# Auth flow
DEMO_OTP = "123456"
OTP_LENGTH = 6
OTP_RESEND_SECONDS = 30
MIN_AGE = 18
MAX_AGE = 100
LICENSE_MIN_ISSUED_YEAR = 1990

PAYMENT_METHODS = ("cash", "card", "upi")

MEDICINE_CATEGORIES = (
    "Pain Relief",
    "Antibiotics",
    "Antihistamine",
    "Vitamins",
    "Diabetes",
    "Heart",
    "Other",
)

INDIAN_STATES = (
    "Andhra Pradesh",
    "Delhi",
    "Gujarat",
    "Karnataka",
    "Maharashtra",
    "Tamil Nadu",
    "Uttar Pradesh",
    "West Bengal",
)

ISSUING_ORGANIZATIONS = (
    "Pharmacy Council of India (PCI)",
    "State Pharmacy Council - Andhra Pradesh",
    "State Pharmacy Council - Delhi",
    "State Pharmacy Council - Gujarat",
    "State Pharmacy Council - Karnataka",
    "State Pharmacy Council - Maharashtra",
    "State Pharmacy Council - Tamil Nadu",
    "State Pharmacy Council - Uttar Pradesh",
    "State Pharmacy Council - West Bengal",
    "Other",
)
