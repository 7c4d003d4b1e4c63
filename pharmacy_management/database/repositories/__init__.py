# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from pharmacy_management.database.repositories import (
        # Medicines
        MedicinesRepo, Medicine, MedicinesDomainError,
        MedicineNotFoundError, InsufficientStockError,
        # Customers
        CustomersRepo, Customer, CustomersDomainError,
        # Sales
        SalesRepo, Sale, SaleItem, SaleValidationError, new_sale_id,
        # Dashboard / reports
        DashboardRepo,
        # Onboarding
        AuthRepo,
    )
"""

# ---------------- Medicines ----------------
from .medicines_repo import (
    MedicinesRepo,
    Medicine,
    DomainError as MedicinesDomainError,
    MedicineNotFoundError,
    InsufficientStockError,
)

# ---------------- Customers ----------------
from .customers_repo import (
    CustomersRepo,
    Customer,
    DomainError as CustomersDomainError,
)

# ------------------ Sales ------------------
from .sales_repo import SalesRepo, Sale, SaleItem, SaleValidationError, new_sale_id

# -------------- Dashboard ------------------
from .dashboard_repo import DashboardRepo

# --------------- Onboarding ----------------
from .auth_repo import AuthRepo

__all__ = [
    # medicines_repo
    "MedicinesRepo",
    "Medicine",
    "MedicinesDomainError",
    "MedicineNotFoundError",
    "InsufficientStockError",
    # customers_repo
    "CustomersRepo",
    "Customer",
    "CustomersDomainError",
    # sales_repo
    "SalesRepo",
    "Sale",
    "SaleItem",
    "SaleValidationError",
    "new_sale_id",
    # dashboard_repo
    "DashboardRepo",
    # auth_repo
    "AuthRepo",
]
