# pharmacy_management/modules/inventory/__init__.py
