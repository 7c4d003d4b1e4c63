# pharmacy_management/modules/dashboard/__init__.py
