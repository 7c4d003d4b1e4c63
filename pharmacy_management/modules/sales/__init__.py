# pharmacy_management/modules/sales/__init__.py
