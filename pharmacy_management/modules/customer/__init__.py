# pharmacy_management/modules/customer/__init__.py
