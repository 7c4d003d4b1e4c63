# pharmacy_management/modules/reporting/__init__.py
