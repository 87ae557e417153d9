# staff_payroll/business_logic/__init__.py
