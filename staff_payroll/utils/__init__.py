# staff_payroll/utils/__init__.py
