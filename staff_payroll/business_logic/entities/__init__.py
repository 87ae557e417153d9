# staff_payroll/business_logic/entities/__init__.py
from .base_entity import BaseEntity
from .department_entity import DepartmentEntity
from .employee_entity import EmployeeEntity
from .payroll_entity import PayrollEntity

__all__ = [
    "BaseEntity", "DepartmentEntity", "EmployeeEntity", "PayrollEntity",
]
