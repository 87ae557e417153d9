# staff_payroll/business_logic/entities/employee_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from staff_payroll.constants import EmployeeStatus, DB_GENERATED
from .base_entity import BaseEntity

@dataclass
class EmployeeEntity(BaseEntity):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = field(default=None)
    hire_date: Optional[date] = field(default=None)
    job_title: Optional[str] = field(default=None)
    department_id: Optional[int] = field(default=None) # Not checked against departments by the service layer
    salary: Decimal = field(default=Decimal("0"))
    status: EmployeeStatus = field(default=EmployeeStatus.ACTIVE)
    created_at: Optional[datetime] = field(default=None, metadata={DB_GENERATED: True})
    updated_at: Optional[datetime] = field(default=None, metadata={DB_GENERATED: True})

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
