# staff_payroll/business_logic/entities/payroll_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from staff_payroll.constants import PaymentStatus, DB_GENERATED
from .base_entity import BaseEntity

@dataclass
class PayrollEntity(BaseEntity):
    employee_id: int # Foreign Key to EmployeeEntity
    pay_period_start: Optional[date]
    pay_period_end: Optional[date]
    basic_salary: Decimal # Snapshot of the employee's salary when the record was generated
    bonus: Decimal = field(default=Decimal("0"))
    deductions: Decimal = field(default=Decimal("0"))
    net_salary: Decimal = field(default=Decimal("0"))
    payment_date: Optional[date] = field(default=None)
    payment_status: PaymentStatus = field(default=PaymentStatus.PENDING)
    created_at: Optional[datetime] = field(default=None, metadata={DB_GENERATED: True})

    def calculate_net_salary(self) -> Decimal:
        """Recomputes net_salary from its inputs; no floor at zero."""
        self.net_salary = (Decimal(str(self.basic_salary)) + Decimal(str(self.bonus))
                           - Decimal(str(self.deductions)))
        return self.net_salary

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID
