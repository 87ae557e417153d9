# staff_payroll/business_logic/entities/department_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from staff_payroll.constants import DB_GENERATED
from .base_entity import BaseEntity

@dataclass
class DepartmentEntity(BaseEntity):
    name: str
    description: Optional[str] = field(default=None)
    created_at: Optional[datetime] = field(default=None, metadata={DB_GENERATED: True})
