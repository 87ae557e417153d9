# staff_payroll/constants.py

from enum import Enum

# General
DATE_FORMAT = "%Y-%m-%d"
QT_DATE_FORMAT = "yyyy-MM-dd"
NOT_AVAILABLE = "N/A"

class EmployeeStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"

    @property
    def label(self) -> str:
        return self.value.title()

# Dataclass field metadata key for columns filled in by the database (timestamps).
DB_GENERATED = "db_generated"
