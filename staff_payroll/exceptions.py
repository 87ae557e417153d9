# staff_payroll/exceptions.py
"""
Typed exceptions raised by the business-logic and data-access layers.

    StaffPayrollError (base)
    |
    +-- ValidationError   caller data violates an invariant (also a ValueError)
    +-- NotFoundError     referenced employee / payroll / department is absent
    +-- PersistenceError  the underlying SQLite operation failed

Validation and not-found conditions are detected before the store is
touched, so catching them never leaves partial state behind.
"""

from typing import Any, Optional


class StaffPayrollError(Exception):
    """Base class for all application errors."""

    code: str = "STAFF_PAYROLL_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(StaffPayrollError, ValueError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, **details: Any):
        super().__init__(message, **details)
        self.field = field


class NotFoundError(StaffPayrollError):
    code = "NOT_FOUND"

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(f"{entity_name} with ID {entity_id} not found.", entity_id=entity_id)
        self.entity_name = entity_name
        self.entity_id = entity_id


class PersistenceError(StaffPayrollError):
    code = "PERSISTENCE_ERROR"
