# staff_payroll/data_access/__init__.py

from .database_manager import DatabaseManager
from .base_repository import BaseRepository

from .departments_repository import DepartmentsRepository
from .employees_repository import EmployeesRepository
from .payrolls_repository import PayrollsRepository

