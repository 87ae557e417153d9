"""
Shared fixtures: a fresh SQLite file per test, the three repositories and
the managers wired the same way the main window wires them.
"""

from datetime import date
from decimal import Decimal

import pytest

from staff_payroll.business_logic.department_manager import DepartmentManager
from staff_payroll.business_logic.employee_manager import EmployeeManager
from staff_payroll.business_logic.entities.employee_entity import EmployeeEntity
from staff_payroll.business_logic.payroll_manager import PayrollManager
from staff_payroll.business_logic.report_manager import ReportManager
from staff_payroll.constants import EmployeeStatus
from staff_payroll.data_access.database_manager import DatabaseManager
from staff_payroll.data_access.departments_repository import DepartmentsRepository
from staff_payroll.data_access.employees_repository import EmployeesRepository
from staff_payroll.data_access.payrolls_repository import PayrollsRepository

TODAY = date(2024, 2, 15)
JANUARY = (date(2024, 1, 1), date(2024, 1, 31))


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.create_tables()
    return manager


@pytest.fixture
def employees_repo(db_manager):
    return EmployeesRepository(db_manager)


@pytest.fixture
def departments_repo(db_manager):
    return DepartmentsRepository(db_manager)


@pytest.fixture
def payrolls_repo(db_manager):
    return PayrollsRepository(db_manager)


@pytest.fixture
def employee_manager(employees_repo):
    return EmployeeManager(employees_repo)


@pytest.fixture
def department_manager(departments_repo, employees_repo):
    return DepartmentManager(departments_repo, employees_repo)


@pytest.fixture
def payroll_manager(payrolls_repo, employee_manager):
    return PayrollManager(payrolls_repo, employee_manager, today_provider=lambda: TODAY)


@pytest.fixture
def report_manager(employee_manager, payroll_manager, department_manager):
    return ReportManager(employee_manager, payroll_manager, department_manager)


@pytest.fixture
def make_employee(employee_manager):
    """Adds an employee and returns the stored entity."""
    def _make(first_name="Anna", last_name="Smith", salary="5000", status=EmployeeStatus.ACTIVE,
              department_id=None, email=None):
        employee = EmployeeEntity(
            first_name=first_name,
            last_name=last_name,
            email=email or f"{first_name.lower()}.{last_name.lower()}@example.com",
            hire_date=date(2020, 3, 1),
            job_title="Engineer",
            department_id=department_id,
            salary=Decimal(salary),
            status=status,
        )
        employee_id = employee_manager.add_employee(employee)
        return employee_manager.get_employee_by_id(employee_id)
    return _make
