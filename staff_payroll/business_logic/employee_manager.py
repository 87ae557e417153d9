# staff_payroll/business_logic/employee_manager.py

from typing import Optional, List
from decimal import Decimal, InvalidOperation

from staff_payroll.business_logic.entities.employee_entity import EmployeeEntity
from staff_payroll.data_access.employees_repository import EmployeesRepository
from staff_payroll.constants import EmployeeStatus
from staff_payroll.exceptions import ValidationError, PersistenceError
import logging

logger = logging.getLogger(__name__)

def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()

def _positive_salary(salary) -> bool:
    if salary is None:
        return False
    try:
        return Decimal(str(salary)) > 0
    except InvalidOperation:
        return False

class EmployeeManager:
    def __init__(self, employees_repository: EmployeesRepository):
        """
        Initializes the EmployeeManager.
        :param employees_repository: An instance of EmployeesRepository.
        """
        if employees_repository is None: raise ValueError("employees_repository cannot be None")
        self.employees_repository = employees_repository

    def add_employee(self, employee: EmployeeEntity) -> int:
        """
        Validates and persists a new employee.
        Returns the id assigned by the database.
        """
        if _is_blank(employee.first_name):
            raise ValidationError("First name is required.", field="first_name")
        if _is_blank(employee.last_name):
            raise ValidationError("Last name is required.", field="last_name")
        if _is_blank(employee.email):
            raise ValidationError("Email is required.", field="email")
        if not _positive_salary(employee.salary):
            raise ValidationError("Salary must be greater than 0.", field="salary")

        created_employee = self.employees_repository.add(employee)
        if created_employee is None or created_employee.id is None:
            logger.error(f"Failed to persist employee '{employee.full_name}'.")
            raise PersistenceError(f"Could not save employee '{employee.full_name}'.")

        employee.id = created_employee.id
        logger.info(f"Employee '{created_employee.full_name}' added with ID {created_employee.id}.")
        return created_employee.id

    def update_employee(self, employee: EmployeeEntity) -> bool:
        """
        Replaces the stored fields of an existing employee.
        Callers keep current values for anything they don't want to change.
        """
        if employee.id is None or employee.id <= 0:
            raise ValidationError("Invalid employee ID.", field="id")
        if _is_blank(employee.first_name):
            raise ValidationError("First name is required.", field="first_name")
        if _is_blank(employee.last_name):
            raise ValidationError("Last name is required.", field="last_name")
        if not _positive_salary(employee.salary):
            raise ValidationError("Salary must be greater than 0.", field="salary")

        updated = self.employees_repository.update(employee)
        if updated:
            logger.info(f"Details for employee ID {employee.id} updated.")
        else:
            logger.warning(f"Employee ID {employee.id} was not updated.")
        return updated

    def set_employee_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        """Changes only the status of an employee; returns False if the employee doesn't exist."""
        employee = self.get_employee_by_id(employee_id)
        if employee is None:
            logger.warning(f"Employee with ID {employee_id} not found for status change.")
            return False
        employee.status = status
        return self.update_employee(employee)

    def delete_employee(self, employee_id: int) -> bool:
        """
        Deletes an employee record.
        Employees with payroll history are refused by the store (foreign key
        RESTRICT) and False is returned; deactivate them instead.
        """
        if employee_id is None or employee_id <= 0:
            raise ValidationError("Invalid employee ID.", field="id")

        logger.warning(f"Attempting to delete employee record ID: {employee_id}.")
        deleted = self.employees_repository.delete(employee_id)
        if deleted:
            logger.info(f"Employee ID {employee_id} deleted.")
        else:
            logger.warning(f"Employee ID {employee_id} was not deleted (missing or has payroll history).")
        return deleted

    def get_employee_by_id(self, employee_id: int) -> Optional[EmployeeEntity]:
        if not isinstance(employee_id, int) or employee_id <= 0:
            return None
        employee = self.employees_repository.get_by_id(employee_id)
        if not employee:
            logger.debug(f"No employee found for ID: {employee_id}")
        return employee

    def get_all_employees(self) -> List[EmployeeEntity]:
        return self.employees_repository.get_all(order_by="id")

    def get_active_employees(self) -> List[EmployeeEntity]:
        return self.employees_repository.get_by_status(EmployeeStatus.ACTIVE)

    def get_employees_by_department(self, department_id: int) -> List[EmployeeEntity]:
        return self.employees_repository.get_by_department(department_id)

    def search_employees_by_name(self, name_fragment: str) -> List[EmployeeEntity]:
        """Case-insensitive substring search over first and last names, ordered by id."""
        if _is_blank(name_fragment):
            raise ValidationError("Search term is required.", field="name_fragment")
        fragment = name_fragment.strip()
        logger.debug(f"Searching for employees with name fragment: '{fragment}'")
        return self.employees_repository.search_by_name_fragment(fragment)
