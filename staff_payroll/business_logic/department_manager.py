# staff_payroll/business_logic/department_manager.py

from typing import Optional, List

from staff_payroll.business_logic.entities.department_entity import DepartmentEntity
from staff_payroll.data_access.departments_repository import DepartmentsRepository
from staff_payroll.data_access.employees_repository import EmployeesRepository
from staff_payroll.exceptions import ValidationError, PersistenceError
import logging

logger = logging.getLogger(__name__)

class DepartmentManager:
    def __init__(self,
                 departments_repository: DepartmentsRepository,
                 employees_repository: EmployeesRepository):
        """
        Initializes the DepartmentManager.
        :param departments_repository: An instance of DepartmentsRepository.
        :param employees_repository: Used to refuse deleting departments that still have staff.
        """
        if departments_repository is None: raise ValueError("departments_repository cannot be None")
        if employees_repository is None: raise ValueError("employees_repository cannot be None")
        self.departments_repository = departments_repository
        self.employees_repository = employees_repository

    def add_department(self, name: str, description: Optional[str] = None) -> DepartmentEntity:
        if not name or not name.strip():
            raise ValidationError("Department name is required.", field="name")

        department = DepartmentEntity(name=name.strip(), description=description)
        created_department = self.departments_repository.add(department)
        if created_department is None:
            raise PersistenceError(f"Could not save department '{name}'.")
        logger.info(f"Department '{created_department.name}' (ID: {created_department.id}) added successfully.")
        return created_department

    def get_department_by_id(self, department_id: int) -> Optional[DepartmentEntity]:
        if not isinstance(department_id, int) or department_id <= 0:
            return None
        return self.departments_repository.get_by_id(department_id)

    def get_all_departments(self) -> List[DepartmentEntity]:
        return self.departments_repository.get_all(order_by="id")

    def update_department(self, department: DepartmentEntity) -> bool:
        if department.id is None or department.id <= 0:
            raise ValidationError("Invalid department ID.", field="id")
        if not department.name or not department.name.strip():
            raise ValidationError("Department name is required.", field="name")

        department.name = department.name.strip()
        updated = self.departments_repository.update(department)
        if updated:
            logger.info(f"Department ID {department.id} updated.")
        return updated

    def delete_department(self, department_id: int) -> bool:
        if department_id is None or department_id <= 0:
            raise ValidationError("Invalid department ID.", field="id")

        employee_count = self.employees_repository.count_by_department(department_id)
        if employee_count > 0:
            logger.warning(f"Refusing to delete department ID {department_id}: {employee_count} employee(s) assigned.")
            raise ValidationError(
                f"Department has {employee_count} associated employee(s); reassign them first.",
                field="id", employee_count=employee_count,
            )

        deleted = self.departments_repository.delete(department_id)
        if deleted:
            logger.info(f"Department ID {department_id} deleted.")
        return deleted
