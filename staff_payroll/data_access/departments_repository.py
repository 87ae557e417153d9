# staff_payroll/data_access/departments_repository.py

from staff_payroll.data_access.base_repository import BaseRepository
from staff_payroll.data_access.database_manager import DatabaseManager
from staff_payroll.business_logic.entities.department_entity import DepartmentEntity

class DepartmentsRepository(BaseRepository[DepartmentEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=DepartmentEntity,
                         table_name="departments")
