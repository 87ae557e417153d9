# staff_payroll/data_access/employees_repository.py

from typing import List

from staff_payroll.data_access.base_repository import BaseRepository
from staff_payroll.data_access.database_manager import DatabaseManager
from staff_payroll.business_logic.entities.employee_entity import EmployeeEntity
from staff_payroll.constants import EmployeeStatus
import logging

logger = logging.getLogger(__name__)

LIKE_ESCAPE_CHAR = "\\"

def _escape_like(text: str) -> str:
    """Escapes LIKE wildcards so the fragment is matched literally."""
    return (text.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
                .replace("%", LIKE_ESCAPE_CHAR + "%")
                .replace("_", LIKE_ESCAPE_CHAR + "_"))

class EmployeesRepository(BaseRepository[EmployeeEntity]):
    touch_column = "updated_at"

    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=EmployeeEntity,
                         table_name="employees")

    def get_by_department(self, department_id: int) -> List[EmployeeEntity]:
        query = f"SELECT * FROM {self._table_name} WHERE department_id = ? ORDER BY id"
        return self._fetch_entities(query, (department_id,))

    def get_by_status(self, status: EmployeeStatus) -> List[EmployeeEntity]:
        query = f"SELECT * FROM {self._table_name} WHERE status = ? ORDER BY id"
        return self._fetch_entities(query, (status.value,))

    def search_by_name_fragment(self, fragment: str) -> List[EmployeeEntity]:
        """
        Case-insensitive substring match on first OR last name, ordered by id.
        Both sides go through the connection's casefold() so accented names
        match regardless of case.
        """
        pattern = f"%{_escape_like(fragment.casefold())}%"
        query = (f"SELECT * FROM {self._table_name} "
                 f"WHERE casefold(first_name) LIKE ? ESCAPE '{LIKE_ESCAPE_CHAR}' "
                 f"OR casefold(last_name) LIKE ? ESCAPE '{LIKE_ESCAPE_CHAR}' "
                 f"ORDER BY id")
        logger.debug(f"Searching employees with pattern '{pattern}'")
        return self._fetch_entities(query, (pattern, pattern))

    def count_by_department(self, department_id: int) -> int:
        query = f"SELECT COUNT(*) AS employee_count FROM {self._table_name} WHERE department_id = ?"
        row = self.db_manager.fetch_one(query, (department_id,))
        return int(row["employee_count"]) if row else 0
