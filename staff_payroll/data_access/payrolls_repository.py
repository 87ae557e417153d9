# staff_payroll/data_access/payrolls_repository.py

from typing import List, Optional
from datetime import date
from staff_payroll.data_access.base_repository import BaseRepository
from staff_payroll.data_access.database_manager import DatabaseManager
from staff_payroll.business_logic.entities.payroll_entity import PayrollEntity
from staff_payroll.constants import PaymentStatus
from staff_payroll.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)

class PayrollsRepository(BaseRepository[PayrollEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=PayrollEntity,
                         table_name="payrolls")

    def get_all(self, order_by: Optional[str] = "id DESC") -> List[PayrollEntity]:
        # Most recent records first by default.
        return super().get_all(order_by=order_by)

    def get_by_employee_id(self, employee_id: int) -> List[PayrollEntity]:
        query = f"SELECT * FROM {self._table_name} WHERE employee_id = ? ORDER BY pay_period_start DESC, id DESC"
        return self._fetch_entities(query, (employee_id,))

    def get_by_pay_period(self, start_date: date, end_date: date) -> List[PayrollEntity]:
        """Records whose whole pay period lies inside [start_date, end_date]."""
        query = (f"SELECT * FROM {self._table_name} WHERE pay_period_start >= ? AND pay_period_end <= ? "
                 f"ORDER BY pay_period_start DESC, id DESC")
        return self._fetch_entities(query, (start_date.isoformat(), end_date.isoformat()))

    def get_unpaid_payrolls(self) -> List[PayrollEntity]:
        query = f"SELECT * FROM {self._table_name} WHERE payment_status = ? ORDER BY pay_period_start ASC"
        return self._fetch_entities(query, (PaymentStatus.PENDING.value,))

    def mark_paid(self, payroll_id: int, payment_date: date) -> bool:
        query = f"UPDATE {self._table_name} SET payment_status = ?, payment_date = ? WHERE id = ?"
        try:
            cursor = self.db_manager.execute_query(query, (PaymentStatus.PAID.value, payment_date.isoformat(), payroll_id))
        except PersistenceError as e:
            logger.error(f"Error marking payroll ID {payroll_id} as paid: {e}", exc_info=True)
            return False
        if cursor.rowcount == 0:
            logger.warning(f"Payroll ID {payroll_id} not found when marking as paid.")
            return False
        return True
