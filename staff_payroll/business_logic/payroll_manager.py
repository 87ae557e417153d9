# staff_payroll/business_logic/payroll_manager.py

from dataclasses import dataclass
from typing import Optional, List, Callable
from datetime import date
from decimal import Decimal

from staff_payroll.business_logic.entities.payroll_entity import PayrollEntity
from staff_payroll.business_logic.employee_manager import EmployeeManager
from staff_payroll.data_access.payrolls_repository import PayrollsRepository
from staff_payroll.constants import PaymentStatus
from staff_payroll.exceptions import ValidationError, NotFoundError, PersistenceError
import logging

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

@dataclass(frozen=True)
class BatchGenerationResult:
    succeeded: int
    failed: int

    @property
    def attempted(self) -> int:
        return self.succeeded + self.failed

@dataclass(frozen=True)
class PayrollSummary:
    employee_id: int
    employee_name: str
    record_count: int
    total_paid: Decimal
    total_pending: Decimal

def _validate_pay_period(pay_period_start: Optional[date], pay_period_end: Optional[date]) -> None:
    if pay_period_start is None or pay_period_end is None:
        raise ValidationError("Pay period dates are required.", field="pay_period")
    if pay_period_start > pay_period_end:
        raise ValidationError("Pay period start date must not be after the end date.", field="pay_period")

def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))

class PayrollManager:
    """
    Computes and manages payroll records.

    Payment lifecycle: records are created PENDING and move to PAID only through
    process_payroll_payment(). That call does not check the current status;
    callers must look at PayrollEntity.is_paid first and refuse to pay twice.
    """
    def __init__(self,
                 payrolls_repository: PayrollsRepository,
                 employee_manager: EmployeeManager,
                 today_provider: Optional[Callable[[], date]] = None):
        if payrolls_repository is None: raise ValueError("payrolls_repository cannot be None")
        if employee_manager is None: raise ValueError("employee_manager cannot be None")

        self.payrolls_repository = payrolls_repository
        self.employee_manager = employee_manager
        self.today_provider = today_provider if today_provider is not None else date.today

    def generate_payroll_for_employee(self,
                                      employee_id: int,
                                      pay_period_start: date,
                                      pay_period_end: date,
                                      bonus: Decimal = ZERO,
                                      deductions: Decimal = ZERO) -> PayrollEntity:
        """
        Generates a PENDING payroll record from the employee's current salary.
        Net salary = salary + bonus - deductions, negative results included.
        Does NOT process payment; use process_payroll_payment for that.
        """
        employee = self.employee_manager.get_employee_by_id(employee_id)
        if not employee:
            logger.warning(f"Cannot generate payroll: employee ID {employee_id} not found.")
            raise NotFoundError("Employee", employee_id)
        _validate_pay_period(pay_period_start, pay_period_end)
        if not employee.is_active:
            logger.warning(f"Generating payroll for non-active employee ID {employee_id} ({employee.status.value}).")

        payroll_entity = PayrollEntity(
            employee_id=employee.id,
            pay_period_start=pay_period_start,
            pay_period_end=pay_period_end,
            basic_salary=_as_decimal(employee.salary),
            bonus=_as_decimal(bonus),
            deductions=_as_decimal(deductions),
            payment_status=PaymentStatus.PENDING,
            payment_date=None,
        )
        payroll_entity.calculate_net_salary()

        created_payroll = self._persist_new_payroll(payroll_entity)
        logger.info(f"Payroll ID {created_payroll.id} generated for employee ID {employee_id} for period "
                    f"{pay_period_start} to {pay_period_end}. Net Salary: {created_payroll.net_salary:.2f}")
        return created_payroll

    def add_payroll(self, payroll: PayrollEntity) -> PayrollEntity:
        """
        Persists a caller-built payroll record. Any net salary supplied by the
        caller is discarded and recomputed; the record always starts PENDING.
        """
        if payroll.employee_id is None or payroll.employee_id <= 0:
            raise ValidationError("Invalid employee ID.", field="employee_id")
        _validate_pay_period(payroll.pay_period_start, payroll.pay_period_end)
        if payroll.basic_salary is None or _as_decimal(payroll.basic_salary) < 0:
            raise ValidationError("Basic salary cannot be negative.", field="basic_salary")

        payroll.payment_status = PaymentStatus.PENDING
        payroll.payment_date = None
        payroll.calculate_net_salary()

        created_payroll = self._persist_new_payroll(payroll)
        logger.info(f"Payroll ID {created_payroll.id} created for employee ID {payroll.employee_id}. "
                    f"Net Salary: {created_payroll.net_salary:.2f}")
        return created_payroll

    def _persist_new_payroll(self, payroll: PayrollEntity) -> PayrollEntity:
        created_payroll = self.payrolls_repository.add(payroll)
        if created_payroll is None or created_payroll.id is None:
            logger.error(f"Failed to persist payroll for employee ID {payroll.employee_id}.")
            raise PersistenceError(f"Could not save payroll for employee ID {payroll.employee_id}.")
        payroll.id = created_payroll.id
        return created_payroll

    def update_payroll(self, payroll: PayrollEntity) -> bool:
        """Recomputes net salary from basic/bonus/deductions and saves the record."""
        if payroll.id is None or payroll.id <= 0:
            raise ValidationError("Invalid payroll ID.", field="id")

        payroll.calculate_net_salary()
        updated = self.payrolls_repository.update(payroll)
        if updated:
            logger.info(f"Payroll ID {payroll.id} updated. New Net Salary: {payroll.net_salary:.2f}")
        else:
            logger.warning(f"Payroll ID {payroll.id} was not updated.")
        return updated

    def delete_payroll(self, payroll_id: int) -> bool:
        if payroll_id is None or payroll_id <= 0:
            raise ValidationError("Invalid payroll ID.", field="id")

        deleted = self.payrolls_repository.delete(payroll_id)
        if deleted:
            logger.info(f"Payroll ID {payroll_id} deleted.")
        else:
            logger.warning(f"Payroll ID {payroll_id} was not deleted.")
        return deleted

    def process_payroll_payment(self, payroll_id: int) -> bool:
        """
        Marks a payroll record PAID with today's date as payment date.

        Precondition (caller contract): the record is not already PAID. This
        method does not check; invoking it on a PAID record stamps the payment
        date again.
        """
        if payroll_id is None or payroll_id <= 0:
            raise ValidationError("Invalid payroll ID.", field="id")

        payment_date = self.today_provider()
        paid = self.payrolls_repository.mark_paid(payroll_id, payment_date)
        if paid:
            logger.info(f"Payroll ID {payroll_id} marked as paid on {payment_date}.")
        else:
            logger.warning(f"Payment for payroll ID {payroll_id} could not be recorded.")
        return paid

    def generate_monthly_payroll_for_active_employees(self,
                                                      pay_period_start: date,
                                                      pay_period_end: date) -> BatchGenerationResult:
        """
        Generates one PENDING record (no bonus, no deductions) per ACTIVE employee.

        Best effort and not atomic: each employee is attempted independently in
        id order; a failure is counted and the loop moves on. Records created
        before a failure are kept. Only aggregate counts are reported.
        """
        _validate_pay_period(pay_period_start, pay_period_end)

        success_count = 0
        fail_count = 0
        for employee in self.employee_manager.get_all_employees():
            if not employee.is_active:
                continue
            try:
                self.generate_payroll_for_employee(employee.id, pay_period_start, pay_period_end, ZERO, ZERO)
                success_count += 1
            except (PersistenceError, NotFoundError) as e:
                fail_count += 1
                logger.error(f"Monthly payroll failed for employee ID {employee.id}: {e}")

        logger.info(f"Monthly payroll generation complete for {pay_period_start} to {pay_period_end}. "
                    f"Succeeded: {success_count}, Failed: {fail_count}")
        return BatchGenerationResult(succeeded=success_count, failed=fail_count)

    def get_payroll_by_id(self, payroll_id: int) -> Optional[PayrollEntity]:
        if not isinstance(payroll_id, int) or payroll_id <= 0:
            return None
        return self.payrolls_repository.get_by_id(payroll_id)

    def get_all_payrolls(self) -> List[PayrollEntity]:
        return self.payrolls_repository.get_all()

    def get_payroll_history_for_employee(self, employee_id: int) -> List[PayrollEntity]:
        """Payroll records of one employee, most recent pay period first."""
        return self.payrolls_repository.get_by_employee_id(employee_id)

    def get_payrolls_for_period(self, pay_period_start: date, pay_period_end: date) -> List[PayrollEntity]:
        _validate_pay_period(pay_period_start, pay_period_end)
        return self.payrolls_repository.get_by_pay_period(pay_period_start, pay_period_end)

    def get_unpaid_payrolls(self) -> List[PayrollEntity]:
        return self.payrolls_repository.get_unpaid_payrolls()

    def get_payroll_summary_for_employee(self, employee_id: int) -> PayrollSummary:
        employee = self.employee_manager.get_employee_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)

        payrolls = self.get_payroll_history_for_employee(employee_id)
        total_paid = ZERO
        total_pending = ZERO
        for payroll in payrolls:
            if payroll.payment_status == PaymentStatus.PAID:
                total_paid += payroll.net_salary
            else:
                total_pending += payroll.net_salary

        return PayrollSummary(
            employee_id=employee_id,
            employee_name=employee.full_name,
            record_count=len(payrolls),
            total_paid=total_paid,
            total_pending=total_pending,
        )
