"""
Tests for PayrollManager: net salary arithmetic, the PENDING -> PAID
lifecycle, best-effort batch generation and per-employee summaries.
"""

from datetime import date
from decimal import Decimal

import pytest

from staff_payroll.business_logic.entities.payroll_entity import PayrollEntity
from staff_payroll.business_logic.payroll_manager import PayrollManager, BatchGenerationResult
from staff_payroll.constants import EmployeeStatus, PaymentStatus
from staff_payroll.data_access.payrolls_repository import PayrollsRepository
from staff_payroll.exceptions import NotFoundError, PersistenceError, ValidationError

from tests.conftest import JANUARY, TODAY

FEBRUARY = (date(2024, 2, 1), date(2024, 2, 29))


class RefusingPayrollsRepository(PayrollsRepository):
    """Refuses inserts for the given employee ids, like a store rejecting the row."""

    def __init__(self, db_manager, refused_employee_ids):
        super().__init__(db_manager)
        self.refused_employee_ids = set(refused_employee_ids)

    def add(self, entity):
        if entity.employee_id in self.refused_employee_ids:
            return None
        return super().add(entity)


class UnreadablePayrollsRepository(PayrollsRepository):
    """Inserts normally but every read by id fails."""

    def get_by_id(self, entity_id):
        raise PersistenceError("database is locked")


# =============================================================================
# Single-employee generation
# =============================================================================


class TestGeneratePayrollForEmployee:

    def test_net_salary_scenario(self, payroll_manager, make_employee):
        employee = make_employee(salary="5000")

        payroll = payroll_manager.generate_payroll_for_employee(
            employee.id, *JANUARY, bonus=Decimal("500"), deductions=Decimal("200"))

        assert payroll.id is not None
        assert payroll.basic_salary == Decimal("5000")
        assert payroll.net_salary == Decimal("5300")
        assert payroll.payment_status == PaymentStatus.PENDING
        assert payroll.payment_date is None
        assert payroll.created_at is not None

    def test_record_is_persisted(self, payroll_manager, make_employee):
        employee = make_employee(salary="5000")
        payroll = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)

        stored = payroll_manager.get_payroll_by_id(payroll.id)
        assert stored is not None
        assert stored.employee_id == employee.id
        assert stored.pay_period_start == JANUARY[0]
        assert stored.pay_period_end == JANUARY[1]
        assert stored.net_salary == Decimal("5000")

    def test_negative_net_salary_is_allowed(self, payroll_manager, make_employee):
        employee = make_employee(salary="1000")
        payroll = payroll_manager.generate_payroll_for_employee(
            employee.id, *JANUARY, deductions=Decimal("1500"))
        assert payroll.net_salary == Decimal("-500")

    def test_basic_salary_is_a_snapshot(self, payroll_manager, employee_manager, make_employee):
        employee = make_employee(salary="5000")
        payroll = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)

        employee.salary = Decimal("6000")
        assert employee_manager.update_employee(employee)

        assert payroll_manager.get_payroll_by_id(payroll.id).basic_salary == Decimal("5000")

    def test_missing_employee_raises_not_found(self, payroll_manager):
        with pytest.raises(NotFoundError) as exc_info:
            payroll_manager.generate_payroll_for_employee(999, *JANUARY)
        assert exc_info.value.entity_id == 999
        assert payroll_manager.get_all_payrolls() == []

    def test_inverted_period_is_rejected(self, payroll_manager, make_employee):
        employee = make_employee()
        with pytest.raises(ValidationError):
            payroll_manager.generate_payroll_for_employee(employee.id, date(2024, 2, 1), date(2024, 1, 1))
        assert payroll_manager.get_all_payrolls() == []

    def test_inactive_employee_can_still_be_paid_individually(self, payroll_manager, make_employee):
        employee = make_employee(status=EmployeeStatus.ON_LEAVE)
        payroll = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        assert payroll.id is not None

    def test_store_refusal_raises_persistence_error(self, db_manager, employee_manager, make_employee):
        employee = make_employee()
        manager = PayrollManager(RefusingPayrollsRepository(db_manager, [employee.id]), employee_manager)
        with pytest.raises(PersistenceError):
            manager.generate_payroll_for_employee(employee.id, *JANUARY)


# =============================================================================
# Direct create / update / delete
# =============================================================================


class TestAddAndUpdatePayroll:

    def _payroll(self, employee_id, /, **overrides):
        values = dict(
            employee_id=employee_id,
            pay_period_start=JANUARY[0],
            pay_period_end=JANUARY[1],
            basic_salary=Decimal("4000"),
            bonus=Decimal("250.50"),
            deductions=Decimal("100.25"),
            net_salary=Decimal("1"),
        )
        values.update(overrides)
        return PayrollEntity(**values)

    def test_add_discards_caller_net_salary(self, payroll_manager, make_employee):
        employee = make_employee()
        created = payroll_manager.add_payroll(self._payroll(employee.id))

        assert created.net_salary == Decimal("4150.25")
        assert payroll_manager.get_payroll_by_id(created.id).net_salary == Decimal("4150.25")

    def test_add_always_starts_pending(self, payroll_manager, make_employee):
        employee = make_employee()
        created = payroll_manager.add_payroll(self._payroll(
            employee.id, payment_status=PaymentStatus.PAID, payment_date=date(2024, 1, 31)))
        assert created.payment_status == PaymentStatus.PENDING
        assert created.payment_date is None

    @pytest.mark.parametrize("overrides", [
        {"employee_id": 0},
        {"pay_period_start": None},
        {"pay_period_end": None},
        {"pay_period_start": date(2024, 2, 1), "pay_period_end": date(2024, 1, 1)},
        {"basic_salary": Decimal("-1")},
    ])
    def test_add_rejects_invalid_records(self, payroll_manager, make_employee, overrides):
        employee = make_employee()
        with pytest.raises(ValidationError):
            payroll_manager.add_payroll(self._payroll(employee.id, **overrides))
        assert payroll_manager.get_all_payrolls() == []

    def test_single_day_period_is_valid(self, payroll_manager, make_employee):
        employee = make_employee()
        created = payroll_manager.add_payroll(self._payroll(
            employee.id, pay_period_start=date(2024, 1, 15), pay_period_end=date(2024, 1, 15)))
        assert created.id is not None

    def test_update_recomputes_net_salary(self, payroll_manager, make_employee):
        employee = make_employee(salary="3000")
        payroll = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)

        payroll.bonus = Decimal("700")
        payroll.deductions = Decimal("50")
        payroll.net_salary = Decimal("123456")
        assert payroll_manager.update_payroll(payroll)

        assert payroll.net_salary == Decimal("3650")
        assert payroll_manager.get_payroll_by_id(payroll.id).net_salary == Decimal("3650")

    def test_update_requires_positive_id(self, payroll_manager, make_employee):
        employee = make_employee()
        with pytest.raises(ValidationError):
            payroll_manager.update_payroll(self._payroll(employee.id))

    def test_update_missing_record_returns_false(self, payroll_manager, make_employee):
        employee = make_employee()
        payroll = self._payroll(employee.id)
        payroll.id = 4242
        assert payroll_manager.update_payroll(payroll) is False

    def test_delete(self, payroll_manager, make_employee):
        employee = make_employee()
        payroll = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)

        assert payroll_manager.delete_payroll(payroll.id) is True
        assert payroll_manager.get_payroll_by_id(payroll.id) is None
        assert payroll_manager.delete_payroll(payroll.id) is False

    def test_delete_requires_positive_id(self, payroll_manager):
        with pytest.raises(ValidationError):
            payroll_manager.delete_payroll(0)


# =============================================================================
# Payment lifecycle
# =============================================================================


class TestProcessPayrollPayment:

    def test_marks_paid_with_today(self, payroll_manager, make_employee):
        employee = make_employee()
        payroll = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)

        assert payroll_manager.process_payroll_payment(payroll.id) is True

        paid = payroll_manager.get_payroll_by_id(payroll.id)
        assert paid.payment_status == PaymentStatus.PAID
        assert paid.is_paid
        assert paid.payment_date == TODAY

    def test_repaying_restamps_payment_date(self, payrolls_repo, employee_manager, make_employee):
        days = iter([date(2024, 2, 1), date(2024, 3, 1)])
        manager = PayrollManager(payrolls_repo, employee_manager, today_provider=lambda: next(days))
        employee = make_employee()
        payroll = manager.generate_payroll_for_employee(employee.id, *JANUARY)

        assert manager.process_payroll_payment(payroll.id)
        assert manager.get_payroll_by_id(payroll.id).payment_date == date(2024, 2, 1)

        assert manager.process_payroll_payment(payroll.id)
        repaid = manager.get_payroll_by_id(payroll.id)
        assert repaid.payment_status == PaymentStatus.PAID
        assert repaid.payment_date == date(2024, 3, 1)

    def test_missing_record_returns_false(self, payroll_manager):
        assert payroll_manager.process_payroll_payment(777) is False

    def test_requires_positive_id(self, payroll_manager):
        with pytest.raises(ValidationError):
            payroll_manager.process_payroll_payment(-3)

    def test_paid_record_leaves_unpaid_list(self, payroll_manager, make_employee):
        employee = make_employee()
        first = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        second = payroll_manager.generate_payroll_for_employee(employee.id, *FEBRUARY)

        payroll_manager.process_payroll_payment(first.id)

        assert [p.id for p in payroll_manager.get_unpaid_payrolls()] == [second.id]


# =============================================================================
# Batch generation
# =============================================================================


class TestMonthlyBatch:

    def test_only_active_employees_are_included(self, payroll_manager, make_employee):
        first = make_employee("Anna", "Smith", salary="3000")
        second = make_employee("Dan", "Anderson", salary="4000")
        make_employee("Ivan", "Petrov", salary="3500", status=EmployeeStatus.INACTIVE)

        result = payroll_manager.generate_monthly_payroll_for_active_employees(*FEBRUARY)

        assert result == BatchGenerationResult(succeeded=2, failed=0)
        assert result.attempted == 2
        payrolls = payroll_manager.get_all_payrolls()
        assert sorted(p.employee_id for p in payrolls) == [first.id, second.id]
        assert sorted(p.net_salary for p in payrolls) == [Decimal("3000"), Decimal("4000")]
        for payroll in payrolls:
            assert payroll.bonus == Decimal("0")
            assert payroll.deductions == Decimal("0")
            assert payroll.payment_status == PaymentStatus.PENDING
            assert (payroll.pay_period_start, payroll.pay_period_end) == FEBRUARY

    def test_failure_is_counted_and_batch_continues(self, db_manager, employee_manager, make_employee):
        first = make_employee("Anna", "Smith")
        refused = make_employee("Dan", "Anderson")
        third = make_employee("Eve", "Stone")
        repo = RefusingPayrollsRepository(db_manager, [refused.id])
        manager = PayrollManager(repo, employee_manager, today_provider=lambda: TODAY)

        result = manager.generate_monthly_payroll_for_active_employees(*FEBRUARY)

        assert result.succeeded == 2
        assert result.failed == 1
        assert sorted(p.employee_id for p in manager.get_all_payrolls()) == [first.id, third.id]

    def test_saved_record_counts_as_success_when_reread_fails(self, db_manager, employee_manager, make_employee):
        employee = make_employee()
        manager = PayrollManager(UnreadablePayrollsRepository(db_manager), employee_manager,
                                 today_provider=lambda: TODAY)

        result = manager.generate_monthly_payroll_for_active_employees(*FEBRUARY)

        assert result == BatchGenerationResult(succeeded=1, failed=0)
        rows = db_manager.fetch_all("SELECT employee_id FROM payrolls")
        assert [row["employee_id"] for row in rows] == [employee.id]

    def test_no_active_employees(self, payroll_manager, make_employee):
        make_employee(status=EmployeeStatus.TERMINATED)
        result = payroll_manager.generate_monthly_payroll_for_active_employees(*FEBRUARY)
        assert result == BatchGenerationResult(succeeded=0, failed=0)

    def test_inverted_period_is_rejected_before_any_record(self, payroll_manager, make_employee):
        make_employee()
        with pytest.raises(ValidationError):
            payroll_manager.generate_monthly_payroll_for_active_employees(FEBRUARY[1], FEBRUARY[0])
        assert payroll_manager.get_all_payrolls() == []


# =============================================================================
# Queries and summaries
# =============================================================================


class TestPayrollQueries:

    def test_history_is_most_recent_period_first(self, payroll_manager, make_employee):
        employee = make_employee()
        payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        payroll_manager.generate_payroll_for_employee(employee.id, date(2023, 12, 1), date(2023, 12, 31))
        payroll_manager.generate_payroll_for_employee(employee.id, *FEBRUARY)

        history = payroll_manager.get_payroll_history_for_employee(employee.id)

        assert [p.pay_period_start for p in history] == [date(2024, 2, 1), date(2024, 1, 1), date(2023, 12, 1)]

    def test_history_only_contains_that_employee(self, payroll_manager, make_employee):
        anna = make_employee("Anna", "Smith")
        dan = make_employee("Dan", "Anderson")
        payroll_manager.generate_payroll_for_employee(anna.id, *JANUARY)
        payroll_manager.generate_payroll_for_employee(dan.id, *JANUARY)

        assert [p.employee_id for p in payroll_manager.get_payroll_history_for_employee(anna.id)] == [anna.id]

    def test_all_payrolls_newest_id_first(self, payroll_manager, make_employee):
        employee = make_employee()
        first = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        second = payroll_manager.generate_payroll_for_employee(employee.id, *FEBRUARY)

        assert [p.id for p in payroll_manager.get_all_payrolls()] == [second.id, first.id]

    def test_payrolls_for_period(self, payroll_manager, make_employee):
        employee = make_employee()
        january = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        payroll_manager.generate_payroll_for_employee(employee.id, *FEBRUARY)

        found = payroll_manager.get_payrolls_for_period(*JANUARY)
        assert [p.id for p in found] == [january.id]

    def test_summary_scenario(self, payroll_manager, make_employee):
        employee = make_employee(salary="1000")
        paid = payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        payroll_manager.generate_payroll_for_employee(employee.id, *FEBRUARY, bonus=Decimal("200"))
        payroll_manager.process_payroll_payment(paid.id)

        summary = payroll_manager.get_payroll_summary_for_employee(employee.id)

        assert summary.employee_id == employee.id
        assert summary.employee_name == "Anna Smith"
        assert summary.record_count == 2
        assert summary.total_paid == Decimal("1000")
        assert summary.total_pending == Decimal("1200")

    def test_summary_without_records(self, payroll_manager, make_employee):
        employee = make_employee()
        summary = payroll_manager.get_payroll_summary_for_employee(employee.id)
        assert summary.record_count == 0
        assert summary.total_paid == Decimal("0")
        assert summary.total_pending == Decimal("0")

    def test_summary_for_missing_employee(self, payroll_manager):
        with pytest.raises(NotFoundError):
            payroll_manager.get_payroll_summary_for_employee(31337)

    def test_get_payroll_by_invalid_id(self, payroll_manager):
        assert payroll_manager.get_payroll_by_id(0) is None
        assert payroll_manager.get_payroll_by_id(None) is None
