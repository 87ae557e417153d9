"""Tests for ReportManager."""

from datetime import date
from decimal import Decimal

import pytest

from staff_payroll.business_logic.report_manager import ReportManager, UNKNOWN_EMPLOYEE
from staff_payroll.constants import PaymentStatus
from staff_payroll.exceptions import ValidationError

from tests.conftest import JANUARY, TODAY


class TestDepartmentEmployeeCounts:

    def test_counts_per_department(self, report_manager, department_manager, make_employee):
        sales = department_manager.add_department("Sales")
        empty = department_manager.add_department("Legal")
        make_employee(department_id=sales.id)
        make_employee("Dan", "Anderson", department_id=sales.id)
        make_employee("Eve", "Stone")

        report = report_manager.get_department_employee_counts()

        assert report == [
            {"department_id": sales.id, "department_name": "Sales", "employee_count": 2},
            {"department_id": empty.id, "department_name": "Legal", "employee_count": 0},
        ]

    def test_no_departments(self, report_manager):
        assert report_manager.get_department_employee_counts() == []


class TestPayrollRegister:

    def test_rows_and_totals(self, report_manager, payroll_manager, make_employee):
        anna = make_employee("Anna", "Smith", salary="3000")
        dan = make_employee("Dan", "Anderson", salary="4000")
        first = payroll_manager.generate_payroll_for_employee(anna.id, *JANUARY, bonus=Decimal("100"))
        payroll_manager.generate_payroll_for_employee(dan.id, *JANUARY, deductions=Decimal("250"))
        payroll_manager.generate_payroll_for_employee(dan.id, date(2024, 2, 1), date(2024, 2, 29))
        payroll_manager.process_payroll_payment(first.id)

        register = report_manager.get_payroll_register(*JANUARY)

        assert len(register) == 2
        by_name = {row["employee_name"]: row for row in register}
        assert by_name["Anna Smith"]["payment_status"] == PaymentStatus.PAID
        assert by_name["Anna Smith"]["payment_date"] == TODAY
        assert by_name["Dan Anderson"]["net_salary"] == Decimal("3750")

        totals = ReportManager.get_payroll_register_totals(register)
        assert totals == {
            "basic_salary": Decimal("7000"),
            "bonus": Decimal("100"),
            "deductions": Decimal("250"),
            "net_salary": Decimal("6850"),
        }

    def test_totals_of_empty_register(self):
        totals = ReportManager.get_payroll_register_totals([])
        assert all(value == Decimal("0") for value in totals.values())

    def test_unknown_employee_name(self, report_manager, payroll_manager, db_manager, make_employee):
        employee = make_employee()
        payroll_manager.generate_payroll_for_employee(employee.id, *JANUARY)
        # Bypass the foreign key to simulate a row left behind by an older schema.
        with db_manager as conn:
            conn.execute("PRAGMA foreign_keys = OFF;")
            conn.execute("DELETE FROM employees WHERE id = ?", (employee.id,))
            conn.commit()

        register = report_manager.get_payroll_register(*JANUARY)
        assert register[0]["employee_name"] == UNKNOWN_EMPLOYEE

    def test_inverted_period_is_rejected(self, report_manager):
        with pytest.raises(ValidationError):
            report_manager.get_payroll_register(JANUARY[1], JANUARY[0])
