# staff_payroll/business_logic/report_manager.py

from typing import List, Dict, Any
from datetime import date
from decimal import Decimal

from staff_payroll.business_logic.employee_manager import EmployeeManager
from staff_payroll.business_logic.payroll_manager import PayrollManager
from staff_payroll.business_logic.department_manager import DepartmentManager
import logging

logger = logging.getLogger(__name__)

UNKNOWN_EMPLOYEE = "(deleted employee)"

class ReportManager:
    def __init__(self,
                 employee_manager: EmployeeManager,
                 payroll_manager: PayrollManager,
                 department_manager: DepartmentManager):
        if employee_manager is None: raise ValueError("employee_manager cannot be None")
        if payroll_manager is None: raise ValueError("payroll_manager cannot be None")
        if department_manager is None: raise ValueError("department_manager cannot be None")
        self.employee_manager = employee_manager
        self.payroll_manager = payroll_manager
        self.department_manager = department_manager

    def get_department_employee_counts(self) -> List[Dict[str, Any]]:
        """One row per department with the number of employees assigned to it."""
        report = []
        for department in self.department_manager.get_all_departments():
            employees = self.employee_manager.get_employees_by_department(department.id)
            report.append({
                "department_id": department.id,
                "department_name": department.name,
                "employee_count": len(employees),
            })
        logger.debug(f"Department head-count report built for {len(report)} departments.")
        return report

    def get_payroll_register(self, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        """Payroll records within the period, with employee names resolved."""
        names: Dict[int, str] = {e.id: e.full_name for e in self.employee_manager.get_all_employees()}
        register = []
        for payroll in self.payroll_manager.get_payrolls_for_period(start_date, end_date):
            register.append({
                "payroll_id": payroll.id,
                "employee_id": payroll.employee_id,
                "employee_name": names.get(payroll.employee_id, UNKNOWN_EMPLOYEE),
                "pay_period_start": payroll.pay_period_start,
                "pay_period_end": payroll.pay_period_end,
                "basic_salary": payroll.basic_salary,
                "bonus": payroll.bonus,
                "deductions": payroll.deductions,
                "net_salary": payroll.net_salary,
                "payment_status": payroll.payment_status,
                "payment_date": payroll.payment_date,
            })
        logger.info(f"Payroll register for {start_date} to {end_date}: {len(register)} records.")
        return register

    @staticmethod
    def get_payroll_register_totals(register: List[Dict[str, Any]]) -> Dict[str, Decimal]:
        return {
            key: sum((row[key] for row in register), Decimal("0"))
            for key in ("basic_salary", "bonus", "deductions", "net_salary")
        }
