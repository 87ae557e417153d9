"""Tests for DepartmentManager."""

import pytest

from staff_payroll.business_logic.department_manager import DepartmentManager
from staff_payroll.exceptions import ValidationError


class TestDepartmentManager:

    def test_add_and_get(self, department_manager):
        department = department_manager.add_department("  Engineering ", "Builds things")

        assert department.id is not None
        assert department.name == "Engineering"
        assert department.created_at is not None
        stored = department_manager.get_department_by_id(department.id)
        assert stored.description == "Builds things"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_is_required(self, department_manager, name):
        with pytest.raises(ValidationError):
            department_manager.add_department(name)
        assert department_manager.get_all_departments() == []

    def test_list_ordered_by_id(self, department_manager):
        names = ["Sales", "Finance", "Operations"]
        for name in names:
            department_manager.add_department(name)
        assert [d.name for d in department_manager.get_all_departments()] == names

    def test_update(self, department_manager):
        department = department_manager.add_department("Sales")
        department.name = "Sales & Marketing "
        department.description = "Front office"

        assert department_manager.update_department(department) is True
        stored = department_manager.get_department_by_id(department.id)
        assert stored.name == "Sales & Marketing"
        assert stored.description == "Front office"

    def test_update_requires_name(self, department_manager):
        department = department_manager.add_department("Sales")
        department.name = ""
        with pytest.raises(ValidationError):
            department_manager.update_department(department)

    def test_delete_empty_department(self, department_manager):
        department = department_manager.add_department("Sales")
        assert department_manager.delete_department(department.id) is True
        assert department_manager.get_department_by_id(department.id) is None

    def test_delete_with_employees_is_refused(self, department_manager, make_employee):
        department = department_manager.add_department("Sales")
        make_employee(department_id=department.id)
        make_employee("Dan", "Anderson", department_id=department.id)

        with pytest.raises(ValidationError) as exc_info:
            department_manager.delete_department(department.id)

        assert exc_info.value.details["employee_count"] == 2
        assert department_manager.get_department_by_id(department.id) is not None

    def test_delete_missing_returns_false(self, department_manager):
        assert department_manager.delete_department(81) is False

    def test_delete_requires_positive_id(self, department_manager):
        with pytest.raises(ValidationError):
            department_manager.delete_department(0)

    def test_repositories_are_required(self, departments_repo):
        with pytest.raises(ValueError):
            DepartmentManager(departments_repo, None)
