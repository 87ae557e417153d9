# staff_payroll/presentation/employees_ui.py

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QLabel, QTableView, QPushButton,
                             QHBoxLayout, QMessageBox, QDialog, QLineEdit, QComboBox,
                             QFormLayout, QDialogButtonBox, QAbstractItemView,
                             QDoubleSpinBox, QHeaderView, QDateEdit)
from PyQt5.QtCore import Qt, QAbstractTableModel, QVariant, QModelIndex
from PyQt5.QtGui import QColor

from typing import List, Optional, Any, Dict
from dataclasses import replace
from decimal import Decimal

from staff_payroll.business_logic.entities.employee_entity import EmployeeEntity
from staff_payroll.business_logic.entities.department_entity import DepartmentEntity
from staff_payroll.business_logic.employee_manager import EmployeeManager
from staff_payroll.business_logic.department_manager import DepartmentManager
from staff_payroll.constants import EmployeeStatus, QT_DATE_FORMAT
from staff_payroll.exceptions import ValidationError, PersistenceError
from staff_payroll.utils import date_converter
import logging

logger = logging.getLogger(__name__)

ALL_DEPARTMENTS = -1

# --- Custom Table Model for Employees ---
class EmployeeTableModel(QAbstractTableModel):
    def __init__(self, data: Optional[List[EmployeeEntity]] = None, parent=None):
        super().__init__(parent)
        self._data: List[EmployeeEntity] = data if data is not None else []
        self._department_names: Dict[int, str] = {}
        self._headers = ["ID", "First Name", "Last Name", "Email", "Phone", "Hire Date",
                         "Job Title", "Department", "Salary", "Status"]

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._data)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return QVariant()

        row = index.row()
        col = index.column()
        if not (0 <= row < len(self._data)):
            return QVariant()
        employee = self._data[row]

        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0: return str(employee.id)
            elif col == 1: return employee.first_name
            elif col == 2: return employee.last_name
            elif col == 3: return employee.email
            elif col == 4: return employee.phone or ""
            elif col == 5: return date_converter.to_display_str(employee.hire_date)
            elif col == 6: return employee.job_title or ""
            elif col == 7:
                if employee.department_id is None:
                    return ""
                return self._department_names.get(employee.department_id, str(employee.department_id))
            elif col == 8: return f"{employee.salary:,.2f}"
            elif col == 9: return employee.status.label

        elif role == Qt.ItemDataRole.TextAlignmentRole:
            if col in (0, 8):
                return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
            return Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter

        elif role == Qt.ItemDataRole.ForegroundRole:
            if not employee.is_active:
                return QColor(Qt.GlobalColor.gray)

        return QVariant()

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self._headers):
                return self._headers[section]
        return QVariant()

    def update_data(self, new_data: List[EmployeeEntity], department_names: Optional[Dict[int, str]] = None):
        logger.debug(f"Updating employee table model with {len(new_data)} rows.")
        self.beginResetModel()
        self._data = new_data
        if department_names is not None:
            self._department_names = department_names
        self.endResetModel()

    def get_employee_at_row(self, row: int) -> Optional[EmployeeEntity]:
        if 0 <= row < len(self._data):
            return self._data[row]
        return None

# --- Add/Edit Employee Dialog ---
class EmployeeDialog(QDialog):
    def __init__(self, departments: List[DepartmentEntity],
                 employee: Optional[EmployeeEntity] = None, parent=None):
        super().__init__(parent)
        self.employee = employee
        is_edit_mode = employee is not None

        self.setWindowTitle("Add New Employee" if not is_edit_mode else f"Edit Employee: {employee.full_name}")
        self.setMinimumWidth(420)

        layout = QFormLayout(self)

        self.first_name_edit = QLineEdit(self)
        self.last_name_edit = QLineEdit(self)
        self.email_edit = QLineEdit(self)
        self.phone_edit = QLineEdit(self)
        self.hire_date_edit = QDateEdit(self)
        self.hire_date_edit.setCalendarPopup(True)
        self.hire_date_edit.setDisplayFormat(QT_DATE_FORMAT)
        self.job_title_edit = QLineEdit(self)

        self.department_combo = QComboBox(self)
        self.department_combo.addItem("-- None --", None)
        for department in departments:
            self.department_combo.addItem(f"{department.id} - {department.name}", department.id)

        self.salary_spinbox = QDoubleSpinBox(self)
        self.salary_spinbox.setDecimals(2)
        self.salary_spinbox.setMinimum(0.00)
        self.salary_spinbox.setMaximum(999999999.99)
        self.salary_spinbox.setGroupSeparatorShown(True)

        self.status_combo = QComboBox(self)
        for status in EmployeeStatus:
            self.status_combo.addItem(status.label, status)

        if is_edit_mode:
            self.first_name_edit.setText(employee.first_name)
            self.last_name_edit.setText(employee.last_name)
            self.email_edit.setText(employee.email)
            self.phone_edit.setText(employee.phone or "")
            self.hire_date_edit.setDate(date_converter.to_qdate(employee.hire_date))
            self.job_title_edit.setText(employee.job_title or "")
            dept_index = self.department_combo.findData(employee.department_id)
            self.department_combo.setCurrentIndex(dept_index if dept_index >= 0 else 0)
            self.salary_spinbox.setValue(float(employee.salary))
            self.status_combo.setCurrentIndex(self.status_combo.findData(employee.status))
        else:
            self.hire_date_edit.setDate(date_converter.to_qdate(None))
            self.status_combo.setCurrentIndex(self.status_combo.findData(EmployeeStatus.ACTIVE))

        layout.addRow("First Name:", self.first_name_edit)
        layout.addRow("Last Name:", self.last_name_edit)
        layout.addRow("Email:", self.email_edit)
        layout.addRow("Phone:", self.phone_edit)
        layout.addRow("Hire Date:", self.hire_date_edit)
        layout.addRow("Job Title:", self.job_title_edit)
        layout.addRow("Department:", self.department_combo)
        layout.addRow("Salary:", self.salary_spinbox)
        layout.addRow("Status:", self.status_combo)

        buttons = QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        self.button_box = QDialogButtonBox(buttons, Qt.Orientation.Horizontal, self) # type: ignore
        layout.addWidget(self.button_box)

        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)

    def get_employee(self) -> EmployeeEntity:
        """
        Builds the entity from the form. In edit mode the original record is
        copied first so fields not shown here (id, timestamps) are kept.
        """
        values = dict(
            first_name=self.first_name_edit.text().strip(),
            last_name=self.last_name_edit.text().strip(),
            email=self.email_edit.text().strip(),
            phone=self.phone_edit.text().strip() or None,
            hire_date=date_converter.from_qdate(self.hire_date_edit.date()),
            job_title=self.job_title_edit.text().strip() or None,
            department_id=self.department_combo.currentData(),
            salary=Decimal(str(round(self.salary_spinbox.value(), 2))),
            status=self.status_combo.currentData(),
        )
        if self.employee is not None:
            return replace(self.employee, **values)
        return EmployeeEntity(**values)

# --- Main Employees UI Widget ---
class EmployeesUI(QWidget):
    def __init__(self, employee_manager: EmployeeManager, department_manager: DepartmentManager, parent=None):
        super().__init__(parent)
        self.employee_manager = employee_manager
        self.department_manager = department_manager
        self.table_model = EmployeeTableModel()
        self._init_ui()
        self.load_employees_data()

    def _init_ui(self):
        main_layout = QVBoxLayout(self)

        filter_layout = QHBoxLayout()
        self.search_edit = QLineEdit(self)
        self.search_edit.setPlaceholderText("Search by first or last name...")
        self.search_edit.returnPressed.connect(self._search_employees)
        self.search_button = QPushButton("Search")
        self.search_button.clicked.connect(self._search_employees)
        self.department_filter_combo = QComboBox(self)
        self.department_filter_combo.currentIndexChanged.connect(self._on_department_filter_changed)

        filter_layout.addWidget(self.search_edit)
        filter_layout.addWidget(self.search_button)
        filter_layout.addStretch()
        filter_layout.addWidget(QLabel("Department:"))
        filter_layout.addWidget(self.department_filter_combo)
        main_layout.addLayout(filter_layout)

        self.table_view = QTableView()
        self.table_view.setModel(self.table_model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)

        header = self.table_view.horizontalHeader()
        if header:
            header.setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
            header.setSectionResizeMode(3, QHeaderView.ResizeMode.Stretch) # Email column
        main_layout.addWidget(self.table_view)

        button_layout = QHBoxLayout()
        self.add_button = QPushButton("Add New Employee")
        self.edit_button = QPushButton("Update Employee")
        self.delete_button = QPushButton("Delete Employee")
        self.refresh_button = QPushButton("Refresh")

        self.add_button.clicked.connect(self._open_add_employee_dialog)
        self.edit_button.clicked.connect(self._open_edit_employee_dialog)
        self.delete_button.clicked.connect(self._delete_selected_employee)
        self.refresh_button.clicked.connect(self.reload)

        button_layout.addWidget(self.add_button)
        button_layout.addWidget(self.edit_button)
        button_layout.addWidget(self.delete_button)
        button_layout.addStretch()
        button_layout.addWidget(self.refresh_button)

        main_layout.addLayout(button_layout)
        self.setLayout(main_layout)
        self._reload_department_filter()
        logger.info("EmployeesUI initialized.")

    def _reload_department_filter(self):
        current = self.department_filter_combo.currentData()
        self.department_filter_combo.blockSignals(True)
        self.department_filter_combo.clear()
        self.department_filter_combo.addItem("All Departments", ALL_DEPARTMENTS)
        for department in self.department_manager.get_all_departments():
            self.department_filter_combo.addItem(department.name, department.id)
        index = self.department_filter_combo.findData(current)
        self.department_filter_combo.setCurrentIndex(index if index >= 0 else 0)
        self.department_filter_combo.blockSignals(False)

    def _department_names(self) -> Dict[int, str]:
        return {d.id: d.name for d in self.department_manager.get_all_departments()}

    def reload(self):
        self.search_edit.clear()
        self._reload_department_filter()
        self.load_employees_data()

    def _on_department_filter_changed(self, index: int):
        self.search_edit.clear()
        self.load_employees_data()

    def load_employees_data(self):
        department_id = self.department_filter_combo.currentData()
        logger.debug(f"Loading employees data... (Department filter: {department_id})")
        try:
            if department_id is None or department_id == ALL_DEPARTMENTS:
                employees = self.employee_manager.get_all_employees()
            else:
                employees = self.employee_manager.get_employees_by_department(department_id)
            self.table_model.update_data(employees, self._department_names())
            logger.info(f"{len(employees)} employees loaded into table.")
        except PersistenceError as e:
            logger.error(f"Error loading employees: {e}", exc_info=True)
            QMessageBox.critical(self, "Load Error", f"Error loading the employee list: {e}")

    def _search_employees(self):
        term = self.search_edit.text()
        if not term.strip():
            self.load_employees_data()
            return
        try:
            employees = self.employee_manager.search_employees_by_name(term)
            self.table_model.update_data(employees, self._department_names())
            if not employees:
                QMessageBox.information(self, "Search", f"No employees found with name: {term}")
        except ValidationError as ve:
            QMessageBox.warning(self, "Invalid Input", str(ve))
        except PersistenceError as e:
            logger.error(f"Error searching employees: {e}", exc_info=True)
            QMessageBox.critical(self, "Error", f"Error searching employees: {e}")

    def _selected_employee(self) -> Optional[EmployeeEntity]:
        return self.table_model.get_employee_at_row(self.table_view.currentIndex().row())

    def _open_add_employee_dialog(self):
        logger.debug("Opening Add Employee dialog.")
        dialog = EmployeeDialog(self.department_manager.get_all_departments(), parent=self)
        if dialog.exec_() == QDialog.DialogCode.Accepted:
            employee = dialog.get_employee()
            try:
                employee_id = self.employee_manager.add_employee(employee)
                QMessageBox.information(self, "Success", f"Employee added successfully! Employee ID: {employee_id}")
                self.load_employees_data()
            except ValidationError as ve:
                QMessageBox.warning(self, "Validation Error", str(ve))
            except PersistenceError as e:
                logger.error(f"Error adding employee: {e}", exc_info=True)
                QMessageBox.critical(self, "Error", f"Failed to add employee: {e}")

    def _open_edit_employee_dialog(self):
        selected = self._selected_employee()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select an employee to update.")
            return

        # Re-read so the dialog starts from the stored values.
        current = self.employee_manager.get_employee_by_id(selected.id)
        if current is None:
            QMessageBox.warning(self, "Not Found", "Employee not found.")
            self.load_employees_data()
            return

        dialog = EmployeeDialog(self.department_manager.get_all_departments(), employee=current, parent=self)
        if dialog.exec_() == QDialog.DialogCode.Accepted:
            employee = dialog.get_employee()
            try:
                if self.employee_manager.update_employee(employee):
                    QMessageBox.information(self, "Success", "Employee updated successfully!")
                    self.load_employees_data()
                else:
                    QMessageBox.warning(self, "Failed", "Failed to update employee.")
            except ValidationError as ve:
                QMessageBox.warning(self, "Validation Error", str(ve))

    def _delete_selected_employee(self):
        selected = self._selected_employee()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select an employee to delete.")
            return

        reply = QMessageBox.question(self, "Confirm Delete",
                                     f"Are you sure you want to delete employee '{selected.full_name}' (ID: {selected.id})?",
                                     QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No, # type: ignore
                                     QMessageBox.StandardButton.No)
        if reply != QMessageBox.StandardButton.Yes:
            return

        try:
            if self.employee_manager.delete_employee(selected.id):
                QMessageBox.information(self, "Success", "Employee deleted successfully!")
                self.load_employees_data()
            else:
                QMessageBox.warning(self, "Failed",
                                    "Failed to delete employee. Employees with payroll history cannot be deleted; "
                                    "set their status to Inactive or Terminated instead.")
        except ValidationError as ve:
            QMessageBox.warning(self, "Validation Error", str(ve))
