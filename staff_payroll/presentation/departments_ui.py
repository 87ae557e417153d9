# staff_payroll/presentation/departments_ui.py

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QTableView, QPushButton, QHBoxLayout,
                             QMessageBox, QDialog, QLineEdit, QTextEdit, QFormLayout,
                             QDialogButtonBox, QAbstractItemView, QHeaderView)
from PyQt5.QtCore import Qt, QAbstractTableModel, QVariant, QModelIndex

from typing import List, Optional, Any, Dict

from staff_payroll.business_logic.entities.department_entity import DepartmentEntity
from staff_payroll.business_logic.department_manager import DepartmentManager
from staff_payroll.business_logic.report_manager import ReportManager
from staff_payroll.exceptions import ValidationError, PersistenceError
import logging

logger = logging.getLogger(__name__)

class DepartmentTableModel(QAbstractTableModel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._data: List[DepartmentEntity] = []
        self._counts: Dict[int, int] = {}
        self._headers = ["ID", "Name", "Description", "Employees"]

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._data)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._data)):
            return QVariant()
        department = self._data[index.row()]
        col = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0: return str(department.id)
            elif col == 1: return department.name
            elif col == 2: return department.description or ""
            elif col == 3: return str(self._counts.get(department.id, 0))
        elif role == Qt.ItemDataRole.TextAlignmentRole:
            if col in (0, 3):
                return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        return QVariant()

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self._headers):
                return self._headers[section]
        return QVariant()

    def update_data(self, departments: List[DepartmentEntity], counts: Dict[int, int]):
        self.beginResetModel()
        self._data = departments
        self._counts = counts
        self.endResetModel()

    def get_department_at_row(self, row: int) -> Optional[DepartmentEntity]:
        if 0 <= row < len(self._data):
            return self._data[row]
        return None

class DepartmentDialog(QDialog):
    def __init__(self, department: Optional[DepartmentEntity] = None, parent=None):
        super().__init__(parent)
        self.department = department
        self.setWindowTitle("Add Department" if department is None else f"Edit Department: {department.name}")
        self.setMinimumWidth(360)

        layout = QFormLayout(self)
        self.name_edit = QLineEdit(self)
        self.description_edit = QTextEdit(self)
        self.description_edit.setFixedHeight(80)
        if department is not None:
            self.name_edit.setText(department.name)
            self.description_edit.setPlainText(department.description or "")

        layout.addRow("Name:", self.name_edit)
        layout.addRow("Description:", self.description_edit)

        self.button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel) # type: ignore
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

    def get_values(self):
        return self.name_edit.text().strip(), self.description_edit.toPlainText().strip() or None

class DepartmentsUI(QWidget):
    def __init__(self, department_manager: DepartmentManager, report_manager: ReportManager, parent=None):
        super().__init__(parent)
        self.department_manager = department_manager
        self.report_manager = report_manager
        self.table_model = DepartmentTableModel()
        self._init_ui()
        self.load_departments_data()

    def _init_ui(self):
        main_layout = QVBoxLayout(self)

        self.table_view = QTableView()
        self.table_view.setModel(self.table_model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        header = self.table_view.horizontalHeader()
        if header:
            header.setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
            header.setSectionResizeMode(2, QHeaderView.ResizeMode.Stretch)
        main_layout.addWidget(self.table_view)

        button_layout = QHBoxLayout()
        self.add_button = QPushButton("Add Department")
        self.edit_button = QPushButton("Edit Department")
        self.delete_button = QPushButton("Delete Department")
        self.refresh_button = QPushButton("Refresh")
        self.add_button.clicked.connect(self._add_department)
        self.edit_button.clicked.connect(self._edit_department)
        self.delete_button.clicked.connect(self._delete_department)
        self.refresh_button.clicked.connect(self.load_departments_data)
        for button in (self.add_button, self.edit_button, self.delete_button):
            button_layout.addWidget(button)
        button_layout.addStretch()
        button_layout.addWidget(self.refresh_button)
        main_layout.addLayout(button_layout)

    def load_departments_data(self):
        try:
            departments = self.department_manager.get_all_departments()
            counts = {row["department_id"]: row["employee_count"]
                      for row in self.report_manager.get_department_employee_counts()}
            self.table_model.update_data(departments, counts)
        except PersistenceError as e:
            logger.error(f"Error loading departments: {e}", exc_info=True)
            QMessageBox.critical(self, "Load Error", f"Error loading departments: {e}")

    def _selected_department(self) -> Optional[DepartmentEntity]:
        return self.table_model.get_department_at_row(self.table_view.currentIndex().row())

    def _add_department(self):
        dialog = DepartmentDialog(parent=self)
        if dialog.exec_() != QDialog.DialogCode.Accepted:
            return
        name, description = dialog.get_values()
        try:
            self.department_manager.add_department(name, description)
            self.load_departments_data()
        except ValidationError as ve:
            QMessageBox.warning(self, "Validation Error", str(ve))
        except PersistenceError as e:
            QMessageBox.critical(self, "Error", f"Failed to add department: {e}")

    def _edit_department(self):
        selected = self._selected_department()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select a department to edit.")
            return
        dialog = DepartmentDialog(selected, parent=self)
        if dialog.exec_() != QDialog.DialogCode.Accepted:
            return
        name, description = dialog.get_values()
        updated = DepartmentEntity(id=selected.id, name=name, description=description,
                                   created_at=selected.created_at)
        try:
            if self.department_manager.update_department(updated):
                self.load_departments_data()
            else:
                QMessageBox.warning(self, "Failed", "Failed to update department.")
        except ValidationError as ve:
            QMessageBox.warning(self, "Validation Error", str(ve))

    def _delete_department(self):
        selected = self._selected_department()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select a department to delete.")
            return
        reply = QMessageBox.question(self, "Confirm Delete",
                                     f"Delete department '{selected.name}'?",
                                     QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No, # type: ignore
                                     QMessageBox.StandardButton.No)
        if reply != QMessageBox.StandardButton.Yes:
            return
        try:
            if self.department_manager.delete_department(selected.id):
                self.load_departments_data()
            else:
                QMessageBox.warning(self, "Failed", "Failed to delete department.")
        except ValidationError as ve:
            QMessageBox.warning(self, "Cannot Delete", str(ve))
