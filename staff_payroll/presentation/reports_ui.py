# staff_payroll/presentation/reports_ui.py

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QTableView, QPushButton, QMessageBox,
                             QFormLayout, QGroupBox, QHeaderView, QTabWidget, QDateEdit)
from PyQt5.QtCore import Qt, QAbstractTableModel, QVariant, QModelIndex
from PyQt5.QtGui import QFont, QColor
from typing import List, Optional, Any, Dict
from datetime import date
from decimal import Decimal

from staff_payroll.business_logic.report_manager import ReportManager
from staff_payroll.constants import QT_DATE_FORMAT
from staff_payroll.exceptions import ValidationError, PersistenceError
from staff_payroll.utils import date_converter

import logging
logger = logging.getLogger(__name__)


# ============================================================
#  Department head count
# ============================================================
class DepartmentCountTableModel(QAbstractTableModel):
    def __init__(self, data: Optional[List[Dict[str, Any]]] = None, parent=None):
        super().__init__(parent)
        self._data: List[Dict[str, Any]] = data if data is not None else []
        self._headers = ["Department ID", "Department", "Employees"]

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._data)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return QVariant()
        item = self._data[index.row()]
        col = index.column()
        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0: return str(item.get("department_id", ""))
            elif col == 1: return item.get("department_name", "")
            elif col == 2: return str(item.get("employee_count", 0))
        return QVariant()

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self._headers):
                return self._headers[section]
        return QVariant()

    def update_data(self, new_data: List[Dict[str, Any]]):
        self.beginResetModel()
        self._data = new_data
        self.endResetModel()

class DepartmentCountWidget(QWidget):
    def __init__(self, report_manager: ReportManager, parent=None):
        super().__init__(parent)
        self.report_manager = report_manager
        layout = QVBoxLayout(self)
        self.generate_button = QPushButton("Refresh Report")
        self.table_view = QTableView(self)
        self.table_model = DepartmentCountTableModel()
        self.table_view.setModel(self.table_model)
        self.table_view.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        layout.addWidget(self.generate_button)
        layout.addWidget(self.table_view)
        self.generate_button.clicked.connect(self._generate_report)

    def _generate_report(self):
        try:
            self.table_model.update_data(self.report_manager.get_department_employee_counts())
        except PersistenceError as e:
            logger.error(f"Error generating department report: {e}", exc_info=True)
            QMessageBox.critical(self, "Report Error", f"Error generating the department report: {e}")

# ============================================================
#  Payroll register
# ============================================================
class PayrollRegisterTableModel(QAbstractTableModel):
    def __init__(self, data: Optional[List[Dict[str, Any]]] = None, parent=None):
        super().__init__(parent)
        self._data: List[Dict[str, Any]] = data if data is not None else []
        self._headers = ["Payroll ID", "Employee", "Period Start", "Period End", "Basic Salary",
                         "Bonus", "Deductions", "Net Salary", "Status", "Payment Date"]
        self.total_row: Dict[str, Decimal] = ReportManager.get_payroll_register_totals(self._data)

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._data) + 1 # +1 for the total row

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return QVariant()
        row = index.row()
        col = index.column()

        # --- Total Row ---
        if row == len(self._data):
            if role == Qt.ItemDataRole.DisplayRole:
                if col == 1: return "Total"
                if col == 4: return f"{self.total_row['basic_salary']:,.2f}"
                if col == 5: return f"{self.total_row['bonus']:,.2f}"
                if col == 6: return f"{self.total_row['deductions']:,.2f}"
                if col == 7: return f"{self.total_row['net_salary']:,.2f}"
            if role == Qt.ItemDataRole.FontRole:
                font = QFont(); font.setBold(True); return font
            if role == Qt.ItemDataRole.BackgroundRole:
                return QColor("#f0f0f0")
            return QVariant()

        item = self._data[row]
        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0: return str(item["payroll_id"])
            elif col == 1: return item["employee_name"]
            elif col == 2: return date_converter.to_display_str(item["pay_period_start"])
            elif col == 3: return date_converter.to_display_str(item["pay_period_end"])
            elif col == 4: return f"{item['basic_salary']:,.2f}"
            elif col == 5: return f"{item['bonus']:,.2f}"
            elif col == 6: return f"{item['deductions']:,.2f}"
            elif col == 7: return f"{item['net_salary']:,.2f}"
            elif col == 8: return item["payment_status"].label
            elif col == 9: return date_converter.to_display_str(item["payment_date"])
        elif role == Qt.ItemDataRole.TextAlignmentRole:
            if 4 <= col <= 7:
                return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        return QVariant()

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self._headers):
                return self._headers[section]
        return QVariant()

    def update_data(self, new_data: List[Dict[str, Any]]):
        self.beginResetModel()
        self._data = new_data
        self.total_row = ReportManager.get_payroll_register_totals(new_data)
        self.endResetModel()

class PayrollRegisterWidget(QWidget):
    def __init__(self, report_manager: ReportManager, parent=None):
        super().__init__(parent)
        self.report_manager = report_manager
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        options_group = QGroupBox("Payroll Register Options")
        options_layout = QFormLayout(options_group)

        start, end = date_converter.previous_month_bounds(date.today())
        self.start_date_edit = QDateEdit(date_converter.to_qdate(start), self)
        self.start_date_edit.setCalendarPopup(True)
        self.start_date_edit.setDisplayFormat(QT_DATE_FORMAT)
        self.end_date_edit = QDateEdit(date_converter.to_qdate(end), self)
        self.end_date_edit.setCalendarPopup(True)
        self.end_date_edit.setDisplayFormat(QT_DATE_FORMAT)
        self.generate_button = QPushButton("Generate Report")

        options_layout.addRow("From Date:", self.start_date_edit)
        options_layout.addRow("To Date:", self.end_date_edit)
        options_layout.addRow(self.generate_button)
        layout.addWidget(options_group)

        self.register_table = QTableView(self)
        self.register_model = PayrollRegisterTableModel()
        self.register_table.setModel(self.register_model)
        self.register_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        layout.addWidget(self.register_table)

        self.generate_button.clicked.connect(self._generate_register)

    def _generate_register(self):
        start_date = date_converter.from_qdate(self.start_date_edit.date())
        end_date = date_converter.from_qdate(self.end_date_edit.date())
        try:
            report_data = self.report_manager.get_payroll_register(start_date, end_date)
            self.register_model.update_data(report_data)
            logger.info("Payroll register displayed successfully.")
        except ValidationError as ve:
            QMessageBox.warning(self, "Invalid Period", str(ve))
        except PersistenceError as e:
            logger.error(f"Error generating payroll register: {e}", exc_info=True)
            QMessageBox.critical(self, "Report Error", f"Error generating the payroll register: {e}")

class ReportsUI(QWidget):
    def __init__(self, report_manager: ReportManager, parent=None):
        super().__init__(parent)
        self.report_manager = report_manager
        self._init_ui()

    def _init_ui(self):
        main_layout = QVBoxLayout(self)

        self.report_tabs = QTabWidget()
        main_layout.addWidget(self.report_tabs)

        self.department_count_widget = DepartmentCountWidget(self.report_manager)
        self.report_tabs.addTab(self.department_count_widget, "Department Head Count")

        self.payroll_register_widget = PayrollRegisterWidget(self.report_manager)
        self.report_tabs.addTab(self.payroll_register_widget, "Payroll Register")
