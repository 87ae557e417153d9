# staff_payroll/presentation/payroll_ui.py

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QLabel, QTableView, QPushButton, QHBoxLayout,
                             QMessageBox, QDialog, QComboBox, QFormLayout, QDialogButtonBox,
                             QAbstractItemView, QDoubleSpinBox, QHeaderView, QDateEdit)
from PyQt5.QtCore import Qt, QAbstractTableModel, QVariant, QModelIndex
from PyQt5.QtGui import QColor

from typing import List, Optional, Any, Dict
from datetime import date
from decimal import Decimal

from staff_payroll.business_logic.entities.employee_entity import EmployeeEntity
from staff_payroll.business_logic.entities.payroll_entity import PayrollEntity
from staff_payroll.business_logic.employee_manager import EmployeeManager
from staff_payroll.business_logic.payroll_manager import PayrollManager
from staff_payroll.constants import QT_DATE_FORMAT
from staff_payroll.exceptions import ValidationError, NotFoundError, PersistenceError
from staff_payroll.utils import date_converter
import logging

logger = logging.getLogger(__name__)

ALL_EMPLOYEES = -1

def _money(value: Optional[Decimal]) -> str:
    return f"{(value or Decimal('0')):,.2f}"

def _to_decimal(spinbox: QDoubleSpinBox) -> Decimal:
    return Decimal(str(round(spinbox.value(), 2)))

def _money_spinbox(parent) -> QDoubleSpinBox:
    spinbox = QDoubleSpinBox(parent)
    spinbox.setDecimals(2)
    spinbox.setMinimum(0.00)
    spinbox.setMaximum(999999999.99)
    spinbox.setGroupSeparatorShown(True)
    return spinbox

def _date_edit(parent) -> QDateEdit:
    date_edit = QDateEdit(parent)
    date_edit.setCalendarPopup(True)
    date_edit.setDisplayFormat(QT_DATE_FORMAT)
    return date_edit

class PayrollTableModel(QAbstractTableModel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._data: List[PayrollEntity] = []
        self._employee_names: Dict[int, str] = {}
        self._headers = ["ID", "Employee", "Period Start", "Period End", "Basic Salary",
                         "Bonus", "Deductions", "Net Salary", "Status", "Payment Date"]

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._data)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._data)):
            return QVariant()
        payroll = self._data[index.row()]
        col = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0: return str(payroll.id)
            elif col == 1: return self._employee_names.get(payroll.employee_id, f"#{payroll.employee_id}")
            elif col == 2: return date_converter.to_display_str(payroll.pay_period_start)
            elif col == 3: return date_converter.to_display_str(payroll.pay_period_end)
            elif col == 4: return _money(payroll.basic_salary)
            elif col == 5: return _money(payroll.bonus)
            elif col == 6: return _money(payroll.deductions)
            elif col == 7: return _money(payroll.net_salary)
            elif col == 8: return payroll.payment_status.label
            elif col == 9: return date_converter.to_display_str(payroll.payment_date)

        elif role == Qt.ItemDataRole.TextAlignmentRole:
            if col == 0 or 4 <= col <= 7:
                return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter

        elif role == Qt.ItemDataRole.ForegroundRole:
            if col == 8:
                return QColor("darkgreen") if payroll.is_paid else QColor("darkorange")
            if col == 7 and payroll.net_salary < 0:
                return QColor("red")

        return QVariant()

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self._headers):
                return self._headers[section]
        return QVariant()

    def update_data(self, payrolls: List[PayrollEntity], employee_names: Dict[int, str]):
        self.beginResetModel()
        self._data = payrolls
        self._employee_names = employee_names
        self.endResetModel()

    def get_payroll_at_row(self, row: int) -> Optional[PayrollEntity]:
        if 0 <= row < len(self._data):
            return self._data[row]
        return None

class GeneratePayrollDialog(QDialog):
    """Picks an employee and a pay period; bonus and deductions are optional."""
    def __init__(self, employees: List[EmployeeEntity], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Generate Payroll")
        self.setMinimumWidth(380)
        layout = QFormLayout(self)

        self.employee_combo = QComboBox(self)
        for employee in employees:
            self.employee_combo.addItem(f"{employee.id} - {employee.full_name} ({employee.status.label})", employee.id)

        start, end = date_converter.previous_month_bounds(date.today())
        self.start_date_edit = _date_edit(self)
        self.start_date_edit.setDate(date_converter.to_qdate(start))
        self.end_date_edit = _date_edit(self)
        self.end_date_edit.setDate(date_converter.to_qdate(end))
        self.bonus_spinbox = _money_spinbox(self)
        self.deductions_spinbox = _money_spinbox(self)

        layout.addRow("Employee:", self.employee_combo)
        layout.addRow("Period Start:", self.start_date_edit)
        layout.addRow("Period End:", self.end_date_edit)
        layout.addRow("Bonus:", self.bonus_spinbox)
        layout.addRow("Deductions:", self.deductions_spinbox)

        self.button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel) # type: ignore
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

    def get_values(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_combo.currentData(),
            "pay_period_start": date_converter.from_qdate(self.start_date_edit.date()),
            "pay_period_end": date_converter.from_qdate(self.end_date_edit.date()),
            "bonus": _to_decimal(self.bonus_spinbox),
            "deductions": _to_decimal(self.deductions_spinbox),
        }

class PayPeriodDialog(QDialog):
    """Pay period for batch generation; defaults to the previous calendar month."""
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Generate Monthly Payroll")
        layout = QFormLayout(self)
        start, end = date_converter.previous_month_bounds(date.today())
        self.start_date_edit = _date_edit(self)
        self.start_date_edit.setDate(date_converter.to_qdate(start))
        self.end_date_edit = _date_edit(self)
        self.end_date_edit.setDate(date_converter.to_qdate(end))
        layout.addRow(QLabel("A pending payroll record is created for every active employee."))
        layout.addRow("Period Start:", self.start_date_edit)
        layout.addRow("Period End:", self.end_date_edit)

        self.button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel) # type: ignore
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

    def get_period(self):
        return (date_converter.from_qdate(self.start_date_edit.date()),
                date_converter.from_qdate(self.end_date_edit.date()))

class EditPayrollDialog(QDialog):
    """Edits bonus and deductions of a pending record; net salary is recomputed on save."""
    def __init__(self, payroll: PayrollEntity, employee_name: str, parent=None):
        super().__init__(parent)
        self.payroll = payroll
        self.setWindowTitle(f"Edit Payroll #{payroll.id}")
        layout = QFormLayout(self)

        self.bonus_spinbox = _money_spinbox(self)
        self.bonus_spinbox.setValue(float(payroll.bonus))
        self.deductions_spinbox = _money_spinbox(self)
        self.deductions_spinbox.setValue(float(payroll.deductions))

        layout.addRow("Employee:", QLabel(employee_name))
        layout.addRow("Period:", QLabel(f"{date_converter.to_display_str(payroll.pay_period_start)} to "
                                        f"{date_converter.to_display_str(payroll.pay_period_end)}"))
        layout.addRow("Basic Salary:", QLabel(_money(payroll.basic_salary)))
        layout.addRow("Bonus:", self.bonus_spinbox)
        layout.addRow("Deductions:", self.deductions_spinbox)

        self.button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel) # type: ignore
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

    def get_payroll(self) -> PayrollEntity:
        self.payroll.bonus = _to_decimal(self.bonus_spinbox)
        self.payroll.deductions = _to_decimal(self.deductions_spinbox)
        return self.payroll

class PayrollUI(QWidget):
    def __init__(self, payroll_manager: PayrollManager, employee_manager: EmployeeManager, parent=None):
        super().__init__(parent)
        self.payroll_manager = payroll_manager
        self.employee_manager = employee_manager
        self.table_model = PayrollTableModel()
        self._init_ui()
        self.reload()

    def _init_ui(self):
        main_layout = QVBoxLayout(self)

        filter_layout = QHBoxLayout()
        self.employee_filter_combo = QComboBox(self)
        self.employee_filter_combo.currentIndexChanged.connect(self.load_payrolls_data)
        self.summary_label = QLabel("")
        filter_layout.addWidget(QLabel("Employee:"))
        filter_layout.addWidget(self.employee_filter_combo)
        filter_layout.addWidget(self.summary_label)
        filter_layout.addStretch()
        main_layout.addLayout(filter_layout)

        self.table_view = QTableView()
        self.table_view.setModel(self.table_model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        header = self.table_view.horizontalHeader()
        if header:
            header.setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
            header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        main_layout.addWidget(self.table_view)

        button_layout = QHBoxLayout()
        self.generate_button = QPushButton("Generate Payroll")
        self.monthly_button = QPushButton("Generate Monthly Payroll")
        self.edit_button = QPushButton("Edit Bonus/Deductions")
        self.pay_button = QPushButton("Process Payment")
        self.delete_button = QPushButton("Delete Payroll")
        self.refresh_button = QPushButton("Refresh")

        self.generate_button.clicked.connect(self._generate_payroll)
        self.monthly_button.clicked.connect(self._generate_monthly_payroll)
        self.edit_button.clicked.connect(self._edit_payroll)
        self.pay_button.clicked.connect(self._process_payment)
        self.delete_button.clicked.connect(self._delete_payroll)
        self.refresh_button.clicked.connect(self.reload)

        for button in (self.generate_button, self.monthly_button, self.edit_button,
                       self.pay_button, self.delete_button):
            button_layout.addWidget(button)
        button_layout.addStretch()
        button_layout.addWidget(self.refresh_button)
        main_layout.addLayout(button_layout)
        logger.info("PayrollUI initialized.")

    def _employee_names(self) -> Dict[int, str]:
        return {e.id: e.full_name for e in self.employee_manager.get_all_employees()}

    def reload(self):
        current = self.employee_filter_combo.currentData()
        self.employee_filter_combo.blockSignals(True)
        self.employee_filter_combo.clear()
        self.employee_filter_combo.addItem("All Employees", ALL_EMPLOYEES)
        for employee in self.employee_manager.get_all_employees():
            self.employee_filter_combo.addItem(f"{employee.id} - {employee.full_name}", employee.id)
        index = self.employee_filter_combo.findData(current)
        self.employee_filter_combo.setCurrentIndex(index if index >= 0 else 0)
        self.employee_filter_combo.blockSignals(False)
        self.load_payrolls_data()

    def load_payrolls_data(self):
        employee_id = self.employee_filter_combo.currentData()
        try:
            if employee_id is None or employee_id == ALL_EMPLOYEES:
                payrolls = self.payroll_manager.get_all_payrolls()
                self.summary_label.setText("")
            else:
                payrolls = self.payroll_manager.get_payroll_history_for_employee(employee_id)
                summary = self.payroll_manager.get_payroll_summary_for_employee(employee_id)
                self.summary_label.setText(
                    f"Records: {summary.record_count}   Paid: {_money(summary.total_paid)}   "
                    f"Pending: {_money(summary.total_pending)}")
            self.table_model.update_data(payrolls, self._employee_names())
        except (PersistenceError, NotFoundError) as e:
            logger.error(f"Error loading payrolls: {e}", exc_info=True)
            QMessageBox.critical(self, "Load Error", f"Error loading payroll records: {e}")

    def _selected_payroll(self) -> Optional[PayrollEntity]:
        return self.table_model.get_payroll_at_row(self.table_view.currentIndex().row())

    def _generate_payroll(self):
        employees = self.employee_manager.get_all_employees()
        if not employees:
            QMessageBox.information(self, "No Employees", "Add an employee before generating payroll.")
            return
        dialog = GeneratePayrollDialog(employees, parent=self)
        if dialog.exec_() != QDialog.DialogCode.Accepted:
            return
        try:
            payroll = self.payroll_manager.generate_payroll_for_employee(**dialog.get_values())
            QMessageBox.information(self, "Success",
                                    f"Payroll #{payroll.id} generated. Net salary: {_money(payroll.net_salary)}")
            self.load_payrolls_data()
        except ValidationError as ve:
            QMessageBox.warning(self, "Validation Error", str(ve))
        except (NotFoundError, PersistenceError) as e:
            logger.error(f"Error generating payroll: {e}", exc_info=True)
            QMessageBox.critical(self, "Error", f"Failed to generate payroll: {e}")

    def _generate_monthly_payroll(self):
        dialog = PayPeriodDialog(parent=self)
        if dialog.exec_() != QDialog.DialogCode.Accepted:
            return
        start, end = dialog.get_period()
        try:
            result = self.payroll_manager.generate_monthly_payroll_for_active_employees(start, end)
        except ValidationError as ve:
            QMessageBox.warning(self, "Validation Error", str(ve))
            return
        message = f"Generated {result.succeeded} payroll record(s)."
        if result.failed:
            QMessageBox.warning(self, "Completed With Errors", f"{message} {result.failed} failed; see the log.")
        else:
            QMessageBox.information(self, "Success", message)
        self.load_payrolls_data()

    def _edit_payroll(self):
        selected = self._selected_payroll()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select a payroll record to edit.")
            return
        if selected.is_paid:
            QMessageBox.warning(self, "Already Paid", "Paid payroll records cannot be edited.")
            return
        name = self._employee_names().get(selected.employee_id, f"#{selected.employee_id}")
        dialog = EditPayrollDialog(selected, name, parent=self)
        if dialog.exec_() != QDialog.DialogCode.Accepted:
            return
        try:
            if not self.payroll_manager.update_payroll(dialog.get_payroll()):
                QMessageBox.warning(self, "Failed", "Failed to update payroll record.")
        except ValidationError as ve:
            QMessageBox.warning(self, "Validation Error", str(ve))
        self.load_payrolls_data()

    def _process_payment(self):
        selected = self._selected_payroll()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select a payroll record to pay.")
            return
        if selected.is_paid:
            QMessageBox.warning(self, "Already Paid",
                                f"Payroll #{selected.id} was already paid on "
                                f"{date_converter.to_display_str(selected.payment_date)}.")
            return
        reply = QMessageBox.question(self, "Confirm Payment",
                                     f"Mark payroll #{selected.id} ({_money(selected.net_salary)}) as paid?",
                                     QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No, # type: ignore
                                     QMessageBox.StandardButton.No)
        if reply != QMessageBox.StandardButton.Yes:
            return
        if self.payroll_manager.process_payroll_payment(selected.id):
            QMessageBox.information(self, "Success", f"Payroll #{selected.id} marked as paid.")
        else:
            QMessageBox.warning(self, "Failed", "Payment could not be recorded.")
        self.load_payrolls_data()

    def _delete_payroll(self):
        selected = self._selected_payroll()
        if not selected:
            QMessageBox.information(self, "No Selection", "Please select a payroll record to delete.")
            return
        reply = QMessageBox.question(self, "Confirm Delete",
                                     f"Delete payroll #{selected.id}?",
                                     QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No, # type: ignore
                                     QMessageBox.StandardButton.No)
        if reply != QMessageBox.StandardButton.Yes:
            return
        if not self.payroll_manager.delete_payroll(selected.id):
            QMessageBox.warning(self, "Failed", "Failed to delete payroll record.")
        self.load_payrolls_data()
