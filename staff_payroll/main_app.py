# staff_payroll/main_app.py
import sys
import logging
import logging.config
from PyQt5.QtWidgets import QApplication, QMainWindow, QTabWidget, QMessageBox
from PyQt5.QtCore import Qt, QLocale

# --- Configuration ---
from staff_payroll.config import APP_NAME, DATABASE_PATH, LOGGING_CONFIG, WINDOW_TITLE, ensure_directories

# --- Data Access Layer (DAL) ---
from staff_payroll.data_access.database_manager import DatabaseManager
from staff_payroll.data_access.departments_repository import DepartmentsRepository
from staff_payroll.data_access.employees_repository import EmployeesRepository
from staff_payroll.data_access.payrolls_repository import PayrollsRepository
from staff_payroll.exceptions import PersistenceError

# --- Business Logic Layer (BLL) ---
from staff_payroll.business_logic.employee_manager import EmployeeManager
from staff_payroll.business_logic.department_manager import DepartmentManager
from staff_payroll.business_logic.payroll_manager import PayrollManager
from staff_payroll.business_logic.report_manager import ReportManager

# --- Presentation Layer (UI Tabs) ---
from staff_payroll.presentation.employees_ui import EmployeesUI
from staff_payroll.presentation.departments_ui import DepartmentsUI
from staff_payroll.presentation.payroll_ui import PayrollUI
from staff_payroll.presentation.reports_ui import ReportsUI

logger = logging.getLogger(__name__)

class MainWindow(QMainWindow):
    def __init__(self, db_manager: DatabaseManager, parent=None):
        super().__init__(parent)
        self.setWindowTitle(WINDOW_TITLE)
        self.setGeometry(100, 100, 1200, 760)
        self.db_manager = db_manager

        logger.info("Initializing Repositories...")
        self.departments_repo = DepartmentsRepository(self.db_manager)
        self.employees_repo = EmployeesRepository(self.db_manager)
        self.payrolls_repo = PayrollsRepository(self.db_manager)

        logger.info("Initializing Managers...")
        self.employee_manager = EmployeeManager(self.employees_repo)
        self.department_manager = DepartmentManager(self.departments_repo, self.employees_repo)
        self.payroll_manager = PayrollManager(
            payrolls_repository=self.payrolls_repo,
            employee_manager=self.employee_manager,
        )
        self.report_manager = ReportManager(
            employee_manager=self.employee_manager,
            payroll_manager=self.payroll_manager,
            department_manager=self.department_manager,
        )

        logger.info("Setting up UI...")
        self._setup_ui()
        logger.info("MainWindow initialized and UI setup complete.")

    def _setup_ui(self):
        self.tabs = QTabWidget()
        self.tabs.setLayoutDirection(Qt.LayoutDirection.LeftToRight)

        self.employees_tab = EmployeesUI(self.employee_manager, self.department_manager, self)
        self.tabs.addTab(self.employees_tab, "Employees")

        self.departments_tab = DepartmentsUI(self.department_manager, self.report_manager, self)
        self.tabs.addTab(self.departments_tab, "Departments")

        self.payroll_tab = PayrollUI(self.payroll_manager, self.employee_manager, self)
        self.tabs.addTab(self.payroll_tab, "Payroll")

        self.reports_tab = ReportsUI(self.report_manager, self)
        self.tabs.addTab(self.reports_tab, "Reports")

        # Reload lookups (employees, departments) whenever a tab is shown.
        self.tabs.currentChanged.connect(self._on_tab_changed)
        self.setCentralWidget(self.tabs)

    def _on_tab_changed(self, index: int):
        widget = self.tabs.widget(index)
        if widget is self.employees_tab:
            self.employees_tab.reload()
        elif widget is self.departments_tab:
            self.departments_tab.load_departments_data()
        elif widget is self.payroll_tab:
            self.payroll_tab.reload()

def main():
    ensure_directories()
    logging.config.dictConfig(LOGGING_CONFIG)
    logger.info("Application starting...")
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    english_locale = QLocale(QLocale.Language.English, QLocale.Country.UnitedStates)
    QLocale.setDefault(english_locale)

    db_manager = DatabaseManager(DATABASE_PATH)
    if not db_manager.test_connection():
        QMessageBox.critical(None, "Database Error", f"Could not open the database at {DATABASE_PATH}.")
        sys.exit(1)
    try:
        db_manager.create_tables()
        logger.info("Database tables checked/created successfully.")
    except PersistenceError as e:
        logger.error(f"FATAL: Could not initialize database: {e}", exc_info=True)
        QMessageBox.critical(None, "Database Error", f"Could not create the database tables: {e}")
        sys.exit(1)

    main_window = MainWindow(db_manager)
    main_window.show()
    logger.info("Application started successfully. Main window shown.")
    sys.exit(app.exec_())

if __name__ == '__main__':
    main()
