# staff_payroll/data_access/database_manager.py

import sqlite3
import logging
from staff_payroll.config import DATABASE_PATH
from staff_payroll.constants import EmployeeStatus, PaymentStatus
from staff_payroll.exceptions import PersistenceError

logger = logging.getLogger(__name__)

def _casefold(value):
    return value.casefold() if isinstance(value, str) else value

def _check_values(enum_cls) -> str:
    return ', '.join(f"'{member.value}'" for member in enum_cls)

class DatabaseManager:
    """
    Owns the SQLite connection lifecycle. Every `with` block opens a fresh
    connection with foreign keys enforced and closes it on exit.
    Driver errors are logged and re-raised as PersistenceError.
    """
    def __init__(self, db_path=DATABASE_PATH):
        self.db_path = db_path
        self.conn = None

    def __enter__(self):
        try:
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row # Access columns by name
            self.conn.execute("PRAGMA foreign_keys = ON;") # Enforce foreign key constraints
            # Unicode-aware lowercasing; SQLite LIKE only folds ASCII.
            self.conn.create_function("casefold", 1, _casefold, deterministic=True)
            logger.debug(f"Database connection established to {self.db_path}")
            return self.conn
        except sqlite3.Error as e:
            logger.error(f"Error connecting to database {self.db_path}: {e}")
            raise PersistenceError(f"Could not connect to database {self.db_path}: {e}") from e

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Database connection closed.")

    def test_connection(self) -> bool:
        """Returns True when the database can be opened and queried."""
        try:
            with self as conn:
                conn.execute("SELECT 1").fetchone()
            logger.info(f"Database connection test succeeded for {self.db_path}")
            return True
        except (PersistenceError, sqlite3.Error) as e:
            logger.error(f"Database connection test failed for {self.db_path}: {e}")
            return False

    def execute_query(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                conn.commit()
                return cursor
        except sqlite3.Error as e:
            logger.error(f"Query execution failed: {query} with params {params} - {e}")
            raise PersistenceError(f"Query execution failed: {e}") from e

    def fetch_one(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Fetch one failed: {query} with params {params} - {e}")
            raise PersistenceError(f"Fetch failed: {e}") from e

    def fetch_all(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Fetch all failed: {query} with params {params} - {e}")
            raise PersistenceError(f"Fetch failed: {e}") from e

    def create_tables(self):
        queries = [
            """
            CREATE TABLE IF NOT EXISTS departments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """,
            # department_id is not a foreign key and is not validated on write.
            """
            CREATE TABLE IF NOT EXISTS employees (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT NOT NULL,
                phone TEXT,
                hire_date TEXT,
                job_title TEXT,
                department_id INTEGER,
                salary REAL NOT NULL CHECK(salary > 0),
                status TEXT NOT NULL DEFAULT '{active}' CHECK(status IN ({statuses})),
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """.format(active=EmployeeStatus.ACTIVE.value, statuses=_check_values(EmployeeStatus)),
            """
            CREATE TABLE IF NOT EXISTS payrolls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                employee_id INTEGER NOT NULL,
                pay_period_start TEXT NOT NULL,
                pay_period_end TEXT NOT NULL,
                basic_salary REAL NOT NULL,
                bonus REAL NOT NULL DEFAULT 0.0,
                deductions REAL NOT NULL DEFAULT 0.0,
                net_salary REAL NOT NULL,
                payment_date TEXT,
                payment_status TEXT NOT NULL DEFAULT '{pending}' CHECK(payment_status IN ({statuses})),
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (employee_id) REFERENCES employees(id) ON DELETE RESTRICT
            );
            """.format(pending=PaymentStatus.PENDING.value, statuses=_check_values(PaymentStatus)),
            "CREATE INDEX IF NOT EXISTS idx_employees_department ON employees(department_id);",
            "CREATE INDEX IF NOT EXISTS idx_payrolls_employee ON payrolls(employee_id);",
        ]

        try:
            with self as conn:
                cursor = conn.cursor()
                for query_index, query in enumerate(queries):
                    logger.debug(f"Executing schema statement {query_index+1}/{len(queries)}")
                    cursor.execute(query)
                conn.commit()
                logger.info("Database tables checked/created successfully.")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database schema: {e}", exc_info=True)
            raise PersistenceError(f"Failed to initialize database schema: {e}") from e
