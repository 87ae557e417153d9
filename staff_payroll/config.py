# staff_payroll/config.py

import os
import logging

APP_NAME = "Staff Payroll"
WINDOW_TITLE = "Employee Management & Payroll System"

# --- Database Configuration ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) # staff_payroll/ -> project root
DATA_DIR = os.path.join(BASE_DIR, "data")
DB_NAME = "staff_payroll.db"
DATABASE_PATH = os.environ.get("STAFF_PAYROLL_DB_PATH", os.path.join(DATA_DIR, DB_NAME))

# --- Logging Configuration ---
LOGS_DIR = os.environ.get("STAFF_PAYROLL_LOG_DIR", os.path.join(BASE_DIR, "logs"))
LOG_FILE_NAME = "app.log"
LOG_FILE_PATH = os.path.join(LOGS_DIR, LOG_FILE_NAME)
LOG_LEVEL = os.environ.get("STAFF_PAYROLL_LOG_LEVEL", "DEBUG").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'


def ensure_directories() -> None:
    """Creates the data and log directories if they don't exist."""
    for directory in (os.path.dirname(DATABASE_PATH), LOGS_DIR):
        if directory and not os.path.exists(directory):
            os.makedirs(directory)


LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': LOG_FORMAT,
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'level': LOG_LEVEL,
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'standard',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024*1024*5,  # 5 MB
            'backupCount': 5,
            'level': logging.INFO,
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': LOG_LEVEL,
    },
}
