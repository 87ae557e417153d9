# staff_payroll/utils/date_converter.py

import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union

from staff_payroll.constants import DATE_FORMAT, NOT_AVAILABLE

def to_display_str(value: Optional[date]) -> str:
    """Formats a date as YYYY-MM-DD, or N/A when absent."""
    if value is None:
        return NOT_AVAILABLE
    if not isinstance(value, (date, datetime)):
        return str(value)
    return value.strftime(DATE_FORMAT)

def parse_date(date_str: str) -> Optional[date]:
    """Parses a YYYY-MM-DD string; returns None when it isn't a valid date."""
    if not isinstance(date_str, str) or not date_str.strip():
        return None
    try:
        return datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    except ValueError:
        return None

def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)

def previous_month_bounds(today: date) -> Tuple[date, date]:
    if today.month == 1:
        return month_bounds(today.year - 1, 12)
    return month_bounds(today.year, today.month - 1)

def from_qdate(q_date: 'QDate') -> date:
    """Converts a PyQt QDate to a standard Python date."""
    return q_date.toPyDate()

def to_qdate(g_date: Optional[Union[date, datetime]]) -> 'QDate':
    """Converts a Python date to a QDate; None gives today's date."""
    from PyQt5.QtCore import QDate
    if g_date is None:
        return QDate.currentDate()
    return QDate(g_date.year, g_date.month, g_date.day)
