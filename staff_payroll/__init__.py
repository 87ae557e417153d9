"""Employee, department and payroll administration for a small organisation."""

__version__ = "1.0.0"
