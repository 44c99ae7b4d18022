"""Staff Desk: admin API for staff accounts, roles and permissions."""

__version__ = "0.1.0"
