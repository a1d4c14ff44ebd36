"""Database models for the salary history domain."""
from __future__ import annotations

from .base import Base
from .employment import EmploymentRecord
from .salary_history import SalaryHistory
from .users import Client, User

__all__ = [
    "Base",
    "Client",
    "EmploymentRecord",
    "SalaryHistory",
    "User",
]
