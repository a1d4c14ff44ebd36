"""Service layer entrypoints for domain logic."""

from .exceptions import (
    DuplicateSalaryHistoryError,
    EmploymentRecordNotFoundError,
    SalaryHistoryError,
    SalaryHistoryValidationError,
)
from .salary_history import SalaryHistoryService

__all__ = [
    "DuplicateSalaryHistoryError",
    "EmploymentRecordNotFoundError",
    "SalaryHistoryError",
    "SalaryHistoryService",
    "SalaryHistoryValidationError",
]
