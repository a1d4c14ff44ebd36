"""Data access layer."""

from .employment_repository import EmploymentRecordRepository
from .salary_history_repository import SalaryHistoryRepository

__all__ = ["EmploymentRecordRepository", "SalaryHistoryRepository"]
