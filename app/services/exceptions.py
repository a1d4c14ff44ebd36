"""Domain errors raised by the service layer."""
from __future__ import annotations


class SalaryHistoryError(Exception):
    """Base class for salary history failures mapped to HTTP responses."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmploymentRecordNotFoundError(SalaryHistoryError):
    status_code = 404
    error = "Not Found"


class SalaryHistoryValidationError(SalaryHistoryError):
    status_code = 400
    error = "Bad Request"


class DuplicateSalaryHistoryError(SalaryHistoryValidationError):
    """Another row already holds this employment record and effective date."""
