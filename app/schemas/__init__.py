"""Pydantic schemas for request and response payloads."""

from .pagination import ApiModel, PaginatedResponse
from .salary_history import (
    CreateSalaryHistoryRequest,
    SalaryCurrency,
    SalaryHistoryResponse,
    SalaryHistorySearchParams,
    SalaryReport,
    SalaryStatistics,
)

__all__ = [
    "ApiModel",
    "CreateSalaryHistoryRequest",
    "PaginatedResponse",
    "SalaryCurrency",
    "SalaryHistoryResponse",
    "SalaryHistorySearchParams",
    "SalaryReport",
    "SalaryStatistics",
]
