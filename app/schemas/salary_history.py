"""Request and response payloads for salary history endpoints."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import ConfigDict, Field, field_serializer, field_validator

from .pagination import ApiModel

MAX_CHANGE_REASON_LENGTH = 100
DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 1000


class SalaryCurrency(str, Enum):
    """Currencies accepted for salary records."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    AUD = "AUD"
    JPY = "JPY"
    CHF = "CHF"
    CNY = "CNY"
    INR = "INR"
    BRL = "BRL"


SortField = Literal["effectiveDate", "salaryAmount", "salaryCurrency", "createdAt"]
SortOrder = Literal["ASC", "DESC"]


class CreateSalaryHistoryRequest(ApiModel):
    """Payload for recording a new salary value."""

    model_config = ConfigDict(extra="forbid")

    employment_record_id: UUID
    salary_amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    salary_currency: SalaryCurrency = SalaryCurrency.USD
    effective_date: date
    change_reason: str = Field(min_length=1, max_length=MAX_CHANGE_REASON_LENGTH)

    @field_validator("change_reason")
    @classmethod
    def _reject_blank_reason(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Change reason is required")
        return value


class SalaryHistorySearchParams(ApiModel):
    """Filters, ordering and window for ``GET /search``."""

    employment_record_id: UUID | None = None
    user_id: UUID | None = None
    client_id: UUID | None = None
    currency: SalaryCurrency | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_scheduled: bool | None = None
    sort_field: SortField = "effectiveDate"
    sort_order: SortOrder = "DESC"
    limit: int = Field(DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT)
    offset: int = Field(0, ge=0)


class SalaryHistoryResponse(ApiModel):
    """A salary record with denormalised employee details."""

    id: UUID
    employment_record_id: UUID
    salary_amount: Decimal
    salary_currency: str
    effective_date: date
    change_reason: str
    changed_by: UUID | None = None
    changed_by_name: str | None = None
    employee_name: str | None = None
    employee_role: str | None = None
    employment_status: str | None = None
    is_scheduled: bool
    migrated_from_zoho: bool = False
    zoho_salary_id: str | None = None
    created_at: datetime

    @field_serializer("salary_amount")
    def _serialize_amount(self, value: Decimal) -> float:
        return float(value)


class SalaryStatistics(ApiModel):
    average_salary: Decimal = Decimal("0")
    total_active_records: int = 0
    total_salaries: Decimal = Decimal("0")

    @field_serializer("average_salary", "total_salaries")
    def _serialize_decimal(self, value: Decimal) -> float:
        return float(value)


class SalaryReport(ApiModel):
    """Current salary, full history and aggregates for a scope."""

    employment_id: UUID | None = None
    user_id: UUID | None = None
    client_id: UUID | None = None
    current_salary: SalaryHistoryResponse | None = None
    salary_history: list[SalaryHistoryResponse] = Field(default_factory=list)
    statistics: SalaryStatistics = Field(default_factory=SalaryStatistics)
    generated_at: datetime
