"""REST endpoints for salary history under ``/v1/salary-history``."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.core.logger import get_logger
from app.core.security import AuthenticatedUser, require_roles
from app.schemas.pagination import PaginatedResponse
from app.schemas.salary_history import (
    DEFAULT_SEARCH_LIMIT,
    MAX_SEARCH_LIMIT,
    CreateSalaryHistoryRequest,
    SalaryCurrency,
    SalaryHistoryResponse,
    SalaryHistorySearchParams,
    SalaryReport,
    SortField,
    SortOrder,
)
from app.services import SalaryHistoryService
from app.web.dependencies import get_salary_history_service

router = APIRouter(prefix="/v1/salary-history", tags=["salary-history"])
LOGGER = get_logger(__name__)

ADMIN_HR = ("admin", "hr")
ADMIN_HR_EOR = ("admin", "hr", "eor")


def get_search_params(
    employment_record_id: UUID | None = Query(None, alias="employmentRecordId"),
    user_id: UUID | None = Query(None, alias="userId"),
    client_id: UUID | None = Query(None, alias="clientId"),
    currency: SalaryCurrency | None = Query(None),
    min_amount: Decimal | None = Query(None, alias="minAmount"),
    max_amount: Decimal | None = Query(None, alias="maxAmount"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    is_scheduled: bool | None = Query(None, alias="isScheduled"),
    sort_field: SortField = Query("effectiveDate", alias="sortField"),
    sort_order: SortOrder = Query("DESC", alias="sortOrder"),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT),
    offset: int = Query(0, ge=0),
) -> SalaryHistorySearchParams:
    return SalaryHistorySearchParams(
        employment_record_id=employment_record_id,
        user_id=user_id,
        client_id=client_id,
        currency=currency,
        min_amount=min_amount,
        max_amount=max_amount,
        start_date=start_date,
        end_date=end_date,
        is_scheduled=is_scheduled,
        sort_field=sort_field,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=SalaryHistoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create salary history record",
)
def create_salary_history(
    payload: CreateSalaryHistoryRequest,
    user: AuthenticatedUser = Depends(require_roles(*ADMIN_HR)),
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> SalaryHistoryResponse:
    LOGGER.info(
        "Creating salary history for employment %s by user %s",
        payload.employment_record_id,
        user.user_id,
    )
    return service.create(payload, user.user_id)


@router.get(
    "/employment/{employment_id}",
    response_model=list[SalaryHistoryResponse],
    dependencies=[Depends(require_roles(*ADMIN_HR_EOR))],
    summary="Get salary history for employment record",
)
def list_by_employment(
    employment_id: UUID,
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> list[SalaryHistoryResponse]:
    return service.find_by_employment_id(employment_id)


@router.get(
    "/user/{user_id}",
    response_model=list[SalaryHistoryResponse],
    dependencies=[Depends(require_roles(*ADMIN_HR_EOR))],
    summary="Get salary history for user",
)
def list_by_user(
    user_id: UUID,
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> list[SalaryHistoryResponse]:
    return service.find_by_user_id(user_id)


@router.get(
    "/search",
    response_model=PaginatedResponse[SalaryHistoryResponse],
    dependencies=[Depends(require_roles(*ADMIN_HR_EOR))],
    summary="Search salary history records",
)
def search_salary_history(
    params: SalaryHistorySearchParams = Depends(get_search_params),
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> PaginatedResponse[SalaryHistoryResponse]:
    return service.search(params)


@router.get(
    "/reports/employment/{employment_id}",
    response_model=SalaryReport,
    dependencies=[Depends(require_roles(*ADMIN_HR_EOR))],
    summary="Get salary report for employment record",
)
def employment_report(
    employment_id: UUID,
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> SalaryReport:
    return service.get_employment_report(employment_id)


@router.get(
    "/reports/user/{user_id}",
    response_model=SalaryReport,
    dependencies=[Depends(require_roles(*ADMIN_HR_EOR))],
    summary="Get salary report for user",
)
def user_report(
    user_id: UUID,
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> SalaryReport:
    return service.get_user_report(user_id)


@router.get(
    "/reports/summary",
    response_model=SalaryReport,
    dependencies=[Depends(require_roles(*ADMIN_HR))],
    summary="Get organization-wide salary summary",
)
def organization_summary(
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> SalaryReport:
    return service.get_organization_summary()


@router.get(
    "/scheduled",
    response_model=list[SalaryHistoryResponse],
    dependencies=[Depends(require_roles(*ADMIN_HR))],
    summary="Get scheduled salary changes",
)
def scheduled_changes(
    service: SalaryHistoryService = Depends(get_salary_history_service),
) -> list[SalaryHistoryResponse]:
    return service.get_scheduled_changes()


__all__ = ["router"]
