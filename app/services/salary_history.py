"""Business rules and reporting for salary history."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.logger import get_logger, timeit
from app.models import EmploymentRecord, SalaryHistory
from app.repositories import EmploymentRecordRepository, SalaryHistoryRepository
from app.schemas.pagination import PaginatedResponse
from app.schemas.salary_history import (
    CreateSalaryHistoryRequest,
    SalaryHistoryResponse,
    SalaryHistorySearchParams,
    SalaryReport,
    SalaryStatistics,
)

from .exceptions import (
    DuplicateSalaryHistoryError,
    EmploymentRecordNotFoundError,
    SalaryHistoryError,
    SalaryHistoryValidationError,
)

LOGGER = get_logger(__name__)

Clock = Callable[[], datetime]

MAX_SCHEDULE_YEARS = 1


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def add_years(value: date, years: int) -> date:
    """Shift ``value`` by whole years, clamping Feb 29 to Feb 28."""

    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def select_current_salaries(
    rows: Iterable[SalaryHistory],
    employment_ids: Sequence[UUID],
    today: date,
) -> list[SalaryHistory]:
    """Return the salary in force today for each employment that has one.

    The result follows the order of ``employment_ids``; employments whose
    rows are all future-dated are left out.
    """

    by_employment: dict[UUID, list[SalaryHistory]] = defaultdict(list)
    for row in rows:
        by_employment[row.employment_record_id].append(row)

    current: list[SalaryHistory] = []
    for employment_id in employment_ids:
        history = sorted(
            by_employment.get(employment_id, ()),
            key=lambda row: row.effective_date,
            reverse=True,
        )
        in_force = next((row for row in history if row.effective_date <= today), None)
        if in_force is not None:
            current.append(in_force)
    return current


def summarize(current: Sequence[SalaryHistory]) -> SalaryStatistics:
    total = sum((row.salary_amount for row in current), Decimal("0"))
    count = len(current)
    return SalaryStatistics(
        average_salary=total / count if count else Decimal("0"),
        total_active_records=count,
        total_salaries=total,
    )


def to_response(entity: SalaryHistory, today: date) -> SalaryHistoryResponse:
    """Flatten a salary row and its loaded relations into a response."""

    employee_name = employee_role = employment_status = None
    employment = entity.employment_record
    if employment is not None:
        employee_role = employment.role or None
        employment_status = employment.status or None
        if employment.user is not None:
            employee_name = employment.user.full_name

    changed_by_user = entity.changed_by_user
    return SalaryHistoryResponse(
        id=entity.id,
        employment_record_id=entity.employment_record_id,
        salary_amount=entity.salary_amount,
        salary_currency=entity.salary_currency,
        effective_date=entity.effective_date,
        change_reason=entity.change_reason,
        changed_by=entity.changed_by,
        changed_by_name=changed_by_user.full_name if changed_by_user is not None else None,
        employee_name=employee_name,
        employee_role=employee_role,
        employment_status=employment_status,
        is_scheduled=entity.effective_date > today,
        migrated_from_zoho=bool(entity.migrated_from_zoho),
        zoho_salary_id=entity.zoho_salary_id,
        created_at=entity.created_at,
    )


@contextmanager
def _logged(operation: str) -> Iterator[None]:
    try:
        yield
    except SalaryHistoryError as exc:
        LOGGER.warning("Failed to %s: %s", operation, exc.message)
        raise
    except Exception:
        LOGGER.exception("Failed to %s", operation)
        raise


class SalaryHistoryService:
    """Validate, persist and report on salary history records."""

    def __init__(
        self,
        session: Session,
        *,
        repository: SalaryHistoryRepository | None = None,
        employment_repository: EmploymentRecordRepository | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._session = session
        self._repository = repository or SalaryHistoryRepository(session)
        self._employments = employment_repository or EmploymentRecordRepository(session)
        self._clock = clock or utcnow

    def _today(self) -> date:
        return self._clock().date()

    def _require_employment(self, employment_id: UUID) -> EmploymentRecord:
        employment = self._employments.get(employment_id)
        if employment is None:
            raise EmploymentRecordNotFoundError(
                f"Employment record with ID {employment_id} not found"
            )
        return employment

    @staticmethod
    def _duplicate_message(employment_id: UUID, effective_date: date) -> str:
        return (
            f"Salary history already exists for employment {employment_id} "
            f"on {effective_date.isoformat()}"
        )

    def exists(self, employment_record_id: UUID, effective_date: date) -> bool:
        return self._repository.exists(employment_record_id, effective_date)

    def create(
        self, payload: CreateSalaryHistoryRequest, changed_by: UUID | None
    ) -> SalaryHistoryResponse:
        employment_id = payload.employment_record_id
        LOGGER.info("Creating salary history for employment %s", employment_id)
        with _logged("create salary history"):
            self._require_employment(employment_id)

            today = self._today()
            if payload.effective_date > add_years(today, MAX_SCHEDULE_YEARS):
                raise SalaryHistoryValidationError(
                    "Effective date cannot be more than 1 year in the future"
                )

            if self.exists(employment_id, payload.effective_date):
                raise DuplicateSalaryHistoryError(
                    self._duplicate_message(employment_id, payload.effective_date)
                )

            record = SalaryHistory(
                employment_record_id=employment_id,
                salary_amount=payload.salary_amount,
                salary_currency=payload.salary_currency.value,
                effective_date=payload.effective_date,
                change_reason=payload.change_reason,
                changed_by=changed_by,
            )
            try:
                self._repository.add(record)
                self._session.commit()
            except IntegrityError as exc:
                self._session.rollback()
                # A concurrent writer won the unique index race.
                if self.exists(employment_id, payload.effective_date):
                    raise DuplicateSalaryHistoryError(
                        self._duplicate_message(employment_id, payload.effective_date)
                    ) from exc
                raise

            saved = self._repository.get(record.id) or record
            LOGGER.info("Salary history created with ID %s", saved.id)
            return to_response(saved, today)

    def find_by_employment_id(self, employment_id: UUID) -> list[SalaryHistoryResponse]:
        LOGGER.info("Finding salary history for employment %s", employment_id)
        with _logged(f"find salary history for employment {employment_id}"):
            self._require_employment(employment_id)
            today = self._today()
            rows = self._repository.list_for_employments([employment_id])
            return [to_response(row, today) for row in rows]

    def find_by_user_id(self, user_id: UUID) -> list[SalaryHistoryResponse]:
        LOGGER.info("Finding salary history for user %s", user_id)
        with _logged(f"find salary history for user {user_id}"):
            employment_ids = self._employments.list_ids_for_user(user_id)
            if not employment_ids:
                return []
            today = self._today()
            rows = self._repository.list_for_employments(employment_ids)
            return [to_response(row, today) for row in rows]

    def search(
        self, params: SalaryHistorySearchParams
    ) -> PaginatedResponse[SalaryHistoryResponse]:
        LOGGER.info(
            "Searching salary history with criteria: %s",
            params.model_dump(exclude_none=True, by_alias=True, mode="json"),
        )
        with _logged("search salary history"):
            today = self._today()
            rows, total = self._repository.search(params, today=today)
            items = [to_response(row, today) for row in rows]
            return PaginatedResponse[SalaryHistoryResponse].build(
                items,
                total_count=total,
                page_size=params.limit,
                current_page=params.offset // params.limit,
            )

    def _build_report(
        self,
        employment_ids: Sequence[UUID],
        rows: Sequence[SalaryHistory],
        **scope: UUID | None,
    ) -> SalaryReport:
        today = self._today()
        current = select_current_salaries(rows, employment_ids, today)
        # Stable: the first employment wins when effective dates tie.
        headline = max(current, key=lambda row: row.effective_date) if current else None
        return SalaryReport(
            **scope,
            current_salary=to_response(headline, today) if headline is not None else None,
            salary_history=[to_response(row, today) for row in rows],
            statistics=summarize(current),
            generated_at=self._clock(),
        )

    def _empty_report(self, **scope: UUID | None) -> SalaryReport:
        return SalaryReport(**scope, generated_at=self._clock())

    def get_employment_report(self, employment_id: UUID) -> SalaryReport:
        LOGGER.info("Generating salary report for employment %s", employment_id)
        with _logged("generate employment report"):
            employment = self._require_employment(employment_id)
            scope = {
                "employment_id": employment_id,
                "user_id": employment.user_id,
                "client_id": employment.client_id,
            }
            rows = self._repository.list_for_employments([employment_id])
            return self._build_report([employment_id], rows, **scope)

    def get_user_report(self, user_id: UUID) -> SalaryReport:
        LOGGER.info("Generating salary report for user %s", user_id)
        with _logged("generate user report"):
            employment_ids = self._employments.list_ids_for_user(user_id)
            if not employment_ids:
                return self._empty_report(user_id=user_id)
            rows = self._repository.list_for_employments(employment_ids)
            return self._build_report(employment_ids, rows, user_id=user_id)

    def get_organization_summary(self) -> SalaryReport:
        LOGGER.info("Generating organization-wide salary summary")
        with _logged("generate organization summary"), timeit(
            "Organization salary summary", logger=LOGGER
        ) as timer:
            employment_ids = self._employments.list_ids()
            if not employment_ids:
                return self._empty_report()
            rows = self._repository.list_all()
            timer.add(len(rows))
            return self._build_report(employment_ids, rows)

    def get_scheduled_changes(self) -> list[SalaryHistoryResponse]:
        LOGGER.info("Retrieving scheduled salary changes")
        with _logged("get scheduled changes"):
            today = self._today()
            return [to_response(row, today) for row in self._repository.list_scheduled(today)]


__all__ = [
    "SalaryHistoryService",
    "add_years",
    "select_current_salaries",
    "summarize",
    "to_response",
]
