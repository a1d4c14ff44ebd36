"""Query helpers for the ``salary_history`` table."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Select, select
from sqlalchemy.orm import selectinload

from app.models import EmploymentRecord, SalaryHistory
from app.schemas.salary_history import SalaryHistorySearchParams

from .base import BaseRepository

SORT_COLUMNS: dict[str, Any] = {
    "effectiveDate": SalaryHistory.effective_date,
    "salaryAmount": SalaryHistory.salary_amount,
    "salaryCurrency": SalaryHistory.salary_currency,
    "createdAt": SalaryHistory.created_at,
}

# Everything the response mapping reads.
_DISPLAY_RELATIONS = (
    selectinload(SalaryHistory.changed_by_user),
    selectinload(SalaryHistory.employment_record).selectinload(EmploymentRecord.user),
)


class SalaryHistoryRepository(BaseRepository):
    """Append-only access to salary history rows."""

    def _select(self) -> Select[tuple[SalaryHistory]]:
        return select(SalaryHistory).options(*_DISPLAY_RELATIONS)

    def get(self, record_id: UUID) -> SalaryHistory | None:
        statement = self._select().where(SalaryHistory.id == record_id)
        return self._session.execute(
            statement.execution_options(populate_existing=True)
        ).scalars().first()

    def exists(self, employment_record_id: UUID, effective_date: date) -> bool:
        statement = (
            select(SalaryHistory.id)
            .where(
                SalaryHistory.employment_record_id == employment_record_id,
                SalaryHistory.effective_date == effective_date,
            )
            .limit(1)
        )
        return self._session.execute(statement).first() is not None

    def add(self, record: SalaryHistory) -> SalaryHistory:
        """Insert ``record`` and flush so constraint violations surface here."""

        self._session.add(record)
        self._session.flush()
        return record

    def list_for_employments(self, employment_ids: Sequence[UUID]) -> list[SalaryHistory]:
        if not employment_ids:
            return []
        statement = (
            self._select()
            .where(SalaryHistory.employment_record_id.in_(list(employment_ids)))
            .order_by(SalaryHistory.effective_date.desc(), SalaryHistory.created_at.desc())
        )
        return list(self._session.execute(statement).scalars())

    def list_all(self) -> list[SalaryHistory]:
        statement = self._select().order_by(
            SalaryHistory.effective_date.desc(), SalaryHistory.created_at.desc()
        )
        return list(self._session.execute(statement).scalars())

    def list_scheduled(self, today: date) -> list[SalaryHistory]:
        statement = (
            self._select()
            .where(SalaryHistory.effective_date > today)
            .order_by(SalaryHistory.effective_date.asc(), SalaryHistory.created_at.asc())
        )
        return list(self._session.execute(statement).scalars())

    @staticmethod
    def _search_conditions(
        params: SalaryHistorySearchParams, today: date
    ) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if params.employment_record_id is not None:
            conditions.append(SalaryHistory.employment_record_id == params.employment_record_id)
        if params.user_id is not None:
            conditions.append(EmploymentRecord.user_id == params.user_id)
        if params.client_id is not None:
            conditions.append(EmploymentRecord.client_id == params.client_id)
        if params.currency is not None:
            conditions.append(SalaryHistory.salary_currency == params.currency.value)
        if params.min_amount is not None:
            conditions.append(SalaryHistory.salary_amount >= params.min_amount)
        if params.max_amount is not None:
            conditions.append(SalaryHistory.salary_amount <= params.max_amount)
        if params.start_date is not None:
            conditions.append(SalaryHistory.effective_date >= params.start_date)
        if params.end_date is not None:
            conditions.append(SalaryHistory.effective_date <= params.end_date)
        if params.is_scheduled is True:
            conditions.append(SalaryHistory.effective_date > today)
        elif params.is_scheduled is False:
            conditions.append(SalaryHistory.effective_date <= today)
        return conditions

    def search(
        self, params: SalaryHistorySearchParams, *, today: date
    ) -> tuple[list[SalaryHistory], int]:
        """Return one page of matching rows and the unpaged match count."""

        conditions = self._search_conditions(params, today)
        filtered = (
            select(SalaryHistory.id)
            .join(EmploymentRecord, EmploymentRecord.id == SalaryHistory.employment_record_id)
            .where(*conditions)
        )
        total = self._count(filtered)

        sort_column = SORT_COLUMNS[params.sort_field]
        primary = sort_column.asc() if params.sort_order == "ASC" else sort_column.desc()
        statement = (
            self._select()
            .join(EmploymentRecord, EmploymentRecord.id == SalaryHistory.employment_record_id)
            .where(*conditions)
            .order_by(primary, SalaryHistory.created_at.desc())
            .limit(params.limit)
            .offset(params.offset)
        )
        rows = list(self._session.execute(statement).scalars())
        return rows, total
