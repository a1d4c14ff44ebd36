"""Read access to employment records."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.models import EmploymentRecord

from .base import BaseRepository


class EmploymentRecordRepository(BaseRepository):
    def get(self, employment_id: UUID) -> EmploymentRecord | None:
        statement = (
            select(EmploymentRecord)
            .options(selectinload(EmploymentRecord.user), selectinload(EmploymentRecord.client))
            .where(EmploymentRecord.id == employment_id)
        )
        return self._session.execute(statement).scalars().first()

    def list_ids_for_user(self, user_id: UUID) -> list[UUID]:
        statement = select(EmploymentRecord.id).where(EmploymentRecord.user_id == user_id)
        return list(self._session.execute(statement).scalars())

    def list_ids(self) -> list[UUID]:
        return list(self._session.execute(select(EmploymentRecord.id)).scalars())
