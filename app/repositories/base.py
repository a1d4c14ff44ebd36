"""Shared helpers for repositories."""
from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


class BaseRepository:
    """Base repository holding the request-scoped session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def _count(self, statement: Select[Any]) -> int:
        """Return the number of rows ``statement`` would produce."""

        count_statement = select(func.count()).select_from(
            statement.order_by(None).subquery()
        )
        return int(self._session.execute(count_statement).scalar() or 0)
