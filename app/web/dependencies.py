"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from app.db.session import get_sessionmaker
from app.services import SalaryHistoryService


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Build the session factory once so the engine's pool is shared."""

    return get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_salary_history_service(
    session: Session = Depends(get_db_session),
) -> SalaryHistoryService:
    """Return a service instance per request."""

    return SalaryHistoryService(session)
