"""Shared fixtures: in-memory database, seed helpers and a fixed clock."""
from __future__ import annotations

import os

os.environ["LOG_DIR"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["AUTH_ENABLED"] = "1"

from datetime import date, datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.logger import shutdown_logging  # noqa: E402
from app.models import Base, Client, EmploymentRecord, SalaryHistory, User  # noqa: E402
from app.services import SalaryHistoryService  # noqa: E402

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


class Seed:
    """Insert users, employment records and salary rows with minimal noise."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._sequence = count(1)
        self._created_base = datetime(2024, 1, 1, 9, 0)

    def _next(self) -> int:
        return next(self._sequence)

    def user(self, first_name: str = "Ada", last_name: str = "Lovelace") -> User:
        n = self._next()
        user = User(first_name=first_name, last_name=last_name, email=f"user{n}@example.com")
        self._session.add(user)
        self._session.commit()
        return user

    def client(self, name: str = "Acme") -> Client:
        client = Client(name=name)
        self._session.add(client)
        self._session.commit()
        return client

    def employment(
        self,
        user: User | None = None,
        client: Client | None = None,
        *,
        role: str = "Engineer",
        status: str = "active",
    ) -> EmploymentRecord:
        record = EmploymentRecord(
            user_id=(user or self.user()).id,
            client_id=(client or self.client()).id,
            role=role,
            status=status,
            start_date=date(2022, 1, 1),
        )
        self._session.add(record)
        self._session.commit()
        return record

    def salary(
        self,
        employment: EmploymentRecord,
        amount: str | int,
        effective_date: date,
        *,
        currency: str = "USD",
        created_at: datetime | None = None,
    ) -> SalaryHistory:
        row = SalaryHistory(
            employment_record_id=employment.id,
            salary_amount=Decimal(str(amount)),
            salary_currency=currency,
            effective_date=effective_date,
            change_reason="Annual review",
            created_at=created_at or self._created_base + timedelta(minutes=self._next()),
        )
        self._session.add(row)
        self._session.commit()
        return row


@pytest.fixture(scope="session", autouse=True)
def _stop_log_listener():
    yield
    shutdown_logging()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with factory() as session:
        yield session


@pytest.fixture
def seed(session) -> Seed:
    return Seed(session)


@pytest.fixture
def service(session) -> SalaryHistoryService:
    return SalaryHistoryService(session, clock=fixed_clock)


@pytest.fixture
def clock():
    return fixed_clock
