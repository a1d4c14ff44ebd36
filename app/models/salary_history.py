"""Append-only salary history model."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow
from .employment import EmploymentRecord
from .users import User


class SalaryHistory(Base):
    """A salary value effective from a date for one employment record.

    Rows are never updated; a correction is a new row with a later
    ``created_at``.
    """

    __tablename__ = "salary_history"
    __table_args__ = (
        UniqueConstraint(
            "employment_record_id",
            "effective_date",
            name="unique_effective_date_per_employment",
        ),
        CheckConstraint("salary_amount > 0", name="amount_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    employment_record_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("employment_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    salary_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    salary_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    effective_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    change_reason: Mapped[str] = mapped_column(String(100), nullable=False)
    changed_by: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("users.id"))
    migrated_from_zoho: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    zoho_salary_id: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    employment_record: Mapped[EmploymentRecord] = relationship(EmploymentRecord)
    changed_by_user: Mapped[User | None] = relationship(User)
