"""Service tests against an in-memory SQLite database."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.schemas.salary_history import CreateSalaryHistoryRequest, SalaryHistorySearchParams
from app.services import (
    DuplicateSalaryHistoryError,
    EmploymentRecordNotFoundError,
    SalaryHistoryValidationError,
)


def _payload(employment_id, effective_date: date, amount: str = "65000", **extra):
    return CreateSalaryHistoryRequest(
        employment_record_id=employment_id,
        salary_amount=Decimal(amount),
        effective_date=effective_date,
        change_reason=extra.pop("change_reason", "Promotion"),
        **extra,
    )


def test_create_returns_denormalised_record(service, seed) -> None:
    hr = seed.user("Grace", "Hopper")
    employment = seed.employment(seed.user("Ada", "Lovelace"), role="Data Analyst")

    created = service.create(
        _payload(employment.id, date(2024, 5, 1), salary_currency="EUR"), hr.id
    )

    assert created.employment_record_id == employment.id
    assert created.salary_amount == Decimal("65000")
    assert created.salary_currency == "EUR"
    assert created.changed_by == hr.id
    assert created.changed_by_name == "Grace Hopper"
    assert created.employee_name == "Ada Lovelace"
    assert created.employee_role == "Data Analyst"
    assert created.employment_status == "active"
    assert created.is_scheduled is False
    assert created.migrated_from_zoho is False


def test_created_row_is_listed_exactly_once(service, seed) -> None:
    employment = seed.employment()
    seed.salary(employment, 50000, date(2023, 1, 1))

    created = service.create(_payload(employment.id, date(2024, 3, 1)), None)
    history = service.find_by_employment_id(employment.id)

    assert [row.id for row in history].count(created.id) == 1
    assert [row.effective_date for row in history] == [date(2024, 3, 1), date(2023, 1, 1)]


def test_create_rejects_unknown_employment(service) -> None:
    missing = uuid4()

    with pytest.raises(EmploymentRecordNotFoundError) as excinfo:
        service.create(_payload(missing, date(2024, 1, 1)), None)

    assert str(missing) in excinfo.value.message


def test_duplicate_effective_date_is_rejected(service, seed) -> None:
    employment = seed.employment()
    service.create(_payload(employment.id, date(2024, 1, 1), amount="60000"), None)

    with pytest.raises(DuplicateSalaryHistoryError) as excinfo:
        service.create(
            _payload(employment.id, date(2024, 1, 1), amount="99000", change_reason="Other"),
            None,
        )

    assert excinfo.value.message == (
        f"Salary history already exists for employment {employment.id} on 2024-01-01"
    )
    assert len(service.find_by_employment_id(employment.id)) == 1


def test_unknown_acting_user_violates_foreign_key(service, seed) -> None:
    employment = seed.employment()

    with pytest.raises(IntegrityError):
        service.create(_payload(employment.id, date(2024, 1, 1)), uuid4())

    assert service.find_by_employment_id(employment.id) == []


def test_effective_date_one_year_ahead_is_the_limit(service, seed) -> None:
    employment = seed.employment()

    accepted = service.create(_payload(employment.id, date(2025, 6, 1)), None)
    assert accepted.is_scheduled is True

    with pytest.raises(SalaryHistoryValidationError) as excinfo:
        service.create(_payload(employment.id, date(2025, 6, 2)), None)
    assert "1 year" in excinfo.value.message


def test_find_by_employment_requires_record(service) -> None:
    with pytest.raises(EmploymentRecordNotFoundError):
        service.find_by_employment_id(uuid4())


def test_find_by_user_spans_employments(service, seed) -> None:
    user = seed.user()
    first = seed.employment(user)
    second = seed.employment(user)
    other = seed.employment()
    seed.salary(first, 40000, date(2022, 1, 1))
    seed.salary(second, 55000, date(2023, 7, 1))
    seed.salary(other, 90000, date(2023, 8, 1))

    history = service.find_by_user_id(user.id)

    assert [row.salary_amount for row in history] == [Decimal("55000"), Decimal("40000")]
    assert service.find_by_user_id(uuid4()) == []


def test_search_sorts_with_created_at_tie_break(service, seed) -> None:
    employment = seed.employment()
    seed.salary(employment, 50000, date(2023, 1, 1), created_at=datetime(2024, 1, 1, 9))
    older_tie = seed.salary(employment, 40000, date(2023, 2, 1), created_at=datetime(2024, 1, 1, 10))
    newer_tie = seed.salary(employment, 40000, date(2023, 3, 1), created_at=datetime(2024, 1, 1, 11))
    seed.salary(employment, 70000, date(2023, 4, 1), created_at=datetime(2024, 1, 1, 12))
    seed.salary(employment, 60000, date(2023, 5, 1), created_at=datetime(2024, 1, 1, 13))

    page = service.search(
        SalaryHistorySearchParams(sort_field="salaryAmount", sort_order="ASC", limit=2, offset=0)
    )

    assert [item.id for item in page.items] == [newer_tie.id, older_tie.id]
    assert page.total_count == 5
    assert page.page_size == 2
    assert page.current_page == 0
    assert page.total_pages == 3


def test_search_offset_past_end_keeps_total(service, seed) -> None:
    employment = seed.employment()
    for month in range(1, 6):
        seed.salary(employment, 50000 + month, date(2023, month, 1))

    page = service.search(SalaryHistorySearchParams(limit=2, offset=5))

    assert page.items == []
    assert page.total_count == 5
    assert page.current_page == 2
    assert page.total_pages == 3


def test_search_scheduled_filter_partitions_rows(service, seed) -> None:
    employment = seed.employment()
    seed.salary(employment, 50000, date(2023, 1, 1))
    seed.salary(employment, 52000, date(2024, 6, 1))
    seed.salary(employment, 55000, date(2024, 6, 2))
    seed.salary(employment, 58000, date(2025, 1, 1))

    everything = {item.id for item in service.search(SalaryHistorySearchParams()).items}
    scheduled = service.search(SalaryHistorySearchParams(is_scheduled=True)).items
    in_force = service.search(SalaryHistorySearchParams(is_scheduled=False)).items

    assert all(item.effective_date > date(2024, 6, 1) for item in scheduled)
    assert all(item.effective_date <= date(2024, 6, 1) for item in in_force)
    scheduled_ids = {item.id for item in scheduled}
    in_force_ids = {item.id for item in in_force}
    assert scheduled_ids.isdisjoint(in_force_ids)
    assert scheduled_ids | in_force_ids == everything


def test_search_filters_combine(service, seed) -> None:
    user = seed.user()
    client = seed.client("Globex")
    target = seed.employment(user, client)
    elsewhere = seed.employment(user)
    seed.salary(target, 45000, date(2023, 1, 1), currency="GBP")
    match = seed.salary(target, 50000, date(2023, 6, 1), currency="GBP")
    seed.salary(target, 80000, date(2023, 9, 1), currency="GBP")
    seed.salary(elsewhere, 50000, date(2023, 6, 1), currency="GBP")
    seed.salary(target, 50000, date(2023, 7, 1), currency="USD")

    page = service.search(
        SalaryHistorySearchParams(
            user_id=user.id,
            client_id=client.id,
            currency="GBP",
            min_amount=Decimal("46000"),
            max_amount=Decimal("79999"),
            start_date=date(2023, 6, 1),
            end_date=date(2023, 6, 1),
        )
    )

    assert [item.id for item in page.items] == [match.id]
    assert page.total_count == 1


@pytest.mark.parametrize(
    ("bounds", "expected"),
    [
        ({"start_date": date(2023, 3, 1)}, [date(2023, 5, 1), date(2023, 3, 1)]),
        ({"end_date": date(2023, 3, 1)}, [date(2023, 3, 1), date(2023, 1, 1)]),
    ],
)
def test_search_accepts_a_single_date_bound(service, seed, bounds, expected) -> None:
    employment = seed.employment()
    for month in (1, 3, 5):
        seed.salary(employment, 50000 + month, date(2023, month, 1))

    page = service.search(SalaryHistorySearchParams(**bounds))

    assert [item.effective_date for item in page.items] == expected
    assert page.total_count == 2


def test_employment_report_uses_latest_effective_row(service, seed) -> None:
    employment = seed.employment()
    seed.salary(employment, 60000, date(2023, 1, 1))
    seed.salary(employment, 70000, date(2024, 1, 1))
    seed.salary(employment, 80000, date(2024, 9, 1))

    report = service.get_employment_report(employment.id)

    assert report.employment_id == employment.id
    assert report.user_id == employment.user_id
    assert report.client_id == employment.client_id
    assert report.current_salary is not None
    assert report.current_salary.salary_amount == Decimal("70000")
    assert report.statistics.total_active_records == 1
    assert report.statistics.total_salaries == Decimal("70000")
    assert len(report.salary_history) == 3


def test_employment_report_with_only_future_rows(service, seed) -> None:
    employment = seed.employment()
    seed.salary(employment, 80000, date(2024, 9, 1))

    report = service.get_employment_report(employment.id)

    assert report.current_salary is None
    assert report.statistics.total_active_records == 0
    assert report.statistics.average_salary == 0
    assert len(report.salary_history) == 1


def test_user_report_aggregates_current_salaries(service, seed) -> None:
    user = seed.user()
    first = seed.employment(user)
    second = seed.employment(user)
    future_only = seed.employment(user)
    seed.salary(first, 40000, date(2022, 1, 1))
    seed.salary(first, 45000, date(2023, 1, 1))
    seed.salary(second, 60000, date(2024, 2, 1))
    seed.salary(future_only, 99000, date(2024, 12, 1))

    report = service.get_user_report(user.id)
    stats = report.statistics

    assert report.user_id == user.id
    assert report.employment_id is None
    assert stats.total_active_records == 2
    assert stats.total_salaries == Decimal("105000")
    assert stats.average_salary * stats.total_active_records == stats.total_salaries
    assert report.current_salary.salary_amount == Decimal("60000")
    assert len(report.salary_history) == 4


def test_user_report_without_employments_is_empty(service) -> None:
    user_id = uuid4()

    report = service.get_user_report(user_id)

    assert report.user_id == user_id
    assert report.current_salary is None
    assert report.salary_history == []
    assert report.statistics.total_active_records == 0
    assert report.statistics.total_salaries == 0


def test_organization_summary_covers_every_employment(service, seed) -> None:
    a = seed.employment()
    b = seed.employment()
    c = seed.employment()
    seed.employment()
    seed.salary(a, 30000, date(2023, 1, 1))
    seed.salary(b, 40000, date(2023, 5, 1))
    seed.salary(c, 50000, date(2024, 5, 31))
    seed.salary(c, 90000, date(2024, 7, 1))

    report = service.get_organization_summary()
    stats = report.statistics

    assert report.user_id is None and report.client_id is None
    assert stats.total_active_records == 3
    assert stats.total_salaries == Decimal("120000")
    assert stats.average_salary == Decimal("40000")
    assert report.current_salary.employment_record_id == c.id


def test_scheduled_changes_are_future_rows_ascending(service, seed) -> None:
    employment = seed.employment()
    other = seed.employment()
    seed.salary(employment, 50000, date(2024, 6, 1))
    later = seed.salary(employment, 60000, date(2025, 2, 1))
    sooner = seed.salary(other, 65000, date(2024, 8, 15))

    scheduled = service.get_scheduled_changes()

    assert [row.id for row in scheduled] == [sooner.id, later.id]
    assert all(row.is_scheduled for row in scheduled)
