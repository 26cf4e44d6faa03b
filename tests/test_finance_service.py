"""Tests for finance summaries and the dashboard."""

from datetime import date
from decimal import Decimal

import pytest

from cleanops.domain.errors import ValidationError
from cleanops.domain.finance import summarize_jobs

MARCH = (date(2024, 3, 1), date(2024, 3, 31))


def test_summarize_completed_jobs(finance_service, make_job, sample_professionals):
    maria = sample_professionals[0]
    make_job(status="completed")  # £80 / £54
    make_job(date=date(2024, 3, 12), status="completed", professional_ids=[maria.id], duration_hours="3")  # £60 / £36
    make_job(date=date(2024, 3, 13), status="scheduled")
    make_job(date=date(2024, 3, 14), status="cancelled")
    make_job(date=date(2024, 4, 1), status="completed")

    result = finance_service.summarize(*MARCH)

    assert result.revenue == Decimal("140.00")
    assert result.cost == Decimal("90.00")
    assert result.profit == Decimal("50.00")
    assert result.job_count == 2
    assert [j.date for j in result.jobs] == [date(2024, 3, 12), date(2024, 3, 4)]


def test_summarize_for_one_client(finance_service, make_job, deep_clean_client):
    make_job(status="completed")
    make_job(client_id=deep_clean_client.id, status="completed", service_kind="deep_clean")

    result = finance_service.summarize(*MARCH, client_id=deep_clean_client.id)

    assert result.job_count == 1
    assert result.revenue == Decimal("120.00")
    assert result.cost == Decimal("62.00")
    assert result.profit == Decimal("58.00")


def test_summarize_empty_range(finance_service):
    result = finance_service.summarize(*MARCH)
    assert (result.revenue, result.cost, result.profit, result.job_count) == (
        Decimal("0.00"),
        Decimal("0.00"),
        Decimal("0.00"),
        0,
    )


def test_summarize_reversed_range(finance_service):
    with pytest.raises(ValidationError, match="before start date"):
        finance_service.summarize(date(2024, 3, 31), date(2024, 3, 1))


def test_summarize_period(finance_service, make_job):
    make_job(status="completed")
    make_job(date=date(2024, 2, 26), status="completed")

    this_week = finance_service.summarize_period("this-week", today=date(2024, 3, 6))
    last_week = finance_service.summarize_period("last-week", today=date(2024, 3, 6))

    assert (this_week.start_date, this_week.end_date) == (date(2024, 3, 4), date(2024, 3, 10))
    assert this_week.job_count == 1
    assert (last_week.start_date, last_week.end_date) == (date(2024, 2, 26), date(2024, 3, 3))
    assert last_week.job_count == 1


def test_summarize_unknown_period(finance_service):
    with pytest.raises(ValueError, match="Unknown period"):
        finance_service.summarize_period("fortnight", today=date(2024, 3, 6))


def test_summarize_jobs_is_pure(make_job):
    jobs = [make_job(), make_job(duration_hours="1")]
    result = summarize_jobs(jobs, *MARCH)
    assert result.revenue == Decimal("120.00")
    assert result.cost == Decimal("81.00")
    assert result.profit == Decimal("39.00")


def test_dashboard(finance_service, professional_service, make_job, sample_professionals):
    today = date(2024, 3, 6)

    make_job(date=date(2024, 3, 4), status="completed")
    make_job(date=date(2024, 3, 10), status="cancelled")
    make_job(date=date(2024, 3, 11), professional_ids=[sample_professionals[0].id])
    for day in (7, 8, 9, 12, 13, 14):
        make_job(date=date(2024, 3, day), professional_ids=[sample_professionals[0].id])
    make_job(date=date(2024, 3, 6), professional_ids=[sample_professionals[0].id])
    professional_service.update_professional(sample_professionals[1].id, status="vacation")

    stats = finance_service.dashboard(today)

    assert stats.active_clients == 1
    assert stats.active_professionals == 1
    # Monday 4th to Sunday 10th, any status
    assert stats.jobs_this_week == 6
    assert [j.date for j in stats.upcoming_jobs] == [
        date(2024, 3, 7),
        date(2024, 3, 8),
        date(2024, 3, 9),
        date(2024, 3, 11),
        date(2024, 3, 12),
    ]
