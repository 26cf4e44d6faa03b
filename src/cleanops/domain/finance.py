"""Finance rollups and dashboard figures over job snapshots."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from cleanops.database.base import Database
from cleanops.domain.entities import (
    ClientStatus,
    DashboardStats,
    FinanceSummary,
    Job,
    JobStatus,
    ProfessionalStatus,
)
from cleanops.domain.errors import ValidationError
from cleanops.domain.pricing import to_money
from cleanops.utils.date_parser import get_date_range, week_bounds

UPCOMING_JOB_LIMIT = 5
UPCOMING_STATUSES = (JobStatus.SCHEDULED, JobStatus.IN_PROGRESS)


def summarize_jobs(jobs: Iterable[Job], start_date: date, end_date: date) -> FinanceSummary:
    """Sum revenue and cost of the given jobs.

    Callers pass completed jobs; nothing is filtered here.
    """
    jobs = tuple(jobs)
    revenue = to_money(sum((job.total_price for job in jobs), Decimal("0.00")))
    cost = to_money(sum((job.cost for job in jobs), Decimal("0.00")))
    return FinanceSummary(
        start_date=start_date,
        end_date=end_date,
        revenue=revenue,
        cost=cost,
        profit=revenue - cost,
        job_count=len(jobs),
        jobs=jobs,
    )


class FinanceService:
    """Read-only revenue, cost and profit figures."""

    def __init__(self, db: Database):
        """Initialize finance service.

        Args:
            db: Database instance
        """
        self.db = db

    def summarize(
        self, start_date: date, end_date: date, client_id: Optional[int] = None
    ) -> FinanceSummary:
        """Revenue, cost and profit of completed jobs dated in a range.

        Args:
            start_date: First day, inclusive
            end_date: Last day, inclusive
            client_id: Only count this client's jobs

        Returns:
            FinanceSummary, with jobs newest first

        Raises:
            ValidationError: If end_date is before start_date
        """
        if end_date < start_date:
            raise ValidationError(
                f"End date ({end_date.isoformat()}) is before start date ({start_date.isoformat()})"
            )
        jobs = self.db.list_jobs(
            start_date=start_date,
            end_date=end_date,
            client_id=client_id,
            status=JobStatus.COMPLETED,
        )
        return summarize_jobs(jobs, start_date, end_date)

    def summarize_period(
        self, period: str, today: date, client_id: Optional[int] = None
    ) -> FinanceSummary:
        """Summarize a named period such as ``this-month`` or ``last-week``.

        Raises:
            ValueError: If the period name is not recognized
        """
        start_date, end_date = get_date_range(period, today=today)
        return self.summarize(start_date, end_date, client_id=client_id)

    def dashboard(self, today: date) -> DashboardStats:
        """Headline figures as of ``today``.

        Jobs this week counts jobs dated Monday to Sunday of the current week,
        whatever their status. Upcoming jobs are the next scheduled or
        in-progress jobs dated after today, soonest first.
        """
        week_start, week_end = week_bounds(today)
        jobs_this_week = self.db.list_jobs(start_date=week_start, end_date=week_end)

        upcoming = [
            job
            for job in self.db.list_jobs(start_date=today)
            if job.date > today and job.status in UPCOMING_STATUSES
        ]
        upcoming.sort(key=lambda job: (job.date, job.start_time, job.id))

        return DashboardStats(
            active_clients=len(self.db.list_clients(status=ClientStatus.ACTIVE)),
            active_professionals=len(self.db.list_professionals(status=ProfessionalStatus.ACTIVE)),
            jobs_this_week=len(jobs_this_week),
            upcoming_jobs=tuple(upcoming[:UPCOMING_JOB_LIMIT]),
        )
