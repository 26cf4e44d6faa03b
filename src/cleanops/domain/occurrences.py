"""Expansion of jobs into calendar occurrences.

Dates are handled as ``datetime.date`` values built from year, month and day
only, so no timezone conversion can move an occurrence to a neighbouring day.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from cleanops.domain.entities import Job, JobStatus, JobType, Occurrence

ONE_WEEK = timedelta(days=7)


def date_key(day: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key back into a calendar date.

    Raises:
        ValueError: If the key is not a valid calendar date
    """
    try:
        year, month, day = (int(part) for part in key.strip().split("-"))
        return date(year, month, day)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date key '{key}': {e}")


def is_occurrence_date(job: Job, on_date: date) -> bool:
    """Return True if ``job`` takes place on ``on_date``."""
    if job.job_type == JobType.ONE_TIME:
        return on_date == job.date
    if job.job_type == JobType.RECURRING:
        return on_date >= job.date and on_date.weekday() == job.date.weekday()
    raise ValueError(f"Unknown job type: {job.job_type!r}")


def occurrence_status(job: Job, on_date: date) -> JobStatus:
    """Effective status of a job on one date.

    Recurring jobs may override the template status for single dates.
    """
    if job.job_type == JobType.RECURRING:
        return job.occurrence_statuses.get(on_date, job.status)
    return job.status


def _first_weekday_on_or_after(start: date, weekday: int) -> date:
    return start + timedelta(days=(weekday - start.weekday()) % 7)


def expand_occurrences(job: Job, range_start: date, range_end: date) -> list[Occurrence]:
    """Expand a job into its occurrences within ``[range_start, range_end]``.

    One-time jobs yield their own date when it is in range. Recurring jobs
    yield every date in range that falls on the anchor date's weekday and is
    not before the anchor date.
    """
    if range_end < range_start:
        return []

    if job.job_type == JobType.ONE_TIME:
        if range_start <= job.date <= range_end:
            return [Occurrence(job=job, date=job.date, status=job.status)]
        return []

    if job.job_type != JobType.RECURRING:
        raise ValueError(f"Unknown job type: {job.job_type!r}")

    first = _first_weekday_on_or_after(max(range_start, job.date), job.date.weekday())
    occurrences = []
    current = first
    while current <= range_end:
        occurrences.append(Occurrence(job=job, date=current, status=occurrence_status(job, current)))
        current += ONE_WEEK
    return occurrences


def expand_all(jobs: Iterable[Job], range_start: date, range_end: date) -> list[Occurrence]:
    """Expand many jobs, ordered by date then start time."""
    occurrences = [occ for job in jobs for occ in expand_occurrences(job, range_start, range_end)]
    return sorted(occurrences, key=lambda occ: (occ.date, occ.job.start_time, occ.job.id))


def past_completed_occurrences(jobs: Iterable[Job], today: Optional[date] = None) -> list[Occurrence]:
    """Completed occurrences strictly before ``today``, newest first."""
    if today is None:
        today = date.today()

    result = []
    for job in jobs:
        if job.job_type == JobType.ONE_TIME:
            if job.date < today and job.status == JobStatus.COMPLETED:
                result.append(Occurrence(job=job, date=job.date, status=job.status))
            continue

        current = job.date
        while current < today:
            status = occurrence_status(job, current)
            if status == JobStatus.COMPLETED:
                result.append(Occurrence(job=job, date=current, status=status))
            current += ONE_WEEK

    return sorted(result, key=lambda occ: (occ.date, occ.job.start_time), reverse=True)
