"""Job domain service: scheduling, revenue/cost snapshots and occurrence statuses."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from cleanops.database.base import Database
from cleanops.domain.entities import (
    WEEKDAY_KEYS,
    Client,
    ClientStatus,
    Job as JobEntity,
    JobFinancials,
    JobStatus,
    JobType,
    Occurrence,
    Professional,
    ProfessionalStatus,
    ServiceKind,
)
from cleanops.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
    client_not_found,
    job_already_invoiced,
    job_not_found,
    no_professionals,
    professional_not_found,
)
from cleanops.domain.occurrences import (
    expand_all,
    is_occurrence_date,
    past_completed_occurrences,
)
from cleanops.domain.pricing import compute_job_financials
from cleanops.domain.validation import coerce_enum, require_duration, require_start_time

logger = logging.getLogger(__name__)

# Changing any of these re-runs the price/cost calculation
FINANCIAL_FIELDS = frozenset({"client_id", "professional_ids", "duration_hours", "service_kind"})

JOB_UPDATE_FIELDS = FINANCIAL_FIELDS | {"date", "start_time", "job_type", "status", "notes"}


class JobService:
    """Service for scheduling jobs and keeping their financial snapshot current."""

    def __init__(self, db: Database):
        """Initialize job service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_client(self, client_id: int) -> Client:
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def _require_schedulable_client(self, client_id: int) -> Client:
        client = self._require_client(client_id)
        if client.status != ClientStatus.ACTIVE:
            raise ValidationError(f"Client '{client.name}' is {client.status.value} and cannot be scheduled")
        return client

    def _load_professionals(self, professional_ids: Sequence[int]) -> list[Professional]:
        if not professional_ids:
            raise ValidationError(no_professionals())
        if len(set(professional_ids)) != len(professional_ids):
            raise ValidationError("The same cleaner cannot be assigned to a job twice")

        professionals = []
        for professional_id in professional_ids:
            professional = self.db.get_professional(professional_id)
            if professional is None:
                raise NotFoundError(professional_not_found(professional_id))
            professionals.append(professional)
        return professionals

    @staticmethod
    def _check_assignable(
        professionals: Sequence[Professional], job_date: date, new_ids: Optional[set[int]] = None
    ) -> None:
        """Check that professionals can work on ``job_date``.

        Only professionals in ``new_ids`` (all, when None) need to be active;
        everyone must be available on the job's weekday.
        """
        weekday = WEEKDAY_KEYS[job_date.weekday()]
        for professional in professionals:
            if (new_ids is None or professional.id in new_ids) and professional.status != ProfessionalStatus.ACTIVE:
                raise ValidationError(
                    f"Professional '{professional.name}' is {professional.status.value} and cannot be assigned"
                )
            if not professional.availability.is_available_on(job_date):
                raise ValidationError(f"Professional '{professional.name}' is not available on {weekday}")

    def create_job(
        self,
        client_id: int,
        professional_ids: Sequence[int],
        date: date,
        start_time: str,
        duration_hours: Union[Decimal, int, float, str],
        job_type: Union[JobType, str] = JobType.ONE_TIME,
        service_kind: Union[ServiceKind, str] = ServiceKind.REGULAR,
        status: Union[JobStatus, str] = JobStatus.SCHEDULED,
        notes: Optional[str] = None,
    ) -> int:
        """Schedule a job and snapshot its price and cost.

        Nothing is written unless every check passes. If linking the
        professionals fails, the job row is deleted again before the error
        is re-raised.

        Args:
            client_id: Client being served
            professional_ids: Assigned professionals, in order
            date: Job date (the first occurrence for recurring jobs)
            start_time: Start time as HH:MM
            duration_hours: Length of the job, at least half an hour
            job_type: One-time or weekly recurring
            service_kind: Regular or deep clean
            status: Initial status
            notes: Optional notes

        Returns:
            Job ID

        Raises:
            NotFoundError: If the client or a professional does not exist
            ValidationError: If the client or a professional cannot be
                scheduled, the schedule fields are malformed, or a deep clean
                is requested for a client without a deep-clean price
        """
        duration = require_duration(duration_hours)
        start_time = require_start_time(start_time)
        job_type = coerce_enum(JobType, job_type, "job type")
        service_kind = coerce_enum(ServiceKind, service_kind, "service kind")
        status = coerce_enum(JobStatus, status, "job status")
        professional_ids = list(professional_ids)

        client = self._require_schedulable_client(client_id)
        professionals = self._load_professionals(professional_ids)
        self._check_assignable(professionals, date)
        financials = compute_job_financials(client, professionals, duration, service_kind)

        job_id = self.db.create_job(
            client_id=client_id,
            date=date,
            start_time=start_time,
            duration_hours=duration,
            job_type=job_type,
            service_kind=service_kind,
            status=status,
            total_price=financials.total_price,
            cost=financials.cost,
            notes=(notes or "").strip() or None,
        )
        self._link_professionals(job_id, financials, compensate=True)

        logger.info(
            "Created job %s for client %s on %s: price %s, cost %s",
            job_id,
            client_id,
            date,
            financials.total_price,
            financials.cost,
        )
        return job_id

    def _link_professionals(self, job_id: int, financials: JobFinancials, compensate: bool = False) -> None:
        assignments = [(pc.professional_id, pc.cost) for pc in financials.professional_costs]
        try:
            self.db.set_job_professionals(job_id, assignments)
        except DomainError:
            if compensate:
                logger.error("Linking professionals to job %s failed, removing the job", job_id)
                self.db.delete_job(job_id)
            raise

    def get_job(self, job_id: int) -> Optional[JobEntity]:
        """Get job by ID, or None if not found."""
        return self.db.get_job(job_id)

    def require_job(self, job_id: int) -> JobEntity:
        """Get job by ID.

        Raises:
            NotFoundError: If the job does not exist
        """
        job = self.db.get_job(job_id)
        if job is None:
            raise NotFoundError(job_not_found(job_id))
        return job

    def list_jobs(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
        professional_id: Optional[int] = None,
        status: Optional[Union[JobStatus, str]] = None,
    ) -> list[JobEntity]:
        """List jobs by anchor date, newest first.

        Args:
            start_date: Only jobs dated on or after this date
            end_date: Only jobs dated on or before this date
            client_id: Only jobs for this client
            professional_id: Only jobs this professional is assigned to
            status: Only jobs with this template status
        """
        if status is not None:
            status = coerce_enum(JobStatus, status, "job status")
        return self.db.list_jobs(
            start_date=start_date,
            end_date=end_date,
            client_id=client_id,
            professional_id=professional_id,
            status=status,
        )

    def update_job(self, job_id: int, **updates: Any) -> JobEntity:
        """Apply a partial update to a job.

        Price and cost are recomputed from current rates only when the client,
        the professionals, the duration or the service kind actually change.
        Status, notes, date and start time changes leave the snapshot alone.

        Returns:
            The updated job

        Raises:
            NotFoundError: If the job, client or a professional does not exist
            ValidationError: If an updated field is invalid
            ConflictError: If a price-affecting field changes on an invoiced job
        """
        job = self.require_job(job_id)
        unknown = set(updates) - JOB_UPDATE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown job field(s): {', '.join(sorted(unknown))}")

        fields: dict[str, Any] = {}
        if "client_id" in updates:
            fields["client_id"] = int(updates["client_id"])
        if "professional_ids" in updates:
            fields["professional_ids"] = tuple(updates["professional_ids"])
        if "date" in updates:
            fields["date"] = updates["date"]
        if "start_time" in updates:
            fields["start_time"] = require_start_time(updates["start_time"])
        if "duration_hours" in updates:
            fields["duration_hours"] = require_duration(updates["duration_hours"])
        if "job_type" in updates:
            fields["job_type"] = coerce_enum(JobType, updates["job_type"], "job type")
        if "service_kind" in updates:
            fields["service_kind"] = coerce_enum(ServiceKind, updates["service_kind"], "service kind")
        if "status" in updates:
            fields["status"] = coerce_enum(JobStatus, updates["status"], "job status")
        if "notes" in updates:
            fields["notes"] = (updates["notes"] or "").strip() or None

        # Drop fields whose value is unchanged
        fields = {name: value for name, value in fields.items() if getattr(job, name) != value}
        if not fields:
            return job

        client_id = fields.get("client_id", job.client_id)
        professional_ids = list(fields.get("professional_ids", job.professional_ids))
        job_date = fields.get("date", job.date)

        if "client_id" in fields:
            client = self._require_schedulable_client(client_id)
        else:
            client = self._require_client(client_id)

        professionals = None
        if {"professional_ids", "date"} & set(fields):
            professionals = self._load_professionals(professional_ids)
            new_ids = set(professional_ids) - set(job.professional_ids)
            self._check_assignable(professionals, job_date, new_ids=new_ids)

        financials = None
        if FINANCIAL_FIELDS & set(fields):
            if any(link.job_id == job_id for link in self.db.list_invoice_links()):
                raise ConflictError(job_already_invoiced(job_id))
            if professionals is None:
                professionals = self._load_professionals(professional_ids)
            financials = compute_job_financials(
                client,
                professionals,
                fields.get("duration_hours", job.duration_hours),
                fields.get("service_kind", job.service_kind),
            )

        row_updates = {name: value for name, value in fields.items() if name != "professional_ids"}
        if financials is not None:
            row_updates["total_price"] = financials.total_price
            row_updates["cost"] = financials.cost
        if row_updates:
            self.db.update_job(job_id, row_updates)
        if financials is not None:
            try:
                self._link_professionals(job_id, financials)
            except DomainError:
                logger.error("Linking professionals to job %s failed, restoring the job", job_id)
                self.db.update_job(job_id, {name: getattr(job, name) for name in row_updates})
                raise
            logger.info(
                "Recomputed job %s: price %s, cost %s", job_id, financials.total_price, financials.cost
            )

        logger.info("Updated job %s: %s", job_id, ", ".join(sorted(fields)))
        return self.require_job(job_id)

    def delete_job(self, job_id: int) -> None:
        """Delete a job with its assignments and occurrence statuses.

        Raises:
            NotFoundError: If the job does not exist
            ConflictError: If the job is on an invoice
        """
        self.require_job(job_id)
        if any(link.job_id == job_id for link in self.db.list_invoice_links()):
            raise ConflictError(job_already_invoiced(job_id))
        self.db.delete_job(job_id)
        logger.info("Deleted job %s", job_id)

    def _require_occurrence(self, job_id: int, on_date: date) -> JobEntity:
        job = self.require_job(job_id)
        if not job.is_recurring:
            raise ValidationError(f"Job {job_id} is not recurring; update its status instead")
        if not is_occurrence_date(job, on_date):
            raise ValidationError(f"Job {job_id} does not take place on {on_date.isoformat()}")
        return job

    def set_occurrence_status(
        self, job_id: int, on_date: date, status: Union[JobStatus, str]
    ) -> JobEntity:
        """Override the status of a recurring job for one calendar date.

        Raises:
            NotFoundError: If the job does not exist
            ValidationError: If the job is not recurring or does not occur on ``on_date``
        """
        status = coerce_enum(JobStatus, status, "job status")
        self._require_occurrence(job_id, on_date)
        self.db.set_occurrence_status(job_id, on_date, status)
        logger.info("Job %s on %s set to %s", job_id, on_date, status.value)
        return self.require_job(job_id)

    def clear_occurrence_status(self, job_id: int, on_date: date) -> JobEntity:
        """Drop a per-date override so the occurrence follows the job's status again."""
        self._require_occurrence(job_id, on_date)
        self.db.clear_occurrence_status(job_id, on_date)
        return self.require_job(job_id)

    def occurrences(
        self,
        range_start: date,
        range_end: date,
        client_id: Optional[int] = None,
        professional_id: Optional[int] = None,
    ) -> list[Occurrence]:
        """Expand jobs into the occurrences that fall within a date range.

        Returns:
            Occurrences ordered by date then start time
        """
        jobs = self.db.list_jobs(end_date=range_end, client_id=client_id, professional_id=professional_id)
        return expand_all(jobs, range_start, range_end)

    def past_completed(
        self,
        today: date,
        client_id: Optional[int] = None,
        professional_id: Optional[int] = None,
    ) -> list[Occurrence]:
        """Completed occurrences before ``today``, newest first."""
        jobs = self.db.list_jobs(end_date=today, client_id=client_id, professional_id=professional_id)
        return past_completed_occurrences(jobs, today=today)
