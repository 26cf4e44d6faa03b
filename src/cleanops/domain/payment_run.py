"""Payment run domain service: weekly payroll for professionals."""

import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from cleanops.database.base import Database
from cleanops.domain.entities import (
    Job,
    JobStatus,
    PaymentItemStatus,
    PaymentRun as PaymentRunEntity,
    PaymentRunItem,
    ProfessionalCost,
)
from cleanops.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
    duplicate_payment_run,
    payment_run_item_not_found,
    payment_run_not_found,
)
from cleanops.domain.pricing import split_cost_evenly, to_money

logger = logging.getLogger(__name__)


def job_cost_breakdown(job: Job) -> tuple[ProfessionalCost, ...]:
    """Per-professional cost of a job.

    Jobs stored without a breakdown fall back to an even split of their
    total cost.
    """
    if job.professional_costs:
        return job.professional_costs
    return split_cost_evenly(job.cost, job.professional_ids)


def professional_totals(jobs: Iterable[Job]) -> dict[int, Decimal]:
    """Sum job costs per professional, ordered by professional ID."""
    totals: dict[int, Decimal] = defaultdict(lambda: Decimal("0.00"))
    for job in jobs:
        for part in job_cost_breakdown(job):
            totals[part.professional_id] += part.cost
    return {professional_id: to_money(totals[professional_id]) for professional_id in sorted(totals)}


class PaymentRunService:
    """Service for generating payment runs and recording payouts."""

    def __init__(self, db: Database):
        """Initialize payment run service.

        Args:
            db: Database instance
        """
        self.db = db

    def find_run_for_period(self, period_start: date, period_end: date) -> Optional[PaymentRunEntity]:
        """Return the first payment run covering exactly this period, if any."""
        for run in self.db.list_payment_runs():
            if run.period_start == period_start and run.period_end == period_end:
                return run
        return None

    def generate_payment_run(
        self, period_start: date, period_end: date, allow_duplicate: bool = False
    ) -> PaymentRunEntity:
        """Create a payment run from completed jobs in a period.

        Each professional with a positive total gets one pending item. Job
        costs are taken from the snapshot stored on each job.

        Args:
            period_start: First day of the period
            period_end: Last day of the period
            allow_duplicate: Create the run even if one exists for the same period

        Returns:
            The created payment run

        Raises:
            ValidationError: If the period is reversed
            ConflictError: If a run already exists for exactly this period
                and ``allow_duplicate`` is False
        """
        if period_end < period_start:
            raise ValidationError(
                f"Payment period ends ({period_end.isoformat()}) before it starts ({period_start.isoformat()})"
            )
        if not allow_duplicate and self.find_run_for_period(period_start, period_end) is not None:
            raise ConflictError(duplicate_payment_run(period_start.isoformat(), period_end.isoformat()))

        jobs = self.db.list_jobs(start_date=period_start, end_date=period_end, status=JobStatus.COMPLETED)
        totals = professional_totals(jobs)

        run_id = self.db.create_payment_run(period_start, period_end)
        try:
            for professional_id, amount in totals.items():
                if amount > 0:
                    self.db.create_payment_run_item(run_id, professional_id, amount)
        except DomainError:
            logger.error("Creating items for payment run %s failed, removing the run", run_id)
            self.db.delete_payment_run(run_id)
            raise

        logger.info(
            "Generated payment run %s for %s to %s: %d job(s), %d item(s)",
            run_id,
            period_start,
            period_end,
            len(jobs),
            sum(1 for amount in totals.values() if amount > 0),
        )
        return self.require_payment_run(run_id)

    def get_payment_run(self, run_id: int) -> Optional[PaymentRunEntity]:
        """Get payment run by ID, or None if not found."""
        return self.db.get_payment_run(run_id)

    def require_payment_run(self, run_id: int) -> PaymentRunEntity:
        """Get payment run by ID.

        Raises:
            NotFoundError: If the run does not exist
        """
        run = self.db.get_payment_run(run_id)
        if run is None:
            raise NotFoundError(payment_run_not_found(run_id))
        return run

    def list_payment_runs(self) -> list[PaymentRunEntity]:
        """List payment runs, newest period first."""
        return self.db.list_payment_runs()

    def list_items(self, run_id: int) -> list[PaymentRunItem]:
        """List the items of a payment run.

        Raises:
            NotFoundError: If the run does not exist
        """
        self.require_payment_run(run_id)
        return self.db.list_payment_run_items(run_id)

    def run_total(self, run_id: int) -> Decimal:
        """Total amount of all items in a run."""
        return to_money(sum((item.amount for item in self.list_items(run_id)), Decimal("0.00")))

    def mark_item_paid(self, item_id: int, now: Optional[datetime] = None) -> PaymentRunItem:
        """Record that a payment run item has been paid.

        Marking an already paid item again changes nothing; the original
        ``paid_at`` and amount are kept.

        Args:
            item_id: Payment run item ID
            now: Payment time (defaults to now, UTC)

        Returns:
            The item after the update

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.db.get_payment_run_item(item_id)
        if item is None:
            raise NotFoundError(payment_run_item_not_found(item_id))
        if item.status == PaymentItemStatus.PAID:
            logger.debug("Payment run item %s already paid at %s", item_id, item.paid_at)
            return item

        if now is None:
            now = datetime.now(timezone.utc)
        self.db.mark_payment_run_item_paid(item_id, now)
        logger.info("Marked payment run item %s paid (%s)", item_id, item.amount)
        return self.db.get_payment_run_item(item_id)
