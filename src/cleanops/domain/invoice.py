"""Invoice domain service: generation from completed jobs and the invoice lifecycle."""

import logging
import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional

from cleanops.database.base import Database
from cleanops.domain.entities import (
    Client,
    ClientStatus,
    Invoice as InvoiceEntity,
    InvoiceDisplayStatus,
    InvoiceStatus,
    Job,
    JobStatus,
)
from cleanops.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
    client_not_found,
    invalid_invoice_transition,
    invoice_not_found,
    job_already_invoiced,
    job_not_found,
)
from cleanops.domain.pricing import to_money

logger = logging.getLogger(__name__)

INVOICE_NUMBER_RE = re.compile(r"^INV-(\d+)$")
INVOICE_NUMBER_FORMAT = "INV-{:06d}"
DEFAULT_DUE_DAYS = 30
MAX_DUE_DAYS = 90
ZERO = Decimal("0.00")

ALLOWED_TRANSITIONS = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.PENDING, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def display_status(invoice: InvoiceEntity, today: date) -> InvoiceDisplayStatus:
    """Status to show for an invoice on ``today``.

    A pending invoice whose due date is before today shows as overdue. The
    overdue state is never stored.
    """
    if invoice.status == InvoiceStatus.PENDING and invoice.due_date < today:
        return InvoiceDisplayStatus.OVERDUE
    return InvoiceDisplayStatus(invoice.status.value)


def sum_job_prices(jobs: Iterable[Job]) -> Decimal:
    return to_money(sum((job.total_price for job in jobs), ZERO))


def _sort_for_invoice(jobs: Iterable[Job]) -> list[Job]:
    return sorted(jobs, key=lambda job: (job.date, job.start_time, job.id))


class InvoiceService:
    """Service for generating invoices and moving them through their lifecycle."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_client(self, client_id: int) -> Client:
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def _invoiced_job_ids(self) -> set[int]:
        return {link.job_id for link in self.db.list_invoice_links()}

    def next_invoice_number(self) -> str:
        """Return the next invoice number without reserving it.

        The number is one above both the highest numeric suffix of any stored
        ``INV-`` number and the highest number ever issued, so numbers of
        deleted invoices are not handed out again.
        """
        highest = 0
        for number in self.db.list_invoice_numbers():
            match = INVOICE_NUMBER_RE.match(number or "")
            if match:
                highest = max(highest, int(match.group(1)))
        highest = max(highest, self.db.get_invoice_sequence())
        return INVOICE_NUMBER_FORMAT.format(highest + 1)

    def uninvoiced_completed_jobs(self, client_id: int) -> list[Job]:
        """Completed jobs for a client that are not on any invoice, oldest first."""
        invoiced = self._invoiced_job_ids()
        jobs = self.db.list_jobs(client_id=client_id, status=JobStatus.COMPLETED)
        return _sort_for_invoice(job for job in jobs if job.id not in invoiced)

    def clients_with_uninvoiced_work(self, period_start: date, period_end: date) -> list[Client]:
        """Active clients with uninvoiced completed jobs in a period, sorted by name."""
        invoiced = self._invoiced_job_ids()
        jobs = self.db.list_jobs(start_date=period_start, end_date=period_end, status=JobStatus.COMPLETED)
        client_ids = {job.client_id for job in jobs if job.id not in invoiced}
        return [
            client
            for client in self.db.list_clients(status=ClientStatus.ACTIVE)
            if client.id in client_ids
        ]

    def generate_invoice(
        self,
        client_id: int,
        period_start: date,
        period_end: date,
        due_days: int = DEFAULT_DUE_DAYS,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> InvoiceEntity:
        """Create a draft invoice from a client's uninvoiced completed jobs.

        Jobs dated within ``[period_start, period_end]`` are linked to the new
        invoice and their snapshot prices summed. A period with no matching
        jobs still produces a zero-total draft.

        Args:
            client_id: Client to invoice
            period_start: First day of the billed period
            period_end: Last day of the billed period
            due_days: Days between issue and due date
            notes: Optional invoice notes
            now: Current time (defaults to now, UTC)

        Returns:
            The created invoice

        Raises:
            NotFoundError: If the client does not exist
            ValidationError: If the period is reversed or due_days is outside 1 to 90
        """
        if period_end < period_start:
            raise ValidationError(
                f"Invoice period ends ({period_end.isoformat()}) before it starts ({period_start.isoformat()})"
            )
        if not 1 <= due_days <= MAX_DUE_DAYS:
            raise ValidationError(f"Due days must be between 1 and {MAX_DUE_DAYS}, got {due_days}")
        self._require_client(client_id)
        if now is None:
            now = datetime.now(timezone.utc)

        jobs = [
            job
            for job in self.uninvoiced_completed_jobs(client_id)
            if period_start <= job.date <= period_end
        ]
        subtotal = sum_job_prices(jobs)
        invoice_number = self.next_invoice_number()
        issue_date = now.date()

        invoice_id = self.db.create_invoice(
            client_id=client_id,
            invoice_number=invoice_number,
            period_start=period_start,
            period_end=period_end,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=due_days),
            status=InvoiceStatus.DRAFT,
            subtotal=subtotal,
            tax=ZERO,
            total=subtotal,
            notes=(notes or "").strip() or None,
        )
        self.db.set_invoice_sequence(int(INVOICE_NUMBER_RE.match(invoice_number).group(1)))

        try:
            for job in jobs:
                self.db.link_job_to_invoice(invoice_id, job.id)
        except DomainError:
            logger.error("Linking jobs to invoice %s failed, removing the invoice", invoice_number)
            self.db.delete_invoice(invoice_id)
            raise

        logger.info(
            "Generated invoice %s for client %s: %d job(s), total %s",
            invoice_number,
            client_id,
            len(jobs),
            subtotal,
        )
        return self.require_invoice(invoice_id)

    def get_invoice(self, invoice_id: int) -> Optional[InvoiceEntity]:
        """Get invoice by ID, or None if not found."""
        return self.db.get_invoice(invoice_id)

    def require_invoice(self, invoice_id: int) -> InvoiceEntity:
        """Get invoice by ID.

        Raises:
            NotFoundError: If the invoice does not exist
        """
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def get_invoice_by_number(self, invoice_number: str) -> Optional[InvoiceEntity]:
        return self.db.get_invoice_by_number(invoice_number.strip().upper())

    def list_invoices(self, client_id: Optional[int] = None) -> list[InvoiceEntity]:
        """List invoices newest first, optionally for one client."""
        return self.db.list_invoices(client_id=client_id)

    def get_invoice_jobs(self, invoice_id: int) -> list[Job]:
        """Jobs billed on an invoice, oldest first."""
        self.require_invoice(invoice_id)
        return self.db.get_invoice_jobs(invoice_id)

    def _require_draft(self, invoice_id: int) -> InvoiceEntity:
        invoice = self.require_invoice(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT:
            raise ValidationError(
                f"Invoice {invoice.invoice_number} is {invoice.status.value}; only draft invoices can be edited"
            )
        return invoice

    def _recompute_totals(self, invoice_id: int) -> InvoiceEntity:
        subtotal = sum_job_prices(self.db.get_invoice_jobs(invoice_id))
        self.db.update_invoice(invoice_id, {"subtotal": subtotal, "tax": ZERO, "total": subtotal})
        return self.require_invoice(invoice_id)

    def add_job(self, invoice_id: int, job_id: int) -> InvoiceEntity:
        """Add a completed job to a draft invoice and recompute its totals.

        Raises:
            NotFoundError: If the invoice or job does not exist
            ValidationError: If the invoice is not a draft, or the job is not
                completed or belongs to another client
            ConflictError: If the job is already on an invoice
        """
        invoice = self._require_draft(invoice_id)
        job = self.db.get_job(job_id)
        if job is None:
            raise NotFoundError(job_not_found(job_id))
        if job.client_id != invoice.client_id:
            raise ValidationError(f"Job {job_id} belongs to a different client")
        if job.status != JobStatus.COMPLETED:
            raise ValidationError(f"Job {job_id} is {job.status.value}; only completed jobs can be invoiced")
        if job_id in self._invoiced_job_ids():
            raise ConflictError(job_already_invoiced(job_id))

        self.db.link_job_to_invoice(invoice_id, job_id)
        updated = self._recompute_totals(invoice_id)
        logger.info("Added job %s to invoice %s, total now %s", job_id, invoice.invoice_number, updated.total)
        return updated

    def remove_job(self, invoice_id: int, job_id: int) -> InvoiceEntity:
        """Remove a job from a draft invoice and recompute its totals.

        Removing the last job leaves a zero-total draft.

        Raises:
            NotFoundError: If the invoice does not exist
            ValidationError: If the invoice is not a draft or the job is not on it
        """
        invoice = self._require_draft(invoice_id)
        if not any(link.job_id == job_id for link in self.db.list_invoice_links(invoice_id)):
            raise ValidationError(f"Job {job_id} is not on invoice {invoice.invoice_number}")

        self.db.unlink_job_from_invoice(invoice_id, job_id)
        updated = self._recompute_totals(invoice_id)
        logger.info("Removed job %s from invoice %s, total now %s", job_id, invoice.invoice_number, updated.total)
        return updated

    def _transition(self, invoice_id: int, target: InvoiceStatus) -> InvoiceEntity:
        invoice = self.require_invoice(invoice_id)
        if target not in ALLOWED_TRANSITIONS[invoice.status]:
            raise ValidationError(
                invalid_invoice_transition(invoice.invoice_number, invoice.status.value, target.value)
            )
        self.db.update_invoice(invoice_id, {"status": target})
        logger.info("Invoice %s: %s -> %s", invoice.invoice_number, invoice.status.value, target.value)
        return self.require_invoice(invoice_id)

    def send_invoice(self, invoice_id: int) -> InvoiceEntity:
        """Mark a draft invoice as sent (pending payment)."""
        return self._transition(invoice_id, InvoiceStatus.PENDING)

    def mark_paid(self, invoice_id: int) -> InvoiceEntity:
        """Mark a pending invoice as paid."""
        return self._transition(invoice_id, InvoiceStatus.PAID)

    def cancel_invoice(self, invoice_id: int) -> InvoiceEntity:
        """Cancel a draft or pending invoice."""
        return self._transition(invoice_id, InvoiceStatus.CANCELLED)

    def display_status(self, invoice: InvoiceEntity, today: date) -> InvoiceDisplayStatus:
        return display_status(invoice, today)

    def delete_invoice(self, invoice_id: int) -> None:
        """Delete a draft or cancelled invoice, releasing its jobs.

        The invoice number is not reused.

        Raises:
            NotFoundError: If the invoice does not exist
            ValidationError: If the invoice has been sent or paid
        """
        invoice = self.require_invoice(invoice_id)
        if invoice.status not in (InvoiceStatus.DRAFT, InvoiceStatus.CANCELLED):
            raise ValidationError(
                f"Invoice {invoice.invoice_number} is {invoice.status.value}; "
                "only draft or cancelled invoices can be deleted"
            )
        self.db.delete_invoice(invoice_id)
        logger.info("Deleted invoice %s", invoice.invoice_number)
