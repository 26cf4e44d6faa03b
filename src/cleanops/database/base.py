"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from cleanops.domain.entities import (
    Client,
    Professional,
    Job,
    JobStatus,
    Invoice,
    InvoiceJob,
    PaymentRun,
    PaymentRunItem,
    Quote,
)


class Database(ABC):
    """Abstract database interface for cleanops.

    Every method commits its own write. Update methods take a dict of domain
    field names to new values; enum values are accepted as-is.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Client operations
    @abstractmethod
    def create_client(self, **fields: Any) -> int:
        """Create a new client. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_clients(self, status: Optional[str] = None) -> list[Client]:
        """List clients ordered by name, optionally filtered by status."""
        pass

    @abstractmethod
    def update_client(self, client_id: int, updates: dict[str, Any]) -> None:
        """Update client fields."""
        pass

    @abstractmethod
    def delete_client(self, client_id: int) -> None:
        """Delete a client."""
        pass

    # Professional operations
    @abstractmethod
    def create_professional(self, **fields: Any) -> int:
        """Create a new professional. Returns professional ID."""
        pass

    @abstractmethod
    def get_professional(self, professional_id: int) -> Optional[Professional]:
        """Get professional by ID."""
        pass

    @abstractmethod
    def list_professionals(self, status: Optional[str] = None) -> list[Professional]:
        """List professionals ordered by name, optionally filtered by status."""
        pass

    @abstractmethod
    def update_professional(self, professional_id: int, updates: dict[str, Any]) -> None:
        """Update professional fields."""
        pass

    @abstractmethod
    def delete_professional(self, professional_id: int) -> None:
        """Delete a professional."""
        pass

    @abstractmethod
    def count_professional_jobs(self, professional_id: int) -> int:
        """Count jobs the professional is assigned to."""
        pass

    # Job operations
    @abstractmethod
    def create_job(
        self,
        client_id: int,
        date: date,
        start_time: str,
        duration_hours: Decimal,
        job_type: str,
        service_kind: str,
        status: str,
        total_price: Decimal,
        cost: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Create a job row without professionals. Returns job ID."""
        pass

    @abstractmethod
    def set_job_professionals(
        self, job_id: int, assignments: Sequence[tuple[int, Optional[Decimal]]]
    ) -> None:
        """Replace the job's professional assignments.

        Args:
            job_id: Job ID
            assignments: Ordered (professional_id, cost) pairs
        """
        pass

    @abstractmethod
    def get_job(self, job_id: int) -> Optional[Job]:
        """Get job by ID."""
        pass

    @abstractmethod
    def list_jobs(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
        professional_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Job]:
        """List jobs with optional filters, newest date first.

        Date filters apply to the job's anchor date.
        """
        pass

    @abstractmethod
    def count_client_jobs(self, client_id: int) -> int:
        """Count jobs booked for a client."""
        pass

    @abstractmethod
    def update_job(self, job_id: int, updates: dict[str, Any]) -> None:
        """Update job fields (not professionals)."""
        pass

    @abstractmethod
    def delete_job(self, job_id: int) -> None:
        """Delete a job along with its assignments and occurrence statuses."""
        pass

    @abstractmethod
    def set_occurrence_status(self, job_id: int, occurrence_date: date, status: JobStatus) -> None:
        """Set (or replace) the status override for one occurrence date."""
        pass

    @abstractmethod
    def clear_occurrence_status(self, job_id: int, occurrence_date: date) -> None:
        """Remove the status override for one occurrence date, if any."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        client_id: int,
        invoice_number: str,
        period_start: date,
        period_end: date,
        issue_date: date,
        due_date: date,
        status: str,
        subtotal: Decimal,
        tax: Decimal,
        total: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Create an invoice. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by its number."""
        pass

    @abstractmethod
    def list_invoices(self, client_id: Optional[int] = None) -> list[Invoice]:
        """List invoices newest first, optionally for one client."""
        pass

    @abstractmethod
    def count_client_invoices(self, client_id: int) -> int:
        """Count invoices issued to a client."""
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: int, updates: dict[str, Any]) -> None:
        """Update invoice fields."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice and its job links."""
        pass

    @abstractmethod
    def list_invoice_numbers(self) -> list[str]:
        """Return every stored invoice number."""
        pass

    @abstractmethod
    def get_invoice_sequence(self) -> int:
        """Return the highest invoice sequence number ever issued (0 if none)."""
        pass

    @abstractmethod
    def set_invoice_sequence(self, value: int) -> None:
        """Record the highest invoice sequence number issued."""
        pass

    @abstractmethod
    def link_job_to_invoice(self, invoice_id: int, job_id: int) -> int:
        """Link a job to an invoice. Returns link ID.

        Raises:
            ConflictError: If the job is already linked to an invoice
        """
        pass

    @abstractmethod
    def unlink_job_from_invoice(self, invoice_id: int, job_id: int) -> None:
        """Remove a job from an invoice."""
        pass

    @abstractmethod
    def list_invoice_links(self, invoice_id: Optional[int] = None) -> list[InvoiceJob]:
        """List invoice/job links, optionally for one invoice."""
        pass

    @abstractmethod
    def get_invoice_jobs(self, invoice_id: int) -> list[Job]:
        """Get the jobs linked to an invoice."""
        pass

    # Payment run operations
    @abstractmethod
    def create_payment_run(self, period_start: date, period_end: date) -> int:
        """Create a payment run. Returns run ID."""
        pass

    @abstractmethod
    def get_payment_run(self, run_id: int) -> Optional[PaymentRun]:
        """Get payment run by ID."""
        pass

    @abstractmethod
    def list_payment_runs(self) -> list[PaymentRun]:
        """List payment runs, newest period first."""
        pass

    @abstractmethod
    def delete_payment_run(self, run_id: int) -> None:
        """Delete a payment run and its items."""
        pass

    @abstractmethod
    def create_payment_run_item(self, run_id: int, professional_id: int, amount: Decimal) -> int:
        """Create a pending payment run item. Returns item ID."""
        pass

    @abstractmethod
    def get_payment_run_item(self, item_id: int) -> Optional[PaymentRunItem]:
        """Get payment run item by ID."""
        pass

    @abstractmethod
    def list_payment_run_items(self, run_id: int) -> list[PaymentRunItem]:
        """List the items of a payment run."""
        pass

    @abstractmethod
    def mark_payment_run_item_paid(self, item_id: int, paid_at: datetime) -> None:
        """Set an item's status to paid with the given timestamp."""
        pass

    # Quote operations
    @abstractmethod
    def create_quote(self, **fields: Any) -> int:
        """Create a quote request. Returns quote ID."""
        pass

    @abstractmethod
    def get_quote(self, quote_id: int) -> Optional[Quote]:
        """Get quote by ID."""
        pass

    @abstractmethod
    def list_quotes(self, status: Optional[str] = None) -> list[Quote]:
        """List quotes newest first, optionally filtered by status."""
        pass

    @abstractmethod
    def update_quote(self, quote_id: int, updates: dict[str, Any]) -> None:
        """Update quote fields."""
        pass
