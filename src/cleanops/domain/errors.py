"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StoreError(DomainError):
    """The database rejected a read or write."""

    def __init__(self, operation: str, entity_id: object = None, cause: Exception | None = None):
        self.operation = operation
        self.entity_id = entity_id
        self.cause = cause
        message = f"Failed to {operation}"
        if entity_id is not None:
            message += f" ({entity_id})"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


def client_not_found(client_id: int) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def professional_not_found(professional_id: int) -> str:
    """Return message for missing professional."""
    return f"Professional {professional_id} not found"


def job_not_found(job_id: int) -> str:
    """Return message for missing job."""
    return f"Job {job_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def payment_run_not_found(run_id: int) -> str:
    """Return message for missing payment run."""
    return f"Payment run {run_id} not found"


def payment_run_item_not_found(item_id: int) -> str:
    """Return message for missing payment run item."""
    return f"Payment run item {item_id} not found"


def quote_not_found(quote_id: int) -> str:
    """Return message for missing quote."""
    return f"Quote {quote_id} not found"


def missing_deep_clean_rate(client_name: str) -> str:
    """Return message when a deep clean is booked for a client without a deep-clean rate."""
    return f"Client '{client_name}' has no deep-clean rate configured"


def no_professionals() -> str:
    """Return message when a job has no cleaner assigned."""
    return "At least one cleaner required"


def job_already_invoiced(job_id: int) -> str:
    """Return message when a job is already linked to an invoice."""
    return f"Job {job_id} is already on an invoice"


def invalid_invoice_transition(invoice_number: str, current: str, target: str) -> str:
    """Return message for a disallowed invoice status change."""
    return f"Invoice {invoice_number} cannot move from '{current}' to '{target}'"


def duplicate_payment_run(period_start: object, period_end: object) -> str:
    """Return message when a payment run already covers the exact period."""
    return f"A payment run already exists for {period_start} to {period_end}"


def client_delete_blocked(client_id: int, job_count: int, invoice_count: int) -> str:
    """Return message when client has dependent jobs or invoices."""
    parts = []
    if job_count > 0:
        parts.append(f"{job_count} job{'s' if job_count != 1 else ''}")
    if invoice_count > 0:
        parts.append(f"{invoice_count} invoice{'s' if invoice_count != 1 else ''}")
    return (
        f"Cannot delete client {client_id}: it has {', '.join(parts)}. "
        "Please delete them first or mark the client inactive."
    )


def professional_delete_blocked(professional_id: int, job_count: int) -> str:
    """Return message when professional is still assigned to jobs."""
    return (
        f"Cannot delete professional {professional_id}: it is assigned to "
        f"{job_count} job{'s' if job_count != 1 else ''}. "
        "Please reassign them first or mark the professional inactive."
    )
