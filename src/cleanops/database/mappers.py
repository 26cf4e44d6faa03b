"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: column names, stored enum strings
and nullable legacy columns are translated here and nowhere else.
"""

from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Optional

from cleanops.domain import entities as domain
from cleanops.database.models import (
    Client as ORMClient,
    Professional as ORMProfessional,
    Job as ORMJob,
    Invoice as ORMInvoice,
    InvoiceJob as ORMInvoiceJob,
    PaymentRun as ORMPaymentRun,
    PaymentRunItem as ORMPaymentRunItem,
    Quote as ORMQuote,
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to timestamps read back from backends that drop tzinfo."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value)


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        email=orm_client.email,
        phone=orm_client.phone,
        address=orm_client.address,
        postcode=orm_client.postcode,
        city=orm_client.city,
        client_type=domain.ClientType(orm_client.client_type),
        contract_type=domain.ContractType(orm_client.contract_type),
        frequency=domain.Frequency(orm_client.frequency) if orm_client.frequency else None,
        price_per_hour=_decimal(orm_client.price_per_hour),
        deep_clean_price_per_hour=_decimal(orm_client.deep_clean_price_per_hour),
        status=domain.ClientStatus(orm_client.status),
        notes=orm_client.notes,
        created_at=_aware(orm_client.created_at),
    )


def professional_to_domain(orm_professional: ORMProfessional) -> domain.Professional:
    """Convert SQLAlchemy Professional model to domain Professional entity."""
    return domain.Professional(
        id=orm_professional.id,
        name=orm_professional.name,
        email=orm_professional.email,
        phone=orm_professional.phone,
        rate_per_hour=_decimal(orm_professional.rate_per_hour),
        deep_clean_rate_per_hour=_decimal(orm_professional.deep_clean_rate_per_hour),
        status=domain.ProfessionalStatus(orm_professional.status),
        availability=domain.Availability.from_dict(orm_professional.availability),
        bank_account_name=orm_professional.bank_account_name,
        bank_sort_code=orm_professional.bank_sort_code,
        bank_account_number=orm_professional.bank_account_number,
        created_at=_aware(orm_professional.created_at),
    )


def job_to_domain(orm_job: ORMJob) -> domain.Job:
    """Convert SQLAlchemy Job model (with assignments and overrides) to domain Job.

    ``professional_costs`` is left empty when any assignment lacks a stored
    cost, which marks the job as a legacy row.
    """
    assignments = list(orm_job.assignments)
    professional_costs: tuple[domain.ProfessionalCost, ...] = ()
    if assignments and all(a.cost is not None for a in assignments):
        professional_costs = tuple(
            domain.ProfessionalCost(professional_id=a.professional_id, cost=Decimal(a.cost))
            for a in assignments
        )

    return domain.Job(
        id=orm_job.id,
        client_id=orm_job.client_id,
        professional_ids=tuple(a.professional_id for a in assignments),
        date=orm_job.date,
        start_time=orm_job.start_time,
        duration_hours=Decimal(orm_job.duration_hours),
        job_type=domain.JobType(orm_job.job_type),
        service_kind=domain.ServiceKind(orm_job.service_kind),
        status=domain.JobStatus(orm_job.status),
        notes=orm_job.notes,
        total_price=Decimal(orm_job.total_price),
        cost=Decimal(orm_job.cost),
        professional_costs=professional_costs,
        created_at=_aware(orm_job.created_at),
        occurrence_statuses={
            override.occurrence_date: domain.JobStatus(override.status)
            for override in orm_job.occurrence_overrides
        },
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        client_id=orm_invoice.client_id,
        invoice_number=orm_invoice.invoice_number,
        period_start=orm_invoice.period_start,
        period_end=orm_invoice.period_end,
        issue_date=orm_invoice.issue_date,
        due_date=orm_invoice.due_date,
        status=domain.InvoiceStatus(orm_invoice.status),
        subtotal=Decimal(orm_invoice.subtotal),
        tax=Decimal(orm_invoice.tax),
        total=Decimal(orm_invoice.total),
        notes=orm_invoice.notes,
        created_at=_aware(orm_invoice.created_at),
        updated_at=_aware(orm_invoice.updated_at),
    )


def invoice_job_to_domain(orm_link: ORMInvoiceJob) -> domain.InvoiceJob:
    """Convert SQLAlchemy InvoiceJob model to domain InvoiceJob entity."""
    return domain.InvoiceJob(
        id=orm_link.id,
        invoice_id=orm_link.invoice_id,
        job_id=orm_link.job_id,
        created_at=_aware(orm_link.created_at),
    )


def payment_run_to_domain(orm_run: ORMPaymentRun) -> domain.PaymentRun:
    """Convert SQLAlchemy PaymentRun model to domain PaymentRun entity."""
    return domain.PaymentRun(
        id=orm_run.id,
        period_start=orm_run.period_start,
        period_end=orm_run.period_end,
        created_at=_aware(orm_run.created_at),
    )


def payment_run_item_to_domain(orm_item: ORMPaymentRunItem) -> domain.PaymentRunItem:
    """Convert SQLAlchemy PaymentRunItem model to domain PaymentRunItem entity."""
    return domain.PaymentRunItem(
        id=orm_item.id,
        payment_run_id=orm_item.payment_run_id,
        professional_id=orm_item.professional_id,
        amount=Decimal(orm_item.amount),
        status=domain.PaymentItemStatus(orm_item.status),
        paid_at=_aware(orm_item.paid_at),
    )


def quote_to_domain(orm_quote: ORMQuote) -> domain.Quote:
    """Convert SQLAlchemy Quote model to domain Quote entity."""
    return domain.Quote(
        id=orm_quote.id,
        full_name=orm_quote.full_name,
        email=orm_quote.email,
        phone=orm_quote.phone,
        service_type=orm_quote.service_type,
        postcode=orm_quote.postcode,
        preferred_contact=domain.ContactMethod(orm_quote.preferred_contact),
        message=orm_quote.message,
        status=domain.QuoteStatus(orm_quote.status),
        professional_id=orm_quote.professional_id,
        source=orm_quote.source,
        created_at=_aware(orm_quote.created_at),
        updated_at=_aware(orm_quote.updated_at),
    )


def to_column_value(value):
    """Convert a domain value (enum, Availability) into what the column stores."""
    if isinstance(value, domain.Availability):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    return value
