"""Domain model entities for cleanops.

These are pure data classes representing business concepts, independent of
database schema. Status and kind fields are closed enums so every consumer
(rate resolution, display status, occurrence status) matches on a known set
of values.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional


class ClientType(str, Enum):
    """Kind of premises a client books cleans for."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class ContractType(str, Enum):
    """How a client books work."""

    FIXED = "fixed"
    ON_DEMAND = "on_demand"


class Frequency(str, Enum):
    """Visit frequency for fixed-contract clients."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    TRIWEEKLY = "triweekly"
    MONTHLY = "monthly"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProfessionalStatus(str, Enum):
    ACTIVE = "active"
    VACATION = "vacation"
    INACTIVE = "inactive"


class JobType(str, Enum):
    ONE_TIME = "one_time"
    RECURRING = "recurring"


class ServiceKind(str, Enum):
    """Selects which rate pair (client price / professional pay) applies."""

    REGULAR = "regular"
    DEEP_CLEAN = "deep_clean"


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvoiceStatus(str, Enum):
    """Persisted invoice states."""

    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class InvoiceDisplayStatus(str, Enum):
    """Invoice status as shown to users; OVERDUE is derived, never stored."""

    DRAFT = "draft"
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentItemStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class QuoteStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONVERTED = "converted"


class ContactMethod(str, Enum):
    PHONE = "Phone"
    WHATSAPP = "WhatsApp"
    EMAIL = "Email"


WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class Availability:
    """Which weekdays a professional can be assigned work."""

    mon: bool = False
    tue: bool = False
    wed: bool = False
    thu: bool = False
    fri: bool = False
    sat: bool = False
    sun: bool = False

    def is_available_on(self, day: date) -> bool:
        """Return True if the professional works on the weekday of ``day``."""
        return getattr(self, WEEKDAY_KEYS[day.weekday()])

    def to_dict(self) -> dict[str, bool]:
        return {key: getattr(self, key) for key in WEEKDAY_KEYS}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, bool]]) -> "Availability":
        data = data or {}
        return cls(**{key: bool(data.get(key, False)) for key in WEEKDAY_KEYS})

    @classmethod
    def every_day(cls) -> "Availability":
        return cls(**{key: True for key in WEEKDAY_KEYS})


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: int
    name: str
    email: str
    phone: str
    address: str
    postcode: str
    city: str
    client_type: ClientType
    contract_type: ContractType
    frequency: Optional[Frequency]
    price_per_hour: Decimal
    deep_clean_price_per_hour: Optional[Decimal]
    status: ClientStatus
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Professional:
    """Cleaner domain entity, including the bank details used by payment runs."""

    id: int
    name: str
    email: str
    phone: str
    rate_per_hour: Decimal
    deep_clean_rate_per_hour: Optional[Decimal]
    status: ProfessionalStatus
    availability: Availability
    bank_account_name: Optional[str]
    bank_sort_code: Optional[str]
    bank_account_number: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class ProfessionalCost:
    """Cost of one professional's time on a job."""

    professional_id: int
    cost: Decimal


@dataclass(frozen=True)
class JobFinancials:
    """Revenue and cost snapshot computed for a job."""

    total_price: Decimal
    cost: Decimal
    professional_costs: tuple[ProfessionalCost, ...]


@dataclass(frozen=True)
class Job:
    """Job domain entity.

    ``total_price``, ``cost`` and ``professional_costs`` are snapshots taken
    when the job was created or last had a financial input changed.
    ``professional_costs`` is empty for legacy rows stored without a
    per-professional breakdown.
    """

    id: int
    client_id: int
    professional_ids: tuple[int, ...]
    date: date
    start_time: str
    duration_hours: Decimal
    job_type: JobType
    service_kind: ServiceKind
    status: JobStatus
    notes: Optional[str]
    total_price: Decimal
    cost: Decimal
    professional_costs: tuple[ProfessionalCost, ...]
    created_at: datetime
    occurrence_statuses: Mapping[date, JobStatus] = field(default_factory=dict)

    @property
    def is_recurring(self) -> bool:
        return self.job_type == JobType.RECURRING


@dataclass(frozen=True)
class Occurrence:
    """One calendar-date instance of a (possibly recurring) job."""

    job: Job
    date: date
    status: JobStatus


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity."""

    id: int
    client_id: int
    invoice_number: str
    period_start: date
    period_end: date
    issue_date: date
    due_date: date
    status: InvoiceStatus
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class InvoiceJob:
    """Link between an invoice and a job it bills."""

    id: int
    invoice_id: int
    job_id: int
    created_at: datetime


@dataclass(frozen=True)
class PaymentRun:
    """Payroll batch for one period."""

    id: int
    period_start: date
    period_end: date
    created_at: datetime


@dataclass(frozen=True)
class PaymentRunItem:
    """Amount owed to one professional within a payment run."""

    id: int
    payment_run_id: int
    professional_id: int
    amount: Decimal
    status: PaymentItemStatus
    paid_at: Optional[datetime]


@dataclass(frozen=True)
class Quote:
    """Quote request captured from the public contact form."""

    id: int
    full_name: str
    email: str
    phone: str
    service_type: str
    postcode: str
    preferred_contact: ContactMethod
    message: Optional[str]
    status: QuoteStatus
    professional_id: Optional[int]
    source: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class FinanceSummary:
    """Revenue, cost and profit of completed jobs in a date range."""

    start_date: date
    end_date: date
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    job_count: int
    jobs: tuple[Job, ...]


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for the dashboard."""

    active_clients: int
    active_professionals: int
    jobs_this_week: int
    upcoming_jobs: tuple[Job, ...]
