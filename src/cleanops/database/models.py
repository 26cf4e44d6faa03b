"""SQLAlchemy models for cleanops database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=False)
    postcode = Column(String, nullable=False)
    city = Column(String, nullable=False)
    client_type = Column(String, nullable=False, default="residential")
    contract_type = Column(String, nullable=False, default="fixed")
    frequency = Column(String, nullable=True)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    deep_clean_price_per_hour = Column(Numeric(10, 2), nullable=True)
    status = Column(String, nullable=False, default="active")
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    jobs = relationship("Job", back_populates="client")
    invoices = relationship("Invoice", back_populates="client")


class Professional(Base):
    """Cleaner model."""

    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    rate_per_hour = Column(Numeric(10, 2), nullable=False)
    deep_clean_rate_per_hour = Column(Numeric(10, 2), nullable=True)
    status = Column(String, nullable=False, default="active")
    availability = Column(JSON, nullable=False, default=dict)
    bank_account_name = Column(String, nullable=True)
    bank_sort_code = Column(String, nullable=True)
    bank_account_number = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Job(Base):
    """Job model holding the price/cost snapshot."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    duration_hours = Column(Numeric(5, 2), nullable=False)
    job_type = Column(String, nullable=False, default="one_time")
    service_kind = Column(String, nullable=False, default="regular")
    status = Column(String, nullable=False, default="scheduled")
    notes = Column(String, nullable=True)
    total_price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    client = relationship("Client", back_populates="jobs")
    assignments = relationship(
        "JobProfessional",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobProfessional.position",
    )
    occurrence_overrides = relationship(
        "JobOccurrenceStatus", back_populates="job", cascade="all, delete-orphan"
    )


class JobProfessional(Base):
    """Assignment of a professional to a job, with that professional's cost.

    ``cost`` is NULL on rows written before per-professional costs existed.
    """

    __tablename__ = "job_professionals"

    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    cost = Column(Numeric(10, 2), nullable=True)

    __table_args__ = (UniqueConstraint("job_id", "professional_id", name="uq_job_professional"),)

    # Relationships
    job = relationship("Job", back_populates="assignments")


class JobOccurrenceStatus(Base):
    """Status override for one date of a recurring job."""

    __tablename__ = "job_occurrence_statuses"

    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    occurrence_date = Column(Date, nullable=False)
    status = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("job_id", "occurrence_date", name="uq_job_occurrence_date"),)

    # Relationships
    job = relationship("Job", back_populates="occurrence_overrides")


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    invoice_number = Column(String, unique=True, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="draft")
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    client = relationship("Client", back_populates="invoices")
    job_links = relationship("InvoiceJob", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceJob(Base):
    """Invoice to job link. A job can be billed on one invoice only."""

    __tablename__ = "invoice_jobs"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("job_id", name="uq_invoice_job_job_id"),)

    # Relationships
    invoice = relationship("Invoice", back_populates="job_links")


class InvoiceSequence(Base):
    """Highest invoice sequence number ever issued (single row)."""

    __tablename__ = "invoice_sequence"

    id = Column(Integer, primary_key=True)
    last_number = Column(Integer, nullable=False, default=0)


class PaymentRun(Base):
    """Payment run model."""

    __tablename__ = "payment_runs"

    id = Column(Integer, primary_key=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    items = relationship(
        "PaymentRunItem",
        back_populates="payment_run",
        cascade="all, delete-orphan",
        order_by="PaymentRunItem.id",
    )


class PaymentRunItem(Base):
    """Amount owed to one professional in a payment run."""

    __tablename__ = "payment_run_items"

    id = Column(Integer, primary_key=True)
    payment_run_id = Column(Integer, ForeignKey("payment_runs.id", ondelete="CASCADE"), nullable=False)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="pending")
    paid_at = Column(DateTime, nullable=True)

    # Relationships
    payment_run = relationship("PaymentRun", back_populates="items")


class Quote(Base):
    """Quote request from the contact form."""

    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    service_type = Column(String, nullable=False)
    postcode = Column(String, nullable=False)
    preferred_contact = Column(String, nullable=False)
    message = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=True)
    source = Column(String, nullable=False, default="landing-page")
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on SQLite foreign key enforcement so ON DELETE CASCADE works."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
