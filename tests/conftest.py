"""Shared pytest fixtures for cleanops tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from cleanops.database.factories import create_sqlite_database
from cleanops.domain.client import ClientService
from cleanops.domain.entities import Availability, JobStatus
from cleanops.domain.finance import FinanceService
from cleanops.domain.invoice import InvoiceService
from cleanops.domain.job import JobService
from cleanops.domain.payment_run import PaymentRunService
from cleanops.domain.professional import ProfessionalService
from cleanops.domain.quote import QuoteService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def client_service(temp_db):
    """Create a ClientService with a temporary database."""
    return ClientService(temp_db)


@pytest.fixture
def professional_service(temp_db):
    """Create a ProfessionalService with a temporary database."""
    return ProfessionalService(temp_db)


@pytest.fixture
def job_service(temp_db):
    """Create a JobService with a temporary database."""
    return JobService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def payment_run_service(temp_db):
    """Create a PaymentRunService with a temporary database."""
    return PaymentRunService(temp_db)


@pytest.fixture
def finance_service(temp_db):
    """Create a FinanceService with a temporary database."""
    return FinanceService(temp_db)


@pytest.fixture
def quote_service(temp_db):
    """Create a QuoteService with a temporary database."""
    return QuoteService(temp_db)


@pytest.fixture
def sample_client(client_service):
    """A residential client charged £20/h with no deep-clean price."""
    client_id = client_service.create_client(
        name="Jane Smith",
        email="jane@example.com",
        phone="07700 900123",
        address="1 High Street",
        postcode="SW1A 1AA",
        city="London",
        price_per_hour=Decimal("20"),
    )
    return client_service.get_client(client_id)


@pytest.fixture
def deep_clean_client(client_service):
    """A client charged £20/h, or £30/h for deep cleans."""
    client_id = client_service.create_client(
        name="Acme Offices",
        email="office@acme.example.com",
        phone="+44 161 496 0000",
        address="10 Market Street",
        postcode="M1 1AE",
        city="Manchester",
        price_per_hour=Decimal("20"),
        deep_clean_price_per_hour=Decimal("30"),
        client_type="commercial",
    )
    return client_service.get_client(client_id)


@pytest.fixture
def sample_professionals(professional_service):
    """Two cleaners available every day, paid £12/h and £15/h."""
    maria_id = professional_service.create_professional(
        name="Maria Lopez",
        email="maria@example.com",
        phone="07700 900456",
        rate_per_hour=Decimal("12"),
        deep_clean_rate_per_hour=Decimal("16"),
        availability=Availability.every_day(),
    )
    ana_id = professional_service.create_professional(
        name="Ana Silva",
        email="ana@example.com",
        phone="07700 900789",
        rate_per_hour=Decimal("15"),
        availability=Availability.every_day(),
    )
    return [professional_service.get_professional(maria_id), professional_service.get_professional(ana_id)]


@pytest.fixture
def make_job(job_service, sample_client, sample_professionals):
    """Factory creating a 2 hour job for the sample client and both cleaners."""

    def _make(**overrides):
        fields = {
            "client_id": sample_client.id,
            "professional_ids": [p.id for p in sample_professionals],
            "date": date(2024, 3, 4),
            "start_time": "09:00",
            "duration_hours": Decimal("2"),
            "status": JobStatus.SCHEDULED,
        }
        fields.update(overrides)
        return job_service.get_job(job_service.create_job(**fields))

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
