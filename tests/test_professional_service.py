"""Tests for professional service."""

from decimal import Decimal

import pytest

from cleanops.domain.entities import Availability, ProfessionalStatus
from cleanops.domain.errors import DependencyError, NotFoundError, ValidationError

PROFESSIONAL_FIELDS = {
    "name": "Lucia Rossi",
    "email": "lucia@example.com",
    "phone": "07700 900111",
    "rate_per_hour": "13.25",
}


def test_create_professional_defaults(professional_service):
    professional_id = professional_service.create_professional(**PROFESSIONAL_FIELDS)

    professional = professional_service.get_professional(professional_id)
    assert professional.name == "Lucia Rossi"
    assert professional.rate_per_hour == Decimal("13.25")
    assert professional.deep_clean_rate_per_hour is None
    assert professional.status == ProfessionalStatus.ACTIVE
    assert professional.availability == Availability()
    assert professional.bank_account_number is None


def test_create_professional_with_availability_mapping(professional_service):
    professional_id = professional_service.create_professional(
        **PROFESSIONAL_FIELDS,
        availability={"mon": True, "wed": True, "fri": False},
        bank_account_name=" L Rossi ",
        bank_sort_code="12-34-56",
        bank_account_number="12345678",
    )

    professional = professional_service.get_professional(professional_id)
    assert professional.availability.to_dict() == {
        "mon": True,
        "tue": False,
        "wed": True,
        "thu": False,
        "fri": False,
        "sat": False,
        "sun": False,
    }
    assert professional.bank_account_name == "L Rossi"
    assert professional.bank_sort_code == "12-34-56"


def test_create_professional_unknown_weekday(professional_service):
    with pytest.raises(ValidationError, match="Unknown weekday"):
        professional_service.create_professional(**PROFESSIONAL_FIELDS, availability={"monday": True})


@pytest.mark.parametrize(
    "field,value",
    [
        ("rate_per_hour", "0"),
        ("rate_per_hour", "-1"),
        ("phone", "555-0100"),
        ("email", "lucia at example.com"),
        ("name", " "),
    ],
)
def test_create_professional_validation(professional_service, field, value):
    with pytest.raises(ValidationError):
        professional_service.create_professional(**{**PROFESSIONAL_FIELDS, field: value})
    assert professional_service.list_professionals() == []


def test_list_professionals_by_status(professional_service, sample_professionals):
    maria, ana = sample_professionals
    professional_service.update_professional(ana.id, status="vacation")

    assert [p.id for p in professional_service.list_professionals(status="active")] == [maria.id]
    assert [p.id for p in professional_service.list_professionals(status=ProfessionalStatus.VACATION)] == [ana.id]


def test_update_professional(professional_service, sample_professionals):
    maria = sample_professionals[0]

    updated = professional_service.update_professional(
        maria.id, rate_per_hour="13", deep_clean_rate_per_hour=None, availability={"sat": True}
    )

    assert updated.rate_per_hour == Decimal("13.00")
    assert updated.deep_clean_rate_per_hour is None
    assert updated.availability == Availability(sat=True)


def test_update_professional_not_found(professional_service):
    with pytest.raises(NotFoundError, match="Professional 42 not found"):
        professional_service.update_professional(42, name="Nobody")


def test_delete_professional(professional_service):
    professional_id = professional_service.create_professional(**PROFESSIONAL_FIELDS)
    professional_service.delete_professional(professional_id)
    assert professional_service.get_professional(professional_id) is None


def test_delete_professional_with_jobs_blocked(professional_service, sample_professionals, make_job):
    make_job()

    with pytest.raises(DependencyError, match="assigned to 1 job"):
        professional_service.delete_professional(sample_professionals[0].id)
    assert professional_service.get_professional(sample_professionals[0].id) is not None
