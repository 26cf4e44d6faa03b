"""Professional (cleaner) domain service."""

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from cleanops.database.base import Database
from cleanops.domain.entities import (
    WEEKDAY_KEYS,
    Availability,
    Professional as ProfessionalEntity,
    ProfessionalStatus,
)
from cleanops.domain.errors import (
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
    professional_delete_blocked,
    professional_not_found,
)
from cleanops.domain.validation import (
    coerce_enum,
    optional_positive_amount,
    require_email,
    require_name,
    require_phone,
    require_positive_amount,
)

logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, float, str]


def _coerce_availability(value: Union[Availability, Mapping[str, bool], None]) -> Availability:
    if value is None:
        return Availability()
    if isinstance(value, Availability):
        return value
    unknown = set(value) - set(WEEKDAY_KEYS)
    if unknown:
        raise ValidationError(
            f"Unknown weekday(s) in availability: {', '.join(sorted(unknown))}"
        )
    return Availability.from_dict(value)


def _optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def _validate_professional_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalise whichever professional fields are present."""
    validators = {
        "name": require_name,
        "email": require_email,
        "phone": require_phone,
        "rate_per_hour": lambda v: require_positive_amount(v, "Rate per hour"),
        "deep_clean_rate_per_hour": lambda v: optional_positive_amount(v, "Deep-clean rate per hour"),
        "status": lambda v: coerce_enum(ProfessionalStatus, v, "professional status"),
        "availability": _coerce_availability,
        "bank_account_name": _optional_text,
        "bank_sort_code": _optional_text,
        "bank_account_number": _optional_text,
    }
    cleaned = {}
    for name, value in fields.items():
        if name not in validators:
            raise DomainError(f"Unknown professional field '{name}'")
        cleaned[name] = validators[name](value)
    return cleaned


class ProfessionalService:
    """Service for managing professionals."""

    def __init__(self, db: Database):
        """Initialize professional service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_professional(
        self,
        name: str,
        email: str,
        phone: str,
        rate_per_hour: Amount,
        deep_clean_rate_per_hour: Optional[Amount] = None,
        status: Union[ProfessionalStatus, str] = ProfessionalStatus.ACTIVE,
        availability: Union[Availability, Mapping[str, bool], None] = None,
        bank_account_name: Optional[str] = None,
        bank_sort_code: Optional[str] = None,
        bank_account_number: Optional[str] = None,
    ) -> int:
        """Create a new professional.

        Args:
            availability: Weekdays the professional works, either an
                Availability or a mapping such as ``{"mon": True, "fri": True}``.
                Defaults to no days.

        Returns:
            Professional ID

        Raises:
            ValidationError: If any field is invalid
        """
        fields = _validate_professional_fields(
            {
                "name": name,
                "email": email,
                "phone": phone,
                "rate_per_hour": rate_per_hour,
                "deep_clean_rate_per_hour": deep_clean_rate_per_hour,
                "status": status,
                "availability": availability,
                "bank_account_name": bank_account_name,
                "bank_sort_code": bank_sort_code,
                "bank_account_number": bank_account_number,
            }
        )
        professional_id = self.db.create_professional(**fields)
        logger.info("Created professional %s (%s)", professional_id, fields["name"])
        return professional_id

    def get_professional(self, professional_id: int) -> Optional[ProfessionalEntity]:
        """Get professional by ID, or None if not found."""
        return self.db.get_professional(professional_id)

    def require_professional(self, professional_id: int) -> ProfessionalEntity:
        """Get professional by ID.

        Raises:
            NotFoundError: If the professional does not exist
        """
        professional = self.db.get_professional(professional_id)
        if professional is None:
            raise NotFoundError(professional_not_found(professional_id))
        return professional

    def list_professionals(
        self, status: Optional[Union[ProfessionalStatus, str]] = None
    ) -> list[ProfessionalEntity]:
        """List professionals, optionally only those with the given status."""
        if status is not None:
            status = coerce_enum(ProfessionalStatus, status, "professional status")
        return self.db.list_professionals(status=status)

    def update_professional(self, professional_id: int, **updates: Any) -> ProfessionalEntity:
        """Apply a partial update to a professional.

        Returns:
            The updated professional

        Raises:
            NotFoundError: If the professional does not exist
            ValidationError: If any updated field is invalid
        """
        self.require_professional(professional_id)
        fields = _validate_professional_fields(updates)
        if fields:
            self.db.update_professional(professional_id, fields)
            logger.info("Updated professional %s: %s", professional_id, ", ".join(sorted(fields)))
        return self.require_professional(professional_id)

    def delete_professional(self, professional_id: int) -> None:
        """Delete a professional.

        Raises:
            NotFoundError: If the professional does not exist
            DependencyError: If the professional is assigned to any job
        """
        self.require_professional(professional_id)
        job_count = self.db.count_professional_jobs(professional_id)
        if job_count > 0:
            raise DependencyError(professional_delete_blocked(professional_id, job_count))

        self.db.delete_professional(professional_id)
        logger.info("Deleted professional %s", professional_id)
