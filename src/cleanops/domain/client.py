"""Client domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional, Union

from cleanops.database.base import Database
from cleanops.domain.entities import (
    Client as ClientEntity,
    ClientStatus,
    ClientType,
    ContractType,
    Frequency,
)
from cleanops.domain.errors import (
    DependencyError,
    DomainError,
    NotFoundError,
    client_delete_blocked,
    client_not_found,
)
from cleanops.domain.validation import (
    coerce_enum,
    optional_positive_amount,
    require_email,
    require_name,
    require_phone,
    require_positive_amount,
    require_postcode,
    require_text,
)

logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, float, str]


def _validate_client_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalise whichever client fields are present."""
    validators = {
        "name": require_name,
        "email": require_email,
        "phone": require_phone,
        "address": lambda v: require_text(v, "Address", min_length=5),
        "postcode": require_postcode,
        "city": lambda v: require_text(v, "City", min_length=2),
        "client_type": lambda v: coerce_enum(ClientType, v, "client type"),
        "contract_type": lambda v: coerce_enum(ContractType, v, "contract type"),
        "frequency": lambda v: None if v is None else coerce_enum(Frequency, v, "frequency"),
        "price_per_hour": lambda v: require_positive_amount(v, "Price per hour"),
        "deep_clean_price_per_hour": lambda v: optional_positive_amount(v, "Deep-clean price per hour"),
        "status": lambda v: coerce_enum(ClientStatus, v, "client status"),
        "notes": lambda v: (v or "").strip() or None,
    }
    cleaned = {}
    for name, value in fields.items():
        if name not in validators:
            raise DomainError(f"Unknown client field '{name}'")
        cleaned[name] = validators[name](value)
    return cleaned


class ClientService:
    """Service for managing clients."""

    def __init__(self, db: Database):
        """Initialize client service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_client(
        self,
        name: str,
        email: str,
        phone: str,
        address: str,
        postcode: str,
        city: str,
        price_per_hour: Amount,
        client_type: Union[ClientType, str] = ClientType.RESIDENTIAL,
        contract_type: Union[ContractType, str] = ContractType.FIXED,
        frequency: Optional[Union[Frequency, str]] = None,
        deep_clean_price_per_hour: Optional[Amount] = None,
        status: Union[ClientStatus, str] = ClientStatus.ACTIVE,
        notes: Optional[str] = None,
    ) -> int:
        """Create a new client.

        Returns:
            Client ID

        Raises:
            ValidationError: If any field is invalid (e.g. non-positive rate,
                malformed postcode or phone number)
        """
        fields = _validate_client_fields(
            {
                "name": name,
                "email": email,
                "phone": phone,
                "address": address,
                "postcode": postcode,
                "city": city,
                "client_type": client_type,
                "contract_type": contract_type,
                "frequency": frequency,
                "price_per_hour": price_per_hour,
                "deep_clean_price_per_hour": deep_clean_price_per_hour,
                "status": status,
                "notes": notes,
            }
        )
        client_id = self.db.create_client(**fields)
        logger.info("Created client %s (%s)", client_id, fields["name"])
        return client_id

    def get_client(self, client_id: int) -> Optional[ClientEntity]:
        """Get client by ID, or None if not found."""
        return self.db.get_client(client_id)

    def require_client(self, client_id: int) -> ClientEntity:
        """Get client by ID.

        Raises:
            NotFoundError: If the client does not exist
        """
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def list_clients(self, status: Optional[Union[ClientStatus, str]] = None) -> list[ClientEntity]:
        """List clients, optionally only those with the given status."""
        if status is not None:
            status = coerce_enum(ClientStatus, status, "client status")
        return self.db.list_clients(status=status)

    def update_client(self, client_id: int, **updates: Any) -> ClientEntity:
        """Apply a partial update to a client.

        Rate changes do not touch existing jobs; their prices are snapshots.

        Returns:
            The updated client

        Raises:
            NotFoundError: If the client does not exist
            ValidationError: If any updated field is invalid
        """
        self.require_client(client_id)
        fields = _validate_client_fields(updates)
        if fields:
            self.db.update_client(client_id, fields)
            logger.info("Updated client %s: %s", client_id, ", ".join(sorted(fields)))
        return self.require_client(client_id)

    def delete_client(self, client_id: int) -> None:
        """Delete a client.

        Raises:
            NotFoundError: If the client does not exist
            DependencyError: If the client still has jobs or invoices
        """
        self.require_client(client_id)
        job_count = self.db.count_client_jobs(client_id)
        invoice_count = self.db.count_client_invoices(client_id)
        if job_count > 0 or invoice_count > 0:
            raise DependencyError(client_delete_blocked(client_id, job_count, invoice_count))

        self.db.delete_client(client_id)
        logger.info("Deleted client %s", client_id)
