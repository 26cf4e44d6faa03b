"""Quote request inbox fed by the public contact form."""

import logging
import re
from typing import Optional, Union

from cleanops.database.base import Database
from cleanops.domain.entities import ContactMethod, Quote as QuoteEntity, QuoteStatus
from cleanops.domain.errors import (
    NotFoundError,
    ValidationError,
    professional_not_found,
    quote_not_found,
)
from cleanops.domain.validation import coerce_enum, require_email, require_name, require_postcode

logger = logging.getLogger(__name__)

SERVICE_TYPES = (
    "Residential Cleaning",
    "Commercial Cleaning",
    "Deep Cleaning",
    "One-Off Clean",
    "Other",
)
DEFAULT_SOURCE = "landing-page"

# The contact form is more lenient than the back office: dashes allowed, prefix optional
CONTACT_PHONE_RE = re.compile(r"^(\+44|0)?[0-9\s-]{10,13}$")


class QuoteService:
    """Service for quote requests submitted by prospective clients."""

    def __init__(self, db: Database):
        """Initialize quote service.

        Args:
            db: Database instance
        """
        self.db = db

    def submit_quote(
        self,
        full_name: str,
        email: str,
        phone: str,
        service_type: str,
        postcode: str,
        preferred_contact: Union[ContactMethod, str],
        message: Optional[str] = None,
        source: str = DEFAULT_SOURCE,
    ) -> int:
        """Record a quote request.

        Returns:
            Quote ID

        Raises:
            ValidationError: If any contact form field is invalid
        """
        full_name = require_name(full_name)
        email = require_email(email)
        phone = (phone or "").strip()
        if not CONTACT_PHONE_RE.match(phone):
            raise ValidationError(f"Invalid UK phone number: '{phone}'")
        if service_type not in SERVICE_TYPES:
            raise ValidationError(
                f"Invalid service type '{service_type}'. Expected one of: {', '.join(SERVICE_TYPES)}"
            )
        postcode = require_postcode(postcode)
        preferred_contact = coerce_enum(ContactMethod, preferred_contact, "contact method")

        quote_id = self.db.create_quote(
            full_name=full_name,
            email=email,
            phone=phone,
            service_type=service_type,
            postcode=postcode,
            preferred_contact=preferred_contact,
            message=(message or "").strip() or None,
            status=QuoteStatus.PENDING,
            source=source,
        )
        logger.info("Received quote %s from %s (%s)", quote_id, full_name, service_type)
        return quote_id

    def get_quote(self, quote_id: int) -> Optional[QuoteEntity]:
        return self.db.get_quote(quote_id)

    def require_quote(self, quote_id: int) -> QuoteEntity:
        """Get quote by ID.

        Raises:
            NotFoundError: If the quote does not exist
        """
        quote = self.db.get_quote(quote_id)
        if quote is None:
            raise NotFoundError(quote_not_found(quote_id))
        return quote

    def list_quotes(self, status: Optional[Union[QuoteStatus, str]] = None) -> list[QuoteEntity]:
        """List quotes newest first, optionally only those with the given status."""
        if status is not None:
            status = coerce_enum(QuoteStatus, status, "quote status")
        return self.db.list_quotes(status=status)

    def update_status(self, quote_id: int, status: Union[QuoteStatus, str]) -> QuoteEntity:
        """Set a quote's status.

        Raises:
            NotFoundError: If the quote does not exist
            ValidationError: If the status is unknown
        """
        status = coerce_enum(QuoteStatus, status, "quote status")
        self.require_quote(quote_id)
        self.db.update_quote(quote_id, {"status": status})
        logger.info("Quote %s marked %s", quote_id, status.value)
        return self.require_quote(quote_id)

    def assign_professional(self, quote_id: int, professional_id: Optional[int]) -> QuoteEntity:
        """Assign a professional to follow up a quote, or clear the assignment with None.

        Raises:
            NotFoundError: If the quote or professional does not exist
        """
        self.require_quote(quote_id)
        if professional_id is not None and self.db.get_professional(professional_id) is None:
            raise NotFoundError(professional_not_found(professional_id))
        self.db.update_quote(quote_id, {"professional_id": professional_id})
        return self.require_quote(quote_id)
