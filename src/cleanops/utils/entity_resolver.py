"""Utility for resolving client and professional names to IDs."""

from typing import Callable, Optional, Sequence, Union

from cleanops.domain.client import ClientService
from cleanops.domain.professional import ProfessionalService


def _resolve(
    reference: Union[str, int],
    label: str,
    get_by_id: Callable[[int], Optional[object]],
    list_all: Callable[[], Sequence],
) -> int:
    if isinstance(reference, int):
        if get_by_id(reference) is None:
            raise ValueError(f"{label} ID {reference} not found")
        return reference

    reference = reference.strip()
    if reference.isdigit():
        entity_id = int(reference)
        if get_by_id(entity_id) is None:
            raise ValueError(f"{label} ID {entity_id} not found")
        return entity_id

    matches = [entity for entity in list_all() if entity.name.lower() == reference.lower()]
    if not matches:
        raise ValueError(f"{label} '{reference}' not found")
    if len(matches) > 1:
        ids = ", ".join(str(entity.id) for entity in matches)
        raise ValueError(f"{label} name '{reference}' is ambiguous (IDs {ids}); use the ID instead")
    return matches[0].id


def resolve_client(client_service: ClientService, client: Union[str, int]) -> int:
    """Resolve client name or ID to client ID.

    Names match case-insensitively.

    Args:
        client_service: ClientService instance
        client: Client name (str) or ID (int or string representation of int)

    Returns:
        Client ID

    Raises:
        ValueError: If the client is not found or the name matches several clients
    """
    return _resolve(client, "Client", client_service.get_client, client_service.list_clients)


def resolve_professional(professional_service: ProfessionalService, professional: Union[str, int]) -> int:
    """Resolve professional name or ID to professional ID.

    Raises:
        ValueError: If the professional is not found or the name is ambiguous
    """
    return _resolve(
        professional,
        "Professional",
        professional_service.get_professional,
        professional_service.list_professionals,
    )
