"""Rate resolution and job revenue/cost calculation.

All functions here are pure. ``JobService`` persists what
``compute_job_financials`` returns onto the job's snapshot fields.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Union

from cleanops.domain.entities import (
    Client,
    JobFinancials,
    Professional,
    ProfessionalCost,
    ServiceKind,
)
from cleanops.domain.errors import ValidationError, missing_deep_clean_rate, no_professionals

PENNY = Decimal("0.01")


def to_money(value: Union[Decimal, int, str]) -> Decimal:
    """Round a value to pennies."""
    return Decimal(value).quantize(PENNY, rounding=ROUND_HALF_UP)


def resolve_rate(entity: Union[Client, Professional], service_kind: ServiceKind) -> Decimal:
    """Return the hourly rate that applies to ``entity`` for a service kind.

    Clients resolve to a price charged, professionals to a rate paid. A
    deep-clean override is used only when it is set and positive.
    """
    if isinstance(entity, Client):
        standard = entity.price_per_hour
        deep_clean = entity.deep_clean_price_per_hour
    else:
        standard = entity.rate_per_hour
        deep_clean = entity.deep_clean_rate_per_hour

    if service_kind == ServiceKind.DEEP_CLEAN:
        if deep_clean is not None and deep_clean > 0:
            return deep_clean
        return standard
    if service_kind == ServiceKind.REGULAR:
        return standard
    raise ValueError(f"Unknown service kind: {service_kind!r}")


def has_deep_clean_price(client: Client) -> bool:
    return client.deep_clean_price_per_hour is not None and client.deep_clean_price_per_hour > 0


def compute_job_financials(
    client: Client,
    professionals: Sequence[Professional],
    duration_hours: Decimal,
    service_kind: ServiceKind,
) -> JobFinancials:
    """Compute revenue and per-professional cost for a job.

    Each assigned professional is billed at the client's hourly rate for the
    full duration, so revenue scales with the number of cleaners.

    Args:
        client: Client being billed
        professionals: Assigned professionals, in assignment order
        duration_hours: Job length in hours
        service_kind: Regular or deep clean

    Returns:
        JobFinancials with total price, total cost and the per-professional breakdown

    Raises:
        ValidationError: If a deep clean is requested for a client without a
            deep-clean price, or no professionals are supplied
    """
    if service_kind == ServiceKind.DEEP_CLEAN and not has_deep_clean_price(client):
        raise ValidationError(missing_deep_clean_rate(client.name))
    if not professionals:
        raise ValidationError(no_professionals())

    duration = Decimal(duration_hours)
    client_rate = resolve_rate(client, service_kind)
    total_price = to_money(duration * client_rate * len(professionals))

    professional_costs = tuple(
        ProfessionalCost(
            professional_id=pro.id,
            cost=to_money(duration * resolve_rate(pro, service_kind)),
        )
        for pro in professionals
    )
    cost = sum((pc.cost for pc in professional_costs), Decimal("0.00"))

    return JobFinancials(
        total_price=total_price,
        cost=to_money(cost),
        professional_costs=professional_costs,
    )


def split_cost_evenly(cost: Decimal, professional_ids: Sequence[int]) -> tuple[ProfessionalCost, ...]:
    """Split a legacy job's total cost across its professionals.

    Only used for jobs stored before per-professional costs were recorded.
    The split is done in whole pennies; leftover pennies go to the first
    professionals so the parts always add back up to ``cost``.
    """
    if not professional_ids:
        return ()

    pennies = int(to_money(cost) / PENNY)
    share, remainder = divmod(pennies, len(professional_ids))
    parts = []
    for index, professional_id in enumerate(professional_ids):
        amount = share + (1 if index < remainder else 0)
        parts.append(ProfessionalCost(professional_id=professional_id, cost=to_money(Decimal(amount) * PENNY)))
    return tuple(parts)
