from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from ..core.statuses import STATUS_IN_USE, REVENUE_STATUSES
from ..crud.pricing import PricingTable
from ..models.unit import Unit


@dataclass(frozen=True)
class AnalyticsSummary:
    total_revenue: float
    total_sessions: int
    active_users: int
    status_counts: dict[str, int] = field(default_factory=dict)


def summarize(units: list[Unit], pricing: PricingTable) -> AnalyticsSummary:
    """Live snapshot over the registry; units with an unpriced duration add nothing."""
    billable = [unit for unit in units if unit.status in REVENUE_STATUSES]
    revenue = 0.0
    for unit in billable:
        quote = pricing.quote(unit.session_duration)
        if quote.price is not None:
            revenue += quote.price
    counts = Counter(unit.status for unit in units)
    return AnalyticsSummary(
        total_revenue=revenue,
        total_sessions=len(billable),
        active_users=sum(1 for unit in units if unit.status == STATUS_IN_USE),
        status_counts=dict(counts),
    )
