from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class PricingTier:
    duration_minutes: int
    label: str
    price: float

    def copy(self) -> "PricingTier":
        return replace(self)


# Tiers the shop opens with after every restart.
DEFAULT_TIERS = (
    PricingTier(duration_minutes=30, label="30 minutes", price=30.0),
    PricingTier(duration_minutes=60, label="1 hour", price=50.0),
    PricingTier(duration_minutes=120, label="2 hours", price=90.0),
    PricingTier(duration_minutes=180, label="3 hours", price=120.0),
)
