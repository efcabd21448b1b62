"""Pricing tiers keyed by session length in minutes."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable

from ..core.errors import NotFound, Rejected
from ..models.pricing import DEFAULT_TIERS, PricingTier

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class PriceQuote:
    duration_minutes: int | None
    label: str
    price: float | None
    known: bool


def _validate(duration_minutes: int, label: str, price: float) -> Rejected | None:
    if duration_minutes is None or duration_minutes <= 0:
        return Rejected("durationMinutes must be a positive number")
    if not (label or "").strip():
        return Rejected("label is required")
    if price is None or price < 0:
        return Rejected("price must be zero or greater")
    return None


class PricingTable:
    def __init__(self, tiers: Iterable[PricingTier] = DEFAULT_TIERS) -> None:
        self._tiers: dict[int, PricingTier] = {tier.duration_minutes: tier.copy() for tier in tiers}
        self._lock = threading.Lock()

    def list_tiers(self) -> list[PricingTier]:
        with self._lock:
            return [self._tiers[key].copy() for key in sorted(self._tiers)]

    def lookup(self, duration_minutes: int | None) -> PricingTier | None:
        if duration_minutes is None:
            return None
        with self._lock:
            tier = self._tiers.get(duration_minutes)
            return tier.copy() if tier else None

    def get_tier(self, duration_minutes: int) -> PricingTier | NotFound:
        return self.lookup(duration_minutes) or NotFound("Pricing tier", duration_minutes)

    def create_tier(self, duration_minutes: int, label: str, price: float) -> PricingTier | Rejected:
        rejected = _validate(duration_minutes, label, price)
        if rejected:
            return rejected
        tier = PricingTier(duration_minutes=duration_minutes, label=label.strip(), price=float(price))
        with self._lock:
            if duration_minutes in self._tiers:
                return Rejected(f"A tier for {duration_minutes} minutes already exists")
            self._tiers[duration_minutes] = tier
        return tier.copy()

    def update_tier(
        self, original_minutes: int, duration_minutes: int, label: str, price: float
    ) -> PricingTier | NotFound | Rejected:
        rejected = _validate(duration_minutes, label, price)
        if rejected:
            return rejected
        tier = PricingTier(duration_minutes=duration_minutes, label=label.strip(), price=float(price))
        with self._lock:
            if original_minutes not in self._tiers:
                return NotFound("Pricing tier", original_minutes)
            if duration_minutes != original_minutes and duration_minutes in self._tiers:
                return Rejected(f"A tier for {duration_minutes} minutes already exists")
            del self._tiers[original_minutes]
            self._tiers[duration_minutes] = tier
        return tier.copy()

    def delete_tier(self, duration_minutes: int) -> int | NotFound:
        with self._lock:
            if self._tiers.pop(duration_minutes, None) is None:
                return NotFound("Pricing tier", duration_minutes)
        return duration_minutes

    def quote(self, duration_minutes: int | None) -> PriceQuote:
        """Join a session length against the table; unmatched lengths are 'unknown', not errors."""
        tier = self.lookup(duration_minutes)
        if tier is None:
            return PriceQuote(duration_minutes=duration_minutes, label=UNKNOWN_LABEL, price=None, known=False)
        return PriceQuote(duration_minutes=tier.duration_minutes, label=tier.label, price=tier.price, known=True)
