from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..db.store import Store, get_store
from ..schemas.pricing import PricingTierDelete, PricingTierIn, PricingTierOut, PricingTierUpdate
from ._outcomes import unwrap

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


@router.get("")
def api_list(store: Store = Depends(get_store)):
    return [PricingTierOut.model_validate(tier) for tier in store.pricing.list_tiers()]


@router.post("", status_code=status.HTTP_201_CREATED)
def api_create(payload: PricingTierIn, store: Store = Depends(get_store)):
    tier = unwrap(store.pricing.create_tier(payload.duration_minutes, payload.label, payload.price))
    store.feed.log(f'Added pricing tier "{tier.label}" ({tier.duration_minutes} min) at {tier.price:.2f}.')
    return PricingTierOut.model_validate(tier)


@router.put("")
def api_update(payload: PricingTierUpdate, store: Store = Depends(get_store)):
    updated = payload.updated_tier
    tier = unwrap(
        store.pricing.update_tier(
            payload.original_duration, updated.duration_minutes, updated.label, updated.price
        )
    )
    store.feed.log(
        f'Updated pricing tier {payload.original_duration} min to "{tier.label}" '
        f"({tier.duration_minutes} min) at {tier.price:.2f}."
    )
    return PricingTierOut.model_validate(tier)


@router.delete("")
def api_delete(payload: PricingTierDelete, store: Store = Depends(get_store)):
    minutes = unwrap(store.pricing.delete_tier(payload.duration_minutes))
    store.feed.log(f"Deleted pricing tier for {minutes} min.")
    return {"message": f"Pricing tier with value {minutes} deleted successfully"}
