"""Unit registry endpoints.

WHAT: List, create, rename, transition and delete rentable PCs.
WHEN: Polled by every customer and admin screen, written to whenever a
customer reserves/pays or an admin approves, resets or edits a unit.
WHY: The registry is the only shared truth between the two parties; there
is no push channel, so these reads are what keeps both views in sync.
HOW: Handlers delegate to ``UnitRegistry`` and ``transition_unit`` and map
their outcomes onto 400/404 responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ..db.store import Store, get_store
from ..models.unit import Unit
from ..schemas.unit import PriceQuoteOut, UnitCreate, UnitDelete, UnitDeleted, UnitOut, UnitUpdate
from ..services.state_machine import TransitionRequest, transition_unit
from ._outcomes import unwrap

router = APIRouter(prefix="/api/units", tags=["units"])


def _out(unit: Unit) -> UnitOut:
    return UnitOut.model_validate(unit)


@router.get("")
def api_list(id: str | None = Query(default=None), store: Store = Depends(get_store)):
    if id is not None:
        return _out(unwrap(store.registry.get_unit(id)))
    return [_out(unit) for unit in store.registry.list_units()]


@router.get("/{unit_id}")
def api_get(unit_id: str, store: Store = Depends(get_store)):
    return _out(unwrap(store.registry.get_unit(unit_id)))


@router.get("/{unit_id}/quote")
def api_quote(unit_id: str, store: Store = Depends(get_store)):
    unit = unwrap(store.registry.get_unit(unit_id))
    return PriceQuoteOut.model_validate(store.pricing.quote(unit.session_duration))


@router.post("", status_code=status.HTTP_201_CREATED)
def api_create(payload: UnitCreate, store: Store = Depends(get_store)):
    unit = unwrap(store.registry.create_unit(payload.name), prefix="Could not add PC")
    store.feed.log(f'Added new PC "{unit.name}".')
    return _out(unit)


@router.put("")
def api_update(payload: UnitUpdate, store: Store = Depends(get_store)):
    before = unwrap(store.registry.get_unit(payload.id))
    request = None
    if payload.new_status is not None:
        request = TransitionRequest(
            status=payload.new_status,
            duration=payload.duration,
            user=payload.user,
            email=payload.email,
            payment_method=payload.payment_method,
            payment_proof=payload.payment_proof,
        )
    outcome = transition_unit(store.registry, payload.id, request, new_name=payload.new_name)
    unit = unwrap(outcome, prefix="Could not update status" if request else "Could not rename PC")
    if unit.name != before.name:
        store.feed.log(f'Renamed PC "{before.name}" to "{unit.name}".')
    return _out(unit)


@router.delete("")
def api_delete(payload: UnitDelete, store: Store = Depends(get_store)):
    unit = store.registry.get_unit(payload.id)
    deleted_id = unwrap(store.registry.delete_unit(payload.id))
    name = unit.name if isinstance(unit, Unit) else deleted_id
    store.feed.log(f'Deleted PC "{name}".')
    return UnitDeleted(deleted_id=deleted_id)
