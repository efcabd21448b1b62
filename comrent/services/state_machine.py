"""Session lifecycle transitions for a unit.

A rental walks ``available -> pending_payment -> pending_approval ->
in_use -> time_up`` and is then resolved by the admin back to
``pending_payment`` (collect payment) or ``available``. The admin may
also park idle units in ``maintenance`` or ``unavailable``.

The server never expires a session by itself: ``in_use -> time_up`` is
requested by the customer's client when its own countdown reaches zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ..core.errors import NotFound, Rejected
from ..core.statuses import (
    PAYMENT_METHODS,
    STATUS_AVAILABLE,
    STATUS_CHOICES,
    STATUS_IN_USE,
    STATUS_MAINTENANCE,
    STATUS_PENDING_APPROVAL,
    STATUS_PENDING_PAYMENT,
    STATUS_TIME_UP,
    STATUS_UNAVAILABLE,
    normalize_status,
)
from ..crud.units import UnitRegistry
from ..models.unit import Unit
from .timecalc import now_utc, to_iso

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    STATUS_AVAILABLE: frozenset({STATUS_PENDING_PAYMENT, STATUS_MAINTENANCE, STATUS_UNAVAILABLE}),
    STATUS_PENDING_PAYMENT: frozenset(
        {STATUS_PENDING_APPROVAL, STATUS_AVAILABLE, STATUS_MAINTENANCE, STATUS_UNAVAILABLE}
    ),
    # Approve or reject; nothing else.
    STATUS_PENDING_APPROVAL: frozenset({STATUS_IN_USE, STATUS_AVAILABLE}),
    # Only the customer's expiry signal ends a running session.
    STATUS_IN_USE: frozenset({STATUS_TIME_UP}),
    STATUS_TIME_UP: frozenset(
        {STATUS_PENDING_PAYMENT, STATUS_AVAILABLE, STATUS_MAINTENANCE, STATUS_UNAVAILABLE}
    ),
    STATUS_MAINTENANCE: frozenset({STATUS_AVAILABLE, STATUS_UNAVAILABLE}),
    STATUS_UNAVAILABLE: frozenset({STATUS_AVAILABLE, STATUS_MAINTENANCE}),
}


@dataclass(frozen=True)
class TransitionRequest:
    status: str
    duration: int | None = None
    user: str | None = None
    email: str | None = None
    payment_method: str | None = None
    payment_proof: str | None = None


def allowed_targets(current: str) -> frozenset[str]:
    return ALLOWED_TRANSITIONS.get(current, frozenset())


def check_transition(current: str, target: str) -> Rejected | None:
    if target not in STATUS_CHOICES:
        return Rejected(f"Invalid status: {target or '<empty>'}")
    if target == current:
        return Rejected(f"Unit is already {current}")
    if target not in allowed_targets(current):
        return Rejected(f"Cannot change status from {current} to {target}")
    return None


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _validate_duration(duration: int | None) -> Rejected | None:
    if duration is not None and duration <= 0:
        return Rejected("duration must be a positive number of minutes")
    return None


def _validate_email(email: str) -> Rejected | None:
    if "@" not in email:
        return Rejected("email must be a valid address")
    return None


def _submit_payment(unit: Unit, request: TransitionRequest) -> Rejected | None:
    user = _text(request.user)
    email = _text(request.email)
    method = _text(request.payment_method)
    missing = [
        name
        for name, value in (
            ("duration", request.duration),
            ("user", user),
            ("email", email),
            ("paymentMethod", method),
        )
        if value is None
    ]
    if missing:
        return Rejected(f"Missing required fields: {', '.join(missing)}")
    rejected = _validate_duration(request.duration)
    if rejected:
        return rejected
    rejected = _validate_email(email)
    if rejected:
        return rejected
    if method not in PAYMENT_METHODS:
        return Rejected(f"Unsupported payment method: {method}")
    # Stored verbatim; price is only ever derived at read time.
    unit.session_duration = request.duration
    unit.user = user
    unit.email = email
    unit.payment_method = method
    unit.payment_proof = _text(request.payment_proof)
    unit.session_start = None
    return None


def _approve(unit: Unit, request: TransitionRequest, now: datetime) -> Rejected | None:
    rejected = _validate_duration(request.duration)
    if rejected:
        return rejected
    # Keep what the customer submitted unless the admin explicitly overrides it.
    if request.duration is not None:
        unit.session_duration = request.duration
    if _text(request.user) is not None:
        unit.user = _text(request.user)
    email = _text(request.email)
    if email is not None:
        rejected = _validate_email(email)
        if rejected:
            return rejected
        unit.email = email
    if not unit.session_duration:
        return Rejected("Cannot start a session without a duration")
    unit.session_start = to_iso(now)
    return None


def _reserve(unit: Unit) -> None:
    # A reset to pending_payment must not wipe an in-flight customer's details
    # (time_up -> pending_payment keeps them for invoicing).
    if not unit.has_active_user:
        unit.clear_session()
    unit.session_start = None


def apply_transition(unit: Unit, request: TransitionRequest, now: datetime | None = None) -> Rejected | None:
    """Move ``unit`` (a draft) to ``request.status`` or explain why not."""

    current = unit.status
    target = normalize_status(request.status)
    rejected = check_transition(current, target)
    if rejected:
        return rejected

    if target == STATUS_PENDING_PAYMENT:
        _reserve(unit)
    elif target == STATUS_PENDING_APPROVAL:
        rejected = _submit_payment(unit, request)
    elif target == STATUS_IN_USE:
        rejected = _approve(unit, request, now or now_utc())
    elif target == STATUS_TIME_UP:
        unit.session_start = None
    else:
        unit.clear_session()

    if rejected:
        return rejected
    unit.status = target
    return None


def transition_unit(
    registry: UnitRegistry,
    unit_id: str,
    request: TransitionRequest | None,
    *,
    new_name: str | None = None,
    now: datetime | None = None,
) -> Unit | NotFound | Rejected:
    """Rename and/or transition a unit as one atomic registry write."""

    if request is None and new_name is None:
        return Rejected("Nothing to update: provide newStatus or newName")

    previous: dict[str, str] = {}

    def _edit(draft: Unit) -> Rejected | None:
        previous["status"] = draft.status
        if new_name is not None:
            rejected = registry.apply_name(draft, new_name)
            if rejected:
                return rejected
        if request is not None:
            return apply_transition(draft, request, now=now)
        return None

    outcome = registry.mutate(unit_id, _edit)
    if isinstance(outcome, Rejected):
        logger.info(
            "Rejected update for unit %s: %s",
            unit_id,
            outcome.message,
            extra={"extra_data": {"unit_id": str(unit_id), "requested": request.status if request else None}},
        )
    elif isinstance(outcome, Unit) and request is not None:
        logger.info(
            "Unit %s moved %s -> %s",
            outcome.id,
            previous.get("status"),
            outcome.status,
            extra={"extra_data": {"unit_id": outcome.id, "status": outcome.status}},
        )
    return outcome
