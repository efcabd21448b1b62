"""Customer side of a rental, driven entirely by polling.

``CustomerSession`` mirrors what the payment page does in the browser:

* ``enter()`` claims an ``available`` unit (reservation on entry), resumes
  a rental this customer already started, or gives up.
* ``poll_once()`` re-reads the unit and ``reconcile()`` maps its status
  onto a local step. Events are emitted only when the step changes, so a
  poll that sees nothing new produces nothing.
* ``tick()`` runs the countdown. The server never ends a session on its
  own; the client reports ``time_up`` when its timer hits zero.

Closing the session early leaves the unit wherever it was.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..core.config import settings
from ..core.statuses import (
    IDLE_STATUSES,
    RESUMABLE_STATUSES,
    STATUS_AVAILABLE,
    STATUS_IN_USE,
    STATUS_PENDING_APPROVAL,
    STATUS_PENDING_PAYMENT,
    STATUS_TIME_UP,
)
from ..schemas.unit import UnitOut
from ..services.timecalc import format_hms, now_utc, remaining_seconds, session_end_time
from .api import ComRentClient, RequestRejected, TransientReadError
from .poller import Poller
from .session_cache import SessionDetails, SessionDetailsCache

logger = logging.getLogger(__name__)

STEP_LOADING = "loading"
STEP_SELECTION = "selection"
STEP_PENDING_APPROVAL = "pending_approval"
STEP_IN_SESSION = "in_session"
STEP_SESSION_ENDED = "session_ended"
STEP_CLOSED = "closed"

WARNING_MINUTES = (10, 5, 1)


@dataclass(frozen=True)
class SessionEvent:
    kind: str
    title: str
    description: str = ""


class CustomerSession:
    def __init__(
        self,
        client: ComRentClient,
        pc_name: str,
        cache: SessionDetailsCache | None = None,
        on_event: Callable[[SessionEvent], None] | None = None,
    ) -> None:
        self.client = client
        self.pc_name = pc_name
        self.cache = cache or SessionDetailsCache()
        self.on_event = on_event
        self.unit: UnitOut | None = None
        self.step = STEP_LOADING
        self.session_end: datetime | None = None
        self.time_remaining = ""
        self.stale = False
        self._warned: set[int] = set()
        self._time_up_reported = False

    @property
    def closed(self) -> bool:
        return self.step == STEP_CLOSED

    def _close(self, kind: str, title: str, description: str = "") -> list[SessionEvent]:
        self.step = STEP_CLOSED
        self.session_end = None
        return [SessionEvent(kind, title, description)]

    # ---------- entry ----------

    def enter(self) -> list[SessionEvent]:
        try:
            unit = self.client.find_unit(self.pc_name)
        except TransientReadError:
            return self._close("error", "Error", "Could not load payment page.")
        if unit is None:
            return self._close("not_found", "Error", "PC not found.")

        if unit.status == STATUS_AVAILABLE:
            try:
                self.unit = self.client.update_unit(unit.id, STATUS_PENDING_PAYMENT)
            except (RequestRejected, TransientReadError) as exc:
                logger.info("Could not reserve %s: %s", self.pc_name, exc)
                return self._close("unavailable", "PC Not Available", f"{self.pc_name} was just taken.")
            self.step = STEP_SELECTION
            return [SessionEvent("reserved", "PC Reserved", f"{self.pc_name} is yours while you pay.")]

        if unit.status in RESUMABLE_STATUSES:
            self.unit = unit
            events = self.reconcile(unit)
            if self.step == STEP_LOADING:
                # Someone else's rental; nothing to resume here.
                return self._close(
                    "unavailable", "PC Not Available", f"{self.pc_name} is currently not available for rent."
                )
            return events

        return self._close("unavailable", "PC Not Available", f"{self.pc_name} is currently not available for rent.")

    # ---------- reconciliation ----------

    def reconcile(self, unit: UnitOut) -> list[SessionEvent]:
        """Bring the local step in line with ``unit``; idempotent."""

        self.unit = unit
        if self.closed:
            return []
        details = self.cache.load(unit.name)
        owns = details is not None and details.matches(unit)

        if unit.status == STATUS_IN_USE:
            end = session_end_time(unit.session_start, unit.session_duration)
            if owns and end is not None:
                if end != self.session_end:
                    self.session_end = end
                if self.step != STEP_IN_SESSION:
                    self.step = STEP_IN_SESSION
                    return [SessionEvent("session_started", "Session Started!", f"Enjoy your time on {unit.name}.")]
            return []

        if unit.status == STATUS_TIME_UP:
            if self.step == STEP_LOADING and not owns:
                return []
            if self.step != STEP_SESSION_ENDED:
                self.step = STEP_SESSION_ENDED
                self.time_remaining = format_hms(0)
                return [
                    SessionEvent(
                        "session_ended",
                        "Session Ended",
                        f"Your time on {unit.name} has finished. Please settle your payment.",
                    )
                ]
            return []

        if unit.status == STATUS_PENDING_APPROVAL:
            if owns and self.step != STEP_PENDING_APPROVAL:
                self.step = STEP_PENDING_APPROVAL
            return []

        if unit.status == STATUS_PENDING_PAYMENT:
            if self.step not in (STEP_SELECTION, STEP_SESSION_ENDED):
                self.step = STEP_SELECTION
            return []

        # The admin pulled the unit back.
        if unit.status in IDLE_STATUSES and self.step in (STEP_SELECTION, STEP_PENDING_APPROVAL, STEP_IN_SESSION):
            self.cache.clear(unit.name)
            return self._close(
                "cancelled_by_admin", "Request Cancelled", "Your rental request was cancelled by an admin."
            )
        return []

    def poll_once(self) -> list[SessionEvent]:
        if self.unit is None or self.closed:
            return []
        try:
            unit = self.client.get_unit(self.unit.id)
        except TransientReadError:
            if not self.stale:
                logger.warning("Lost contact with the server; showing last known state for %s", self.pc_name)
            self.stale = True
            return []
        except RequestRejected as exc:
            if exc.not_found:
                self.cache.clear(self.pc_name)
                return self._close("not_found", "PC Removed", f"{self.pc_name} is no longer available.")
            raise
        self.stale = False
        return self.reconcile(unit)

    # ---------- customer actions ----------

    def submit_payment(
        self, user: str, email: str, duration: int, payment_method: str, payment_proof: str | None = None
    ) -> list[SessionEvent]:
        if self.unit is None or self.step != STEP_SELECTION:
            return [SessionEvent("error", "Error", "Nothing to pay for.")]
        details = SessionDetails(user=user, email=email, duration=duration)
        self.cache.save(self.unit.name, details)
        try:
            unit = self.client.update_unit(
                self.unit.id,
                STATUS_PENDING_APPROVAL,
                duration=duration,
                user=user,
                email=email,
                paymentMethod=payment_method,
                paymentProof=payment_proof,
            )
        except (RequestRejected, TransientReadError) as exc:
            logger.info("Payment submission for %s failed: %s", self.pc_name, exc)
            return [SessionEvent("error", "Error", "Could not notify admin.")]
        self.reconcile(unit)
        return [
            SessionEvent(
                "payment_sent",
                "Payment Sent!",
                "Your payment has been sent for approval. Please wait for the admin.",
            )
        ]

    def cancel(self) -> list[SessionEvent]:
        # Only a request still waiting on payment or approval can be withdrawn.
        if self.unit is None or self.step not in (STEP_SELECTION, STEP_PENDING_APPROVAL):
            return [SessionEvent("error", "Error", "Nothing to cancel.")]
        try:
            self.client.update_unit(self.unit.id, STATUS_AVAILABLE)
        except (RequestRejected, TransientReadError) as exc:
            logger.info("Cancelling %s failed: %s", self.pc_name, exc)
            return [SessionEvent("error", "Error", "Could not cancel the session.")]
        self.cache.clear(self.unit.name)
        return self._close("cancelled", "Session Cancelled", "Your rental request has been cancelled.")

    def acknowledge_session_end(self) -> None:
        self.cache.clear(self.pc_name)

    # ---------- countdown ----------

    def tick(self, now: datetime | None = None) -> list[SessionEvent]:
        if self.step != STEP_IN_SESSION or self.session_end is None or self.unit is None:
            return []
        seconds = remaining_seconds(self.session_end, now or now_utc())
        self.time_remaining = format_hms(seconds)
        if seconds <= 0:
            return self._report_time_up()

        events: list[SessionEvent] = []
        minutes_left = math.ceil(seconds / 60)
        for threshold in WARNING_MINUTES:
            if minutes_left <= threshold and threshold not in self._warned:
                self._warned.add(threshold)
                label = "1 Minute Remaining!" if threshold == 1 else f"{threshold} Minutes Remaining"
                events.append(SessionEvent("warning", label, "Your session is ending soon."))
        return events

    def _report_time_up(self) -> list[SessionEvent]:
        if self._time_up_reported:
            return []
        try:
            unit = self.client.update_unit(self.unit.id, STATUS_TIME_UP)
        except TransientReadError:
            # Retried on the next tick.
            return []
        except RequestRejected as exc:
            logger.info("time_up for %s not accepted: %s", self.pc_name, exc)
            self._time_up_reported = True
            return []
        self._time_up_reported = True
        return self.reconcile(unit)

    # ---------- background loop ----------

    def step_once(self) -> list[SessionEvent]:
        """One poller tick: re-read the unit, then advance the countdown."""
        events = self.poll_once() + self.tick()
        if self.on_event is not None:
            for event in events:
                self.on_event(event)
        return events

    def poller(self, interval: float | None = None) -> Poller:
        return Poller(
            self.step_once,
            settings.CUSTOMER_POLL_SECONDS if interval is None else interval,
            name=f"customer-{self.pc_name}",
        )
