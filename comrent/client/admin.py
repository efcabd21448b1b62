"""Admin dashboard state kept fresh by polling.

The monitor holds the last good snapshot of units, notifications and
unread counts. A failed read keeps that snapshot and flips ``stale`` so
the dashboard can show a banner; the next good read clears it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..core.config import settings
from ..core.statuses import (
    SENDER_ADMIN,
    STATUS_AVAILABLE,
    STATUS_IN_USE,
)
from ..schemas.activity import NotificationOut
from ..schemas.message import MessageOut
from ..schemas.unit import UnitOut
from .api import ComRentClient, RequestRejected, TransientReadError
from .poller import Poller

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    ok: bool
    message: str = ""
    unit: UnitOut | None = None


@dataclass
class AdminMonitor:
    client: ComRentClient
    units: list[UnitOut] = field(default_factory=list)
    notifications: list[NotificationOut] = field(default_factory=list)
    unread: dict[str, int] = field(default_factory=dict)
    conversations: dict[str, list[MessageOut]] = field(default_factory=dict)
    stale: bool = False
    dismissed: set[str] = field(default_factory=set)

    def poll_once(self) -> bool:
        """Refresh the snapshot; returns False when the server was unreachable."""
        try:
            units = self.client.list_units()
            notifications = self.client.notifications()
            unread = self.client.unread_counts(SENDER_ADMIN)
        except TransientReadError as exc:
            if not self.stale:
                logger.warning("Admin poll failed, keeping last known state: %s", exc)
            self.stale = True
            return False
        self.units, self.notifications, self.unread = units, notifications, unread
        self.stale = False
        return True

    def poller(self, interval: float | None = None) -> Poller:
        return Poller(
            self.poll_once,
            settings.ADMIN_POLL_SECONDS if interval is None else interval,
            name="admin-monitor",
        )

    def unit(self, unit_id: str) -> UnitOut | None:
        return next((u for u in self.units if u.id == unit_id), None)

    def visible_notifications(self) -> list[NotificationOut]:
        return [n for n in self.notifications if n.id not in self.dismissed]

    def dismiss(self, notification_id: str) -> None:
        self.dismissed.add(notification_id)

    def dismiss_all(self) -> None:
        self.dismissed.update(n.id for n in self.notifications)

    # ---------- actions ----------

    def _update(self, unit_id: str, new_status: str | None = None, **fields: Any) -> ActionResult:
        try:
            unit = self.client.update_unit(unit_id, new_status, **fields)
        except RequestRejected as exc:
            return ActionResult(False, exc.message)
        except TransientReadError:
            return ActionResult(False, "Server unreachable, try again.")
        self.units = [unit if u.id == unit.id else u for u in self.units]
        return ActionResult(True, unit=unit)

    def approve(self, unit_id: str, **overrides: Any) -> ActionResult:
        return self._update(unit_id, STATUS_IN_USE, **overrides)

    def reject(self, unit_id: str) -> ActionResult:
        return self._update(unit_id, STATUS_AVAILABLE)

    def set_status(self, unit_id: str, new_status: str) -> ActionResult:
        return self._update(unit_id, new_status)

    def rename(self, unit_id: str, new_name: str) -> ActionResult:
        return self._update(unit_id, newName=new_name)

    # ---------- chat ----------

    def open_conversation(self, pc_name: str) -> list[MessageOut]:
        """Read a conversation as the admin; falls back to the last copy when offline."""
        try:
            messages = self.client.list_messages(pc_name)
            if any(not m.is_read and m.sender != SENDER_ADMIN for m in messages):
                self.client.mark_read(pc_name, SENDER_ADMIN)
                self.unread[pc_name] = 0
        except TransientReadError as exc:
            if not self.stale:
                logger.warning("Could not open conversation %s, keeping last known copy: %s", pc_name, exc)
            self.stale = True
            return list(self.conversations.get(pc_name, []))
        self.conversations[pc_name] = messages
        return messages
