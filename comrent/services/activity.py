"""Notifications and the audit trail.

``ChangeDetector`` compares consecutive registry snapshots and turns
status changes into :class:`Notification` records, keeping only the most
recent ``limit`` of them. Every notification it emits is also written to
the :class:`AuditLog`, which additionally records admin actions that do
not change a status (renames, deletions, pricing edits, invoices).
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Iterable
from uuid import uuid4

from ..core.statuses import (
    STATUS_AVAILABLE,
    STATUS_IN_USE,
    STATUS_LABELS,
    STATUS_MAINTENANCE,
    STATUS_PENDING_APPROVAL,
    STATUS_PENDING_PAYMENT,
    STATUS_TIME_UP,
    STATUS_UNAVAILABLE,
)
from ..models.activity import AuditEntry, Notification
from ..models.unit import Unit
from .timecalc import now_iso

logger = logging.getLogger(__name__)

_MESSAGES = {
    STATUS_PENDING_PAYMENT: "{name} has been reserved and is awaiting payment.",
    STATUS_PENDING_APPROVAL: "{name} needs approval: payment submitted{by}.",
    STATUS_IN_USE: "{name} session started{by}.",
    STATUS_TIME_UP: "Session on {name} has ended{by}.",
    STATUS_AVAILABLE: "{name} is now available.",
    STATUS_MAINTENANCE: "{name} is now under maintenance.",
    STATUS_UNAVAILABLE: "{name} is now unavailable.",
}


def describe_change(unit: Unit, status_from: str) -> str:
    by = f" by {unit.user}" if unit.user else ""
    template = _MESSAGES.get(unit.status)
    if template is None:
        return (
            f"{unit.name} changed from {STATUS_LABELS.get(status_from, status_from)} "
            f"to {STATUS_LABELS.get(unit.status, unit.status)}."
        )
    return template.format(name=unit.name, by=by)


def _fingerprint(units: Iterable[Unit]) -> tuple[tuple[str, str], ...]:
    return tuple((unit.id, unit.status) for unit in units)


class AuditLog:
    """Unbounded, append-only list of human-readable actions."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []
        self._lock = threading.Lock()

    def append(self, message: str) -> AuditEntry | None:
        """Record ``message``; returns None when it repeats the latest entry."""
        message = message.strip()
        if not message:
            return None
        with self._lock:
            if self._entries and self._entries[-1].message == message:
                return None
            entry = AuditEntry(timestamp=now_iso(), message=message)
            self._entries.append(entry)
        logger.info("audit: %s", message)
        return entry

    def entries(self) -> list[AuditEntry]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ChangeDetector:
    def __init__(self, limit: int = 50, on_notify: Callable[[Notification], None] | None = None) -> None:
        self._buffer: deque[Notification] = deque(maxlen=limit)
        self._on_notify = on_notify
        self._baseline: list[Unit] | None = None
        self._last_pair: tuple | None = None
        self._lock = threading.RLock()

    def observe(self, snapshot: list[Unit]) -> list[Notification]:
        """Diff ``snapshot`` against the previous one and make it the new baseline.

        The first snapshot only records a baseline.
        """
        with self._lock:
            previous = self._baseline
            self._baseline = [unit.copy() for unit in snapshot]
            if previous is None:
                return []
            return self.diff(previous, snapshot)

    def diff(self, previous: list[Unit], current: list[Unit]) -> list[Notification]:
        with self._lock:
            pair = (_fingerprint(previous), _fingerprint(current))
            # Re-feeding the pair we just processed (a repeated poll) emits nothing.
            if pair == self._last_pair:
                return []
            self._last_pair = pair

            before = {unit.id: unit.status for unit in previous}
            seen: set[tuple[str, str, str]] = set()
            emitted: list[Notification] = []
            for unit in current:
                status_from = before.get(unit.id)
                if status_from is None or status_from == unit.status:
                    continue
                message = describe_change(unit, status_from)
                key = (unit.id, unit.status, message)
                if key in seen:
                    continue
                seen.add(key)
                notification = Notification(
                    id=uuid4().hex,
                    unit_id=unit.id,
                    unit_name=unit.name,
                    status_from=status_from,
                    status_to=unit.status,
                    timestamp=now_iso(),
                    message=message,
                )
                self._buffer.append(notification)
                emitted.append(notification)
                if self._on_notify:
                    self._on_notify(notification)
            return emitted

    def notifications(self) -> list[Notification]:
        """Newest first, at most ``limit`` entries."""
        with self._lock:
            return list(reversed(self._buffer))


class ActivityFeed:
    """Registry listener that owns the notification buffer and the audit log."""

    def __init__(self, notification_limit: int = 50) -> None:
        self.audit = AuditLog()
        self.detector = ChangeDetector(limit=notification_limit, on_notify=self._record)

    def _record(self, notification: Notification) -> None:
        self.audit.append(
            f'PC "{notification.unit_name}" status changed from '
            f"{notification.status_from} to {notification.status_to}."
        )

    def observe(self, snapshot: list[Unit]) -> list[Notification]:
        return self.detector.observe(snapshot)

    def log(self, message: str) -> AuditEntry | None:
        return self.audit.append(message)

    def notifications(self) -> list[Notification]:
        return self.detector.notifications()

    def audit_entries(self) -> list[AuditEntry]:
        return self.audit.entries()
