"""The unit registry: authoritative, in-memory set of rentable PCs.

Reads hand out copies, so callers never hold a reference into the live
collection. Every write goes through :meth:`UnitRegistry.mutate`, which
takes the unit's own lock, edits a private draft and swaps it in only
when the edit succeeds. A concurrent reader therefore sees either the
old record or the new one, never a half-applied transition.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Iterable

from ..core.errors import NotFound, Rejected
from ..core.statuses import STATUS_AVAILABLE
from ..models.unit import Unit

logger = logging.getLogger(__name__)

Listener = Callable[[list[Unit]], None]
Edit = Callable[[Unit], "Rejected | None"]


def _clean_name(name: str | None) -> str:
    return (name or "").strip()


class UnitRegistry:
    def __init__(self, names: Iterable[str] = ()) -> None:
        self._units: dict[str, Unit] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.RLock()
        # Ids only ever move forward, so a deleted unit's id is never handed out again.
        self._ids = itertools.count(1)
        self._listeners: list[Listener] = []
        for name in names:
            outcome = self.create_unit(name)
            if isinstance(outcome, Rejected):
                raise ValueError(outcome.message)

    # ---------- observers ----------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        # Called with the registry lock held so listeners see snapshots in write order.
        if not self._listeners:
            return
        snapshot = [unit.copy() for unit in self._units.values()]
        for listener in self._listeners:
            listener(snapshot)

    # ---------- reads ----------

    def list_units(self) -> list[Unit]:
        with self._registry_lock:
            return [unit.copy() for unit in self._units.values()]

    def get_unit(self, unit_id: str) -> Unit | NotFound:
        with self._registry_lock:
            unit = self._units.get(str(unit_id))
            if unit is None:
                return NotFound("Unit", unit_id)
            return unit.copy()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._units)

    # ---------- writes ----------

    def create_unit(self, name: str) -> Unit | Rejected:
        clean = _clean_name(name)
        if not clean:
            return Rejected("Unit name is required")
        with self._registry_lock:
            if self._name_taken(clean):
                return Rejected(f'A unit named "{clean}" already exists')
            unit_id = str(next(self._ids))
            unit = Unit(id=unit_id, name=clean, status=STATUS_AVAILABLE)
            self._units[unit_id] = unit
            self._locks[unit_id] = threading.Lock()
            self._notify()
            logger.info("Created unit %s (%s)", unit_id, clean)
            return unit.copy()

    def rename_unit(self, unit_id: str, new_name: str) -> Unit | NotFound | Rejected:
        clean = _clean_name(new_name)
        if not clean:
            return Rejected("Unit name is required")

        def _rename(draft: Unit) -> Rejected | None:
            return self._apply_name(draft, clean)

        return self.mutate(unit_id, _rename)

    def delete_unit(self, unit_id: str) -> str | NotFound:
        unit_id = str(unit_id)
        lock = self._lock_for(unit_id)
        if lock is None:
            return NotFound("Unit", unit_id)
        with lock:
            with self._registry_lock:
                removed = self._units.pop(unit_id, None)
                if removed is None:
                    return NotFound("Unit", unit_id)
                self._locks.pop(unit_id, None)
                self._notify()
        logger.info("Deleted unit %s (%s)", unit_id, removed.name)
        return unit_id

    def mutate(self, unit_id: str, edit: Edit) -> Unit | NotFound | Rejected:
        """Apply ``edit`` to a draft of the unit and commit it atomically.

        ``edit`` returns a :class:`Rejected` to abort; the live record is
        then left untouched.
        """
        unit_id = str(unit_id)
        lock = self._lock_for(unit_id)
        if lock is None:
            return NotFound("Unit", unit_id)
        with lock:
            with self._registry_lock:
                current = self._units.get(unit_id)
            if current is None:
                return NotFound("Unit", unit_id)
            draft = current.copy()
            outcome = edit(draft)
            if isinstance(outcome, Rejected):
                return outcome
            with self._registry_lock:
                if unit_id not in self._units:
                    return NotFound("Unit", unit_id)
                # Another unit may have taken the name while the edit ran.
                if draft.name != current.name and self._name_taken(draft.name, exclude_id=unit_id):
                    return Rejected(f'A unit named "{draft.name}" already exists')
                self._units[unit_id] = draft
                self._notify()
            return draft.copy()

    def apply_name(self, draft: Unit, new_name: str) -> Rejected | None:
        """Rename a draft inside a :meth:`mutate` edit."""
        clean = _clean_name(new_name)
        if not clean:
            return Rejected("Unit name is required")
        return self._apply_name(draft, clean)

    # ---------- helpers ----------

    def _apply_name(self, draft: Unit, clean: str) -> Rejected | None:
        if clean == draft.name:
            return None
        with self._registry_lock:
            if self._name_taken(clean, exclude_id=draft.id):
                return Rejected(f'A unit named "{clean}" already exists')
        draft.name = clean
        return None

    def _name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        return any(unit.name == name and unit.id != exclude_id for unit in self._units.values())

    def _lock_for(self, unit_id: str) -> threading.Lock | None:
        with self._registry_lock:
            return self._locks.get(unit_id)


def seed_unit_names(count: int, prefix: str = "PC") -> list[str]:
    return [f"{prefix}-{index:02d}" for index in range(1, count + 1)]
