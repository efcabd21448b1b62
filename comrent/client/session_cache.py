"""Per-unit session details remembered on the customer's machine.

This is how a customer who reloads the page (or restarts the kiosk app)
is recognised as the owner of an in-flight rental: the server has no
accounts, so we compare what we stored against the unit's payload.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path

from ..core.config import settings
from ..schemas.unit import UnitOut

logger = logging.getLogger(__name__)


@dataclass
class SessionDetails:
    user: str
    email: str
    duration: int

    def matches(self, unit: UnitOut) -> bool:
        return (self.user == unit.user or self.user == "") and self.duration == unit.session_duration


def _slug(pc_name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", pc_name) or "_"


class SessionDetailsCache:
    def __init__(self, directory: Path | None = None) -> None:
        self.directory = Path(directory) if directory else settings.sessions_dir

    def _path(self, pc_name: str) -> Path:
        return self.directory / f"session-details-{_slug(pc_name)}.json"

    def load(self, pc_name: str) -> SessionDetails | None:
        path = self._path(pc_name)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return SessionDetails(user=str(raw.get("user", "")), email=str(raw.get("email", "")), duration=int(raw["duration"]))
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Ignoring unreadable session cache %s", path)
            return None

    def save(self, pc_name: str, details: SessionDetails) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(pc_name).write_text(json.dumps(asdict(details), ensure_ascii=False), encoding="utf-8")

    def clear(self, pc_name: str) -> None:
        self._path(pc_name).unlink(missing_ok=True)
