from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Notification:
    id: str
    unit_id: str
    unit_name: str
    status_from: str
    status_to: str
    timestamp: str
    message: str


@dataclass(frozen=True)
class AuditEntry:
    timestamp: str
    message: str

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.message}"
