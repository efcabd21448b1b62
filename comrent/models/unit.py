"""In-memory record for a rentable PC."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..core.statuses import STATUS_AVAILABLE

# Everything a unit carries while a customer is renting it.
SESSION_FIELDS = (
    "user",
    "email",
    "session_start",
    "session_duration",
    "payment_method",
    "payment_proof",
)


@dataclass
class Unit:
    id: str
    name: str
    status: str = STATUS_AVAILABLE
    user: str | None = None
    email: str | None = None
    session_start: str | None = None
    session_duration: int | None = None
    payment_method: str | None = None
    payment_proof: str | None = None

    def copy(self) -> "Unit":
        return replace(self)

    def clear_session(self) -> None:
        for name in SESSION_FIELDS:
            setattr(self, name, None)

    @property
    def has_active_user(self) -> bool:
        return bool(self.user)

    @property
    def has_session_payload(self) -> bool:
        return any(getattr(self, name) is not None for name in SESSION_FIELDS)
