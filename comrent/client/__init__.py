from __future__ import annotations

from .admin import ActionResult, AdminMonitor
from .api import ComRentClient, RequestRejected, TransientReadError
from .customer import CustomerSession, SessionEvent
from .poller import Poller
from .session_cache import SessionDetails, SessionDetailsCache

__all__ = [
    "ActionResult",
    "AdminMonitor",
    "ComRentClient",
    "CustomerSession",
    "Poller",
    "RequestRejected",
    "SessionDetails",
    "SessionDetailsCache",
    "SessionEvent",
    "TransientReadError",
]
