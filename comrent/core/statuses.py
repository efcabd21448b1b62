"""Unit status constants and the groupings the rest of the app relies on."""

STATUS_AVAILABLE = "available"
STATUS_PENDING_PAYMENT = "pending_payment"
STATUS_PENDING_APPROVAL = "pending_approval"
STATUS_IN_USE = "in_use"
STATUS_TIME_UP = "time_up"
STATUS_MAINTENANCE = "maintenance"
STATUS_UNAVAILABLE = "unavailable"

STATUS_CHOICES = (
    STATUS_AVAILABLE,
    STATUS_PENDING_PAYMENT,
    STATUS_PENDING_APPROVAL,
    STATUS_IN_USE,
    STATUS_TIME_UP,
    STATUS_MAINTENANCE,
    STATUS_UNAVAILABLE,
)

# Units in these states never carry a session payload.
IDLE_STATUSES = {STATUS_AVAILABLE, STATUS_MAINTENANCE, STATUS_UNAVAILABLE}

# A customer returning to a unit page may pick up where they left off.
RESUMABLE_STATUSES = (
    STATUS_PENDING_PAYMENT,
    STATUS_PENDING_APPROVAL,
    STATUS_IN_USE,
    STATUS_TIME_UP,
)

# Sessions in these states can be billed.
INVOICEABLE_STATUSES = (STATUS_IN_USE, STATUS_TIME_UP, STATUS_PENDING_PAYMENT)

# Units counted towards revenue on the analytics snapshot.
REVENUE_STATUSES = (STATUS_IN_USE, STATUS_PENDING_PAYMENT)

STATUS_LABELS = {
    STATUS_AVAILABLE: "available",
    STATUS_PENDING_PAYMENT: "pending payment",
    STATUS_PENDING_APPROVAL: "pending approval",
    STATUS_IN_USE: "in use",
    STATUS_TIME_UP: "time up",
    STATUS_MAINTENANCE: "under maintenance",
    STATUS_UNAVAILABLE: "unavailable",
}

PAYMENT_METHODS = ("GCash", "Maya", "QR Code")

SENDER_USER = "user"
SENDER_ADMIN = "admin"
SENDER_CHOICES = (SENDER_USER, SENDER_ADMIN)


def normalize_status(value: str | None) -> str:
    """Return a lowercase, underscore-separated status string."""

    return (value or "").strip().lower().replace("-", "_").replace(" ", "_")


def normalize_sender(value: str | None) -> str:
    sender = (value or "").strip().lower()
    if sender == "customer":
        return SENDER_USER
    return sender


__all__ = [
    "IDLE_STATUSES",
    "INVOICEABLE_STATUSES",
    "PAYMENT_METHODS",
    "RESUMABLE_STATUSES",
    "REVENUE_STATUSES",
    "SENDER_ADMIN",
    "SENDER_CHOICES",
    "SENDER_USER",
    "STATUS_AVAILABLE",
    "STATUS_CHOICES",
    "STATUS_IN_USE",
    "STATUS_LABELS",
    "STATUS_MAINTENANCE",
    "STATUS_PENDING_APPROVAL",
    "STATUS_PENDING_PAYMENT",
    "STATUS_TIME_UP",
    "STATUS_UNAVAILABLE",
    "normalize_sender",
    "normalize_status",
]
