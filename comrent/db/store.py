"""Process-wide in-memory store.

There is no database: the registry, conversations, pricing table, email
template and activity feed all live in this process and are rebuilt from
seed values whenever it starts. Route handlers reach the store through
the ``get_store`` dependency so tests can swap in a fresh one.
"""

from __future__ import annotations

from ..core.config import AppSettings, settings as default_settings
from ..crud.messages import ConversationStore
from ..crud.pricing import PricingTable
from ..crud.units import UnitRegistry, seed_unit_names
from ..models.invoice import EmailTemplate
from ..services.activity import ActivityFeed
from ..services.mailer import Mailer


class Store:
    def __init__(self, config: AppSettings | None = None, *, mailer: Mailer | None = None) -> None:
        self.config = config or default_settings
        self.feed = ActivityFeed(notification_limit=self.config.NOTIFICATION_LIMIT)
        self.registry = UnitRegistry(seed_unit_names(self.config.SEED_UNIT_COUNT, self.config.UNIT_NAME_PREFIX))
        # Seeded units form the detector's baseline; only later changes notify.
        self.feed.observe(self.registry.list_units())
        self.registry.subscribe(self.feed.observe)
        self.conversations = ConversationStore()
        self.pricing = PricingTable()
        self.email_template = EmailTemplate()
        self.mailer = mailer or Mailer(self.config)


store = Store()


def get_store() -> Store:
    """FastAPI dependency returning the live store."""

    return store


def reset_store(config: AppSettings | None = None, *, mailer: Mailer | None = None) -> Store:
    """Throw away all state and start from the seed values again."""

    global store
    store = Store(config, mailer=mailer)
    return store
