from comrent.core.errors import NotFound, Rejected
from comrent.crud.pricing import UNKNOWN_LABEL, PricingTable
from comrent.models.pricing import PricingTier
from comrent.models.unit import Unit
from comrent.services.analytics import summarize


def test_default_tiers_are_sorted_by_length():
    table = PricingTable()
    assert [tier.duration_minutes for tier in table.list_tiers()] == [30, 60, 120, 180]


def test_unknown_duration_quotes_as_unknown():
    table = PricingTable([PricingTier(60, "1 hour", 50)])
    quote = table.quote(45)
    assert quote.known is False
    assert quote.label == UNKNOWN_LABEL
    assert quote.price is None
    assert table.quote(None).known is False
    assert table.quote(60).price == 50


def test_tier_crud():
    table = PricingTable([])
    assert isinstance(table.create_tier(0, "none", 1), Rejected)
    assert isinstance(table.create_tier(30, "", 1), Rejected)
    assert isinstance(table.create_tier(30, "half", -1), Rejected)
    table.create_tier(30, "Half hour", 25)
    assert isinstance(table.create_tier(30, "again", 25), Rejected)

    updated = table.update_tier(30, 45, "45 minutes", 35)
    assert updated.duration_minutes == 45
    assert isinstance(table.get_tier(30), NotFound)
    assert isinstance(table.update_tier(30, 30, "x", 1), NotFound)

    assert table.delete_tier(45) == 45
    assert isinstance(table.delete_tier(45), NotFound)


def test_existing_sessions_reprice_after_a_tier_edit():
    table = PricingTable([PricingTier(60, "1 hour", 50)])
    units = [Unit(id="1", name="PC-01", status="in_use", session_duration=60)]
    assert summarize(units, table).total_revenue == 50
    table.update_tier(60, 60, "1 hour", 65)
    assert summarize(units, table).total_revenue == 65


def test_analytics_snapshot():
    table = PricingTable()
    units = [
        Unit(id="1", name="PC-01", status="in_use", session_duration=60),
        Unit(id="2", name="PC-02", status="pending_payment", session_duration=30),
        Unit(id="3", name="PC-03", status="in_use", session_duration=45),
        Unit(id="4", name="PC-04", status="available"),
        Unit(id="5", name="PC-05", status="time_up", session_duration=60),
    ]
    summary = summarize(units, table)
    assert summary.total_revenue == 80
    assert summary.total_sessions == 3
    assert summary.active_users == 2
    assert summary.status_counts == {"in_use": 2, "pending_payment": 1, "available": 1, "time_up": 1}
