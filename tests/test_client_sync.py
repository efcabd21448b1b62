import threading
from datetime import timedelta

import httpx
import pytest

from comrent.client import (
    AdminMonitor,
    ComRentClient,
    CustomerSession,
    Poller,
    RequestRejected,
    SessionDetails,
    SessionDetailsCache,
    TransientReadError,
)
from comrent.client.customer import STEP_CLOSED, STEP_IN_SESSION, STEP_PENDING_APPROVAL, STEP_SELECTION
from conftest import put_status


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture()
def api(client):
    return ComRentClient(http=client)


@pytest.fixture()
def cache(tmp_path):
    return SessionDetailsCache(tmp_path / "customer")


@pytest.fixture()
def admin(api):
    monitor = AdminMonitor(api)
    monitor.poll_once()
    return monitor


def _kinds(events):
    return [event.kind for event in events]


def _pay(session):
    return session.submit_payment("Alice", "a@x.com", 60, "GCash")


def test_entry_reserves_an_available_unit(api, cache, client):
    session = CustomerSession(api, "PC-01", cache)
    assert _kinds(session.enter()) == ["reserved"]
    assert session.step == STEP_SELECTION
    assert client.get("/api/units/1").json()["status"] == "pending_payment"


def test_entry_gives_up_on_missing_or_parked_units(api, cache, client):
    put_status(client, "2", "maintenance")
    parked = CustomerSession(api, "PC-02", cache)
    assert _kinds(parked.enter()) == ["unavailable"]
    assert parked.closed
    assert client.get("/api/units/2").json()["status"] == "maintenance"

    missing = CustomerSession(api, "PC-99", cache)
    assert _kinds(missing.enter()) == ["not_found"]


def test_full_rental_through_polling(api, cache, admin, client):
    session = CustomerSession(api, "PC-01", cache)
    session.enter()
    assert _kinds(_pay(session)) == ["payment_sent"]
    assert session.step == STEP_PENDING_APPROVAL
    assert cache.load("PC-01") == SessionDetails("Alice", "a@x.com", 60)
    assert session.poll_once() == []

    admin.poll_once()
    assert [n.status_to for n in admin.visible_notifications()][:2] == ["pending_approval", "pending_payment"]
    result = admin.approve("1")
    assert result.ok and result.unit.status == "in_use"

    assert _kinds(session.poll_once()) == ["session_started"]
    assert session.poll_once() == []
    assert session.step == STEP_IN_SESSION
    end = session.session_end
    assert end is not None

    assert _kinds(session.tick(end - timedelta(minutes=9, seconds=30))) == ["warning"]
    assert session.tick(end - timedelta(minutes=9)) == []
    assert [e.title for e in session.tick(end - timedelta(seconds=30))] == ["5 Minutes Remaining", "1 Minute Remaining!"]

    assert _kinds(session.tick(end + timedelta(seconds=1))) == ["session_ended"]
    assert session.time_remaining == "00:00:00"
    assert session.tick(end + timedelta(seconds=2)) == []
    assert client.get("/api/units/1").json()["status"] == "time_up"

    session.acknowledge_session_end()
    assert cache.load("PC-01") is None


def test_admin_rejection_cancels_the_customer(api, cache, admin):
    session = CustomerSession(api, "PC-01", cache)
    session.enter()
    _pay(session)
    assert admin.reject("1").ok
    assert _kinds(session.poll_once()) == ["cancelled_by_admin"]
    assert session.step == STEP_CLOSED
    assert cache.load("PC-01") is None
    assert session.poll_once() == []


def test_reload_resumes_only_for_the_same_customer(api, cache, tmp_path, client):
    first = CustomerSession(api, "PC-01", cache)
    first.enter()
    _pay(first)

    again = CustomerSession(api, "PC-01", cache)
    assert again.enter() == []
    assert again.step == STEP_PENDING_APPROVAL
    assert client.get("/api/units/1").json()["status"] == "pending_approval"

    stranger = CustomerSession(api, "PC-01", SessionDetailsCache(tmp_path / "stranger"))
    assert _kinds(stranger.enter()) == ["unavailable"]


def test_deleted_unit_closes_the_session(api, cache, client):
    session = CustomerSession(api, "PC-01", cache)
    session.enter()
    client.request("DELETE", "/api/units", json={"id": "1"})
    assert _kinds(session.poll_once()) == ["not_found"]


def test_validation_errors_surface_and_outages_go_stale(api, cache, admin):
    with pytest.raises(RequestRejected) as excinfo:
        api.update_unit("1", "in_use")
    assert excinfo.value.status_code == 400

    result = admin.set_status("1", "time_up")
    assert not result.ok
    assert result.message.startswith("Could not update status")

    known = list(admin.units)
    admin.client = ComRentClient(http=httpx.Client(base_url="http://down", transport=httpx.MockTransport(_unreachable)))
    assert admin.poll_once() is False
    assert admin.stale
    assert admin.units == known

    session = CustomerSession(admin.client, "PC-01", cache)
    assert _kinds(session.enter()) == ["error"]
    with pytest.raises(TransientReadError):
        admin.client.list_units()


def test_dismissed_notifications_stay_hidden(api, admin, client):
    put_status(client, "1", "maintenance")
    put_status(client, "2", "maintenance")
    admin.poll_once()
    first = admin.visible_notifications()[0]
    admin.dismiss(first.id)
    admin.poll_once()
    assert first.id not in [n.id for n in admin.visible_notifications()]
    assert len(admin.visible_notifications()) == 1
    admin.dismiss_all()
    assert admin.visible_notifications() == []


def test_admin_rename_and_open_conversation(api, admin):
    api.post_message("PC-03", "user", text="need help")
    admin.poll_once()
    assert admin.unread == {"PC-03": 1}
    messages = admin.open_conversation("PC-03")
    assert [m.text for m in messages] == ["need help"]
    assert api.unread_counts("admin") == {"PC-03": 0}

    assert admin.rename("3", "PC-03X").unit.name == "PC-03X"
    assert admin.unit("3").name == "PC-03X"


def test_poller_keeps_ticking_after_errors():
    calls = []
    done = threading.Event()

    def tick():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first tick fails")
        if len(calls) >= 3:
            done.set()

    poller = Poller(tick, interval=0.01, name="test-poller")
    poller.start()
    try:
        assert done.wait(2)
    finally:
        poller.stop(timeout=1)
    assert not poller.running


def test_step_once_feeds_the_event_callback(api, cache, admin):
    received = []
    session = CustomerSession(api, "PC-01", cache, on_event=received.append)
    session.enter()
    _pay(session)
    admin.approve("1")

    events = session.step_once()
    assert _kinds(events) == ["session_started"]
    assert received == events
    assert session.time_remaining.startswith("00:59") or session.time_remaining == "01:00:00"

    assert session.poller().interval == 1.0
    assert admin.poller(interval=0.5).interval == 0.5


def test_ended_session_cannot_be_freed_by_the_customer(api, cache, admin, client):
    session = CustomerSession(api, "PC-01", cache)
    session.enter()
    _pay(session)
    admin.approve("1")
    session.poll_once()
    session.tick(session.session_end + timedelta(seconds=1))

    assert _kinds(session.cancel()) == ["error"]
    unit = client.get("/api/units/1").json()
    assert unit["status"] == "time_up"
    assert unit["user"] == "Alice"
    assert unit["email"] == "a@x.com"


def test_offline_conversation_keeps_last_copy(api, admin):
    api.post_message("PC-02", "user", text="hello")
    assert [m.text for m in admin.open_conversation("PC-02")] == ["hello"]

    admin.client = ComRentClient(http=httpx.Client(base_url="http://down", transport=httpx.MockTransport(_unreachable)))
    assert [m.text for m in admin.open_conversation("PC-02")] == ["hello"]
    assert admin.open_conversation("PC-09") == []
    assert admin.stale
