import httpx
import pytest

from comrent.core.config import AppSettings
from comrent.db.store import reset_store
from comrent.services.invoicing import render
from comrent.services.mailer import Mailer
from conftest import PAYMENT, put_status, start_session


def _mailer(tmp_path, handler) -> Mailer:
    config = AppSettings(SEED_UNIT_COUNT=3, DATA_DIR=tmp_path, MAILER_API_KEY="re_test")
    return Mailer(config, transport=httpx.MockTransport(handler))


@pytest.fixture()
def sent():
    return []


@pytest.fixture()
def working_store(client, tmp_path, sent):
    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200, json={"id": "email_1"})

    config = AppSettings(SEED_UNIT_COUNT=3, DATA_DIR=tmp_path, MAILER_API_KEY="re_test", COMPANY_NAME="Net Hub")
    return reset_store(config, mailer=_mailer(tmp_path, handler))


@pytest.fixture()
def failing_store(client, tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    config = AppSettings(SEED_UNIT_COUNT=3, DATA_DIR=tmp_path, MAILER_API_KEY="re_test")
    return reset_store(config, mailer=_mailer(tmp_path, handler))


def test_eligible_units(client):
    assert client.get("/api/invoices/eligible").json() == []
    start_session(client, "1")
    eligible = client.get("/api/invoices/eligible").json()
    assert len(eligible) == 1
    assert eligible[0]["unit"]["name"] == "PC-01"
    assert eligible[0]["quote"]["label"] == "1 hour"
    assert eligible[0]["amount"] == "₱50.00"


def test_invoice_is_rendered_and_sent(working_store, client, sent):
    start_session(client, "1")
    response = client.post("/api/invoices", json={"id": "1"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "Alice" in body["body"]
    assert "Net Hub" in body["body"]
    assert "{{" not in body["subject"] + body["body"]

    assert len(sent) == 1
    assert sent[0].headers["Authorization"] == "Bearer re_test"
    assert b"a@x.com" in sent[0].content
    assert client.get("/api/audit-log").json()[0]["message"] == 'Sent invoice to a@x.com for PC "PC-01".'


def test_failed_delivery_is_502_and_leaves_unit_alone(failing_store, client):
    before = start_session(client, "1")
    response = client.post("/api/invoices", json={"id": "1"})
    assert response.status_code == 502
    assert response.json()["success"] is False
    assert client.get("/api/units/1").json() == before


def test_unknown_tier_and_idle_unit_are_rejected(client):
    assert client.post("/api/invoices", json={"id": "2"}).status_code == 400
    start_session(client, "1", **dict(PAYMENT, duration=45))
    response = client.post("/api/invoices", json={"id": "1"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid session duration."
    assert client.post("/api/invoices", json={"id": "99"}).status_code == 404


def test_simulated_delivery_without_api_key(client):
    start_session(client, "3")
    put_status(client, "3", "time_up")
    response = client.post("/api/invoices", json={"id": 3})
    assert response.status_code == 200
    assert response.json()["message"] == "Email has been sent to a@x.com."


def test_email_template_round_trip(client):
    client.post("/api/email-template", json={"subject": "Bill for {{pcName}}", "body": "Pay {{amount}}"})
    assert client.get("/api/email-template").json() == {"subject": "Bill for {{pcName}}", "body": "Pay {{amount}}"}
    start_session(client, "1")
    body = client.post("/api/invoices", json={"id": "1"}).json()
    assert body["subject"] == "Bill for PC-01"
    assert body["body"] == "Pay ₱50.00"


def test_pricing_endpoints(client):
    assert client.post("/api/pricing", json={"durationMinutes": 45, "label": "45 minutes", "price": 40}).status_code == 201
    tiers = client.get("/api/pricing").json()
    assert [t["durationMinutes"] for t in tiers] == [30, 45, 60, 120, 180]

    updated = client.put(
        "/api/pricing",
        json={"originalDuration": 45, "updatedTier": {"durationMinutes": 45, "label": "45 min", "price": 42}},
    )
    assert updated.json()["price"] == 42
    assert client.request("DELETE", "/api/pricing", json={"durationMinutes": 45}).status_code == 200
    assert client.request("DELETE", "/api/pricing", json={"durationMinutes": 45}).status_code == 404


def test_analytics_summary(client):
    start_session(client, "1")
    summary = client.get("/api/analytics/summary").json()
    assert summary["totalRevenue"] == 50
    assert summary["activeUsers"] == 1
    assert summary["statusCounts"] == {"in_use": 1, "available": 2}


def test_inserted_values_are_not_expanded_again():
    values = {"customerName": "{{amount}}", "amount": "P50.00"}
    assert render("Hi {{customerName}}", values) == "Hi {{amount}}"
    assert render("Total: {{ amount }}", values) == "Total: P50.00"


def test_unparseable_template_is_rejected(client):
    response = client.post("/api/email-template", json={"subject": "Bill {{ pcName", "body": "x"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("Could not update template")
    assert client.get("/api/email-template").json()["subject"] != "Bill {{ pcName"


def test_template_cannot_reach_python_internals(client):
    client.post(
        "/api/email-template",
        json={"subject": "{{ pcName.__class__() }}", "body": "{{ customerName }}"},
    )
    start_session(client, "1")
    response = client.post("/api/invoices", json={"id": "1"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("Could not render the invoice template")
