from conftest import PAYMENT, put_status, start_session


def test_list_and_get_units(client):
    units = client.get("/api/units").json()
    assert [u["name"] for u in units] == ["PC-01", "PC-02", "PC-03"]
    assert set(units[0]) == {
        "id",
        "name",
        "status",
        "user",
        "email",
        "session_start",
        "session_duration",
        "paymentMethod",
        "paymentProof",
    }
    assert client.get("/api/units", params={"id": "2"}).json()["name"] == "PC-02"
    assert client.get("/api/units/3").json()["status"] == "available"


def test_missing_unit_is_404_with_envelope(client):
    response = client.get("/api/units/99")
    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "not_found"
    assert "99" in body["message"]


def test_approval_preserves_payload(client):
    unit = start_session(client, "1")
    assert unit["status"] == "in_use"
    assert unit["session_duration"] == 60
    assert unit["user"] == "Alice"
    assert unit["paymentMethod"] == "GCash"
    assert unit["session_start"].endswith("Z")


def test_same_status_twice_is_rejected_without_side_effects(client, store):
    assert put_status(client, "1", "maintenance").status_code == 200
    audit_before = client.get("/api/audit-log").json()
    notes_before = client.get("/api/notifications").json()

    response = put_status(client, "1", "maintenance")
    assert response.status_code == 400
    assert response.json()["message"].startswith("Could not update status")
    assert client.get("/api/audit-log").json() == audit_before
    assert client.get("/api/notifications").json() == notes_before


def test_illegal_transitions_are_400(client):
    start_session(client, "1")
    assert put_status(client, "1", "available").status_code == 400
    assert put_status(client, "1", "maintenance").status_code == 400
    assert client.get("/api/units/1").json()["status"] == "in_use"


def test_incomplete_payment_is_rejected(client):
    put_status(client, "1", "pending_payment")
    response = put_status(client, "1", "pending_approval", duration=60, user="Alice")
    assert response.status_code == 400
    assert client.get("/api/units/1").json()["status"] == "pending_payment"


def test_full_cycle_and_notifications(client):
    start_session(client, "2")
    assert put_status(client, "2", "time_up").status_code == 200
    resolved = put_status(client, "2", "available").json()
    assert resolved["user"] is None

    notes = client.get("/api/notifications").json()
    assert [n["statusTo"] for n in notes] == [
        "available",
        "time_up",
        "in_use",
        "pending_approval",
        "pending_payment",
    ]
    assert all(n["unitName"] == "PC-02" for n in notes)


def test_create_rename_delete(client):
    created = client.post("/api/units", json={"name": "Booth"})
    assert created.status_code == 201
    unit_id = created.json()["id"]
    assert client.post("/api/units", json={"name": "Booth"}).status_code == 400

    renamed = client.put("/api/units", json={"id": unit_id, "newName": "Booth 2"})
    assert renamed.json()["name"] == "Booth 2"
    assert client.put("/api/units", json={"id": unit_id, "newName": "PC-01"}).status_code == 400
    assert client.put("/api/units", json={"id": unit_id}).status_code == 400

    deleted = client.request("DELETE", "/api/units", json={"id": unit_id})
    assert deleted.json() == {"deletedId": unit_id}
    assert client.get(f"/api/units/{unit_id}").status_code == 404

    messages = [entry["message"] for entry in client.get("/api/audit-log").json()]
    assert messages[:3] == ['Deleted PC "Booth 2".', 'Renamed PC "Booth" to "Booth 2".', 'Added new PC "Booth".']


def test_numeric_ids_are_accepted(client):
    assert client.put("/api/units", json={"id": 1, "newStatus": "maintenance"}).status_code == 200


def test_quote_for_unit(client):
    start_session(client, "1", **dict(PAYMENT, duration=45))
    quote = client.get("/api/units/1/quote").json()
    assert quote == {"durationMinutes": 45, "label": "Unknown", "price": None, "known": False}


def test_rename_orphans_conversation(client):
    client.post("/api/messages", json={"pcName": "PC-01", "sender": "user", "text": "hello"})
    client.put("/api/units", json={"id": "1", "newName": "PC-01A"})
    assert client.get("/api/messages", params={"pcName": "PC-01A"}).json() == []
    assert len(client.get("/api/messages", params={"pcName": "PC-01"}).json()) == 1


def test_validation_errors_use_envelope(client):
    response = client.put("/api/units", json={"newStatus": "maintenance"})
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_health_and_cache_headers(client):
    assert client.get("/health").json() == {"ok": True}
    response = client.get("/api/units")
    assert response.headers["Cache-Control"].startswith("no-store")
    assert response.headers["X-Request-ID"]
