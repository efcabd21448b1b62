from comrent.core.config import AppSettings
from comrent.db.store import reset_store


def _post(client, sender, text, pc_name="PC-01"):
    return client.post("/api/messages", json={"pcName": pc_name, "sender": sender, "text": text})


def test_post_and_list(client):
    response = _post(client, "user", "hello")
    assert response.status_code == 201
    body = response.json()
    assert body["pcName"] == "PC-01"
    assert body["isRead"] is False
    listed = client.get("/api/messages", params={"pcName": "PC-01"}).json()
    assert [m["text"] for m in listed] == ["hello"]


def test_empty_message_is_rejected(client):
    response = client.post("/api/messages", json={"pcName": "PC-01", "sender": "user"})
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_unread_counts_and_mark_read(client):
    _post(client, "user", "one")
    _post(client, "user", "two")
    _post(client, "admin", "reply")
    _post(client, "user", "hi", pc_name="PC-02")

    assert client.get("/api/messages/unread").json() == {"PC-01": 2, "PC-02": 1}
    assert client.put("/api/messages", json={"pcName": "PC-01", "role": "admin"}).json() == {"success": True}
    assert client.get("/api/messages/unread", params={"role": "admin"}).json() == {"PC-01": 0, "PC-02": 1}
    assert client.get("/api/messages/unread", params={"role": "user"}).json() == {"PC-01": 1, "PC-02": 0}


def test_conversation_survives_unit_deletion(client):
    _post(client, "user", "still here?")
    client.request("DELETE", "/api/units", json={"id": "1"})
    assert [m["text"] for m in client.get("/api/messages", params={"pcName": "PC-01"}).json()] == ["still here?"]
    assert "PC-01" in client.get("/api/messages/all").json()


def test_clear_all_is_blocked_in_production(client, tmp_path):
    _post(client, "user", "hello")
    assert client.request("DELETE", "/api/messages").status_code == 200
    assert client.get("/api/messages/all").json() == {}

    reset_store(AppSettings(SEED_UNIT_COUNT=1, DATA_DIR=tmp_path, APP_ENV="production"))
    response = client.request("DELETE", "/api/messages")
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"
