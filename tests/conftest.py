import os
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))
os.environ.setdefault("MAILER_API_KEY", "")

from comrent.core.config import AppSettings, reset_settings_cache  # noqa: E402

reset_settings_cache()

from comrent import app  # noqa: E402
from comrent.db.store import Store, reset_store  # noqa: E402

PAYMENT = {
    "duration": 60,
    "user": "Alice",
    "email": "a@x.com",
    "paymentMethod": "GCash",
}


@pytest.fixture()
def settings(tmp_path) -> AppSettings:
    return AppSettings(SEED_UNIT_COUNT=3, DATA_DIR=tmp_path, APP_ENV="test", MAILER_API_KEY="")


@pytest.fixture()
def store(settings) -> Store:
    return reset_store(settings)


@pytest.fixture()
def client(store) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


def put_status(client: TestClient, unit_id: str, new_status: str, **fields):
    return client.put("/api/units", json={"id": unit_id, "newStatus": new_status, **fields})


def start_session(client: TestClient, unit_id: str = "1", **payment) -> dict:
    """Walk a unit from available to in_use and return its final JSON."""
    assert put_status(client, unit_id, "pending_payment").status_code == 200
    assert put_status(client, unit_id, "pending_approval", **(payment or PAYMENT)).status_code == 200
    response = put_status(client, unit_id, "in_use")
    assert response.status_code == 200
    return response.json()
