"""HTTP client used by the customer and admin front-ends.

Failures come in two kinds. ``TransientReadError`` means the server could
not be reached (or fell over with a 5xx); callers keep showing what they
last saw and try again on their next tick. ``RequestRejected`` means the
server answered and said no, which is something to tell the user.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..schemas.activity import NotificationOut
from ..schemas.message import MessageOut
from ..schemas.unit import UnitOut

logger = logging.getLogger(__name__)


class TransientReadError(Exception):
    """The registry could not be reached."""


class RequestRejected(Exception):
    """The server answered with a 4xx."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("detail") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"


class ComRentClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8089",
        *,
        http: httpx.Client | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ComRentClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise TransientReadError(str(exc)) from exc
        if response.status_code >= 500:
            raise TransientReadError(f"{method} {path} returned HTTP {response.status_code}")
        if response.status_code >= 400:
            raise RequestRejected(response.status_code, _error_message(response))
        return response.json()

    # ---------- units ----------

    def list_units(self) -> list[UnitOut]:
        return [UnitOut.model_validate(item) for item in self._request("GET", "/api/units")]

    def get_unit(self, unit_id: str) -> UnitOut:
        return UnitOut.model_validate(self._request("GET", "/api/units", params={"id": unit_id}))

    def find_unit(self, name: str) -> UnitOut | None:
        for unit in self.list_units():
            if unit.name == name:
                return unit
        return None

    def update_unit(self, unit_id: str, new_status: str | None = None, **fields: Any) -> UnitOut:
        body: dict[str, Any] = {"id": unit_id}
        if new_status is not None:
            body["newStatus"] = new_status
        body.update({key: value for key, value in fields.items() if value is not None})
        return UnitOut.model_validate(self._request("PUT", "/api/units", json=body))

    # ---------- messages ----------

    def list_messages(self, pc_name: str) -> list[MessageOut]:
        payload = self._request("GET", "/api/messages", params={"pcName": pc_name})
        return [MessageOut.model_validate(item) for item in payload]

    def post_message(
        self, pc_name: str, sender: str, text: str | None = None, image_url: str | None = None
    ) -> MessageOut:
        body = {"pcName": pc_name, "sender": sender, "text": text, "imageUrl": image_url}
        return MessageOut.model_validate(self._request("POST", "/api/messages", json=body))

    def mark_read(self, pc_name: str, role: str) -> None:
        self._request("PUT", "/api/messages", json={"pcName": pc_name, "role": role})

    def unread_counts(self, role: str) -> dict[str, int]:
        return self._request("GET", "/api/messages/unread", params={"role": role})

    # ---------- activity ----------

    def notifications(self) -> list[NotificationOut]:
        return [NotificationOut.model_validate(item) for item in self._request("GET", "/api/notifications")]
