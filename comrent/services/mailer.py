from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import AppSettings, settings as default_settings
from ..core.errors import MailerError

logger = logging.getLogger(__name__)


def _raise_for_status(response: httpx.Response, recipient: str) -> None:
    if response.status_code in {401, 403}:
        logger.warning("Mailer rejected our credentials while sending to %s", recipient)
    elif response.status_code >= 500:
        logger.error("Mailer service error %s while sending to %s", response.status_code, recipient)
    elif response.status_code >= 400:
        logger.error("Mailer request error %s while sending to %s", response.status_code, recipient)
    if response.is_error:
        raise MailerError(f"Mailer responded with HTTP {response.status_code}")


class Mailer:
    """Thin client for an HTTP e-mail API (Resend-compatible payload).

    Without an API key the mailer only logs what it would have sent and
    reports success, which keeps local development self-contained.
    """

    def __init__(
        self,
        config: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or default_settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.config.MAILER_API_KEY)

    async def send(self, subject: str, body: str, recipient: str) -> dict[str, Any]:
        if not recipient:
            raise MailerError("No recipient address")
        if not self.configured:
            logger.info(
                "Simulating e-mail to %s",
                recipient,
                extra={"extra_data": {"subject": subject}},
            )
            return {"id": None, "simulated": True}

        payload = {
            "from": self.config.MAILER_FROM_ADDRESS,
            "to": [recipient],
            "subject": subject,
            "text": body,
        }
        headers = {"Authorization": f"Bearer {self.config.MAILER_API_KEY}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.config.MAILER_TIMEOUT_SECONDS, transport=self._transport
            ) as client:
                response = await client.post(self.config.MAILER_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Mailer unreachable while sending to %s: %s", recipient, exc)
            raise MailerError("Mailer service is unreachable") from exc
        _raise_for_status(response, recipient)
        try:
            return response.json()
        except ValueError:
            return {}
