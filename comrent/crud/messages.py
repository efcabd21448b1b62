"""Per-unit conversations between a customer and the admin.

Conversations are keyed by the unit *name*, not its id. Renaming a unit
therefore leaves its history under the old name, and deleting a unit
leaves its conversation readable. Both are known and kept as-is.
"""

from __future__ import annotations

import threading
from uuid import uuid4

from ..core.errors import Rejected
from ..core.statuses import SENDER_CHOICES, normalize_sender
from ..models.message import Message
from ..services.timecalc import now_iso


class ConversationStore:
    def __init__(self) -> None:
        self._conversations: dict[str, list[Message]] = {}
        self._lock = threading.Lock()

    def post_message(
        self,
        pc_name: str,
        sender: str,
        text: str | None = None,
        image_url: str | None = None,
    ) -> Message | Rejected:
        pc_name = (pc_name or "").strip()
        sender = normalize_sender(sender)
        text = (text or "").strip() or None
        image_url = (image_url or "").strip() or None
        if not pc_name:
            return Rejected("pcName is required")
        if sender not in SENDER_CHOICES:
            return Rejected(f"Unknown sender: {sender or '<empty>'}")
        if text is None and image_url is None:
            return Rejected("A message needs text or an image")

        message = Message(
            id=uuid4().hex,
            pc_name=pc_name,
            sender=sender,
            text=text,
            image_url=image_url,
            timestamp=now_iso(),
        )
        with self._lock:
            self._conversations.setdefault(pc_name, []).append(message)
        return message.copy()

    def list_messages(self, pc_name: str) -> list[Message]:
        with self._lock:
            return [message.copy() for message in self._conversations.get(pc_name, [])]

    def all_conversations(self) -> dict[str, list[Message]]:
        with self._lock:
            return {
                name: [message.copy() for message in messages]
                for name, messages in self._conversations.items()
            }

    def mark_all_read(self, pc_name: str, reader_role: str) -> int:
        """Mark the other party's messages as read; returns how many flipped."""
        reader = normalize_sender(reader_role)
        flipped = 0
        with self._lock:
            for message in self._conversations.get(pc_name, []):
                if message.sender != reader and not message.is_read:
                    message.is_read = True
                    flipped += 1
        return flipped

    def unread_count(self, pc_name: str, role: str) -> int:
        role = normalize_sender(role)
        with self._lock:
            return sum(
                1
                for message in self._conversations.get(pc_name, [])
                if message.sender != role and not message.is_read
            )

    def unread_counts(self, role: str) -> dict[str, int]:
        role = normalize_sender(role)
        with self._lock:
            return {
                name: sum(1 for m in messages if m.sender != role and not m.is_read)
                for name, messages in self._conversations.items()
            }

    def clear(self) -> None:
        with self._lock:
            self._conversations.clear()
