from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class Message:
    id: str
    pc_name: str
    sender: str
    timestamp: str
    text: str | None = None
    image_url: str | None = None
    is_read: bool = False

    def copy(self) -> "Message":
        return replace(self)
