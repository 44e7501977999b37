from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..common.datetime_utils import format_iso


@dataclass(frozen=True)
class Message:
    """Domain entity: a direct message between a guardian and staff."""

    message_id: str
    sender_id: str
    recipient_id: str
    content: str
    created_at: datetime

    @property
    def participants(self) -> tuple[str, str]:
        return (self.sender_id, self.recipient_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.message_id,
            "senderId": self.sender_id,
            "recipientId": self.recipient_id,
            "content": self.content,
            "participants": list(self.participants),
            "createdAt": format_iso(self.created_at),
        }
