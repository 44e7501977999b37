from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Message


class MessageRepository(Protocol):
    def list_for_participant(
        self, user_id: str, *, with_user: Optional[str] = None, limit: int
    ) -> Sequence[Message]:
        """Messages sent or received by ``user_id``, newest first.

        With ``with_user`` only the conversation between the two users is returned.
        """

        raise NotImplementedError

    def create_message(self, *, sender_id: str, recipient_id: str, content: str, created_at: datetime) -> str:
        raise NotImplementedError
