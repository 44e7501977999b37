from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import require_caller, require_non_empty
from ..core.constants import DEFAULT_MESSAGE_LIMIT, MAX_HISTORY_LIMIT, MAX_MESSAGE_LENGTH
from ..core.context import Clock, SystemClock
from ..core.exceptions import ValidationError
from .model import Message
from .repository import MessageRepository

logger = logging.getLogger(__name__)


class MessageService:
    """Use case: guardians and staff exchange direct messages."""

    def __init__(self, messages: MessageRepository, *, clock: Optional[Clock] = None):
        self._messages = messages
        self._clock = clock or SystemClock()

    def send_message(self, caller_id: Optional[str], recipient_id: Any, content: Any) -> Message:
        sender = require_caller(caller_id)
        recipient = require_non_empty(recipient_id, "recipientId")
        if recipient == sender:
            raise ValidationError("recipientId", "cannot be yourself")
        if content is not None and not isinstance(content, str):
            raise ValidationError("content", "must be text")
        content = require_non_empty(content, "content")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError("content", f"must be at most {MAX_MESSAGE_LENGTH} characters")

        now = self._clock.now()
        message_id = self._messages.create_message(
            sender_id=sender,
            recipient_id=recipient,
            content=content,
            created_at=now,
        )
        logger.info("Message %s sent from %s to %s", message_id, sender, recipient)
        return Message(message_id=message_id, sender_id=sender, recipient_id=recipient, content=content, created_at=now)

    def list_messages(
        self,
        caller_id: Optional[str],
        *,
        with_user: Optional[str] = None,
        limit: int = DEFAULT_MESSAGE_LIMIT,
    ) -> Sequence[Message]:
        user = require_caller(caller_id)
        if int(limit) <= 0:
            raise ValidationError("limit", "must be a positive number")
        return self._messages.list_for_participant(
            user,
            with_user=(with_user or "").strip() or None,
            limit=min(int(limit), MAX_HISTORY_LIMIT),
        )
