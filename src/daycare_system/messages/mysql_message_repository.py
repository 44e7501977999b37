from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Message
from .repository import MessageRepository

_COLUMNS = "message_id, sender_id, recipient_id, content, created_at"


def _row_to_message(r: dict[str, Any]) -> Message:
    return Message(
        message_id=r["message_id"],
        sender_id=r["sender_id"],
        recipient_id=r["recipient_id"],
        content=r["content"],
        created_at=r["created_at"],
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_participant(
        self, user_id: str, *, with_user: Optional[str] = None, limit: int
    ) -> Sequence[Message]:
        if with_user:
            where = "(sender_id=%s AND recipient_id=%s) OR (sender_id=%s AND recipient_id=%s)"
            params: tuple = (user_id, with_user, with_user, user_id)
        else:
            where = "sender_id=%s OR recipient_id=%s"
            params = (user_id, user_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (*params, int(limit)),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def create_message(self, *, sender_id: str, recipient_id: str, content: str, created_at: datetime) -> str:
        message_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO messages({_COLUMNS}) VALUES(%s,%s,%s,%s,%s)",
                (message_id, sender_id, recipient_id, content, created_at),
            )
        return message_id
