from __future__ import annotations

import uuid
from datetime import datetime
from typing import Sequence

from ..core.enums import ActivityType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import DailyActivity
from .repository import ActivityRepository


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_recent_for_child(self, child_id: str, limit: int) -> Sequence[DailyActivity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT activity_id, child_id, activity_type, description, activity_time, created_by, created_at
                FROM activities
                WHERE child_id=%s
                ORDER BY activity_time DESC
                LIMIT %s
                """,
                (child_id, int(limit)),
            )
            return [
                DailyActivity(
                    activity_id=r["activity_id"],
                    child_id=r["child_id"],
                    activity_type=ActivityType(r["activity_type"]),
                    description=r["description"],
                    timestamp=r["activity_time"],
                    created_by=r["created_by"],
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def create_activity(
        self,
        *,
        child_id: str,
        activity_type: ActivityType,
        description: str,
        timestamp: datetime,
        created_by: str,
    ) -> str:
        activity_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activities(activity_id, child_id, activity_type, description, activity_time, created_by, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (activity_id, child_id, activity_type.value, description, timestamp, created_by, timestamp),
            )
        return activity_id
