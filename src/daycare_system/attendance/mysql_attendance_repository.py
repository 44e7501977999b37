from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import AlternativePickup, AttendanceSession, DropOffInfo, HealthStatus, Meals, PickUpInfo
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    session_id, child_id, guardian_id, check_in_time, check_out_time,
    drop_off_info, pick_up_info, health_status, meals, concerns, alternative_pickup,
    created_at, created_by, updated_at, updated_by
"""


def _row_to_session(r: dict[str, Any]) -> AttendanceSession:
    pick_up = from_json(r.get("pick_up_info"))
    return AttendanceSession(
        session_id=r["session_id"],
        child_id=r["child_id"],
        guardian_id=r["guardian_id"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        drop_off=DropOffInfo.from_dict(from_json(r.get("drop_off_info"))),
        pick_up=PickUpInfo.from_dict(pick_up) if pick_up else None,
        health_status=HealthStatus.from_dict(from_json(r.get("health_status"))),
        meals=Meals.from_dict(from_json(r.get("meals"))),
        concerns=r.get("concerns"),
        alternative_pickup=AlternativePickup.from_dict(from_json(r.get("alternative_pickup"))),
        created_at=r.get("created_at"),
        created_by=r.get("created_by"),
        updated_at=r.get("updated_at"),
        updated_by=r.get("updated_by"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def find_open_for_child(self, child_id: str) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE child_id=%s AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                """,
                (child_id,),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def list_for_child(self, child_id: str, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE child_id=%s
                ORDER BY check_in_time DESC
                LIMIT %s
                """,
                (child_id, int(limit)),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def list_checked_in_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE check_in_time BETWEEN %s AND %s
                ORDER BY check_in_time ASC
                """,
                (start, end),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def create_if_no_open_session(
        self,
        *,
        child_id: str,
        guardian_id: str,
        check_in_time: datetime,
        drop_off: DropOffInfo,
        health_status: HealthStatus,
        meals: Meals,
        concerns: Optional[str],
        alternative_pickup: Optional[AlternativePickup],
        created_by: str,
    ) -> Optional[str]:
        session_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(
                        session_id, child_id, guardian_id, check_in_time,
                        drop_off_info, health_status, meals, concerns, alternative_pickup,
                        created_at, created_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session_id,
                        child_id,
                        guardian_id,
                        check_in_time,
                        to_json(drop_off.to_dict()),
                        to_json(health_status.to_dict()),
                        to_json(meals.to_dict()),
                        concerns,
                        to_json(alternative_pickup.to_dict()) if alternative_pickup else None,
                        check_in_time,
                        created_by,
                    ),
                )
            except mysql_errors.IntegrityError as e:
                # uq_attendance_open_child: another open session won the race.
                if e.errno == errorcode.ER_DUP_ENTRY:
                    logger.info("Open session already exists for child %s", child_id)
                    return None
                raise
        return session_id

    def close_session(
        self,
        *,
        session_id: str,
        check_out_time: datetime,
        pick_up: PickUpInfo,
        updated_by: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET check_out_time=%s, pick_up_info=%s, updated_at=%s, updated_by=%s
                WHERE session_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, to_json(pick_up.to_dict()), check_out_time, updated_by, session_id),
            )
            return cur.rowcount > 0

    def update_session(self, session: AttendanceSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET check_in_time=%s, check_out_time=%s,
                    drop_off_info=%s, pick_up_info=%s, health_status=%s, meals=%s, concerns=%s,
                    updated_at=%s, updated_by=%s
                WHERE session_id=%s
                """,
                (
                    session.check_in_time,
                    session.check_out_time,
                    to_json(session.drop_off.to_dict()),
                    to_json(session.pick_up.to_dict()) if session.pick_up else None,
                    to_json(session.health_status.to_dict()),
                    to_json(session.meals.to_dict()),
                    session.concerns,
                    session.updated_at,
                    session.updated_by,
                    session.session_id,
                ),
            )
            return cur.rowcount > 0
