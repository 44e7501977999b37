from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import Child, EmergencyContact, MedicalInfo
from .repository import ChildRepository

_COLUMNS = "child_id, first_name, last_name, date_of_birth, guardian_id, emergency_contacts, medical_info, created_at, updated_at"


def _row_to_child(r: dict[str, Any]) -> Child:
    return Child(
        child_id=r["child_id"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        date_of_birth=r["date_of_birth"],
        guardian_id=r["guardian_id"],
        emergency_contacts=tuple(EmergencyContact.from_dict(c) for c in (from_json(r.get("emergency_contacts")) or [])),
        medical_info=MedicalInfo.from_dict(from_json(r.get("medical_info"))),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLChildRepository(ChildRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, child_id: str) -> Optional[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM children WHERE child_id=%s", (child_id,))
            r = fetchone(cur)
            return _row_to_child(r) if r else None

    def list_for_guardian(self, guardian_id: str) -> Sequence[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM children WHERE guardian_id=%s ORDER BY first_name, last_name",
                (guardian_id,),
            )
            return [_row_to_child(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM children ORDER BY first_name, last_name")
            return [_row_to_child(r) for r in fetchall(cur)]

    def create_child(
        self,
        *,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        guardian_id: str,
        emergency_contacts: Sequence[EmergencyContact],
        medical_info: MedicalInfo,
        created_at: datetime,
    ) -> str:
        child_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO children({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    child_id,
                    first_name,
                    last_name,
                    date_of_birth,
                    guardian_id,
                    to_json([c.to_dict() for c in emergency_contacts]),
                    to_json(medical_info.to_dict()),
                    created_at,
                    created_at,
                ),
            )
        return child_id

    def update_child(
        self,
        *,
        child_id: str,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        emergency_contacts: Sequence[EmergencyContact],
        medical_info: MedicalInfo,
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE children
                SET first_name=%s, last_name=%s, date_of_birth=%s,
                    emergency_contacts=%s, medical_info=%s, updated_at=%s
                WHERE child_id=%s
                """,
                (
                    first_name,
                    last_name,
                    date_of_birth,
                    to_json([c.to_dict() for c in emergency_contacts]),
                    to_json(medical_info.to_dict()),
                    updated_at,
                    child_id,
                ),
            )
            return cur.rowcount > 0
